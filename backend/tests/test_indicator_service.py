import asyncio
import math
from datetime import date

import pytest

from app.schemas.indicators import CandleDirection, IndicatorParams, IndicatorRequest
from app.schemas.market import Bar, DataSource, SeriesRequest
from app.services.base import ExternalAPIError
from app.services.data_ingestion import DataIngestionService
from app.services.data_ingestion import service as ingestion_module
from app.services.indicators import IndicatorService
from app.services.indicators.calculations import compute_ema, compute_rsi, compute_sma, round_price
from app.services.indicators.service import calculate_domains, candle_geometry


@pytest.fixture
def synthetic_service():
    return DataIngestionService(use_live_data=False)


@pytest.fixture
def indicator_service(synthetic_service):
    return IndicatorService(data_service=synthetic_service)


def test_annotate_aligns_by_index(indicator_service, btc_bars):
    params = IndicatorParams(sma_window=10, ema_span=8, rsi_period=6)
    annotated = indicator_service.annotate(btc_bars, params)
    closes = [b.close for b in btc_bars]

    assert len(annotated) == len(btc_bars)
    assert [b.sma for b in annotated] == compute_sma(closes, 10)
    assert [b.ema for b in annotated] == compute_ema(closes, 8)
    assert [b.rsi for b in annotated] == compute_rsi(closes, 6)
    for bar, ann in zip(btc_bars, annotated):
        assert (ann.date, ann.open, ann.high, ann.low, ann.close, ann.volume) == (
            bar.date, bar.open, bar.high, bar.low, bar.close, bar.volume
        )


def test_annotate_direction(indicator_service, eth_bars):
    for ann in indicator_service.annotate(eth_bars, IndicatorParams()):
        expected = CandleDirection.UP if ann.close >= ann.open else CandleDirection.DOWN
        assert ann.direction == expected


def test_candle_geometry():
    rising = Bar(date=date(2024, 1, 1), open=100, high=102, low=99.5, close=101.5, volume=1)
    assert candle_geometry(rising) == {
        "body_base": 100.0,
        "body_range": 1.5,
        "wick_base": 99.5,
        "wick_range": 2.5,
    }

    flat = Bar(date=date(2024, 1, 2), open=200, high=200, low=200, close=200, volume=1)
    assert candle_geometry(flat) == {
        "body_base": 200.0,
        "body_range": 0.3,
        "wick_base": 200.0,
        "wick_range": 0.3,
    }


def test_annotate_carries_candle_geometry(indicator_service, eth_bars):
    for bar, ann in zip(eth_bars, indicator_service.annotate(eth_bars, IndicatorParams())):
        assert ann.body_base == min(bar.open, bar.close)
        assert ann.wick_base == bar.low
        assert ann.body_range >= round_price(bar.close * 0.0015)
        assert ann.wick_range >= ann.body_range


def test_annotate_empty(indicator_service):
    assert indicator_service.annotate([], IndicatorParams()) == []


def test_execute_builds_dashboard(indicator_service):
    request = IndicatorRequest(
        symbol="eth",
        length=90,
        seed=4,
        params=IndicatorParams(sma_window=20, ema_span=12, rsi_period=14),
    )
    output = asyncio.run(indicator_service.execute(request))

    assert output.symbol == "ETH"
    assert output.source == DataSource.SYNTHETIC
    assert len(output.bars) == 90
    assert output.latest.close == output.bars[-1].close
    assert output.latest.sma == output.bars[-1].sma
    assert output.latest.ema == output.bars[-1].ema
    assert output.latest.rsi == output.bars[-1].rsi
    assert output.bars[18].sma is None and output.bars[19].sma is not None
    assert output.bars[10].ema is None and output.bars[11].ema is not None
    assert output.bars[13].rsi is None and output.bars[14].rsi is not None


def test_execute_is_stateless(indicator_service):
    request = IndicatorRequest(symbol="BTC", length=60, seed=11)
    first = asyncio.run(indicator_service.execute(request))
    second = asyncio.run(indicator_service.execute(request))
    assert first.bars == second.bars
    assert first.latest == second.latest


def test_short_series_latest_undefined(indicator_service):
    request = IndicatorRequest(
        symbol="BTC",
        length=5,
        params=IndicatorParams(sma_window=10, ema_span=10, rsi_period=10),
    )
    output = asyncio.run(indicator_service.execute(request))
    assert output.latest.close is not None
    assert output.latest.sma is None
    assert output.latest.ema is None
    assert output.latest.rsi is None


def test_calculate_domains(btc_bars):
    domains = calculate_domains(btc_bars)
    high = max(b.high for b in btc_bars)
    low = min(b.low for b in btc_bars)
    padding = max((high - low) * 0.08, high * 0.01)
    assert domains.price_min == round_price(low - padding)
    assert domains.price_max == round_price(high + padding)
    assert domains.volume_min == 0
    assert domains.volume_max == math.ceil(max(b.volume for b in btc_bars) * 1.2)
    assert calculate_domains([]) is None


class TestDataIngestionService:
    def test_synthetic(self, synthetic_service):
        result = asyncio.run(synthetic_service.execute(SeriesRequest(symbol="btc", length=25)))
        assert result.symbol == "BTC"
        assert result.source == DataSource.SYNTHETIC
        assert len(result.bars) == 25
        assert result.errors == [] and result.warnings == []

    def test_unknown_symbol_warns(self, synthetic_service):
        result = asyncio.run(synthetic_service.execute(SeriesRequest(symbol="SOL", length=5)))
        assert result.source == DataSource.SYNTHETIC
        assert any("SOL" in w for w in result.warnings)

    def test_live_disabled_falls_back(self, synthetic_service):
        result = asyncio.run(
            synthetic_service.execute(SeriesRequest(symbol="BTC", length=5, source=DataSource.LIVE))
        )
        assert result.source == DataSource.SYNTHETIC
        assert result.warnings

    def test_live_success(self, monkeypatch, btc_bars):
        async def fake_fetch(symbol, interval="1d", limit=300):
            return btc_bars[:limit]

        monkeypatch.setattr(ingestion_module, "fetch_klines", fake_fetch)
        service = DataIngestionService(use_live_data=True)
        result = asyncio.run(
            service.execute(SeriesRequest(symbol="BTC", length=30, source=DataSource.LIVE))
        )
        assert result.source == DataSource.LIVE
        assert result.bars == btc_bars[:30]

    def test_live_failure_falls_back_to_synthetic(self, monkeypatch):
        async def failing_fetch(symbol, interval="1d", limit=300):
            raise ExternalAPIError("BinanceAdapter", "Upstream error", status_code=503)

        monkeypatch.setattr(ingestion_module, "fetch_klines", failing_fetch)
        service = DataIngestionService(use_live_data=True, use_mock_fallback=True)
        result = asyncio.run(
            service.execute(SeriesRequest(symbol="ETH", length=12, source=DataSource.LIVE))
        )
        assert result.source == DataSource.SYNTHETIC
        assert len(result.bars) == 12
        assert result.errors == ["Upstream error"]

    def test_live_failure_without_fallback_raises(self, monkeypatch):
        async def failing_fetch(symbol, interval="1d", limit=300):
            raise ExternalAPIError("BinanceAdapter", "Upstream error", status_code=503)

        monkeypatch.setattr(ingestion_module, "fetch_klines", failing_fetch)
        service = DataIngestionService(use_live_data=True, use_mock_fallback=False)
        with pytest.raises(ExternalAPIError) as exc_info:
            asyncio.run(
                service.execute(SeriesRequest(symbol="ETH", length=12, source=DataSource.LIVE))
            )
        assert exc_info.value.status_code == 503
