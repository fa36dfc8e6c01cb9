"""
Indicator Engine Service Implementation

Annotates a bar series with SMA, EMA and RSI overlays.
Every call recomputes from scratch; nothing is retained between calls.
"""

import math
from datetime import datetime
from typing import Optional
import logging

import numpy as np

from app.schemas.market import Bar, SeriesRequest
from app.schemas.indicators import (
    AnnotatedBar,
    CandleDirection,
    ChartDomains,
    DashboardOutput,
    IndicatorParams,
    IndicatorRequest,
    LatestIndicators,
)
from app.services.data_ingestion import get_data_ingestion_service
from app.services.data_ingestion.service import DataIngestionService
from app.services.indicators.interface import IndicatorServiceInterface
from app.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    round_price,
    to_optional_list,
    get_last_valid,
)

logger = logging.getLogger(__name__)


def _closes(bars: list[Bar]) -> np.ndarray:
    return np.array([b.close for b in bars], dtype=float)


MIN_CANDLE_FRACTION = 0.0015


def candle_geometry(bar: Bar) -> dict[str, float]:
    """Body and wick offsets; flat candles keep a visible minimum height."""
    min_height = bar.close * MIN_CANDLE_FRACTION
    return {
        "body_base": min(bar.open, bar.close),
        "body_range": round_price(max(abs(bar.close - bar.open), min_height)),
        "wick_base": bar.low,
        "wick_range": round_price(max(bar.high - bar.low, min_height)),
    }


def calculate_domains(bars: list[Bar]) -> Optional[ChartDomains]:
    """Padded price range and headroom for the volume pane."""
    if not bars:
        return None

    price_high = max(b.high for b in bars)
    price_low = min(b.low for b in bars)
    padding = max((price_high - price_low) * 0.08, price_high * 0.01)
    max_volume = max(max(b.volume for b in bars), 1)

    return ChartDomains(
        price_min=round_price(price_low - padding),
        price_max=round_price(price_high + padding),
        volume_min=0,
        volume_max=math.ceil(max_volume * 1.2),
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    All calculations are deterministic and reproducible.
    """

    def __init__(self, data_service: Optional[DataIngestionService] = None):
        self._data_service = data_service

    @property
    def name(self) -> str:
        return "IndicatorService"

    @property
    def data_service(self) -> DataIngestionService:
        return self._data_service or get_data_ingestion_service()

    async def execute(self, input_data: IndicatorRequest) -> DashboardOutput:
        """Load bars for the request and annotate them."""
        series = await self.data_service.execute(
            SeriesRequest(
                symbol=input_data.symbol,
                length=input_data.length,
                seed=input_data.seed,
                source=input_data.source,
                interval=input_data.interval,
            )
        )

        params = input_data.params
        overlays = self._calculate_overlays(_closes(series.bars), params)
        annotated = self._zip(series.bars, overlays)

        latest = LatestIndicators(
            close=series.bars[-1].close if series.bars else None,
            sma=get_last_valid(overlays["sma"]),
            ema=get_last_valid(overlays["ema"]),
            rsi=get_last_valid(overlays["rsi"]),
        )

        logger.info(
            f"Annotated {len(annotated)} bars for {series.symbol} "
            f"(sma={params.sma_window}, ema={params.ema_span}, rsi={params.rsi_period}, "
            f"source={series.source.value})"
        )

        return DashboardOutput(
            symbol=series.symbol,
            source=series.source,
            timestamp=datetime.now(),
            params=params,
            bars=annotated,
            latest=latest,
            domains=calculate_domains(series.bars),
            warnings=series.warnings,
        )

    def annotate(
        self, bars: list[Bar], params: IndicatorParams
    ) -> list[AnnotatedBar]:
        """Zip the three overlays back onto the bars by index."""
        return self._zip(bars, self._calculate_overlays(_closes(bars), params))

    def _calculate_overlays(
        self, closes: np.ndarray, params: IndicatorParams
    ) -> dict[str, np.ndarray]:
        """Each overlay is computed independently over the same closes."""
        return {
            "sma": sma(closes, params.sma_window),
            "ema": ema(closes, params.ema_span),
            "rsi": rsi(closes, params.rsi_period),
        }

    def _zip(
        self, bars: list[Bar], overlays: dict[str, np.ndarray]
    ) -> list[AnnotatedBar]:
        sma_values = to_optional_list(overlays["sma"])
        ema_values = to_optional_list(overlays["ema"])
        rsi_values = to_optional_list(overlays["rsi"])

        return [
            AnnotatedBar(
                **bar.model_dump(),
                sma=sma_values[i],
                ema=ema_values[i],
                rsi=rsi_values[i],
                direction=(
                    CandleDirection.UP if bar.close >= bar.open else CandleDirection.DOWN
                ),
                **candle_geometry(bar),
            )
            for i, bar in enumerate(bars)
        ]

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
