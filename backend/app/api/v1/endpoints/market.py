"""
Market Data API Endpoints

Endpoints for fetching price bars.
"""

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.schemas.market import (
    DataSource,
    KlinesResponse,
    SeriesRequest,
    SeriesResult,
    SymbolProfileInfo,
)
from app.services.base import ExternalAPIError
from app.services.data_ingestion import get_data_ingestion_service
from app.services.data_ingestion.binance_adapter import fetch_klines, get_trading_pair
from app.services.data_ingestion.series_generator import list_profiles

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/klines", response_model=KlinesResponse)
async def get_klines(
    symbol: str = Query(default="BTC", description="BTC or ETH"),
    interval: str = Query(default="1d", description="Kline interval, e.g. 1d, 4h"),
    limit: int = Query(default=300, ge=1, le=settings.max_klines_limit),
):
    """
    Proxy the exchange klines endpoint.

    Upstream failures return {"error": "Upstream error"} with the upstream
    status code; anything unexpected returns {"error": "Server error"} / 500.
    """
    symbol = symbol.upper()
    try:
        rows = await fetch_klines(symbol, interval=interval, limit=limit)
    except ExternalAPIError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except Exception as e:
        logger.exception(f"Klines proxy failed for {symbol}: {e}")
        return JSONResponse({"error": "Server error"}, status_code=500)

    return KlinesResponse(symbol=symbol, interval=interval, rows=rows)


@router.get("/series", response_model=SeriesResult)
async def get_series(
    symbol: str = Query(default="BTC", description="BTC or ETH"),
    length: int = Query(default=settings.default_series_length, ge=1, le=settings.max_series_length),
    seed: int = Query(default=1),
):
    """
    Get a deterministic synthetic bar series.

    The same (symbol, length, seed) returns identical bars within a day.
    """
    service = get_data_ingestion_service()
    return await service.execute(
        SeriesRequest(
            symbol=symbol,
            length=length,
            seed=seed,
            source=DataSource.SYNTHETIC,
        )
    )


@router.get("/symbols")
async def get_symbols():
    """List supported instruments and their random-walk profiles."""
    profiles = [
        SymbolProfileInfo(
            symbol=p.symbol,
            base_price=p.base_price,
            drift_percent=p.drift_percent,
            volatility=p.volatility,
            base_volume=p.base_volume,
            trading_pair=get_trading_pair(p.symbol.value),
        )
        for p in list_profiles()
    ]
    return {"symbols": [p.model_dump() for p in profiles]}


@router.get("/health")
async def check_data_health():
    """
    Check health of data ingestion service.
    """
    service = get_data_ingestion_service()
    is_healthy = await service.health_check()

    return {
        "service": service.name,
        "healthy": is_healthy,
        "live_data_enabled": service._use_live_data,
        "mock_fallback_enabled": service._use_mock_fallback,
    }
