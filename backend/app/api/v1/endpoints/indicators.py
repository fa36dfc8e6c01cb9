"""
Indicator API Endpoints

Endpoints for technical indicator calculations.
"""

import logging

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from app.core.config import settings
from app.schemas.market import Bar, DataSource, Interval
from app.schemas.indicators import (
    AnnotatedBar,
    DashboardOutput,
    IndicatorParams,
    IndicatorRequest,
)
from app.services.base import ExternalAPIError
from app.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


class AnnotateRequest(BaseModel):
    """Bars supplied by the caller plus the overlay parameters."""
    bars: list[Bar] = Field(..., max_length=5000)
    params: IndicatorParams = Field(default_factory=IndicatorParams)


class AnnotateResponse(BaseModel):
    bars: list[AnnotatedBar]
    params: IndicatorParams


@router.post("/annotate", response_model=AnnotateResponse)
async def annotate_bars(request: AnnotateRequest):
    """
    Annotate caller-supplied bars with SMA, EMA and RSI.

    Bars must already be ordered oldest first.
    """
    service = get_indicator_service()
    try:
        annotated = service.annotate(request.bars, request.params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AnnotateResponse(bars=annotated, params=request.params)


@router.get("/{symbol}", response_model=DashboardOutput)
async def get_indicators(
    symbol: str,
    length: int = Query(default=settings.default_series_length, ge=1, le=settings.max_series_length),
    seed: int = Query(default=1),
    sma_window: int = Query(
        default=settings.default_sma_window,
        ge=settings.min_sma_window,
        le=settings.max_sma_window,
    ),
    ema_span: int = Query(
        default=settings.default_ema_span,
        ge=settings.min_ema_span,
        le=settings.max_ema_span,
    ),
    rsi_period: int = Query(
        default=settings.default_rsi_period,
        ge=settings.min_rsi_period,
        le=settings.max_rsi_period,
    ),
    source: DataSource = DataSource.SYNTHETIC,
    interval: Interval = Interval.D1,
):
    """
    Get the full dashboard payload for a symbol.

    Returns:
        - Bars annotated with SMA, EMA, RSI and candle direction
        - Latest defined value of each overlay
        - Price and volume axis ranges
    """
    request = IndicatorRequest(
        symbol=symbol.upper(),
        length=length,
        seed=seed,
        source=source,
        interval=interval,
        params=IndicatorParams(
            sma_window=sma_window,
            ema_span=ema_span,
            rsi_period=rsi_period,
        ),
    )

    service = get_indicator_service()
    try:
        return await service.execute(request)
    except ExternalAPIError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
