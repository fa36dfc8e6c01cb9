"""
CONTRACT 2: Indicator Engine

Input: IndicatorRequest (or a list of Bar already in hand)
Output: DashboardOutput

This module performs ALL mathematical calculations.
Pure Python/NumPy - no state survives between calls.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.core.config import settings

from app.schemas.market import Bar, DataSource, Interval


# =============================================================================
# ENUMS
# =============================================================================


class CandleDirection(str, Enum):
    UP = "up"
    DOWN = "down"


# =============================================================================
# INPUT: IndicatorRequest
# =============================================================================


class IndicatorParams(BaseModel):
    """Smoothing parameters for the three overlays."""

    sma_window: int = Field(default=20, ge=1, description="SMA window")
    ema_span: int = Field(default=12, ge=1, description="EMA span")
    rsi_period: int = Field(default=14, ge=1, description="RSI period")


class IndicatorRequest(BaseModel):
    """
    Request for a full dashboard recomputation.
    Sent by: API
    Received by: Indicator Service
    """

    symbol: str = Field(default="BTC")
    length: int = Field(default=settings.default_series_length, ge=1, le=settings.max_series_length)
    seed: int = Field(default=1)
    source: DataSource = DataSource.SYNTHETIC
    interval: Interval = Interval.D1
    params: IndicatorParams = Field(default_factory=IndicatorParams)


# =============================================================================
# OUTPUT: Dashboard Components
# =============================================================================


class AnnotatedBar(Bar):
    """A bar with its index-aligned indicator values."""

    sma: Optional[float] = None
    ema: Optional[float] = None
    rsi: Optional[float] = Field(default=None, ge=0, le=100)
    direction: CandleDirection
    # Candle geometry for stacked-bar rendering; ranges have a minimum height
    body_base: float
    body_range: float
    wick_base: float
    wick_range: float


class LatestIndicators(BaseModel):
    """Newest defined value of each overlay."""

    close: Optional[float] = None
    sma: Optional[float] = None
    ema: Optional[float] = None
    rsi: Optional[float] = Field(default=None, ge=0, le=100)


class ChartDomains(BaseModel):
    """Axis ranges for the price and volume panes."""

    price_min: float
    price_max: float
    volume_min: float = 0
    volume_max: float


# =============================================================================
# OUTPUT: DashboardOutput (Complete Response)
# =============================================================================


class DashboardOutput(BaseModel):
    """
    Annotated bars for one symbol.
    Returned by: Indicator Service
    Consumed by: Dashboard frontend
    """

    symbol: str
    source: DataSource
    timestamp: datetime
    params: IndicatorParams
    bars: list[AnnotatedBar]
    latest: LatestIndicators
    domains: Optional[ChartDomains] = None
    warnings: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTC",
                "source": "synthetic",
                "timestamp": "2024-02-04T10:30:00",
                "params": {"sma_window": 20, "ema_span": 12, "rsi_period": 14},
                "bars": [
                    {
                        "date": "2024-02-04",
                        "open": 45000.0,
                        "high": 46210.5,
                        "low": 44480.12,
                        "close": 45902.33,
                        "volume": 41230,
                        "sma": None,
                        "ema": None,
                        "rsi": None,
                        "direction": "up",
                    }
                ],
                "latest": {"close": 45902.33, "sma": None, "ema": None, "rsi": None},
                "domains": {
                    "price_min": 42000.0,
                    "price_max": 48000.0,
                    "volume_min": 0,
                    "volume_max": 49476,
                },
            }
        }
