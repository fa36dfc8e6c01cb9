"""
CONTRACT 1: Market Data Layer

Input: SeriesRequest
Output: SeriesResult

This module describes price bars coming either from the synthetic series
generator or from the exchange klines endpoint. Both sources produce the
same Bar shape so the indicator engine never needs to know which one ran.
"""

import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from app.core.config import settings


# =============================================================================
# ENUMS
# =============================================================================


class CryptoSymbol(str, Enum):
    BTC = "BTC"
    ETH = "ETH"


class Interval(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"


class DataSource(str, Enum):
    SYNTHETIC = "synthetic"
    LIVE = "live"


# =============================================================================
# BAR
# =============================================================================


class Bar(BaseModel):
    """Single OHLCV observation."""

    date: datetime.date
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(..., ge=0)

    class Config:
        frozen = True


# =============================================================================
# INPUT: SeriesRequest
# =============================================================================


class SeriesRequest(BaseModel):
    """
    Request for a price series.
    Sent by: API / Indicator Service
    Received by: Data Ingestion Service
    """

    symbol: str = Field(default=CryptoSymbol.BTC.value, description="BTC or ETH")
    length: int = Field(
        default=settings.default_series_length,
        ge=1,
        le=settings.max_series_length,
        description="Number of bars",
    )
    seed: int = Field(default=1, description="Seed for the synthetic generator")
    source: DataSource = Field(default=DataSource.SYNTHETIC)
    interval: Interval = Field(
        default=Interval.D1,
        description="Kline interval (live source only)",
    )


# =============================================================================
# OUTPUT: SeriesResult
# =============================================================================


class SeriesResult(BaseModel):
    """Bars plus a record of where they came from."""

    symbol: str
    source: DataSource
    bars: list[Bar]
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class KlinesResponse(BaseModel):
    """Proxy response for the exchange klines endpoint."""

    symbol: str
    interval: str
    rows: list[Bar]

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTC",
                "interval": "1d",
                "rows": [
                    {
                        "date": "2024-02-04",
                        "open": 42580.1,
                        "high": 43119.0,
                        "low": 42222.0,
                        "close": 42658.7,
                        "volume": 18215.4,
                    }
                ],
            }
        }


class SymbolProfileInfo(BaseModel):
    """Public view of a synthetic symbol profile."""

    symbol: CryptoSymbol
    base_price: float
    drift_percent: float
    volatility: float
    base_volume: float
    trading_pair: Optional[str] = None
