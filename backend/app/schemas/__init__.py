"""
Crypto Charts Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from app.schemas.market import (
    Bar,
    CryptoSymbol,
    DataSource,
    Interval,
    KlinesResponse,
    SeriesRequest,
    SeriesResult,
    SymbolProfileInfo,
)
from app.schemas.indicators import (
    AnnotatedBar,
    CandleDirection,
    ChartDomains,
    DashboardOutput,
    IndicatorParams,
    IndicatorRequest,
    LatestIndicators,
)

__all__ = [
    # Market
    "Bar",
    "CryptoSymbol",
    "DataSource",
    "Interval",
    "KlinesResponse",
    "SeriesRequest",
    "SeriesResult",
    "SymbolProfileInfo",
    # Indicators
    "AnnotatedBar",
    "CandleDirection",
    "ChartDomains",
    "DashboardOutput",
    "IndicatorParams",
    "IndicatorRequest",
    "LatestIndicators",
]
