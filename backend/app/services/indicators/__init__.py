"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (or bars already in hand)
    Output: DashboardOutput

RESPONSIBILITIES:
    - Calculate SMA, EMA and RSI over closing prices
    - Align every overlay index-for-index with the input bars
    - Report latest values and chart axis ranges

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from app.services.indicators.interface import IndicatorServiceInterface
from app.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
