"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from app.services.base import BaseService
from app.schemas.market import Bar
from app.schemas.indicators import (
    AnnotatedBar,
    DashboardOutput,
    IndicatorParams,
    IndicatorRequest,
)


class IndicatorServiceInterface(BaseService[IndicatorRequest, DashboardOutput]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - symbol, length, seed, source: which bars to load
        - params: SMA window, EMA span, RSI period

    OUTPUT: DashboardOutput
        - bars: Each input bar with its sma / ema / rsi values
        - latest: Newest defined value of each overlay
        - domains: Axis ranges for the chart panes
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: IndicatorRequest) -> DashboardOutput:
        """Load bars and annotate them with indicators."""
        pass

    @abstractmethod
    def annotate(
        self, bars: list[Bar], params: IndicatorParams
    ) -> list[AnnotatedBar]:
        """
        Zip SMA, EMA and RSI onto bars by index.

        Args:
            bars: Ordered bars, oldest first
            params: Smoothing parameters

        Returns:
            One AnnotatedBar per input bar
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
