"""
Data Ingestion Service Interface

Defines the contract for the price series layer.
"""

from abc import abstractmethod

from app.services.base import BaseService
from app.schemas.market import SeriesRequest, SeriesResult


class DataIngestionServiceInterface(BaseService[SeriesRequest, SeriesResult]):
    """
    Data Ingestion Service Contract.

    INPUT: SeriesRequest
        - symbol: BTC / ETH (others fall back to the default profile)
        - length: Number of bars
        - seed: Synthetic generator seed
        - source: synthetic or live
        - interval: Kline interval for the live source

    OUTPUT: SeriesResult
        - bars: Ordered bars, oldest first
        - source: Which source actually produced the bars
        - errors / warnings: Non-fatal problems met along the way
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @abstractmethod
    async def execute(self, input_data: SeriesRequest) -> SeriesResult:
        """Produce an ordered bar series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the service can produce bars."""
        pass
