"""
Data Ingestion Service Implementation

Produces price bars for the dashboard.
Primary: Synthetic generator (deterministic, seedable)
Live: Binance klines (when requested and enabled)
Fallback: Synthetic bars if the live fetch fails
"""

from typing import Optional
import logging

from app.core.config import settings
from app.schemas.market import DataSource, SeriesRequest, SeriesResult
from app.services.base import ExternalAPIError
from app.services.data_ingestion.interface import DataIngestionServiceInterface
from app.services.data_ingestion.binance_adapter import fetch_klines
from app.services.data_ingestion.series_generator import generate_series, get_profile

logger = logging.getLogger(__name__)


class DataIngestionService(DataIngestionServiceInterface):
    """
    Data Ingestion Service.

    Synthetic bars are generated fresh on every call; no history is retained.
    """

    def __init__(
        self,
        use_live_data: Optional[bool] = None,
        use_mock_fallback: Optional[bool] = None,
    ):
        self._use_live_data = (
            settings.enable_live_data if use_live_data is None else use_live_data
        )
        self._use_mock_fallback = (
            settings.enable_mock_fallback if use_mock_fallback is None else use_mock_fallback
        )

    @property
    def name(self) -> str:
        return "DataIngestionService"

    async def execute(self, input_data: SeriesRequest) -> SeriesResult:
        """Produce bars from the requested source."""
        symbol = input_data.symbol.upper().strip()
        errors: list[str] = []
        warnings: list[str] = []

        if input_data.source == DataSource.LIVE:
            if not self._use_live_data:
                warnings.append("Live data disabled (enable_live_data=false); using synthetic bars")
            else:
                try:
                    bars = await fetch_klines(
                        symbol,
                        interval=input_data.interval.value,
                        limit=input_data.length,
                    )
                    logger.info(f"Got {len(bars)} live bars for {symbol}")
                    return SeriesResult(
                        symbol=symbol,
                        source=DataSource.LIVE,
                        bars=bars,
                    )
                except ExternalAPIError as e:
                    logger.warning(f"Live fetch failed for {symbol}: {e}")
                    errors.append(e.message)
                    if not self._use_mock_fallback:
                        raise
                    warnings.append(f"Using synthetic data for {symbol} (live fetch failed)")

        profile = get_profile(symbol)
        if profile.symbol.value != symbol:
            warnings.append(f"Unknown symbol {symbol}; using {profile.symbol.value} profile")

        bars = generate_series(
            symbol,
            input_data.length,
            input_data.seed,
            volume_range=(settings.volume_jitter_min, settings.volume_jitter_max),
        )
        logger.debug(f"Generated {len(bars)} synthetic bars for {symbol} (seed={input_data.seed})")

        return SeriesResult(
            symbol=symbol,
            source=DataSource.SYNTHETIC,
            bars=bars,
            errors=errors,
            warnings=warnings,
        )

    async def health_check(self) -> bool:
        """Synthetic generation needs no external resources."""
        return True


# Singleton instance
_service_instance: Optional[DataIngestionService] = None


def get_data_ingestion_service() -> DataIngestionService:
    """Get or create data ingestion service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DataIngestionService()
    return _service_instance
