"""
Data Ingestion Service

CONTRACT:
    Input:  SeriesRequest
    Output: SeriesResult

RESPONSIBILITIES:
    - Generate deterministic synthetic OHLCV bars
    - Fetch live klines from Binance on request
    - Cache upstream responses for a short window
    - Fall back to synthetic bars when the live fetch fails
"""

from app.services.data_ingestion.interface import DataIngestionServiceInterface
from app.services.data_ingestion.service import (
    DataIngestionService,
    get_data_ingestion_service,
)

__all__ = [
    "DataIngestionServiceInterface",
    "DataIngestionService",
    "get_data_ingestion_service",
]
