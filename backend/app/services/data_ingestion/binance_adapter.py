"""
Binance Klines Adapter

Fetches REAL daily/intraday candles from the public Binance klines endpoint.
No API key needed. Responses are cached for a short window.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import aiohttp

from app.core.config import settings
from app.schemas.market import Bar, CryptoSymbol
from app.services.base import ExternalAPIError, RateLimitError
from app.services.cache.redis_client import KlinesCache, get_klines_cache

logger = logging.getLogger(__name__)

SERVICE_NAME = "BinanceAdapter"

# Symbol to trading pair mapping
PAIR_MAP = {
    CryptoSymbol.BTC.value: "BTCUSDT",
    CryptoSymbol.ETH.value: "ETHUSDT",
}
DEFAULT_PAIR = "BTCUSDT"


def get_trading_pair(symbol: str) -> str:
    """Convert a dashboard symbol to its exchange pair, defaulting to BTCUSDT."""
    return PAIR_MAP.get(symbol.upper().strip(), DEFAULT_PAIR)


def parse_klines(raw: list[list]) -> list[Bar]:
    """
    Convert raw kline arrays to bars.

    Each kline is [open_time_ms, open, high, low, close, volume, ...] with
    prices as strings. The bar date is the UTC day of the open time.
    """
    rows = []
    for kline in raw:
        opened = datetime.fromtimestamp(int(kline[0]) / 1000, tz=timezone.utc)
        rows.append(
            Bar(
                date=opened.date(),
                open=float(kline[1]),
                high=float(kline[2]),
                low=float(kline[3]),
                close=float(kline[4]),
                volume=float(kline[5]),
            )
        )
    return rows


async def _request_klines(pair: str, interval: str, limit: int) -> list[list]:
    params = {"symbol": pair, "interval": interval, "limit": str(limit)}
    timeout = aiohttp.ClientTimeout(total=settings.http_timeout)

    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(settings.binance_base_url, params=params) as response:
                if response.status == 429:
                    raise RateLimitError(SERVICE_NAME, "Upstream error")
                if response.status != 200:
                    body = await response.text()
                    logger.warning(
                        f"Binance returned status {response.status} for {pair}: {body[:200]}"
                    )
                    raise ExternalAPIError(
                        SERVICE_NAME,
                        "Upstream error",
                        status_code=response.status,
                        details={"pair": pair, "interval": interval},
                    )
                return await response.json()
    except ExternalAPIError:
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error(f"Error fetching {pair} klines from Binance: {e}")
        raise ExternalAPIError(
            SERVICE_NAME,
            "Server error",
            status_code=500,
            details={"pair": pair, "interval": interval, "reason": str(e)},
        ) from e


async def fetch_klines(
    symbol: str,
    interval: str = "1d",
    limit: int = 300,
    cache: Optional[KlinesCache] = None,
) -> list[Bar]:
    """
    Fetch candles for a symbol, oldest first.

    Args:
        symbol: Dashboard symbol (BTC / ETH); unknown symbols map to BTCUSDT
        interval: Kline interval (e.g. "1d", "1h")
        limit: Number of candles
        cache: Cache to consult before hitting the exchange

    Raises:
        ExternalAPIError: Upstream returned non-200 or the request failed
    """
    pair = get_trading_pair(symbol)
    cache = cache or get_klines_cache()

    cached = await cache.get_rows(pair, interval, limit)
    if cached is not None:
        logger.debug(f"Klines cache hit for {pair} {interval} x{limit}")
        return [Bar(**row) for row in cached]

    logger.info(f"Fetching {pair} {interval} klines from Binance (limit={limit})...")
    raw = await _request_klines(pair, interval, limit)

    try:
        bars = parse_klines(raw)
    except (TypeError, ValueError, IndexError) as e:
        logger.error(f"Malformed klines payload for {pair}: {e}")
        raise ExternalAPIError(
            SERVICE_NAME,
            "Server error",
            status_code=500,
            details={"pair": pair, "interval": interval, "reason": str(e)},
        ) from e

    await cache.set_rows(
        pair,
        interval,
        limit,
        [bar.model_dump(mode="json") for bar in bars],
    )
    return bars
