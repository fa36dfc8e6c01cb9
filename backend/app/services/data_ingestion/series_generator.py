"""
Synthetic Series Generator

Generates reproducible OHLCV bars for the dashboard when no live feed is used.
The same (symbol, length, seed, end_date) always yields identical bars.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from app.core.rounding import round_cents, round_whole
from app.schemas.market import Bar, CryptoSymbol


MODULUS = 2_147_483_647  # 2^31 - 1
MULTIPLIER = 16_807

# Canonical volume jitter applied to the profile's base volume
VOLUME_RANGE = (0.55, 1.45)


@dataclass(frozen=True)
class SymbolProfile:
    """Random-walk parameters for one instrument."""

    symbol: CryptoSymbol
    base_price: float
    drift_percent: float
    volatility: float
    base_volume: float

    @property
    def seed_offset(self) -> int:
        return ord(self.symbol.value[0])


SYMBOL_PROFILES = {
    CryptoSymbol.BTC: SymbolProfile(
        symbol=CryptoSymbol.BTC,
        base_price=45000.0,
        drift_percent=0.18,
        volatility=0.035,
        base_volume=38000.0,
    ),
    CryptoSymbol.ETH: SymbolProfile(
        symbol=CryptoSymbol.ETH,
        base_price=3000.0,
        drift_percent=0.12,
        volatility=0.028,
        base_volume=24000.0,
    ),
}

DEFAULT_SYMBOL = CryptoSymbol.BTC


class LehmerRandom:
    """
    Park-Miller minimal standard generator.

    Draws are in [0, 1). State lives on the instance only.
    """

    def __init__(self, seed: int):
        # Truncated remainder: negative seeds keep their sign before the shift
        state = abs(seed) % MODULUS
        if seed < 0:
            state = -state
        if state <= 0:
            state += MODULUS - 1
        self._state = state

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        self._state = (self._state * MULTIPLIER) % MODULUS
        return (self._state - 1) / (MODULUS - 1)

    def uniform(self, low: float, high: float) -> float:
        """Draw from [low, high) using one step of the generator."""
        return low + self.next() * (high - low)


def get_profile(symbol: str) -> SymbolProfile:
    """Get the profile for a symbol, falling back to the default instrument."""
    try:
        key = CryptoSymbol(symbol.upper().strip())
    except ValueError:
        key = DEFAULT_SYMBOL
    return SYMBOL_PROFILES[key]


def generate_series(
    symbol: str,
    length: int,
    seed: int = 1,
    end_date: Optional[date] = None,
    volume_range: Optional[tuple[float, float]] = None,
) -> list[Bar]:
    """
    Generate `length` daily bars, oldest first, ending at `end_date`.

    Each bar opens at the previous bar's unrounded close. Prices are rounded
    to 2 decimals only when the Bar is built.
    """
    if end_date is None:
        end_date = date.today()
    vol_low, vol_high = volume_range or VOLUME_RANGE

    profile = get_profile(symbol)
    random = LehmerRandom(seed + profile.seed_offset)
    volatility = profile.volatility
    drift_factor = 1 + profile.drift_percent / 100

    bars = []
    previous_close = profile.base_price

    for index in range(length):
        open_raw = previous_close
        shock = (random.next() - 0.5) * 2 * volatility
        close_raw = max(1.0, open_raw * (drift_factor + shock))

        high_noise = random.uniform(0.4, 1.2) * volatility
        low_noise = random.uniform(0.4, 1.2) * volatility
        high_raw = max(open_raw, close_raw) * (1 + high_noise)
        low_raw = max(1.0, min(open_raw, close_raw) * (1 - low_noise))

        volume = round_whole(profile.base_volume * random.uniform(vol_low, vol_high))

        bars.append(
            Bar(
                date=end_date - timedelta(days=length - index - 1),
                open=round_cents(open_raw),
                high=round_cents(max(high_raw, open_raw, close_raw)),
                low=round_cents(min(low_raw, open_raw, close_raw)),
                close=round_cents(close_raw),
                volume=volume,
            )
        )

        previous_close = close_raw

    return bars


def list_profiles() -> list[SymbolProfile]:
    """All supported synthetic instruments."""
    return list(SYMBOL_PROFILES.values())
