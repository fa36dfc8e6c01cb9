"""
Technical Indicator Calculations

Pure Python/NumPy implementations of SMA, EMA and RSI.
Every function returns an array the same length as its input, with NaN
marking positions whose window has not filled yet. All outputs are rounded
to 2 decimals.
"""

import math
from typing import Optional, Sequence, Union

import numpy as np

from app.core.rounding import round_cents

PriceSeries = Union[Sequence[float], np.ndarray]


def _as_array(data: PriceSeries) -> np.ndarray:
    return np.asarray(data, dtype=float)


def _check_window(value: int, label: str) -> None:
    if value < 1:
        raise ValueError(f"{label} must be >= 1, got {value}")


def round_price(value: float) -> float:
    """Round to 2 decimals, the precision of every stored price and indicator."""
    return round_cents(value)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: PriceSeries, window: int) -> np.ndarray:
    """Simple Moving Average over a running sum."""
    _check_window(window, "window")
    values = _as_array(data)
    result = np.full(len(values), np.nan)

    total = 0.0
    for i in range(len(values)):
        total += values[i]
        if i >= window:
            total -= values[i - window]
        if i >= window - 1:
            result[i] = round_price(total / window)

    return result


def ema(data: PriceSeries, span: int) -> np.ndarray:
    """
    Exponential Moving Average.

    The recursion is seeded with the first value and runs from index 0, but
    only positions i >= span - 1 are exposed. The running average itself is
    kept unrounded.
    """
    _check_window(span, "span")
    values = _as_array(data)
    result = np.full(len(values), np.nan)
    if len(values) == 0:
        return result

    alpha = 2 / (span + 1)
    current = values[0]

    for i in range(len(values)):
        if i > 0:
            current = alpha * values[i] + (1 - alpha) * current
        if i >= span - 1:
            result[i] = round_price(current)

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def format_rsi(avg_gain: float, avg_loss: float) -> float:
    """RSI from smoothed averages; pinned at 100 when there were no losses."""
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return round_price(100 - (100 / (1 + rs)))


def rsi(closes: PriceSeries, period: int = 14) -> np.ndarray:
    """Relative Strength Index with Wilder's smoothing."""
    _check_window(period, "period")
    values = _as_array(closes)
    result = np.full(len(values), np.nan)
    if len(values) <= period:
        return result

    # Price changes
    deltas = np.diff(values)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average over the first `period` deltas
    avg_gain = gains[:period].sum() / period
    avg_loss = losses[:period].sum() / period
    result[period] = format_rsi(avg_gain, avg_loss)

    # Subsequent values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = format_rsi(avg_gain, avg_loss)

    return result


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def to_optional_list(arr: np.ndarray) -> list[Optional[float]]:
    """Convert a NaN-marked array to a list with None for undefined positions."""
    return [None if math.isnan(v) else float(v) for v in arr]


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None


def compute_sma(closes: PriceSeries, window: int) -> list[Optional[float]]:
    return to_optional_list(sma(closes, window))


def compute_ema(closes: PriceSeries, span: int) -> list[Optional[float]]:
    return to_optional_list(ema(closes, span))


def compute_rsi(closes: PriceSeries, period: int = 14) -> list[Optional[float]]:
    return to_optional_list(rsi(closes, period))
