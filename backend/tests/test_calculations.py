import math

import numpy as np
import pytest

from app.services.indicators.calculations import (
    compute_ema,
    compute_rsi,
    compute_sma,
    ema,
    format_rsi,
    get_last_valid,
    round_price,
    rsi,
    sma,
    to_optional_list,
)


def test_sma_warm_up():
    assert compute_sma([1, 2, 3, 4, 5], 3) == [None, None, 2.0, 3.0, 4.0]


def test_sma_window_longer_than_series():
    assert compute_sma([1, 2, 3], 5) == [None, None, None]


def test_sma_matches_rolling_mean(btc_bars):
    closes = np.array([b.close for b in btc_bars])
    result = sma(closes, 20)
    expected = np.convolve(closes, np.ones(20) / 20, mode="valid")
    assert np.isnan(result[:19]).all()
    assert np.allclose(result[19:], expected, atol=0.006)


def test_ema_seeded_with_first_value():
    # alpha = 2/3: 10 -> 16.666... -> 25.555...
    assert compute_ema([10, 20, 30], 2) == [None, 16.67, 25.56]


def test_ema_recursion_runs_before_exposure():
    values = [100.0, 110.0, 90.0, 120.0, 80.0]
    result = compute_ema(values, 4)
    alpha = 2 / 5
    running = values[0]
    for v in values[1:4]:
        running = alpha * v + (1 - alpha) * running
    assert result[:3] == [None, None, None]
    assert result[3] == round_price(running)


def test_ema_span_one_tracks_values():
    assert compute_ema([5.0, 7.5, 6.25], 1) == [5.0, 7.5, 6.25]


def test_rsi_known_values():
    assert compute_rsi([1, 2, 1, 2, 1], 2) == [None, None, 50.0, 75.0, 37.5]


def test_rsi_pins_at_100_for_rising_series():
    values = list(range(1, 21))
    result = compute_rsi(values, 14)
    assert result[:14] == [None] * 14
    assert result[14:] == [100.0] * 6


def test_rsi_falling_series_is_zero():
    values = list(range(20, 0, -1))
    result = compute_rsi(values, 5)
    assert all(v == 0.0 for v in result[5:])


@pytest.mark.parametrize("length", [0, 1, 13, 14])
def test_rsi_insufficient_history(length):
    values = [float(i) for i in range(length)]
    assert compute_rsi(values, 14) == [None] * length


def test_rsi_bounded(btc_bars):
    closes = [b.close for b in btc_bars]
    defined = [v for v in compute_rsi(closes, 14) if v is not None]
    assert len(defined) == len(closes) - 14
    assert all(0 <= v <= 100 for v in defined)


def test_format_rsi_without_losses():
    assert format_rsi(0.0, 0.0) == 100.0
    assert format_rsi(2.5, 0.0) == 100.0
    assert format_rsi(1.0, 1.0) == 50.0


@pytest.mark.parametrize("func", [sma, ema, rsi])
def test_length_preserved(func, btc_bars):
    closes = [b.close for b in btc_bars]
    for window in (1, 5, 14, 60, 500):
        assert len(func(closes, window)) == len(closes)


@pytest.mark.parametrize("func", [sma, ema, rsi])
def test_empty_input(func):
    assert len(func([], 3)) == 0


@pytest.mark.parametrize("func", [sma, ema, rsi])
@pytest.mark.parametrize("window", [0, -3])
def test_non_positive_window_rejected(func, window):
    with pytest.raises(ValueError):
        func([1.0, 2.0, 3.0], window)


def test_recomputation_is_idempotent(eth_bars):
    closes = [b.close for b in eth_bars]
    first = (compute_sma(closes, 20), compute_ema(closes, 12), compute_rsi(closes, 14))
    second = (compute_sma(closes, 20), compute_ema(closes, 12), compute_rsi(closes, 14))
    assert first == second


def test_outputs_rounded_to_cents(btc_bars):
    closes = [b.close for b in btc_bars]
    for series in (compute_sma(closes, 7), compute_ema(closes, 9), compute_rsi(closes, 9)):
        for v in series:
            if v is not None:
                assert v == round(v, 2)


def test_to_optional_list_and_last_valid():
    arr = np.array([np.nan, 1.5, np.nan, 2.25, np.nan])
    assert to_optional_list(arr) == [None, 1.5, None, 2.25, None]
    assert get_last_valid(arr) == 2.25
    assert get_last_valid(np.array([np.nan, np.nan])) is None
    assert all(not isinstance(v, float) or not math.isnan(v) for v in to_optional_list(arr))
