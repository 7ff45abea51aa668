# MIT License
# Copyright (c) 2025 Hashborn

"""
Price Unit Conversion Tests

Tests:
- Bandwidth and storage conversions in both directions
- The 0 / 1 threshold around half a coin
- Truncation (not rounding) above one coin
- Overflow when the human value does not fit 64 bits
"""

import pytest

from protocol.config.params import BLOCKS_PER_MONTH, BYTES_PER_TERABYTE, COIN_PRECISION
from protocol.types.common import ConversionOverflowError, NegativeCurrencyError
from protocol.types.currency import UINT64_MAX, Currency
from protocol.units import (
    bandwidth_price_to_consensus,
    bandwidth_price_to_human,
    coins_to_hastings,
    hastings_to_coins,
    storage_price_to_consensus,
    storage_price_to_human,
)


def test_constants():
    assert COIN_PRECISION == 10**24
    assert BYTES_PER_TERABYTE == 10**12
    assert BLOCKS_PER_MONTH == 4320


# ═══════════════════════════════════════════════════════════════════
# BANDWIDTH
# ═══════════════════════════════════════════════════════════════════

def test_bandwidth_zero():
    assert bandwidth_price_to_consensus(0) == 0
    assert bandwidth_price_to_human(Currency(0)) == 0


def test_bandwidth_five_coins_per_tb():
    """5 SC/TB -> 5 * 10^24 / 10^12 hastings per byte, and back."""
    consensus = bandwidth_price_to_consensus(5)
    assert consensus == 5 * 10**12
    assert bandwidth_price_to_human(consensus) == 5


def test_bandwidth_one_hasting_per_byte_is_zero():
    # 10^12 hastings per TB is far below half a coin
    assert bandwidth_price_to_human(Currency(1)) == 0


@pytest.mark.parametrize("price", [0, 1, 2, 5, 10, 250, 123_456_789, UINT64_MAX])
def test_bandwidth_round_trip(price):
    assert bandwidth_price_to_human(bandwidth_price_to_consensus(price)) == price


def test_bandwidth_half_coin_boundary():
    # 5 * 10^11 hastings/byte is exactly half a coin per TB
    half = COIN_PRECISION // 2 // BYTES_PER_TERABYTE
    assert bandwidth_price_to_human(Currency(half)) == 1
    assert bandwidth_price_to_human(Currency(half - 1)) == 0


def test_bandwidth_below_one_coin_shows_one():
    almost_one = COIN_PRECISION // BYTES_PER_TERABYTE - 1
    assert bandwidth_price_to_human(Currency(almost_one)) == 1


def test_bandwidth_truncates_above_one():
    # 1.99 SC/TB displays as 1, not 2
    price = (2 * COIN_PRECISION - COIN_PRECISION // 100) // BYTES_PER_TERABYTE
    assert bandwidth_price_to_human(Currency(price)) == 1


def test_bandwidth_overflow():
    too_large = Currency((UINT64_MAX + 1) * COIN_PRECISION // BYTES_PER_TERABYTE)
    with pytest.raises(ConversionOverflowError):
        bandwidth_price_to_human(too_large)


def test_bandwidth_rejects_bad_human_input():
    with pytest.raises(NegativeCurrencyError):
        bandwidth_price_to_consensus(-1)
    with pytest.raises(ConversionOverflowError):
        bandwidth_price_to_consensus(UINT64_MAX + 1)


# ═══════════════════════════════════════════════════════════════════
# STORAGE
# ═══════════════════════════════════════════════════════════════════

def test_storage_zero():
    assert storage_price_to_consensus(0) == 0
    assert storage_price_to_human(Currency(0)) == 0


def test_storage_exact_round_trip():
    # 432 SC/TB/month divides evenly: 432 * 10^24 / 4320 / 10^12 = 10^11
    consensus = storage_price_to_consensus(432)
    assert consensus == 10**11
    assert storage_price_to_human(consensus) == 432


def test_storage_round_trip_truncates():
    """Division remainders are dropped on the way in and the way back truncates."""
    consensus = storage_price_to_consensus(50)
    assert consensus == 11_574_074_074
    assert storage_price_to_human(consensus) == 49


def test_storage_half_coin_boundary():
    # 115740741 * 4320 * 10^12 >= 5 * 10^23 > 115740740 * 4320 * 10^12
    assert storage_price_to_human(Currency(115_740_741)) == 1
    assert storage_price_to_human(Currency(115_740_740)) == 0


def test_storage_overflow():
    too_large = Currency((UINT64_MAX + 1) * COIN_PRECISION)
    with pytest.raises(ConversionOverflowError):
        storage_price_to_human(too_large)


def test_storage_largest_human_value():
    # 6_250_000_000 hastings/block/byte is exactly 27 coins/month/TB
    per_27_coins = 6_250_000_000
    assert storage_price_to_human(Currency(per_27_coins)) == 27

    steps = UINT64_MAX // 27
    assert storage_price_to_human(Currency(steps * per_27_coins)) == 27 * steps
    with pytest.raises(ConversionOverflowError):
        storage_price_to_human(Currency((steps + 1) * per_27_coins))


def test_bandwidth_largest_human_value():
    assert bandwidth_price_to_human(Currency(UINT64_MAX * (COIN_PRECISION // BYTES_PER_TERABYTE))) == UINT64_MAX
    with pytest.raises(ConversionOverflowError):
        bandwidth_price_to_human(Currency((UINT64_MAX + 1) * (COIN_PRECISION // BYTES_PER_TERABYTE)))



# ═══════════════════════════════════════════════════════════════════
# WHOLE COINS
# ═══════════════════════════════════════════════════════════════════

def test_coin_threshold_is_inclusive_at_half():
    assert hastings_to_coins(Currency(COIN_PRECISION // 2)) == 1
    assert hastings_to_coins(Currency(COIN_PRECISION // 2 - 1)) == 0


def test_coins_to_hastings():
    assert coins_to_hastings(3) == 3 * COIN_PRECISION
    assert hastings_to_coins(coins_to_hastings(3)) == 3
