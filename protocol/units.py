# MIT License
# Copyright (c) 2025 Hashborn

"""
Price unit conversion.

Human prices are whole coins per terabyte (bandwidth) or per terabyte per month
(storage). Consensus prices are hastings per byte, or per byte per block.

Conversions to consensus always multiply before dividing so that fractional
coin amounts are not truncated early. Conversions to human units return 0 below
half a coin, 1 between half a coin and one coin, and truncate above that.
Values above one coin are NOT rounded to nearest; persisted and displayed
prices depend on this.
"""

from .config.params import BLOCKS_PER_MONTH, BYTES_PER_TERABYTE, COIN_PRECISION
from .types.common import ConversionOverflowError, NegativeCurrencyError
from .types.currency import UINT64_MAX, Currency


def _check_human(value: int) -> Currency:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Human price must be an int, got {type(value).__name__}")
    if value < 0:
        raise NegativeCurrencyError(f"Human price cannot be negative: {value}")
    if value > UINT64_MAX:
        raise ConversionOverflowError(f"Human price {value} overflows uint64")
    return Currency(value)


def _to_human(hastings_per_unit: Currency) -> int:
    """Apply the 0 / 1 / floor rule to a per-coin-unit hastings amount."""
    if hastings_per_unit < COIN_PRECISION // 2:
        # Result of the final division would be below 0.5
        return 0
    if hastings_per_unit < COIN_PRECISION:
        # At least 0.5 but below 1
        return 1
    return hastings_per_unit.div(COIN_PRECISION).to_uint64()


def bandwidth_price_to_consensus(siacoins_tb: int) -> Currency:
    """Convert 'coins per terabyte' to 'hastings per byte'."""
    hastings_tb = _check_human(siacoins_tb).mul(COIN_PRECISION)
    return hastings_tb.div(BYTES_PER_TERABYTE)


def bandwidth_price_to_human(hastings_byte: Currency) -> int:
    """
    Convert 'hastings per byte' to 'coins per terabyte'.

    Raises:
        ConversionOverflowError: if the result does not fit in 64 bits
    """
    hastings_tb = Currency(hastings_byte).mul(BYTES_PER_TERABYTE)
    return _to_human(hastings_tb)


def storage_price_to_consensus(siacoins_month_tb: int) -> Currency:
    """Convert 'coins per terabyte per month' to 'hastings per byte per block'."""
    hastings_month_tb = _check_human(siacoins_month_tb).mul(COIN_PRECISION)
    hastings_block_tb = hastings_month_tb.div(BLOCKS_PER_MONTH)
    return hastings_block_tb.div(BYTES_PER_TERABYTE)


def storage_price_to_human(hastings_block_byte: Currency) -> int:
    """
    Convert 'hastings per byte per block' to 'coins per terabyte per month'.

    Raises:
        ConversionOverflowError: if the result does not fit in 64 bits
    """
    hastings_month_byte = Currency(hastings_block_byte).mul(BLOCKS_PER_MONTH)
    hastings_month_tb = hastings_month_byte.mul(BYTES_PER_TERABYTE)
    return _to_human(hastings_month_tb)


def coins_to_hastings(coins: int) -> Currency:
    """Convert a whole-coin amount (e.g. a contract price) to hastings."""
    return _check_human(coins).mul(COIN_PRECISION)


def hastings_to_coins(hastings: Currency) -> int:
    """Whole coins in a hastings amount, with the same 0 / 1 / floor rule."""
    return _to_human(Currency(hastings))
