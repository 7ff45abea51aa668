# MIT License
# Copyright (c) 2025 Hashborn

"""
Ledger value types.

Currency is an unsigned, arbitrary-precision count of hastings (the smallest
indivisible unit of the coin). Arithmetic is checked: results below zero raise
instead of wrapping, and narrowing to 64 bits raises on overflow.
"""

from functools import total_ordering
from typing import Annotated, Any, Union

from pydantic import Field, GetCoreSchemaHandler, GetJsonSchemaHandler, NonNegativeInt
from pydantic_core import core_schema

from .common import ConversionOverflowError, NegativeCurrencyError

UINT64_MAX = 2**64 - 1

# Block count since genesis
BlockHeight = NonNegativeInt

# Fixed-width unsigned field (byte counts, call counters, rates)
Uint64 = Annotated[int, Field(ge=0, le=UINT64_MAX)]


@total_ordering
class Currency:
    """Immutable unsigned big integer of hastings."""

    __slots__ = ("_value",)

    def __init__(self, value: Union[int, str, "Currency"] = 0):
        if isinstance(value, Currency):
            value = value._value
        elif isinstance(value, str):
            value = value.strip()
            if not value.isascii() or not value.lstrip("-").isdigit():
                raise ValueError(f"Invalid currency string: {value!r}")
            value = int(value)
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Currency requires an int or decimal string, got {type(value).__name__}")

        if value < 0:
            raise NegativeCurrencyError(f"Currency cannot be negative: {value}")
        self._value = value

    # --- Checked arithmetic ---

    def add(self, other: Union[int, "Currency"]) -> "Currency":
        return Currency(self._value + _raw(other))

    def sub(self, other: Union[int, "Currency"]) -> "Currency":
        result = self._value - _raw(other)
        if result < 0:
            raise NegativeCurrencyError(f"Currency underflow: {self._value} - {_raw(other)}")
        return Currency(result)

    def mul(self, other: Union[int, "Currency"]) -> "Currency":
        return Currency(self._value * _raw(other))

    def div(self, other: Union[int, "Currency"]) -> "Currency":
        """Floor division. Raises ZeroDivisionError on a zero divisor."""
        return Currency(self._value // _raw(other))

    def cmp(self, other: Union[int, "Currency"]) -> int:
        o = _raw(other)
        return (self._value > o) - (self._value < o)

    def is_zero(self) -> bool:
        return self._value == 0

    def to_uint64(self) -> int:
        if self._value > UINT64_MAX:
            raise ConversionOverflowError(f"Currency {self._value} overflows uint64")
        return self._value

    # --- Operators ---

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __mul__(self, other):
        return self.mul(other)

    def __floordiv__(self, other):
        return self.div(other)

    __radd__ = __add__
    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if isinstance(other, Currency):
            return self._value == other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == other
        return NotImplemented

    def __lt__(self, other) -> bool:
        if isinstance(other, (Currency, int)):
            return self._value < _raw(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    # Immutable
    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __bool__(self) -> bool:
        return self._value != 0

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"Currency({self._value})"

    # --- Pydantic integration ---

    @classmethod
    def _validate(cls, value: Any) -> "Currency":
        try:
            return cls(value)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler):
        # JSON carries currency as a base-10 string
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str, when_used="json"),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, schema, handler: GetJsonSchemaHandler):
        return {"type": "string", "pattern": "^[0-9]+$", "description": "Amount in hastings"}


ZERO_CURRENCY = Currency(0)


def _raw(value: Union[int, Currency]) -> int:
    if isinstance(value, Currency):
        return value._value
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected int or Currency, got {type(value).__name__}")
    return value


class NetAddress(str):
    """
    Address a host is reachable at, in host:port form.
    The empty string means no address is configured.
    """

    def host(self) -> str:
        host, _, _ = self._split()
        return host

    def port(self) -> str:
        _, _, port = self._split()
        return port

    def _split(self):
        host, sep, port = self.rpartition(":")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        return host, sep, port

    def is_valid(self) -> bool:
        host, sep, port = self._split()
        if not sep or not host or not port.isdigit():
            return False
        if any(c.isspace() for c in host):
            return False
        return 1 <= int(port) <= 65535

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler):
        return core_schema.no_info_after_validator_function(cls, core_schema.str_schema())
