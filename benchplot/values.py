from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from fractions import Fraction
from functools import total_ordering
import math
import re
from typing import Literal

from benchplot.errors import CannotParse, MismatchedValueKinds, ValueOutOfRange


ValueKind = Literal["zero", "integer", "fixed"]

# Fixed values are signed Q32.32: 32 integer bits, 32 fractional bits.
FRAC_BITS = 32
FIXED_ONE = 1 << FRAC_BITS
FIXED_MIN_RAW = -(1 << 63)
FIXED_MAX_RAW = (1 << 63) - 1
INTEGER_MAX = (1 << 64) - 1

MIN_LABEL_DECIMALS = 1
MAX_LABEL_DECIMALS = 5

_FIXED_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_LABEL_QUANTUM = Decimal(1).scaleb(-MAX_LABEL_DECIMALS)


@total_ordering
@dataclass(frozen=True, eq=False)
class DomainValue:
    """Exact zero, an unsigned 64-bit count, or a Q32.32 fixed-point measurement.

    ``raw`` holds the count for ``integer`` values and the scaled bits for
    ``fixed`` values. Values compare by their exact numeric value, so the zero
    variant equals ``integer`` 0 and ``fixed`` 0.
    """

    kind: ValueKind
    raw: int = 0

    def __post_init__(self) -> None:
        if self.kind == "zero":
            if self.raw != 0:
                raise ValueError("zero value must have raw == 0")
        elif self.kind == "integer":
            if self.raw < 0 or self.raw > INTEGER_MAX:
                raise ValueOutOfRange(f"integer value out of range: {self.raw}")
        elif self.kind == "fixed":
            if self.raw < FIXED_MIN_RAW or self.raw > FIXED_MAX_RAW:
                raise ValueOutOfRange(f"fixed value out of range: {self.raw / FIXED_ONE!r}")
        else:
            raise ValueError(f"unknown value kind: {self.kind!r}")

    @classmethod
    def zero(cls) -> DomainValue:
        return ZERO

    @classmethod
    def integer(cls, value: int) -> DomainValue:
        return cls("integer", int(value))

    @classmethod
    def fixed(cls, value: float | int | Decimal | Fraction) -> DomainValue:
        """Nearest fixed-point value; never collapses to the zero variant."""
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueOutOfRange(f"cannot represent {value!r} as a fixed value")
        return cls("fixed", round(Fraction(value) * FIXED_ONE))

    @classmethod
    def from_fixed_bits(cls, raw: int) -> DomainValue:
        return cls("fixed", raw)

    @classmethod
    def from_float(cls, value: float) -> DomainValue:
        if value == 0.0:
            return ZERO
        return cls.fixed(float(value))

    @classmethod
    def parse(cls, text: str) -> DomainValue:
        if text == "0":
            return ZERO
        if text.isascii() and text.isdigit():
            count = int(text)
            if count > INTEGER_MAX:
                raise CannotParse(text)
            return cls("integer", count)
        if _FIXED_TEXT.fullmatch(text) is None:
            raise CannotParse(text)
        try:
            return cls.fixed(Decimal(text))
        except ValueOutOfRange as exc:
            raise CannotParse(text) from exc

    @property
    def is_zero(self) -> bool:
        return self.kind == "zero"

    def as_fraction(self) -> Fraction:
        if self.kind == "fixed":
            return Fraction(self.raw, FIXED_ONE)
        return Fraction(self.raw)

    def to_float(self) -> float:
        if self.kind == "fixed":
            return self.raw / FIXED_ONE
        return float(self.raw)

    def to_unsigned(self) -> int:
        """Whole part for axis labels; negative measurements clamp to 0."""
        if self.kind == "fixed":
            if self.raw <= 0:
                return 0
            return self.raw >> FRAC_BITS
        return self.raw

    def to_fixed(self) -> DomainValue:
        if self.kind == "integer":
            return DomainValue("fixed", self.raw << FRAC_BITS)
        return self

    def __float__(self) -> float:
        return self.to_float()

    def __add__(self, other: object) -> DomainValue:
        if not isinstance(other, DomainValue):
            return NotImplemented
        if other.is_zero:
            return self
        if self.is_zero:
            return other
        kind = self._matching_kind(other, "add")
        return DomainValue(kind, self.raw + other.raw)

    def __sub__(self, other: object) -> DomainValue:
        if not isinstance(other, DomainValue):
            return NotImplemented
        if other.is_zero:
            return self
        if self.is_zero:
            if other.raw == 0:
                return ZERO
            # Counts are unsigned, so only a measurement can be negated.
            if other.kind == "integer":
                raise ValueOutOfRange(f"integer value out of range: -{other.raw}")
            return DomainValue("fixed", -other.raw)
        kind = self._matching_kind(other, "sub")
        return DomainValue(kind, self.raw - other.raw)

    def __mul__(self, other: object) -> DomainValue:
        if not isinstance(other, DomainValue):
            return NotImplemented
        if self.is_zero or other.is_zero:
            return ZERO
        kind = self._matching_kind(other, "mul")
        if kind == "integer":
            return DomainValue(kind, self.raw * other.raw)
        product = self.raw * other.raw
        return DomainValue(kind, (product + (1 << (FRAC_BITS - 1))) >> FRAC_BITS)

    def div_by(self, divisor: int) -> DomainValue:
        """Divide by a small unsigned integer, truncating toward zero."""
        if isinstance(divisor, bool) or not isinstance(divisor, int):
            raise TypeError("divisor must be an int")
        if divisor == 0:
            raise ZeroDivisionError("division of a data point by zero")
        if divisor < 0:
            raise ValueError("divisor must be > 0")
        if self.is_zero:
            return ZERO
        quotient = abs(self.raw) // divisor
        return DomainValue(self.kind, -quotient if self.raw < 0 else quotient)

    def __truediv__(self, other: object) -> DomainValue:
        if isinstance(other, bool) or not isinstance(other, int):
            return NotImplemented
        return self.div_by(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainValue):
            return NotImplemented
        return self.as_fraction() == other.as_fraction()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DomainValue):
            return NotImplemented
        return self.as_fraction() < other.as_fraction()

    def __hash__(self) -> int:
        return hash(self.as_fraction())

    def format(self) -> str:
        if self.kind != "fixed":
            return str(self.raw)
        with localcontext() as ctx:
            ctx.prec = 40
            exact = Decimal(self.raw) / Decimal(FIXED_ONE)
            text = format(exact.quantize(_LABEL_QUANTUM, rounding=ROUND_HALF_EVEN), "f")
        whole, _, frac = text.partition(".")
        frac = frac.rstrip("0").ljust(MIN_LABEL_DECIMALS, "0")
        if whole == "-0" and frac.strip("0") == "":
            whole = "0"
        return f"{whole}.{frac}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"DomainValue({self.kind}, {self.format()})"

    def _matching_kind(self, other: DomainValue, operation: str) -> ValueKind:
        if self.kind != other.kind:
            raise MismatchedValueKinds(operation, self.kind, other.kind)
        return self.kind


ZERO = DomainValue("zero")


def parse_value(text: str) -> DomainValue:
    return DomainValue.parse(text)
