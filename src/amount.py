import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_DOWN

from errors import ParseError

DECIMAL_PLACES = 4
ROUNDING = ROUND_DOWN

_SCALE = 10 ** DECIMAL_PLACES
_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)
# Plain ASCII decimal text only; Decimal() alone would also take "1e2" and "1_000".
_DECIMAL_TEXT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


@dataclass(frozen=True, order=True)
class Amount:
    """
    Fixed-precision monetary value.

    Stored as an integer count of 1/10_000 units, so arithmetic is exact and
    never touches binary floating point. Input with more fractional digits
    than DECIMAL_PLACES is truncated toward zero.
    """

    units: int = 0

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def from_units(cls, units: int) -> "Amount":
        return cls(int(units))

    @classmethod
    def from_decimal(cls, value: Decimal) -> "Amount":
        if not value.is_finite():
            raise ParseError(f"amount must be a finite number, got {value}")
        try:
            quantized = value.quantize(_QUANTUM, rounding=ROUNDING)
        except InvalidOperation as e:
            raise ParseError(f"amount {value} is out of range") from e
        return cls(int(quantized.scaleb(DECIMAL_PLACES)))

    @classmethod
    def parse(cls, text: str) -> "Amount":
        """Parse a decimal string such as '1.5' or ' 0.0001 '."""
        stripped = text.strip() if isinstance(text, str) else ""
        if not _DECIMAL_TEXT.fullmatch(stripped):
            raise ParseError(f"invalid amount {text!r}")
        return cls.from_decimal(Decimal(stripped))

    @property
    def is_negative(self) -> bool:
        return self.units < 0

    @property
    def is_positive(self) -> bool:
        return self.units > 0

    @property
    def is_zero(self) -> bool:
        return self.units == 0

    def to_decimal(self) -> Decimal:
        return Decimal(self.units).scaleb(-DECIMAL_PLACES)

    def __add__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units + other.units)

    def __sub__(self, other: "Amount") -> "Amount":
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units - other.units)

    def __neg__(self) -> "Amount":
        return Amount(-self.units)

    def __str__(self) -> str:
        sign = "-" if self.units < 0 else ""
        whole, fraction = divmod(abs(self.units), _SCALE)
        return f"{sign}{whole}.{fraction:0{DECIMAL_PLACES}d}"

    def __repr__(self) -> str:
        return f"Amount('{self}')"
