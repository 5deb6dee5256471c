"""
Money and VAT value objects.

All amounts are integers in minor currency units (øre, cents).
Floats are refused at construction so that fractional minor
units can never enter the engine.
"""

from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, Field, StrictInt, field_validator

from ledger_engine.models.enums import VatDirection


MINOR_UNITS_PER_MAJOR = 100


class Money(BaseModel):
    """An integer amount in minor units plus an ISO currency code."""

    amount: StrictInt
    currency: str = Field(min_length=3, max_length=3)

    model_config = {"frozen": True}

    @field_validator("currency")
    @classmethod
    def currency_must_be_upper_alpha(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("currency must be a three-letter ISO code")
        return v.upper()

    @classmethod
    def from_major(cls, major: Decimal | str | int, currency: str) -> "Money":
        """
        Convert a major-unit amount ("450.50") to minor units.

        Rounds to the nearest minor unit, ties away from zero.
        Floats are not accepted; pass a string or Decimal.
        """
        if isinstance(major, float):
            raise TypeError("pass major amounts as str or Decimal, not float")
        minor = (Decimal(major) * MINOR_UNITS_PER_MAJOR).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        return cls(amount=int(minor), currency=currency)

    def to_major(self) -> Decimal:
        return Decimal(self.amount) / MINOR_UNITS_PER_MAJOR

    def __str__(self) -> str:
        return f"{self.to_major():.2f} {self.currency}"


class VatRate(BaseModel):
    """
    A named VAT class mapped to an exact percentage.

    percent is a Decimal so that rates like 11.11 stay exact;
    the converter turns it into a Fraction before doing any
    arithmetic.
    """

    code: str = Field(min_length=1, max_length=40)
    percent: Decimal = Field(ge=0, le=100)
    directions: frozenset[VatDirection] = frozenset(
        {VatDirection.PURCHASE, VatDirection.SALE}
    )
    description: str = ""

    model_config = {"frozen": True}

    @property
    def is_zero(self) -> bool:
        """Zero-rated and exempt classes never carry VAT."""
        return self.percent == 0

    def applies_to(self, direction: VatDirection) -> bool:
        return direction in self.directions
