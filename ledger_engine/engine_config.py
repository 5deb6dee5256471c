"""
Per-session engine configuration.

The VAT table, the bank/cash account range and the matching
tolerances are bundled into one immutable EngineConfig that is
built once and passed into every engine component. Tests build
their own with synthetic tables; nothing is read from module
globals at call time.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from ledger_engine.config import Settings
from ledger_engine.models.enums import VatDirection
from ledger_engine.schemas.money import VatRate


_BOTH = frozenset({VatDirection.PURCHASE, VatDirection.SALE})
_PURCHASE = frozenset({VatDirection.PURCHASE})
_SALE = frozenset({VatDirection.SALE})

# Norwegian VAT classes as the ledger names them.
DEFAULT_VAT_RATES: tuple[VatRate, ...] = (
    VatRate(code="HIGH", percent=Decimal("25"), directions=_BOTH,
            description="Standard rate"),
    VatRate(code="MEDIUM", percent=Decimal("15"), directions=_BOTH,
            description="Food and beverages"),
    VatRate(code="LOW", percent=Decimal("12"), directions=_BOTH,
            description="Passenger transport, hotels, cinema"),
    VatRate(code="RAW_FISH", percent=Decimal("11.11"), directions=_BOTH,
            description="Raw fish"),
    VatRate(code="NONE", percent=Decimal("0"), directions=_BOTH,
            description="No VAT"),
    VatRate(code="EXEMPT", percent=Decimal("0"), directions=_SALE,
            description="Zero-rated sale"),
    VatRate(code="OUTSIDE", percent=Decimal("0"), directions=_SALE,
            description="Outside the VAT system"),
    VatRate(code="HIGH_DIRECT", percent=Decimal("25"), directions=_PURCHASE,
            description="Standard rate, direct deduction"),
    VatRate(code="HIGH_BASIS", percent=Decimal("25"), directions=_PURCHASE,
            description="Standard rate, calculation basis"),
    VatRate(code="MEDIUM_DIRECT", percent=Decimal("15"), directions=_PURCHASE,
            description="Food rate, direct deduction"),
    VatRate(code="MEDIUM_BASIS", percent=Decimal("15"), directions=_PURCHASE,
            description="Food rate, calculation basis"),
)

# Bank and cash accounts in the Norwegian standard chart of accounts.
DEFAULT_MONETARY_RANGES: tuple[tuple[int, int], ...] = ((1900, 1999),)


class EngineConfig(BaseModel):
    """Immutable configuration shared by all engine components."""

    vat_rates: tuple[VatRate, ...] = DEFAULT_VAT_RATES
    monetary_ranges: tuple[tuple[int, int], ...] = DEFAULT_MONETARY_RANGES
    amount_tolerance: int = Field(default=500, ge=0)
    date_tolerance_days: int = Field(default=5, ge=0)
    currency: str = Field(default="NOK", min_length=3, max_length=3)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def vat_codes_must_be_unique(self) -> "EngineConfig":
        codes = [rate.code for rate in self.vat_rates]
        if len(codes) != len(set(codes)):
            raise ValueError("duplicate VAT code in rate table")
        for low, high in self.monetary_ranges:
            if low > high:
                raise ValueError(f"invalid monetary range {low}-{high}")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineConfig":
        return cls(
            amount_tolerance=settings.AMOUNT_TOLERANCE_MINOR,
            date_tolerance_days=settings.DATE_TOLERANCE_DAYS,
            currency=settings.DEFAULT_CURRENCY.upper(),
        )

    def vat_rate(self, code: str, direction: VatDirection | None = None) -> VatRate:
        """
        Look up a VAT class by code.

        Raises ValueError for an unknown code, or for a code that
        does not apply to the given direction.
        """
        for rate in self.vat_rates:
            if rate.code == code:
                if direction is not None and not rate.applies_to(direction):
                    raise ValueError(
                        f"VAT type {code} cannot be used for "
                        f"{direction.value.lower()}s"
                    )
                return rate
        known = ", ".join(rate.code for rate in self.vat_rates)
        raise ValueError(f"Unknown VAT type '{code}' (known: {known})")

    def is_monetary_root(self, root: int) -> bool:
        return any(low <= root <= high for low, high in self.monetary_ranges)
