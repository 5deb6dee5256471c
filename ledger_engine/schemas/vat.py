"""
Pydantic schemas for VAT conversion requests.
"""

from pydantic import BaseModel

from ledger_engine.models.enums import VatDirection
from ledger_engine.schemas.money import Money, VatRate


class VatConversionRequest(BaseModel):
    """
    Convert a document amount using one VAT class.

    amount_includes_vat has no default: only the caller knows
    whether the receipt or invoice amount is gross or net.
    """
    amount: Money
    vat_code: str
    amount_includes_vat: bool
    direction: VatDirection | None = None


class VatConversionResponse(BaseModel):
    rate: VatRate
    net: Money
    vat: Money
    gross: Money
