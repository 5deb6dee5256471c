"""
Amount conversion between net, gross and VAT.

Pure functions over integer minor units. Percentages are turned
into exact Fractions, so the only rounding happens once, at the
end, to the nearest minor unit with ties away from zero.

The converter never guesses whether an amount already includes
VAT. The caller knows what the document says and picks
gross_from_net or net_from_gross accordingly.
"""

from fractions import Fraction

from ledger_engine.schemas.money import Money, VatRate


class InvalidAmountError(ValueError):
    """A negative amount was passed to the converter."""

    def __init__(self, amount: Money):
        self.amount = amount
        super().__init__(
            f"amount must be non-negative, got {amount.amount} {amount.currency}"
        )


def round_half_away(value: Fraction) -> int:
    """Round to the nearest integer, ties away from zero."""
    magnitude = abs(value)
    rounded = int(magnitude + Fraction(1, 2))
    return rounded if value >= 0 else -rounded


def _multiplier(rate: VatRate) -> Fraction:
    return 1 + Fraction(rate.percent) / 100


def _require_non_negative(amount: Money) -> None:
    if amount.amount < 0:
        raise InvalidAmountError(amount)


def gross_from_net(net: Money, rate: VatRate) -> Money:
    """Add VAT to a net amount."""
    _require_non_negative(net)
    if rate.is_zero:
        return net
    gross = round_half_away(net.amount * _multiplier(rate))
    return Money(amount=gross, currency=net.currency)


def net_from_gross(gross: Money, rate: VatRate) -> Money:
    """Strip VAT from a VAT-inclusive amount."""
    _require_non_negative(gross)
    if rate.is_zero:
        return gross
    net = round_half_away(gross.amount / _multiplier(rate))
    return Money(amount=net, currency=gross.currency)


def vat_amount(net: Money, rate: VatRate) -> Money:
    """VAT due on a net amount."""
    _require_non_negative(net)
    if rate.is_zero:
        return Money(amount=0, currency=net.currency)
    vat = round_half_away(net.amount * Fraction(rate.percent) / 100)
    return Money(amount=vat, currency=net.currency)


def split_gross(gross: Money, rate: VatRate) -> tuple[Money, Money]:
    """
    Split a receipt total into (net, vat).

    vat is taken as gross - net rather than rounded separately,
    so the two parts always add back up to the receipt total.
    """
    net = net_from_gross(gross, rate)
    vat = Money(amount=gross.amount - net.amount, currency=gross.currency)
    return net, vat
