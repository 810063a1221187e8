"""
Pricing Engine — sell-price calculation for proposal line items.

Covers:
  - Markup on net cost (fixed per unit per day, or percentage of net)
  - VAT by rule: domestic (net + markup) or international (markup only)
  - Flight totals across multiple fare quotes

Every function here is pure: no rounding, no shared state.  Rounding and
currency formatting happen only at display time so aggregated totals keep
full precision.
"""

from dataclasses import dataclass
from typing import Iterable

from app.models.proposal_schema import (
    DEFAULT_VAT_PERCENT,
    FlightQuote,
    MarkupConfig,
    MarkupType,
    VatRule,
)


@dataclass(frozen=True)
class PriceBreakdown:
    """Pre-VAT sell price, VAT and grand total for one line or an aggregate."""
    sub_total: float = 0.0
    vat_amount: float = 0.0
    grand_total: float = 0.0

    def __add__(self, other: "PriceBreakdown") -> "PriceBreakdown":
        if not isinstance(other, PriceBreakdown):
            return NotImplemented
        return PriceBreakdown(
            sub_total=self.sub_total + other.sub_total,
            vat_amount=self.vat_amount + other.vat_amount,
            grand_total=self.grand_total + other.grand_total,
        )

    def to_dict(self) -> dict:
        return {
            "sub_total": self.sub_total,
            "vat_amount": self.vat_amount,
            "grand_total": self.grand_total,
        }


ZERO = PriceBreakdown()


def sum_breakdowns(breakdowns: Iterable[PriceBreakdown]) -> PriceBreakdown:
    """Field-by-field sum. An empty iterable gives ``ZERO``."""
    total = ZERO
    for b in breakdowns:
        total = total + b
    return total


def calculate_markup_amount(
    net_unit_price: float,
    markup: MarkupConfig,
    quantity: float = 1,
    duration: float = 1,
) -> float:
    """
    Agency margin for a line.

    Fixed markup is a per-unit-per-day fee, so it scales with quantity and
    duration exactly like the net cost.  Percentage markup is a percent of
    the total net.  Negative values (discounts) pass through unclamped.
    """
    if markup.type == MarkupType.FIXED:
        return markup.value * quantity * duration
    total_net = net_unit_price * quantity * duration
    return total_net * (markup.value / 100.0)


def calculate_breakdown(
    net_unit_price: float,
    markup: MarkupConfig,
    vat_rule: VatRule,
    vat_percent: float = DEFAULT_VAT_PERCENT,
    quantity: float = 1,
    duration: float = 1,
) -> PriceBreakdown:
    """
    Price a single line item.

    Formula:
        total_net   = net_unit_price × quantity × duration
        base_price  = total_net + markup_amount
        sub_total   = base_price
        vat_amount  = base_price × vat%      (domestic)
                    = markup_amount × vat%   (international)
        grand_total = sub_total + vat_amount

    Args:
        net_unit_price: Net cost per unit per day/night.
        markup:         Category markup rule.
        vat_rule:       domestic | international.
        vat_percent:    VAT rate, 0–100.
        quantity:       Rooms, seats, guests, vehicles...
        duration:       Nights or days.
    """
    total_net = net_unit_price * quantity * duration
    markup_amount = calculate_markup_amount(net_unit_price, markup, quantity, duration)
    base_price = total_net + markup_amount

    sub_total = base_price
    if vat_rule == VatRule.DOMESTIC:
        vat_amount = sub_total * (vat_percent / 100.0)
    else:
        # International: underlying service is zero-rated, only the margin is taxed
        vat_amount = markup_amount * (vat_percent / 100.0)

    return PriceBreakdown(
        sub_total=sub_total,
        vat_amount=vat_amount,
        grand_total=sub_total + vat_amount,
    )


def calculate_flight_total(
    quotes: Iterable[FlightQuote],
    markup: MarkupConfig,
    vat_rule: VatRule,
    vat_percent: float = DEFAULT_VAT_PERCENT,
) -> PriceBreakdown:
    """
    Sum the breakdowns of every fare quote of one flight option.

    Each quote is priced per seat (``price`` × ``quantity`` seats) with a
    duration of 1.
    """
    return sum_breakdowns(
        calculate_breakdown(q.price, markup, vat_rule, vat_percent, q.quantity, 1)
        for q in quotes
    )
