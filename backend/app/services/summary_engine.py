"""
Summary Engine — per-option investment summary for a proposal.

Each hotel option is quoted as a package:

    option total = Σ option lines (rooms, meetings, dining)
                 + Σ shared lines (flights, transport, activities, custom)

Shared lines are added in full to every option; they are never split
between options.  Lines flagged ``include_in_summary=False`` still carry a
price for their own section but are left out of the totals here.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from app.models.proposal_schema import HotelOption, PricingConfig, ProposalData
from app.services.pricing_engine import (
    PriceBreakdown,
    calculate_breakdown,
    calculate_flight_total,
    sum_breakdowns,
)


# ---------------------------------------------------------------------------
# Shared group labels (display order)
# ---------------------------------------------------------------------------
GROUP_FLIGHTS = "Flights Total"
GROUP_TRANSPORT = "Transportation Total"
GROUP_EXTRAS = "Activities & Extras Total"
SHARED_GROUPS: Tuple[str, ...] = (GROUP_FLIGHTS, GROUP_TRANSPORT, GROUP_EXTRAS)

SHARED_ONLY_TITLE = "Shared Services"


@dataclass(frozen=True)
class PricedLine:
    """A line item after pricing, ready for aggregation or display."""
    label: str
    breakdown: PriceBreakdown
    quantity: float = 1
    duration: float = 1
    group: str = ""
    include_in_summary: bool = True

    @property
    def unit_price(self) -> float:
        """Grand total per unit (room, seat, guest...)."""
        if not self.quantity:
            return 0.0
        return self.breakdown.grand_total / self.quantity

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "group": self.group,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "duration": self.duration,
            "include_in_summary": self.include_in_summary,
            **self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class OptionSummary:
    title: str
    option_index: Optional[int]          # None for the shared-only fallback
    rows: Tuple[PricedLine, ...]
    shared_groups: Tuple[Tuple[str, float], ...]
    option_total: PriceBreakdown
    shared_total: PriceBreakdown

    @property
    def total(self) -> PriceBreakdown:
        return self.option_total + self.shared_total

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "option_index": self.option_index,
            "rows": [r.to_dict() for r in self.rows],
            "shared_groups": [{"label": label, "grand_total": amount} for label, amount in self.shared_groups],
            "option_total": self.option_total.to_dict(),
            "shared_total": self.shared_total.to_dict(),
            "total": self.total.to_dict(),
        }


# ---------------------------------------------------------------------------
# Line pricing
# ---------------------------------------------------------------------------

def price_hotel_lines(hotel: HotelOption, pricing: PricingConfig) -> List[PricedLine]:
    """Price every room, meeting and dining line of one hotel option."""
    markups = pricing.markups
    vat = pricing.vat_percent
    lines: List[PricedLine] = []

    for r in hotel.room_types:
        lines.append(PricedLine(
            label=f"Accommodation: {hotel.name} - {r.name}",
            breakdown=calculate_breakdown(r.net_price, markups.hotels, hotel.vat_rule, vat, r.quantity, r.num_nights),
            quantity=r.quantity,
            duration=r.num_nights,
            include_in_summary=r.include_in_summary,
        ))
    for m in hotel.meeting_rooms:
        lines.append(PricedLine(
            label=f"Event: {m.name}",
            breakdown=calculate_breakdown(m.price, markups.meetings, hotel.vat_rule, vat, m.quantity, m.days),
            quantity=m.quantity,
            duration=m.days,
            include_in_summary=m.include_in_summary,
        ))
    # Dining is priced with the meetings markup
    for d in hotel.dining:
        lines.append(PricedLine(
            label=f"Dining: {d.name}",
            breakdown=calculate_breakdown(d.price, markups.meetings, hotel.vat_rule, vat, d.quantity, d.days),
            quantity=d.quantity,
            duration=d.days,
            include_in_summary=d.include_in_summary,
        ))
    return lines


def price_shared_lines(proposal: ProposalData) -> List[PricedLine]:
    """
    Price the proposal-level items that apply to every option.

    Flights and transportation switched off in ``inclusions`` contribute no
    lines.  Activities and custom items are always summarized; their
    toggles only hide their pages.
    """
    pricing = proposal.pricing
    markups = pricing.markups
    vat = pricing.vat_percent
    inc = proposal.inclusions
    lines: List[PricedLine] = []

    if inc.flights:
        for idx, f in enumerate(proposal.flight_options):
            lines.append(PricedLine(
                label=f.route_description or f"Flight Option {idx + 1}",
                breakdown=calculate_flight_total(f.quotes, markups.flights, f.vat_rule, vat),
                quantity=sum(q.quantity for q in f.quotes),
                duration=1,
                group=GROUP_FLIGHTS,
                include_in_summary=f.include_in_summary,
            ))

    if inc.transportation:
        for t in proposal.transportation:
            lines.append(PricedLine(
                label=f"Transport: {t.model or t.type}",
                breakdown=calculate_breakdown(t.net_price_per_day, markups.transportation, t.vat_rule, vat, t.quantity, t.days),
                quantity=t.quantity,
                duration=t.days,
                group=GROUP_TRANSPORT,
                include_in_summary=t.include_in_summary,
            ))

    for a in proposal.activities:
        lines.append(PricedLine(
            label=f"Activity: {a.name}",
            breakdown=calculate_breakdown(a.price_per_person, markups.activities, a.vat_rule, vat, a.guests, a.days),
            quantity=a.guests,
            duration=a.days,
            group=GROUP_EXTRAS,
            include_in_summary=a.include_in_summary,
        ))

    for c in proposal.custom_items:
        lines.append(PricedLine(
            label=f"Additional: {c.description}",
            breakdown=calculate_breakdown(c.unit_price, markups.custom_items, c.vat_rule, vat, c.quantity, c.days),
            quantity=c.quantity,
            duration=c.days,
            group=GROUP_EXTRAS,
            include_in_summary=c.include_in_summary,
        ))

    return lines


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def summarize(lines: Iterable[PricedLine]) -> PriceBreakdown:
    """Sum the breakdowns of the lines included in the summary."""
    return sum_breakdowns(line.breakdown for line in lines if line.include_in_summary)


def _group_totals(shared_lines: List[PricedLine]) -> Tuple[Tuple[str, float], ...]:
    groups = []
    for group in SHARED_GROUPS:
        amount = summarize(line for line in shared_lines if line.group == group).grand_total
        if amount > 0:
            groups.append((group, amount))
    return tuple(groups)


def build_option_summary(
    option_index: int,
    hotel: HotelOption,
    pricing: PricingConfig,
    shared_lines: List[PricedLine],
) -> OptionSummary:
    rows = tuple(line for line in price_hotel_lines(hotel, pricing) if line.include_in_summary)
    return OptionSummary(
        title=f"Option {option_index + 1}: {hotel.name}",
        option_index=option_index,
        rows=rows,
        shared_groups=_group_totals(shared_lines),
        option_total=summarize(rows),
        shared_total=summarize(shared_lines),
    )


def build_investment_summary(proposal: ProposalData) -> List[OptionSummary]:
    """
    One summary per hotel option, in stored order.

    A proposal without hotel options gets a single shared-only summary so
    flights, transport and extras are still quoted.
    """
    shared_lines = price_shared_lines(proposal)

    if not proposal.hotel_options:
        return [OptionSummary(
            title=SHARED_ONLY_TITLE,
            option_index=None,
            rows=(),
            shared_groups=_group_totals(shared_lines),
            option_total=PriceBreakdown(),
            shared_total=summarize(shared_lines),
        )]

    return [
        build_option_summary(idx, hotel, proposal.pricing, shared_lines)
        for idx, hotel in enumerate(proposal.hotel_options)
    ]
