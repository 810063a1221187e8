"""
Report Engine — renders the branded proposal PDF.

Page order:
  1. Cover
  2. General Terms & Conditions
  3. One page per hotel option           (inclusions.hotels)
  4. Flight itinerary                    (inclusions.flights, non-empty)
  5. Transportation                      (inclusions.transportation, non-empty)
  6. Activities & Tours                  (inclusions.activities, non-empty)
  7. Additional Services                 (inclusions.custom_items, non-empty)
  8. Investment Summary
  9. Thank You

Prices are printed only when ``pricing.show_prices`` is set.  All amounts
come from the pricing engine at full precision and are rounded here, at
display time only.
"""
import os
import logging
from datetime import datetime
from typing import Any, BinaryIO, Dict, List, Optional, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas as rl_canvas

from app.exceptions import ReportGenerationError
from app.models.proposal_schema import FlightLeg, HotelOption, ProposalData
from app.services.pricing_engine import calculate_breakdown
from app.services.summary_engine import OptionSummary, build_investment_summary

logger = logging.getLogger("proposals-report")

DOWNLOAD_DIR = os.getenv("DOWNLOAD_DIR", "/tmp/downloads")
DEFAULT_COMPANY_NAME = "SITC TRAVEL & EVENTS"
DEFAULT_WEBSITE = "www.sitc.com.sa"

PAGE_W, PAGE_H = A4
MARGIN = 1.5 * cm
BOTTOM_LIMIT = 2.5 * cm

# Default colors (theme overridden by tenant settings)
NAVY = (0.06, 0.16, 0.29)
GOLD = (0.80, 0.65, 0.25)
DARK_GRAY = (0.2, 0.2, 0.2)
MID_GRAY = (0.5, 0.5, 0.5)
LIGHT_GRAY = (0.7, 0.7, 0.7)
PALE = (0.97, 0.98, 0.99)
WHITE = (1, 1, 1)

TERMS = [
    ("1. Booking Confirmation",
     "All bookings are subject to availability at the time of confirmation. Prices are subject "
     "to change without prior notice until the final booking is secured."),
    ("2. Payment Policy",
     "Full payment is required 14 days prior to arrival to guarantee the reservation. We accept "
     "bank transfers and major credit cards."),
    ("3. Cancellation Policy",
     "Cancellations made more than 30 days before arrival will incur no charges. Cancellations "
     "between 14-30 days will be charged 50%. Cancellations within 14 days are non-refundable."),
    ("4. Flight Changes",
     "Flight schedules are subject to change by the airline. We are not responsible for delays "
     "or cancellations by the carrier."),
    ("5. Travel Documents",
     "Passengers are responsible for ensuring they have valid passports and visas for travel."),
    ("6. Liability",
     "We act only as agents for the passenger in regard to travel, whether by railroad, motorcar, "
     "motorcoach, boat, or airplane, and assume no liability for injury, damage, loss, accident, "
     "delay, or irregularity."),
]


def _ensure_dir(path: str):
    os.makedirs(path, exist_ok=True)


def _hex_to_rgb(hex_color: str) -> tuple:
    """Convert '#RRGGBB' to (r, g, b) floats 0-1."""
    h = hex_color.lstrip("#")
    if len(h) != 6:
        return NAVY
    return (int(h[0:2], 16) / 255, int(h[2:4], 16) / 255, int(h[4:6], 16) / 255)


def format_currency(amount: float, currency: str) -> str:
    """Display formatting: 'SAR 1,234.56'."""
    return f"{currency} {amount:,.2f}"


def _fmt_qty(value: float) -> str:
    return f"{value:g}"


# ── PDF helpers ───────────────────────────────────────────────────────────────

def _draw_band(c, y: float, height: float, rgb: tuple):
    c.setFillColorRGB(*rgb)
    c.rect(0, y, PAGE_W, height, fill=1, stroke=0)


def _draw_footer(c, company_name: str, theme_rgb: tuple):
    _draw_band(c, 0, 0.6 * cm, theme_rgb)
    c.setFillColorRGB(*MID_GRAY)
    c.setFont("Helvetica", 7)
    c.drawString(MARGIN, 0.9 * cm, f"CONFIDENTIAL — {company_name}")
    c.drawRightString(PAGE_W - MARGIN, 0.9 * cm, f"Page {c.getPageNumber()}")


def _section_title(c, y: float, title: str, right_text: str = "") -> float:
    c.setFillColorRGB(*NAVY)
    c.setFont("Helvetica-Bold", 20)
    c.drawString(MARGIN, y, title.upper())
    if right_text:
        c.setFillColorRGB(*LIGHT_GRAY)
        c.setFont("Helvetica-Bold", 11)
        c.drawRightString(PAGE_W - MARGIN, y, right_text)
    y -= 0.35 * cm
    c.setStrokeColorRGB(*GOLD)
    c.setLineWidth(2)
    c.line(MARGIN, y, PAGE_W - MARGIN, y)
    c.setLineWidth(1)
    return y - 0.9 * cm


def _table_header(c, y: float, columns: List[tuple], theme_rgb: tuple) -> float:
    """columns: [(label, x, align)] with align in 'l' | 'r' | 'c'."""
    c.setFillColorRGB(*theme_rgb)
    c.rect(MARGIN, y - 0.15 * cm, PAGE_W - 2 * MARGIN, 0.6 * cm, fill=1, stroke=0)
    c.setFillColorRGB(*WHITE)
    c.setFont("Helvetica-Bold", 8.5)
    for label, x, align in columns:
        _draw_aligned(c, x, y + 0.05 * cm, label, align)
    return y - 0.7 * cm


def _draw_aligned(c, x: float, y: float, text: str, align: str):
    if align == "r":
        c.drawRightString(x, y, text)
    elif align == "c":
        c.drawCentredString(x, y, text)
    else:
        c.drawString(x, y, text)


def _draw_row(c, y: float, cells: List[tuple]) -> float:
    """cells: [(text, x, align, bold)]"""
    for text, x, align, bold in cells:
        c.setFont("Helvetica-Bold" if bold else "Helvetica", 9)
        c.setFillColorRGB(*(NAVY if bold else DARK_GRAY))
        _draw_aligned(c, x, y, text, align)
    c.setStrokeColorRGB(0.9, 0.9, 0.9)
    c.line(MARGIN, y - 0.2 * cm, PAGE_W - MARGIN, y - 0.2 * cm)
    return y - 0.6 * cm


def _draw_wrapped(c, x: float, y: float, text: str, width: float,
                  font: str = "Helvetica", size: float = 9, leading: float = 0.45 * cm) -> float:
    c.setFont(font, size)
    for line in simpleSplit(text, font, size, width):
        c.drawString(x, y, line)
        y -= leading
    return y


class ProposalReportEngine:

    def __init__(self, tenant_settings: Optional[Dict[str, Any]] = None, output_dir: Optional[str] = None):
        ts = tenant_settings or {}
        self.company_name = ts.get("company_name", DEFAULT_COMPANY_NAME)
        self.website = ts.get("website", DEFAULT_WEBSITE)
        self.theme_color_hex = ts.get("theme_color_hex", "#0f2a4a")
        self.theme_rgb = _hex_to_rgb(self.theme_color_hex)
        self.output_dir = output_dir or DOWNLOAD_DIR

    def generate(self, proposal: ProposalData) -> str:
        """Render the proposal into ``output_dir`` and return the file path."""
        _ensure_dir(self.output_dir)
        filename = f"Proposal_{proposal.id[:8]}.pdf"
        path = os.path.join(self.output_dir, filename)
        self.render(proposal, path)
        logger.info("proposal pdf generated", extra={"proposal_id": proposal.id})
        return path

    def render(self, proposal: ProposalData, target: Union[str, BinaryIO]) -> None:
        """Render to a file path or a writable binary buffer."""
        try:
            c = rl_canvas.Canvas(target, pagesize=A4)
            c.setTitle(proposal.proposal_name or "Proposal")
            c.setAuthor(proposal.branding.contact_name or self.company_name)

            inc = proposal.inclusions
            self._cover_page(c, proposal)
            self._terms_page(c)
            if inc.hotels:
                for idx, hotel in enumerate(proposal.hotel_options):
                    self._hotel_page(c, proposal, idx, hotel)
            if inc.flights and proposal.flight_options:
                self._flight_pages(c, proposal)
            if inc.transportation and proposal.transportation:
                self._transport_pages(c, proposal)
            if inc.activities and proposal.activities:
                self._activity_pages(c, proposal)
            if inc.custom_items and proposal.custom_items:
                self._custom_pages(c, proposal)
            self._summary_pages(c, proposal)
            self._thank_you_page(c, proposal)
            c.save()
        except Exception as e:
            logger.error(f"Proposal PDF failed for {proposal.id}: {e}", exc_info=True)
            raise ReportGenerationError(
                f"Could not render proposal {proposal.id}",
                details={"proposal_id": proposal.id, "error": str(e)},
            ) from e

    # ── Page plumbing ─────────────────────────────────────────────────────────

    def _start_page(self, c) -> float:
        _draw_band(c, PAGE_H - 1.2 * cm, 1.2 * cm, self.theme_rgb)
        _draw_footer(c, self.company_name, self.theme_rgb)
        return PAGE_H - 2.8 * cm

    def _end_page(self, c):
        c.showPage()

    def _ensure_room(self, c, y: float, needed: float) -> float:
        if y - needed < BOTTOM_LIMIT:
            self._end_page(c)
            return self._start_page(c)
        return y

    # ── 1. Cover ──────────────────────────────────────────────────────────────

    def _cover_page(self, c, proposal: ProposalData):
        branding = proposal.branding
        _draw_band(c, PAGE_H - 4 * cm, 4 * cm, self.theme_rgb)

        y = PAGE_H / 2 + 4 * cm
        logo = branding.company_logo
        if logo and os.path.isfile(logo):
            c.drawImage(logo, PAGE_W / 2 - 3 * cm, y - 2 * cm, width=6 * cm, height=6 * cm,
                        preserveAspectRatio=True, mask="auto")
        y -= 4 * cm

        c.setFillColorRGB(*self.theme_rgb)
        c.setFont("Helvetica-Bold", 28)
        for line in simpleSplit((proposal.proposal_name or "Proposal").upper(), "Helvetica-Bold", 28, PAGE_W - 4 * cm):
            c.drawCentredString(PAGE_W / 2, y, line)
            y -= 1.1 * cm
        c.setFillColorRGB(*GOLD)
        c.rect(PAGE_W / 2 - 2 * cm, y, 4 * cm, 0.18 * cm, fill=1, stroke=0)
        y -= 1.2 * cm
        c.setFillColorRGB(*MID_GRAY)
        c.setFont("Helvetica", 16)
        c.drawCentredString(PAGE_W / 2, y, proposal.customer_name.upper())

        # Details strip
        strip_y = 3 * cm
        c.setFillColorRGB(*PALE)
        c.rect(0, strip_y, PAGE_W, 3 * cm, fill=1, stroke=0)
        c.setFillColorRGB(*GOLD)
        c.rect(0, strip_y + 3 * cm, PAGE_W, 0.12 * cm, fill=1, stroke=0)
        details = [
            ("DATE", proposal.last_modified.strftime("%d %b %Y")),
            ("PREPARED BY", branding.contact_name or "-"),
            ("CONTACT", branding.contact_email or "-"),
        ]
        col_w = PAGE_W / len(details)
        for i, (label, value) in enumerate(details):
            x = col_w * i + col_w / 2
            c.setFillColorRGB(*LIGHT_GRAY)
            c.setFont("Helvetica-Bold", 8)
            c.drawCentredString(x, strip_y + 1.9 * cm, label)
            c.setFillColorRGB(*self.theme_rgb)
            c.setFont("Helvetica-Bold", 11)
            c.drawCentredString(x, strip_y + 1.2 * cm, value)

        _draw_band(c, 0, 1.2 * cm, self.theme_rgb)
        self._end_page(c)

    # ── 2. Terms ──────────────────────────────────────────────────────────────

    def _terms_page(self, c):
        y = self._start_page(c)
        y = _section_title(c, y, "General Terms & Conditions")
        text_w = PAGE_W - 2 * MARGIN
        for heading, body in TERMS:
            y = self._ensure_room(c, y, 2.5 * cm)
            c.setFillColorRGB(*self.theme_rgb)
            c.setFont("Helvetica-Bold", 10)
            c.drawString(MARGIN, y, heading)
            y -= 0.5 * cm
            c.setFillColorRGB(*DARK_GRAY)
            y = _draw_wrapped(c, MARGIN, y, body, text_w) - 0.4 * cm
        self._end_page(c)

    # ── 3. Hotel options ──────────────────────────────────────────────────────

    def _hotel_page(self, c, proposal: ProposalData, idx: int, hotel: HotelOption):
        pricing = proposal.pricing
        markups = pricing.markups
        currency = pricing.currency

        y = self._start_page(c)
        y = _section_title(c, y, hotel.name or f"Hotel {idx + 1}", f"Option {idx + 1}")

        c.setFillColorRGB(*self.theme_rgb)
        c.setFont("Helvetica-Bold", 9)
        c.drawString(MARGIN, y, "PROPERTY DETAILS")
        y -= 0.5 * cm
        c.setFillColorRGB(*DARK_GRAY)
        c.setFont("Helvetica", 9)
        if hotel.location:
            c.drawString(MARGIN, y, f"Location: {hotel.location}")
            y -= 0.45 * cm
        if hotel.website:
            c.drawString(MARGIN, y, f"Website: {hotel.website}")
            y -= 0.45 * cm
        y -= 0.6 * cm

        if not pricing.show_prices:
            self._end_page(c)
            return

        if hotel.room_types:
            c.setFillColorRGB(*self.theme_rgb)
            c.setFont("Helvetica-Bold", 11)
            c.drawString(MARGIN, y, "ACCOMMODATION RATES")
            y -= 0.7 * cm
            y = _table_header(c, y, [
                ("Room Type", MARGIN + 0.3 * cm, "l"),
                ("Check In / Out", 8 * cm, "l"),
                ("Nights", 13 * cm, "c"),
                ("Qty", 15 * cm, "c"),
                ("Total", PAGE_W - MARGIN - 0.3 * cm, "r"),
            ], self.theme_rgb)
            for rt in hotel.room_types:
                y = self._ensure_room(c, y, 0.8 * cm)
                line = calculate_breakdown(rt.net_price, markups.hotels, hotel.vat_rule,
                                           pricing.vat_percent, rt.quantity, rt.num_nights)
                y = _draw_row(c, y, [
                    (rt.name, MARGIN + 0.3 * cm, "l", True),
                    (f"{rt.check_in} - {rt.check_out}", 8 * cm, "l", False),
                    (_fmt_qty(rt.num_nights), 13 * cm, "c", False),
                    (_fmt_qty(rt.quantity), 15 * cm, "c", False),
                    (format_currency(line.grand_total, currency), PAGE_W - MARGIN - 0.3 * cm, "r", True),
                ])
            y -= 0.8 * cm

        if hotel.meeting_rooms or hotel.dining:
            y = self._ensure_room(c, y, 2.5 * cm)
            c.setFillColorRGB(*self.theme_rgb)
            c.setFont("Helvetica-Bold", 11)
            c.drawString(MARGIN, y, "EVENTS & DINING")
            y -= 0.7 * cm
            y = _table_header(c, y, [
                ("Service Description", MARGIN + 0.3 * cm, "l"),
                ("Days", 13 * cm, "c"),
                ("Guests", 15 * cm, "c"),
                ("Total", PAGE_W - MARGIN - 0.3 * cm, "r"),
            ], self.theme_rgb)
            for entry in [*hotel.meeting_rooms, *hotel.dining]:
                y = self._ensure_room(c, y, 0.8 * cm)
                line = calculate_breakdown(entry.price, markups.meetings, hotel.vat_rule,
                                           pricing.vat_percent, entry.quantity, entry.days)
                y = _draw_row(c, y, [
                    (f"{entry.name}  ({entry.start_date} - {entry.end_date})", MARGIN + 0.3 * cm, "l", True),
                    (_fmt_qty(entry.days), 13 * cm, "c", False),
                    (_fmt_qty(entry.quantity), 15 * cm, "c", False),
                    (format_currency(line.grand_total, currency), PAGE_W - MARGIN - 0.3 * cm, "r", True),
                ])

        self._end_page(c)

    # ── 4. Flights ────────────────────────────────────────────────────────────

    def _draw_leg(self, c, x: float, y: float, leg: FlightLeg) -> float:
        c.setFillColorRGB(*DARK_GRAY)
        c.setFont("Helvetica-Bold", 11)
        c.drawString(x, y, f"{leg.airline} ({leg.flight_number})")
        y -= 0.45 * cm
        c.setFont("Helvetica", 8.5)
        c.setFillColorRGB(*MID_GRAY)
        c.drawString(x, y, f"{leg.origin} {leg.departure_date} @ {leg.departure_time}")
        y -= 0.4 * cm
        c.drawString(x, y, f"{leg.destination} {leg.arrival_date} @ {leg.arrival_time}  {leg.duration}")
        return y - 0.6 * cm

    def _flight_pages(self, c, proposal: ProposalData):
        pricing = proposal.pricing
        currency = pricing.currency
        half = (PAGE_W - 2 * MARGIN) / 2

        y = self._start_page(c)
        y = _section_title(c, y, "Flight Itinerary")
        for idx, flight in enumerate(proposal.flight_options):
            legs = max(len(flight.outbound), len(flight.inbound), 1)
            y = self._ensure_room(c, y, 2 * cm + legs * 1.5 * cm + len(flight.quotes) * 0.5 * cm)
            c.setFillColorRGB(*self.theme_rgb)
            c.setFont("Helvetica-Bold", 12)
            c.drawString(MARGIN, y, flight.route_description or f"Option {idx + 1}")
            y -= 0.7 * cm

            c.setFillColorRGB(*LIGHT_GRAY)
            c.setFont("Helvetica-Bold", 8)
            c.drawString(MARGIN, y, "OUTBOUND")
            c.drawString(MARGIN + half, y, "RETURN")
            y -= 0.55 * cm
            y_out = y_ret = y
            for leg in flight.outbound:
                y_out = self._draw_leg(c, MARGIN, y_out, leg)
            for leg in flight.inbound:
                y_ret = self._draw_leg(c, MARGIN + half, y_ret, leg)
            y = min(y_out, y_ret) - 0.2 * cm

            if pricing.show_prices:
                c.setFillColorRGB(*DARK_GRAY)
                c.setFont("Helvetica-Bold", 9)
                c.drawString(MARGIN, y, "TOTAL COST ESTIMATE")
                y -= 0.5 * cm
                total = 0.0
                c.setFont("Helvetica", 9)
                for q in flight.quotes:
                    line = calculate_breakdown(q.price, pricing.markups.flights, flight.vat_rule,
                                               pricing.vat_percent, q.quantity, 1)
                    total += line.grand_total
                    c.setFillColorRGB(*DARK_GRAY)
                    c.drawString(MARGIN + 0.3 * cm, y, f"{q.cabin_class} Class ({_fmt_qty(q.quantity)} Seats)")
                    c.drawRightString(PAGE_W - MARGIN, y, format_currency(line.grand_total, currency))
                    y -= 0.45 * cm
                c.setStrokeColorRGB(*LIGHT_GRAY)
                c.line(MARGIN, y + 0.25 * cm, PAGE_W - MARGIN, y + 0.25 * cm)
                c.setFillColorRGB(*self.theme_rgb)
                c.setFont("Helvetica-Bold", 11)
                c.drawString(MARGIN + 0.3 * cm, y - 0.1 * cm, "Total")
                c.drawRightString(PAGE_W - MARGIN, y - 0.1 * cm, format_currency(total, currency))
                y -= 0.6 * cm
            y -= 0.8 * cm
        self._end_page(c)

    # ── 5–7. Transport, activities, custom items ──────────────────────────────

    def _item_block(self, c, y: float, title: str, detail: str, amount: Optional[str]) -> float:
        y = self._ensure_room(c, y, 1.8 * cm)
        c.setFillColorRGB(*DARK_GRAY)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(MARGIN, y, title)
        if amount is not None:
            c.setFillColorRGB(*self.theme_rgb)
            c.setFont("Helvetica-Bold", 12)
            c.drawRightString(PAGE_W - MARGIN, y, amount)
        y -= 0.5 * cm
        c.setFillColorRGB(*MID_GRAY)
        c.setFont("Helvetica", 9)
        c.drawString(MARGIN, y, detail)
        c.setStrokeColorRGB(0.9, 0.9, 0.9)
        c.line(MARGIN, y - 0.35 * cm, PAGE_W - MARGIN, y - 0.35 * cm)
        return y - 1.0 * cm

    def _transport_pages(self, c, proposal: ProposalData):
        pricing = proposal.pricing
        y = self._start_page(c)
        y = _section_title(c, y, "Transportation")
        for item in proposal.transportation:
            amount = None
            if pricing.show_prices:
                line = calculate_breakdown(item.net_price_per_day, pricing.markups.transportation, item.vat_rule,
                                           pricing.vat_percent, item.quantity, item.days)
                amount = format_currency(line.grand_total, pricing.currency)
            detail = f"{item.type} • {item.description}  |  {_fmt_qty(item.quantity)} Vehicle(s) × {_fmt_qty(item.days)} Day(s)"
            y = self._item_block(c, y, item.model or item.type, detail, amount)
        self._end_page(c)

    def _activity_pages(self, c, proposal: ProposalData):
        pricing = proposal.pricing
        y = self._start_page(c)
        y = _section_title(c, y, "Activities & Tours")
        for act in proposal.activities:
            amount = None
            if pricing.show_prices:
                line = calculate_breakdown(act.price_per_person, pricing.markups.activities, act.vat_rule,
                                           pricing.vat_percent, act.guests, act.days)
                amount = format_currency(line.grand_total, pricing.currency)
            detail = (f"{act.start_date} to {act.end_date} ({_fmt_qty(act.days)} Days) • "
                      f"{_fmt_qty(act.guests)} Guests")
            y = self._item_block(c, y, act.name, detail, amount)
        self._end_page(c)

    def _custom_pages(self, c, proposal: ProposalData):
        pricing = proposal.pricing
        y = self._start_page(c)
        y = _section_title(c, y, "Additional Services")
        for item in proposal.custom_items:
            amount = None
            if pricing.show_prices:
                line = calculate_breakdown(item.unit_price, pricing.markups.custom_items, item.vat_rule,
                                           pricing.vat_percent, item.quantity, item.days)
                amount = format_currency(line.grand_total, pricing.currency)
            detail = f"{_fmt_qty(item.days)} Days • {_fmt_qty(item.quantity)} Units"
            y = self._item_block(c, y, item.description, detail, amount)
        self._end_page(c)

    # ── 8. Investment summary ─────────────────────────────────────────────────

    def _summary_block(self, c, y: float, summary: OptionSummary, currency: str, vat_percent: float) -> float:
        row_count = len(summary.rows) + len(summary.shared_groups)
        y = self._ensure_room(c, y, 5 * cm + row_count * 0.6 * cm)
        c.setFillColorRGB(*self.theme_rgb)
        c.setFont("Helvetica-Bold", 13)
        c.drawString(MARGIN, y, summary.title)
        y -= 0.8 * cm

        right = PAGE_W - MARGIN - 0.3 * cm
        y = _table_header(c, y, [
            ("Service Description", MARGIN + 0.3 * cm, "l"),
            ("Unit Price", 12 * cm, "r"),
            ("Nights/Days", 13.9 * cm, "c"),
            ("Quantity", 15.9 * cm, "c"),
            ("Subtotal", right, "r"),
        ], self.theme_rgb)
        for row in summary.rows:
            y = self._ensure_room(c, y, 0.8 * cm)
            y = _draw_row(c, y, [
                (row.label[:60], MARGIN + 0.3 * cm, "l", False),
                (format_currency(row.unit_price, currency), 12 * cm, "r", False),
                (_fmt_qty(row.duration), 13.9 * cm, "c", False),
                (_fmt_qty(row.quantity), 15.9 * cm, "c", False),
                (format_currency(row.breakdown.grand_total, currency), right, "r", True),
            ])
        for label, amount in summary.shared_groups:
            y = self._ensure_room(c, y, 0.8 * cm)
            y = _draw_row(c, y, [
                (label, MARGIN + 0.3 * cm, "l", False),
                ("-", 12 * cm, "r", False),
                ("-", 13.9 * cm, "c", False),
                ("1", 15.9 * cm, "c", False),
                (format_currency(amount, currency), right, "r", True),
            ])

        # Totals box
        total = summary.total
        y -= 0.4 * cm
        box_w = 7 * cm
        box_x = PAGE_W - MARGIN - box_w
        c.setFillColorRGB(*PALE)
        c.setStrokeColorRGB(*LIGHT_GRAY)
        c.rect(box_x, y - 2.2 * cm, box_w, 2.6 * cm, fill=1, stroke=1)
        c.setFont("Helvetica", 9)
        c.setFillColorRGB(*MID_GRAY)
        c.drawString(box_x + 0.4 * cm, y - 0.1 * cm, "Sub Total")
        c.drawRightString(box_x + box_w - 0.4 * cm, y - 0.1 * cm, format_currency(total.sub_total, currency))
        c.drawString(box_x + 0.4 * cm, y - 0.7 * cm, f"VAT ({_fmt_qty(vat_percent)}%)")
        c.drawRightString(box_x + box_w - 0.4 * cm, y - 0.7 * cm, format_currency(total.vat_amount, currency))
        c.setFillColorRGB(*self.theme_rgb)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(box_x + 0.4 * cm, y - 1.6 * cm, "Grand Total")
        c.drawRightString(box_x + box_w - 0.4 * cm, y - 1.6 * cm, format_currency(total.grand_total, currency))
        return y - 3.4 * cm

    def _summary_pages(self, c, proposal: ProposalData):
        pricing = proposal.pricing
        y = self._start_page(c)
        y = _section_title(c, y, "Investment Summary")
        for summary in build_investment_summary(proposal):
            y = self._summary_block(c, y, summary, pricing.currency, pricing.vat_percent)
        self._end_page(c)

    # ── 9. Thank you ──────────────────────────────────────────────────────────

    def _thank_you_page(self, c, proposal: ProposalData):
        branding = proposal.branding
        _draw_band(c, 0, PAGE_H, self.theme_rgb)
        y = PAGE_H / 2 + 3 * cm
        c.setFillColorRGB(*WHITE)
        c.setFont("Helvetica-Bold", 36)
        c.drawCentredString(PAGE_W / 2, y, "Thank You")
        y -= 1.5 * cm
        c.setFont("Helvetica", 12)
        message = ("We appreciate the opportunity to propose these services for you. "
                   "We look forward to creating an unforgettable experience.")
        for line in simpleSplit(message, "Helvetica", 12, PAGE_W - 6 * cm):
            c.drawCentredString(PAGE_W / 2, y, line)
            y -= 0.6 * cm
        y -= 0.8 * cm
        c.setFillColorRGB(*GOLD)
        c.rect(PAGE_W / 2 - 1.5 * cm, y, 3 * cm, 0.1 * cm, fill=1, stroke=0)
        y -= 1.2 * cm
        c.setFillColorRGB(*WHITE)
        c.setFont("Helvetica-Bold", 12)
        c.drawCentredString(PAGE_W / 2, y, branding.contact_name)
        y -= 0.6 * cm
        c.setFont("Helvetica", 10)
        c.drawCentredString(PAGE_W / 2, y, branding.contact_email)
        y -= 1 * cm
        c.setFont("Helvetica", 8)
        c.drawCentredString(PAGE_W / 2, y, self.website)
        c.drawCentredString(PAGE_W / 2, 1 * cm, f"Generated {datetime.now().strftime('%d %b %Y')}")
        self._end_page(c)
