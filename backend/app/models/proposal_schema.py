"""
Proposal document schema.

Stored documents use the camelCase keys produced by the proposal editor
(``proposalName``, ``hotelOptions``, ``includeInSummary`` ...); Python code
uses the snake_case attribute names.  Unknown keys are ignored so older
documents keep loading.
"""
import os
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_VAT_PERCENT = float(os.getenv("DEFAULT_VAT_PERCENT", "15"))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class _CaseInsensitiveEnum(str, Enum):
    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class MarkupType(_CaseInsensitiveEnum):
    FIXED = "Fixed"             # amount per unit per day
    PERCENTAGE = "Percentage"   # percent of total net


class VatRule(_CaseInsensitiveEnum):
    DOMESTIC = "domestic"            # VAT on net + markup
    INTERNATIONAL = "international"  # VAT on markup only


class MarkupConfig(_Document):
    type: MarkupType = MarkupType.PERCENTAGE
    value: float = 0.0


class Markups(_Document):
    """One markup rule per pricing category. Dining uses ``meetings``."""
    hotels: MarkupConfig = Field(default_factory=MarkupConfig)
    meetings: MarkupConfig = Field(default_factory=MarkupConfig)
    flights: MarkupConfig = Field(default_factory=MarkupConfig)
    transportation: MarkupConfig = Field(default_factory=MarkupConfig)
    activities: MarkupConfig = Field(default_factory=MarkupConfig)
    custom_items: MarkupConfig = Field(default_factory=MarkupConfig)


class PricingConfig(_Document):
    currency: str = "SAR"           # ISO 4217, display only
    vat_percent: float = DEFAULT_VAT_PERCENT
    show_prices: bool = True
    markups: Markups = Field(default_factory=Markups)


class Branding(_Document):
    company_logo: Optional[str] = None
    contact_name: str = ""
    contact_email: str = ""


class Inclusions(_Document):
    """
    Section toggles.  Every toggle hides its pages.  Flights and
    transportation switched off are also left out of the summary;
    hotels, activities and custom items are always summarized.
    """
    hotels: bool = True
    flights: bool = True
    transportation: bool = True
    activities: bool = True
    custom_items: bool = True


# ── Hotel option (package) ───────────────────────────────────────────────────

class HotelImage(_Document):
    url: str
    caption: str = ""


class RoomType(_Document):
    name: str = ""
    check_in: str = ""
    check_out: str = ""
    net_price: float = 0.0          # net per room per night
    num_nights: float = 1
    quantity: float = 1             # rooms
    include_in_summary: bool = True


class MeetingRoom(_Document):
    name: str = ""
    start_date: str = ""
    end_date: str = ""
    price: float = 0.0              # net per unit per day
    days: float = 1
    quantity: float = 1
    include_in_summary: bool = True


class DiningEntry(_Document):
    name: str = ""
    start_date: str = ""
    end_date: str = ""
    price: float = 0.0              # net per guest per day
    days: float = 1
    quantity: float = 1             # guests
    include_in_summary: bool = True


class HotelOption(_Document):
    name: str = ""
    location: str = ""
    website: str = ""
    images: List[HotelImage] = Field(default_factory=list)
    vat_rule: VatRule = VatRule.DOMESTIC
    room_types: List[RoomType] = Field(default_factory=list)
    meeting_rooms: List[MeetingRoom] = Field(default_factory=list)
    dining: List[DiningEntry] = Field(default_factory=list)


# ── Shared items ─────────────────────────────────────────────────────────────

class FlightLeg(_Document):
    airline: str = ""
    flight_number: str = ""
    origin: str = Field("", alias="from")
    destination: str = Field("", alias="to")
    departure_date: str = ""
    departure_time: str = ""
    arrival_date: str = ""
    arrival_time: str = ""
    duration: str = ""


class FlightQuote(_Document):
    cabin_class: str = Field("Economy", alias="class")
    price: float = 0.0              # net per seat
    quantity: float = 1             # seats


class FlightOption(_Document):
    route_description: str = ""
    outbound: List[FlightLeg] = Field(default_factory=list)
    inbound: List[FlightLeg] = Field(default_factory=list, alias="return")
    quotes: List[FlightQuote] = Field(default_factory=list)
    vat_rule: VatRule = VatRule.INTERNATIONAL
    include_in_summary: bool = True


class TransportItem(_Document):
    type: str = ""
    model: str = ""
    description: str = ""
    image: Optional[str] = None
    net_price_per_day: float = 0.0
    quantity: float = 1             # vehicles
    days: float = 1
    vat_rule: VatRule = VatRule.DOMESTIC
    include_in_summary: bool = True


class Activity(_Document):
    name: str = ""
    image: Optional[str] = None
    start_date: str = ""
    end_date: str = ""
    price_per_person: float = 0.0
    guests: float = 1
    days: float = 1
    vat_rule: VatRule = VatRule.DOMESTIC
    include_in_summary: bool = True


class CustomItem(_Document):
    description: str = ""
    unit_price: float = 0.0
    quantity: float = 1
    days: float = 1
    vat_rule: VatRule = VatRule.DOMESTIC
    include_in_summary: bool = True


# ── Proposal aggregate ───────────────────────────────────────────────────────

class ProposalData(_Document):
    id: str
    proposal_name: str = ""
    customer_name: str = ""
    company_id: Optional[str] = None
    created_by: Optional[str] = None        # author email
    branding: Branding = Field(default_factory=Branding)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    hotel_options: List[HotelOption] = Field(default_factory=list)
    flight_options: List[FlightOption] = Field(default_factory=list)
    transportation: List[TransportItem] = Field(default_factory=list)
    activities: List[Activity] = Field(default_factory=list)
    custom_items: List[CustomItem] = Field(default_factory=list)
    inclusions: Inclusions = Field(default_factory=Inclusions)
    created_at: datetime = Field(default_factory=_utcnow)
    last_modified: datetime = Field(default_factory=_utcnow)
    is_deleted: bool = False

    def to_document(self) -> dict:
        """Serialize to the stored camelCase document."""
        return self.model_dump(mode="json", by_alias=True)
