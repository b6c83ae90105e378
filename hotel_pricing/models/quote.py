"""Pydantic models for computed prices, availability and search results."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hotel_pricing.models.calendar import parse_iso_date
from hotel_pricing.models.price_rule import PriceRule, RecurringType
from hotel_pricing.models.reservation_status import BookingStatus
from hotel_pricing.models.room import InventoryUnit, RoomCategory


class AppliedRule(BaseModel):
    """Summary of the rule that priced a night."""

    id: str
    name: str
    multiplier: Decimal
    priority: int
    is_recurring: bool = False
    recurring_type: Optional[RecurringType] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_rule(cls, rule: PriceRule) -> "AppliedRule":
        return cls(
            id=rule.id,
            name=rule.name,
            multiplier=rule.multiplier,
            priority=rule.priority,
            is_recurring=rule.is_recurring,
            recurring_type=rule.recurring_type,
        )


class NightlyPrice(BaseModel):
    """Price of a single night."""

    date: date
    day_of_week: int = Field(description="0=Sunday .. 6=Saturday")
    day_name: str
    base_price: Decimal
    final_price: Decimal
    applied_rule: Optional[AppliedRule] = None

    model_config = ConfigDict(frozen=True)


class PriceTotals(BaseModel):
    """Aggregated amounts over all nights of a quote.

    ``total_discount`` is ``total_base - total_final``: positive when the stay
    is cheaper than the base price, negative when rules raise it.
    """

    total_base: Decimal
    total_final: Decimal
    total_discount: Decimal
    discount_percentage: Decimal
    average_price_per_night: Decimal

    model_config = ConfigDict(frozen=True)


class PriceQuote(BaseModel):
    """Per-night breakdown and totals for one room category and date range."""

    room_category: RoomCategory
    start_date: date
    end_date: date
    nights: list[NightlyPrice] = Field(default_factory=list)
    totals: PriceTotals
    applicable_rules: list[PriceRule] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def night_count(self) -> int:
        return len(self.nights)


class RuleNight(BaseModel):
    """A night on which a rule's temporal condition holds."""

    date: date
    day_of_week: int
    applied: bool
    winning_rule_id: Optional[str] = None


class CategoryAvailability(BaseModel):
    """Free rooms of one category over a requested stay."""

    room_category: RoomCategory
    total_units: int
    available_units: list[InventoryUnit] = Field(default_factory=list)

    @property
    def available_count(self) -> int:
        return len(self.available_units)

    @property
    def is_available(self) -> bool:
        return self.available_count > 0


class OccupyingBooking(BaseModel):
    """Booking that holds a room on a given day."""

    id: str
    reservation_number: Optional[str] = None
    check_in: date
    check_out: date
    adults: int
    children: int
    status: BookingStatus


class OccupiedUnit(BaseModel):
    """A room held by a booking on a given day."""

    room: InventoryUnit
    booking: Optional[OccupyingBooking] = None


class DailyAvailability(BaseModel):
    """Room counts and lists for one calendar day."""

    date: date
    total: int
    available: int
    occupied: int
    maintenance: int
    cleaning: int
    available_units: list[InventoryUnit] = Field(default_factory=list)
    occupied_units: list[OccupiedUnit] = Field(default_factory=list)
    maintenance_units: list[InventoryUnit] = Field(default_factory=list)


class DailyAvailabilitySummary(BaseModel):
    """Calendar view: per-day availability plus the average occupancy."""

    days: list[DailyAvailability] = Field(default_factory=list)
    rooms: list[InventoryUnit] = Field(default_factory=list)
    categories: dict[str, RoomCategory] = Field(default_factory=dict)

    @property
    def total_units(self) -> int:
        return len(self.rooms)

    @property
    def average_occupancy(self) -> float:
        """Mean number of occupied rooms per day."""
        if not self.days:
            return 0.0
        return sum(day.occupied for day in self.days) / len(self.days)


class SearchRequest(BaseModel):
    """Availability search input."""

    check_in: date = Field(alias="checkIn")
    check_out: date = Field(alias="checkOut")
    adults: int = 1
    children: int = 0
    room_category_id: Optional[str] = Field(None, alias="roomTypeId")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def parse_stay_date(cls, v):
        return parse_iso_date(v)

    @field_validator("adults", mode="before")
    @classmethod
    def default_adults(cls, v):
        """Missing adult count means a single guest."""
        if v is None or v == "":
            return 1
        return v

    @field_validator("children", mode="before")
    @classmethod
    def default_children(cls, v):
        if v is None or v == "":
            return 0
        return v

    @field_validator("adults")
    @classmethod
    def validate_adults(cls, v: int) -> int:
        if v < 1:
            raise ValueError("adults must be at least 1")
        return v

    @field_validator("children")
    @classmethod
    def validate_children(cls, v: int) -> int:
        if v < 0:
            raise ValueError("children cannot be negative")
        return v

    @property
    def guests(self) -> int:
        return self.adults + self.children


class SearchOption(BaseModel):
    """One bookable room category with its availability and price."""

    availability: CategoryAvailability
    quote: PriceQuote

    @property
    def room_category(self) -> RoomCategory:
        return self.availability.room_category

    @property
    def total_final(self) -> Decimal:
        return self.quote.totals.total_final


class SearchResult(BaseModel):
    """Search output: options ranked by final total, cheapest first."""

    request: SearchRequest
    options: list[SearchOption] = Field(default_factory=list)

    @property
    def nights(self) -> int:
        return (self.request.check_out - self.request.check_in).days
