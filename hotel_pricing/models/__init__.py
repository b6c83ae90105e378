"""Typed records consumed and produced by the pricing engine."""

from hotel_pricing.models.price_rule import PriceRule, RecurringType
from hotel_pricing.models.quote import (
    AppliedRule,
    CategoryAvailability,
    DailyAvailability,
    DailyAvailabilitySummary,
    NightlyPrice,
    OccupiedUnit,
    OccupyingBooking,
    PriceQuote,
    PriceTotals,
    RuleNight,
    SearchOption,
    SearchRequest,
    SearchResult,
)
from hotel_pricing.models.reservation import BookedUnit, Booking
from hotel_pricing.models.reservation_status import (
    NON_BLOCKING_STATUSES,
    BookingStatus,
    BookingStatusMapper,
)
from hotel_pricing.models.room import (
    BOOKABLE_STATUSES,
    CleaningStatus,
    InventoryUnit,
    RoomCategory,
    RoomStatus,
)

__all__ = [
    "RoomCategory",
    "InventoryUnit",
    "RoomStatus",
    "CleaningStatus",
    "BOOKABLE_STATUSES",
    "Booking",
    "BookedUnit",
    "BookingStatus",
    "BookingStatusMapper",
    "NON_BLOCKING_STATUSES",
    "PriceRule",
    "RecurringType",
    "AppliedRule",
    "NightlyPrice",
    "PriceTotals",
    "PriceQuote",
    "RuleNight",
    "CategoryAvailability",
    "DailyAvailability",
    "DailyAvailabilitySummary",
    "OccupiedUnit",
    "OccupyingBooking",
    "SearchRequest",
    "SearchOption",
    "SearchResult",
]
