"""Transformers from engine results to the camelCase JSON bodies served to clients."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from hotel_pricing.models import (
    AppliedRule,
    CategoryAvailability,
    DailyAvailability,
    DailyAvailabilitySummary,
    InventoryUnit,
    NightlyPrice,
    OccupiedUnit,
    PriceQuote,
    PriceRule,
    RoomCategory,
    RuleNight,
    SearchOption,
    SearchResult,
)


def to_json_number(value: Optional[Decimal]) -> int | float | None:
    """Render a Decimal as a JSON number, an int when it has no fractional part."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class PriceQuoteTransformer:
    """Builds the price calculation response."""

    @staticmethod
    def _applied_rule(rule: Optional[AppliedRule]) -> Optional[dict[str, Any]]:
        if rule is None:
            return None
        return {
            "id": rule.id,
            "name": rule.name,
            "multiplier": to_json_number(rule.multiplier),
            "priority": rule.priority,
        }

    @staticmethod
    def _night(night: NightlyPrice) -> dict[str, Any]:
        return {
            "date": night.date.isoformat(),
            "dayOfWeek": night.day_of_week,
            "dayName": night.day_name,
            "basePrice": to_json_number(night.base_price),
            "finalPrice": to_json_number(night.final_price),
            "appliedRule": PriceQuoteTransformer._applied_rule(night.applied_rule),
        }

    @staticmethod
    def _rule(rule: PriceRule) -> dict[str, Any]:
        return {
            "id": rule.id,
            "name": rule.name,
            "startDate": _iso(rule.start_date),
            "endDate": _iso(rule.end_date),
            "multiplier": to_json_number(rule.multiplier),
            "priority": rule.priority,
            "isRecurring": rule.is_recurring,
            "recurringType": rule.recurring_type.value if rule.recurring_type else None,
            "daysOfWeek": list(rule.days_of_week),
            "recurringEndDate": _iso(rule.recurring_end_date),
        }

    @staticmethod
    def transform(quote: PriceQuote) -> dict[str, Any]:
        """Transform a price quote into the calculate-price body.

        Args:
            quote: Quote produced by PriceRuleEngine.price_quote

        Returns:
            Dict with roomType, period, pricing, dailyPrices and appliedRules
        """
        totals = quote.totals
        return {
            "roomType": {
                "id": quote.room_category.id,
                "name": quote.room_category.name,
                "basePrice": to_json_number(quote.room_category.base_price),
            },
            "period": {
                "startDate": quote.start_date.isoformat(),
                "endDate": quote.end_date.isoformat(),
                "nights": quote.night_count,
            },
            "pricing": {
                "totalBase": to_json_number(totals.total_base),
                "totalFinal": to_json_number(totals.total_final),
                "totalDiscount": to_json_number(totals.total_discount),
                "discountPercentage": to_json_number(totals.discount_percentage),
                "averagePricePerNight": to_json_number(totals.average_price_per_night),
            },
            "dailyPrices": [PriceQuoteTransformer._night(n) for n in quote.nights],
            "appliedRules": [PriceQuoteTransformer._rule(r) for r in quote.applicable_rules],
        }

    @staticmethod
    def transform_rule_calendar(rule_id: str, nights: list[RuleNight]) -> dict[str, Any]:
        """Transform the nights a rule matches into a calendar body."""
        return {
            "ruleId": rule_id,
            "nights": [
                {
                    "date": night.date.isoformat(),
                    "dayOfWeek": night.day_of_week,
                    "applied": night.applied,
                    "winningRuleId": night.winning_rule_id,
                }
                for night in nights
            ],
            "appliedCount": sum(1 for night in nights if night.applied),
        }


class SearchTransformer:
    """Builds the availability search response."""

    @staticmethod
    def _room_category(category: RoomCategory) -> dict[str, Any]:
        return {
            "id": category.id,
            "name": category.name,
            "description": category.description,
            "category": category.category,
            "capacity": category.capacity,
            "basePrice": to_json_number(category.base_price),
            "amenities": list(category.amenities),
        }

    @staticmethod
    def _availability(availability: CategoryAvailability) -> dict[str, Any]:
        return {
            "totalRooms": availability.total_units,
            "availableRooms": availability.available_count,
            "isAvailable": availability.is_available,
        }

    @staticmethod
    def _option(option: SearchOption) -> dict[str, Any]:
        totals = option.quote.totals
        category = option.room_category
        return {
            "roomType": SearchTransformer._room_category(category),
            "availability": SearchTransformer._availability(option.availability),
            "pricing": {
                "basePrice": to_json_number(category.base_price),
                "nights": option.quote.night_count,
                "totalBasePrice": to_json_number(totals.total_base),
                "totalFinalPrice": to_json_number(totals.total_final),
                "averagePricePerNight": to_json_number(totals.average_price_per_night),
            },
            "availableRoomsList": [
                {
                    "id": room.id,
                    "number": room.number,
                    "floor": room.floor,
                    "status": room.status.value,
                }
                for room in option.availability.available_units
            ],
        }

    @staticmethod
    def transform(result: SearchResult) -> dict[str, Any]:
        """Transform a search result into the search-availability body."""
        request = result.request
        options = [SearchTransformer._option(option) for option in result.options]
        return {
            "checkIn": request.check_in.isoformat(),
            "checkOut": request.check_out.isoformat(),
            "nights": result.nights,
            "adults": request.adults,
            "children": request.children,
            "availableOptions": options,
            "totalOptionsFound": len(options),
        }


class DailyAvailabilityTransformer:
    """Builds the calendar availability response."""

    @staticmethod
    def _room(
        room: InventoryUnit,
        category: Optional[RoomCategory],
        detailed: bool = False,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": room.id,
            "number": room.number,
            "floor": room.floor,
            "roomType": category.name if category else None,
            "status": room.status.value,
        }
        if detailed:
            data["roomTypeId"] = room.room_category_id
            data["capacity"] = category.capacity if category else None
            data["basePrice"] = to_json_number(category.base_price) if category else None
        return data

    @staticmethod
    def _occupied(unit: OccupiedUnit, category: Optional[RoomCategory]) -> dict[str, Any]:
        data = DailyAvailabilityTransformer._room(unit.room, category)
        data["capacity"] = category.capacity if category else None
        booking = unit.booking
        data["reservation"] = (
            {
                "id": booking.id,
                "reservationNumber": booking.reservation_number,
                "checkIn": booking.check_in.isoformat(),
                "checkOut": booking.check_out.isoformat(),
                "adults": booking.adults,
                "children": booking.children,
                "status": booking.status.value,
            }
            if booking
            else None
        )
        return data

    @staticmethod
    def _day(day: DailyAvailability, categories: dict[str, RoomCategory]) -> dict[str, Any]:
        room = DailyAvailabilityTransformer._room
        return {
            "date": day.date.isoformat(),
            "total": day.total,
            "available": day.available,
            "occupied": day.occupied,
            "maintenance": day.maintenance,
            "cleaning": day.cleaning,
            "availableRooms": [
                room(r, categories.get(r.room_category_id), detailed=True)
                for r in day.available_units
            ],
            "occupiedRooms": [
                DailyAvailabilityTransformer._occupied(u, categories.get(u.room.room_category_id))
                for u in day.occupied_units
            ],
            "maintenanceRooms": [
                room(r, categories.get(r.room_category_id)) for r in day.maintenance_units
            ],
        }

    @staticmethod
    def transform(summary: DailyAvailabilitySummary) -> dict[str, Any]:
        """Transform a daily availability summary into the calendar body."""
        return {
            "availability": [
                DailyAvailabilityTransformer._day(day, summary.categories)
                for day in summary.days
            ],
            "summary": {
                "totalRooms": summary.total_units,
                "avgOccupancy": round(summary.average_occupancy, 2),
            },
        }
