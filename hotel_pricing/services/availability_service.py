"""Room availability over a stay and per calendar day."""

from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from structlog import get_logger

from hotel_pricing.errors import InvalidRangeError, NotFoundError, ValidationError
from hotel_pricing.models import (
    Booking,
    CategoryAvailability,
    DailyAvailability,
    DailyAvailabilitySummary,
    InventoryUnit,
    OccupiedUnit,
    OccupyingBooking,
    RoomCategory,
    RoomStatus,
)
from hotel_pricing.models.calendar import iter_days
from hotel_pricing.storage import PricingDataSource

logger = get_logger(__name__)


def _bookings_by_room(bookings: list[Booking]) -> dict[str, list[Booking]]:
    """Index blocking bookings by each room they hold."""
    index: dict[str, list[Booking]] = defaultdict(list)
    for booking in bookings:
        if not booking.is_blocking:
            continue
        for room_id in booking.room_ids:
            index[room_id].append(booking)
    return index


def _first_overlapping(
    bookings: list[Booking], start: date, end: date
) -> Optional[Booking]:
    for booking in bookings:
        if booking.overlaps(start, end):
            return booking
    return None


class AvailabilityResolver:
    """Finds rooms free for a whole stay.

    A room is free when its status allows bookings (AVAILABLE or CLEANING)
    and no booking other than cancelled/no-show ones holds it on any night
    of the stay. Intervals are half-open: a check-out on day D does not
    conflict with a check-in on day D.
    """

    def __init__(self, data_source: PricingDataSource):
        self.data_source = data_source

    def _candidate_categories(
        self,
        room_category_id: Optional[str],
        min_capacity: Optional[int],
    ) -> list[RoomCategory]:
        if room_category_id is not None:
            category = self.data_source.get_room_category(room_category_id)
            if category is None:
                raise NotFoundError(f"Room category {room_category_id} not found")
            categories = [category]
        else:
            categories = self.data_source.list_room_categories(active_only=True)

        categories = [c for c in categories if c.is_active]
        if min_capacity is not None:
            categories = [c for c in categories if c.capacity >= min_capacity]
        return sorted(categories, key=lambda c: (c.base_price, c.name))

    def find_available(
        self,
        check_in: date,
        check_out: date,
        room_category_id: Optional[str] = None,
        min_capacity: Optional[int] = None,
    ) -> list[CategoryAvailability]:
        """Find free rooms for the stay [check_in, check_out), grouped by category.

        Args:
            check_in: Arrival date
            check_out: Departure date (exclusive)
            room_category_id: Restrict the search to one category
            min_capacity: Minimum occupancy the category must allow

        Returns:
            Categories with at least one free room, cheapest base price first

        Raises:
            InvalidRangeError: If check_out is not after check_in
            ValidationError: If min_capacity is not positive
            NotFoundError: If room_category_id does not exist
        """
        if check_out <= check_in:
            raise InvalidRangeError("Check-out date must be after check-in date")
        if min_capacity is not None and min_capacity <= 0:
            raise ValidationError("Minimum capacity must be greater than 0")

        categories = self._candidate_categories(room_category_id, min_capacity)
        if not categories:
            logger.info(
                "No candidate room categories",
                room_category_id=room_category_id,
                min_capacity=min_capacity,
            )
            return []

        scope = categories[0].id if len(categories) == 1 else None
        rooms_by_category: dict[str, list[InventoryUnit]] = defaultdict(list)
        for room in self.data_source.list_rooms(scope):
            if room.is_bookable:
                rooms_by_category[room.room_category_id].append(room)

        bookable_ids = [
            room.id
            for category in categories
            for room in rooms_by_category.get(category.id, [])
        ]
        held: dict[str, list[Booking]] = {}
        if bookable_ids:
            held = _bookings_by_room(
                self.data_source.list_active_bookings(check_in, check_out, room_ids=bookable_ids)
            )

        results = []
        for category in categories:
            rooms = rooms_by_category.get(category.id, [])
            if not rooms:
                continue

            free = [
                room
                for room in rooms
                if _first_overlapping(held.get(room.id, []), check_in, check_out) is None
            ]

            logger.debug(
                "Resolved category availability",
                room_category_id=category.id,
                total_units=len(rooms),
                available_units=len(free),
            )

            if free:
                results.append(
                    CategoryAvailability(
                        room_category=category,
                        total_units=len(rooms),
                        available_units=free,
                    )
                )

        logger.info(
            "Availability search complete",
            check_in=check_in.isoformat(),
            check_out=check_out.isoformat(),
            categories_found=len(results),
        )
        return results

    def is_unit_available(self, room_id: str, check_in: date, check_out: date) -> bool:
        """Re-check a single room right before a booking is committed.

        Raises:
            InvalidRangeError: If check_out is not after check_in
            NotFoundError: If the room does not exist
        """
        if check_out <= check_in:
            raise InvalidRangeError("Check-out date must be after check-in date")

        room = self.data_source.get_room(room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found")
        if not room.is_bookable:
            return False

        bookings = self.data_source.list_active_bookings(check_in, check_out, room_ids=[room_id])
        held = _bookings_by_room(bookings)
        return _first_overlapping(held.get(room_id, []), check_in, check_out) is None

    def daily_availability(
        self,
        start: date,
        end: date,
        room_category_id: Optional[str] = None,
    ) -> DailyAvailabilitySummary:
        """Room counts for every day in [start, end], for calendar views.

        A room is occupied on day D when a blocking booking overlaps [D, D+1).
        Room status counts (maintenance, cleaning) reflect current status and
        are the same for every day.

        Raises:
            InvalidRangeError: If end is before start
        """
        if end < start:
            raise InvalidRangeError("End date cannot be before start date")

        rooms = sorted(
            self.data_source.list_rooms(room_category_id),
            key=lambda r: r.number,
        )
        categories = {
            c.id: c for c in self.data_source.list_room_categories(active_only=False)
        }
        bookings = self.data_source.list_active_bookings(
            start, end + timedelta(days=1), room_ids=[room.id for room in rooms]
        )
        held = _bookings_by_room(bookings)

        maintenance_units = [room for room in rooms if room.is_out_of_service]
        cleaning_count = sum(1 for room in rooms if room.status == RoomStatus.CLEANING)

        days = []
        for day in iter_days(start, end):
            next_day = day + timedelta(days=1)
            available_units = []
            occupied_units = []
            for room in rooms:
                booking = _first_overlapping(held.get(room.id, []), day, next_day)
                if booking is not None:
                    occupied_units.append(
                        OccupiedUnit(room=room, booking=_summarize_booking(booking))
                    )
                elif room.is_bookable:
                    available_units.append(room)

            days.append(
                DailyAvailability(
                    date=day,
                    total=len(rooms),
                    available=len(available_units),
                    occupied=len(occupied_units),
                    maintenance=len(maintenance_units),
                    cleaning=cleaning_count,
                    available_units=available_units,
                    occupied_units=occupied_units,
                    maintenance_units=maintenance_units,
                )
            )

        summary = DailyAvailabilitySummary(days=days, rooms=rooms, categories=categories)
        logger.info(
            "Daily availability computed",
            start=start.isoformat(),
            end=end.isoformat(),
            room_category_id=room_category_id,
            total_rooms=summary.total_units,
            average_occupancy=summary.average_occupancy,
        )
        return summary


def _summarize_booking(booking: Booking) -> OccupyingBooking:
    return OccupyingBooking(
        id=booking.id,
        reservation_number=booking.reservation_number,
        check_in=booking.check_in,
        check_out=booking.check_out,
        adults=booking.adults,
        children=booking.children,
        status=booking.status,
    )
