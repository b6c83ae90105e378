"""Data source reading records from the PMS REST API."""

from datetime import date
from typing import Iterable, Optional

from structlog import get_logger

from hotel_pricing.clients import PMSAPIClient, PMSAPIClientError, PMSAPINotFoundError
from hotel_pricing.errors import DataSourceError
from hotel_pricing.models import Booking, InventoryUnit, PriceRule, RoomCategory
from hotel_pricing.storage.base import parse_record, parse_records

logger = get_logger(__name__)


class PMSAPIDataSource:
    """Data source backed by PMSAPIClient.

    Records are fetched fresh on every call; nothing is cached between
    calculations. Client failures surface as DataSourceError, missing
    resources as None.
    """

    def __init__(self, client: Optional[PMSAPIClient] = None):
        self.client = client or PMSAPIClient()

    def _fetch(self, operation: str, fetch, *args, **kwargs):
        try:
            return fetch(*args, **kwargs)
        except PMSAPINotFoundError:
            return None
        except PMSAPIClientError as e:
            logger.error("PMS API read failed", operation=operation, error=str(e))
            raise DataSourceError(f"Failed to read {operation} from PMS API") from e

    def get_room_category(self, room_category_id: str) -> Optional[RoomCategory]:
        record = self._fetch("room type", self.client.get_room_type, room_category_id)
        return parse_record(RoomCategory, record) if record else None

    def list_room_categories(self, active_only: bool = True) -> list[RoomCategory]:
        records = self._fetch("room types", self.client.get_room_types) or []
        categories = parse_records(RoomCategory, records)
        return [c for c in categories if c.is_active or not active_only]

    def get_room(self, room_id: str) -> Optional[InventoryUnit]:
        record = self._fetch("room", self.client.get_room, room_id)
        return parse_record(InventoryUnit, record) if record else None

    def list_rooms(self, room_category_id: Optional[str] = None) -> list[InventoryUnit]:
        records = self._fetch("rooms", self.client.get_rooms) or []
        rooms = parse_records(InventoryUnit, records)
        if room_category_id is None:
            return rooms
        return [r for r in rooms if r.room_category_id == room_category_id]

    def list_active_bookings(
        self,
        start: date,
        end: date,
        room_ids: Optional[Iterable[str]] = None,
    ) -> list[Booking]:
        records = self._fetch("reservations", self.client.get_reservations) or []
        wanted = set(room_ids) if room_ids is not None else None
        bookings = []
        for booking in parse_records(Booking, records):
            if not booking.is_blocking or not booking.overlaps(start, end):
                continue
            if wanted is not None and not wanted.intersection(booking.room_ids):
                continue
            bookings.append(booking)
        return bookings

    def get_price_rule(self, rule_id: str) -> Optional[PriceRule]:
        record = self._fetch("price rule", self.client.get_price_rule, rule_id)
        return parse_record(PriceRule, record) if record else None

    def list_price_rules(
        self, room_category_id: str, active_only: bool = True
    ) -> list[PriceRule]:
        records = self._fetch(
            "price rules",
            self.client.get_price_rules,
            room_type_id=room_category_id,
            active_only=active_only,
        ) or []
        rules = parse_records(PriceRule, records)
        return [
            r
            for r in rules
            if r.room_category_id == room_category_id and (r.is_active or not active_only)
        ]
