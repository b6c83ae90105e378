"""In-memory data source, loadable from a JSON snapshot."""

import json
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Optional

from structlog import get_logger

from hotel_pricing.errors import DataSourceError
from hotel_pricing.models import Booking, InventoryUnit, PriceRule, RoomCategory
from hotel_pricing.storage.base import parse_records

logger = get_logger(__name__)


class InMemoryDataSource:
    """Data source over records held in memory.

    Records keep the order they were supplied in. Used by tests, the CLI and
    any caller that fetched its records up front.
    """

    def __init__(
        self,
        room_categories: Iterable[RoomCategory | dict[str, Any]] = (),
        rooms: Iterable[InventoryUnit | dict[str, Any]] = (),
        bookings: Iterable[Booking | dict[str, Any]] = (),
        price_rules: Iterable[PriceRule | dict[str, Any]] = (),
    ):
        """Initialize the data source.

        Args:
            room_categories: Room type records
            rooms: Physical room records
            bookings: Reservation records with their booked rooms
            price_rules: Pricing rule records

        Raises:
            ValidationError: If any record is malformed
        """
        self.room_categories = parse_records(RoomCategory, room_categories)
        self.rooms = parse_records(InventoryUnit, rooms)
        self.bookings = parse_records(Booking, bookings)
        self.price_rules = parse_records(PriceRule, price_rules)

    @classmethod
    def from_dict(cls, snapshot: dict[str, Any]) -> "InMemoryDataSource":
        """Build a data source from a snapshot dictionary.

        Expected keys: ``roomTypes``, ``rooms``, ``reservations``, ``priceRules``.
        """
        data_source = cls(
            room_categories=snapshot.get("roomTypes", []),
            rooms=snapshot.get("rooms", []),
            bookings=snapshot.get("reservations", []),
            price_rules=snapshot.get("priceRules", []),
        )
        logger.info(
            "Loaded data snapshot",
            room_categories=len(data_source.room_categories),
            rooms=len(data_source.rooms),
            bookings=len(data_source.bookings),
            price_rules=len(data_source.price_rules),
        )
        return data_source

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryDataSource":
        """Load a snapshot from a JSON file.

        Raises:
            DataSourceError: If the file cannot be read or is not valid JSON
            ValidationError: If any record is malformed
        """
        try:
            with open(path, encoding="utf-8") as f:
                snapshot = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load data snapshot", path=str(path), error=str(e))
            raise DataSourceError(f"Cannot load snapshot {path}: {e}") from e

        return cls.from_dict(snapshot)

    def get_room_category(self, room_category_id: str) -> Optional[RoomCategory]:
        for category in self.room_categories:
            if category.id == room_category_id:
                return category
        return None

    def list_room_categories(self, active_only: bool = True) -> list[RoomCategory]:
        return [c for c in self.room_categories if c.is_active or not active_only]

    def get_room(self, room_id: str) -> Optional[InventoryUnit]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    def list_rooms(self, room_category_id: Optional[str] = None) -> list[InventoryUnit]:
        if room_category_id is None:
            return list(self.rooms)
        return [r for r in self.rooms if r.room_category_id == room_category_id]

    def list_active_bookings(
        self,
        start: date,
        end: date,
        room_ids: Optional[Iterable[str]] = None,
    ) -> list[Booking]:
        wanted = set(room_ids) if room_ids is not None else None
        bookings = []
        for booking in self.bookings:
            if not booking.is_blocking or not booking.overlaps(start, end):
                continue
            if wanted is not None and not wanted.intersection(booking.room_ids):
                continue
            bookings.append(booking)
        return bookings

    def get_price_rule(self, rule_id: str) -> Optional[PriceRule]:
        for rule in self.price_rules:
            if rule.id == rule_id:
                return rule
        return None

    def list_price_rules(
        self, room_category_id: str, active_only: bool = True
    ) -> list[PriceRule]:
        return [
            rule
            for rule in self.price_rules
            if rule.room_category_id == room_category_id
            and (rule.is_active or not active_only)
        ]
