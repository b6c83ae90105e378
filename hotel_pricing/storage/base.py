"""Read-only data source interface consumed by the engine."""

from datetime import date
from typing import Any, Iterable, Optional, Protocol, TypeVar

import pydantic
from structlog import get_logger

from hotel_pricing.errors import ValidationError
from hotel_pricing.models import Booking, InventoryUnit, PriceRule, RoomCategory

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=pydantic.BaseModel)


class PricingDataSource(Protocol):
    """Accessors for the records the engine reads.

    Implementations own storage; the engine never writes through them.
    """

    def get_room_category(self, room_category_id: str) -> Optional[RoomCategory]:
        ...

    def list_room_categories(self, active_only: bool = True) -> list[RoomCategory]:
        ...

    def get_room(self, room_id: str) -> Optional[InventoryUnit]:
        ...

    def list_rooms(self, room_category_id: Optional[str] = None) -> list[InventoryUnit]:
        ...

    def list_active_bookings(
        self,
        start: date,
        end: date,
        room_ids: Optional[Iterable[str]] = None,
    ) -> list[Booking]:
        """Bookings not cancelled/no-show whose stay overlaps [start, end)."""
        ...

    def get_price_rule(self, rule_id: str) -> Optional[PriceRule]:
        ...

    def list_price_rules(
        self, room_category_id: str, active_only: bool = True
    ) -> list[PriceRule]:
        ...


def parse_record(model: type[RecordT], data: dict[str, Any] | RecordT) -> RecordT:
    """Validate a raw record into its typed model.

    Args:
        model: Target pydantic model class
        data: Raw record (camelCase or snake_case keys) or an already parsed model

    Returns:
        Parsed model instance

    Raises:
        ValidationError: If the record is malformed
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        logger.warning(
            "Failed to parse record",
            model=model.__name__,
            record_id=data.get("id") if isinstance(data, dict) else None,
            error=str(e),
        )
        raise ValidationError(f"Invalid {model.__name__} record: {e}") from e


def parse_records(
    model: type[RecordT], records: Iterable[dict[str, Any] | RecordT]
) -> list[RecordT]:
    """Validate a list of raw records, failing on the first malformed one."""
    return [parse_record(model, record) for record in records]
