"""Pydantic models for room categories and physical rooms."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hotel_pricing.models.money import coerce_decimal


class RoomStatus(str, Enum):
    """Operational status of a physical room."""

    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    CLEANING = "CLEANING"
    MAINTENANCE = "MAINTENANCE"
    BLOCKED = "BLOCKED"


class CleaningStatus(str, Enum):
    """Housekeeping sub-status, tracked independently of the booking status."""

    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
    IN_PROGRESS = "IN_PROGRESS"
    INSPECTED = "INSPECTED"


# Only these rooms can take new bookings; maintenance/blocked rooms are excluded for any date
BOOKABLE_STATUSES = frozenset({RoomStatus.AVAILABLE, RoomStatus.CLEANING})
OUT_OF_SERVICE_STATUSES = frozenset({RoomStatus.MAINTENANCE, RoomStatus.BLOCKED})


class RoomCategory(BaseModel):
    """Room type with its base nightly rate.

    The base price applies on every night no pricing rule overrides.
    """

    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    capacity: int = Field(description="Maximum occupancy")
    base_price: Decimal = Field(alias="basePrice")
    amenities: list[str] = Field(default_factory=list)
    is_active: bool = Field(default=True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        """Capacity must be positive."""
        if v <= 0:
            raise ValueError("capacity must be greater than 0")
        return v

    @field_validator("base_price", mode="before")
    @classmethod
    def parse_base_price(cls, v):
        """Decimal columns arrive as strings or JSON numbers."""
        return coerce_decimal(v)

    @field_validator("base_price")
    @classmethod
    def validate_base_price(cls, v: Decimal) -> Decimal:
        """Base price cannot be negative."""
        if v < 0:
            raise ValueError("basePrice cannot be negative")
        return v


class InventoryUnit(BaseModel):
    """A physical room belonging to exactly one room category."""

    id: str
    number: str
    floor: Optional[int] = None
    room_category_id: str = Field(alias="roomTypeId")
    status: RoomStatus = RoomStatus.AVAILABLE
    cleaning_status: CleaningStatus = Field(
        default=CleaningStatus.CLEAN, alias="cleaningStatus"
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("number", mode="before")
    @classmethod
    def coerce_number(cls, v):
        """Room numbers arrive as strings or integers."""
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def is_bookable(self) -> bool:
        """True when the room's operational status allows new bookings."""
        return self.status in BOOKABLE_STATUSES

    @property
    def is_out_of_service(self) -> bool:
        """True when the room is under maintenance or blocked."""
        return self.status in OUT_OF_SERVICE_STATUSES
