"""Pydantic model for dynamic pricing rules."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hotel_pricing.models.calendar import parse_iso_date
from hotel_pricing.models.money import coerce_decimal


class RecurringType(str, Enum):
    """Cadence of a recurring price rule.

    - WEEKLY: every week (on ``days_of_week`` when given, otherwise every day)
    - CUSTOM: only on the weekdays listed in ``days_of_week``
    - MONTHLY: on the same day of month as the rule's start date
    """

    WEEKLY = "WEEKLY"
    CUSTOM = "CUSTOM"
    MONTHLY = "MONTHLY"


class PriceRule(BaseModel):
    """Multiplier applied to a room category's base price.

    A rule is either bounded (applies between ``start_date`` and ``end_date``,
    both inclusive) or recurring (applies on its cadence until the optional
    ``recurring_end_date``). Higher ``priority`` wins when several rules match
    the same night.
    """

    id: str
    name: str = ""
    room_category_id: str = Field(alias="roomTypeId")
    start_date: date = Field(alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    multiplier: Decimal = Field(description="Fraction of the base price, e.g. 1.5 = +50%")
    priority: int = 0
    is_active: bool = Field(default=True, alias="isActive")
    is_recurring: bool = Field(default=False, alias="isRecurring")
    recurring_type: Optional[RecurringType] = Field(None, alias="recurringType")
    days_of_week: list[int] = Field(
        default_factory=list,
        alias="daysOfWeek",
        description="Weekday indices, 0=Sunday .. 6=Saturday",
    )
    recurring_end_date: Optional[date] = Field(None, alias="recurringEndDate")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("start_date", "end_date", "recurring_end_date", mode="before")
    @classmethod
    def parse_rule_date(cls, v):
        """Truncate ISO datetimes to their calendar date."""
        if v is None or v == "":
            return None
        return parse_iso_date(v)

    @field_validator("multiplier", mode="before")
    @classmethod
    def parse_multiplier(cls, v):
        return coerce_decimal(v)

    @field_validator("multiplier")
    @classmethod
    def validate_multiplier(cls, v: Decimal) -> Decimal:
        """Multiplier must be strictly positive."""
        if v <= 0:
            raise ValueError("multiplier must be greater than 0")
        return v

    @field_validator("recurring_type", mode="before")
    @classmethod
    def parse_recurring_type(cls, v):
        if isinstance(v, str):
            return v.strip().upper() or None
        return v

    @field_validator("days_of_week")
    @classmethod
    def validate_days_of_week(cls, v: list[int]) -> list[int]:
        """Weekday indices must be within 0..6; stored sorted and unique."""
        invalid = [day for day in v if day < 0 or day > 6]
        if invalid:
            raise ValueError(f"daysOfWeek values must be between 0 and 6, got {invalid}")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_temporal_mode(self) -> "PriceRule":
        """Bounded rules need an end date; recurring rules need a cadence."""
        if self.is_recurring:
            if self.recurring_type is None:
                raise ValueError("recurringType is required for recurring rules")
            if self.recurring_type == RecurringType.CUSTOM and not self.days_of_week:
                raise ValueError("daysOfWeek is required for CUSTOM recurring rules")
            if (
                self.recurring_end_date is not None
                and self.recurring_end_date < self.start_date
            ):
                raise ValueError("recurringEndDate cannot be before startDate")
        else:
            if self.end_date is None:
                raise ValueError("endDate is required for bounded rules")
            if self.end_date < self.start_date:
                raise ValueError("endDate cannot be before startDate")
        return self

    @property
    def is_bounded(self) -> bool:
        return not self.is_recurring

    def sort_key(self) -> tuple[int, str]:
        """Priority descending, then id ascending for equal priorities."""
        return (-self.priority, self.id)
