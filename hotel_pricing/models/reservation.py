"""Pydantic models for reservations and their booked rooms."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hotel_pricing.errors import ValidationError
from hotel_pricing.models.calendar import intervals_overlap, night_count, parse_iso_date
from hotel_pricing.models.money import coerce_decimal
from hotel_pricing.models.reservation_status import BookingStatus, BookingStatusMapper


class BookedUnit(BaseModel):
    """A room assigned to a reservation with the rate locked in at booking time.

    Rates are captured once and never recomputed when pricing rules change later.
    """

    room_id: str = Field(alias="roomId")
    nightly_rate: Decimal = Field(alias="nightlyRate")
    nights: int
    subtotal: Decimal

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("nightly_rate", "subtotal", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return coerce_decimal(v)


class Booking(BaseModel):
    """Reservation record as supplied by the PMS."""

    id: str
    reservation_number: Optional[str] = Field(None, alias="reservationNumber")
    guest_id: Optional[str] = Field(None, alias="guestId")
    check_in: date = Field(alias="checkIn")
    check_out: date = Field(alias="checkOut")
    adults: int = 1
    children: int = 0
    status: BookingStatus = BookingStatus.PENDING
    total_amount: Decimal = Field(default=Decimal("0"), alias="totalAmount")
    paid_amount: Decimal = Field(default=Decimal("0"), alias="paidAmount")
    rooms: list[BookedUnit] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def parse_stay_date(cls, v):
        """Truncate ISO datetimes to their calendar date."""
        return parse_iso_date(v)

    @field_validator("total_amount", "paid_amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        """Decimal columns arrive as strings or JSON numbers."""
        return coerce_decimal(v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        """PMS status names are matched case-insensitively."""
        return BookingStatusMapper.from_pms_status(v)

    @model_validator(mode="after")
    def validate_amounts(self) -> "Booking":
        """Check-out must follow check-in and paid amount must fit the total."""
        if self.check_out <= self.check_in:
            raise ValueError("checkOut must be after checkIn")
        if self.paid_amount < 0:
            raise ValueError("paidAmount cannot be negative")
        if self.paid_amount > self.total_amount:
            raise ValueError("paidAmount cannot exceed totalAmount")
        return self

    @property
    def pending_amount(self) -> Decimal:
        """Outstanding balance: total minus paid, never negative."""
        return self.total_amount - self.paid_amount

    @property
    def nights(self) -> int:
        """Number of nights in the stay."""
        return night_count(self.check_in, self.check_out)

    @property
    def is_blocking(self) -> bool:
        """True when this booking keeps its rooms occupied."""
        return BookingStatusMapper.is_blocking(self.status)

    @property
    def room_ids(self) -> list[str]:
        return [unit.room_id for unit in self.rooms]

    def overlaps(self, start: date, end: date) -> bool:
        """Half-open overlap test against [start, end)."""
        return intervals_overlap(self.check_in, self.check_out, start, end)

    def apply_payment(self, amount: Decimal) -> Decimal:
        """Register a payment against the outstanding balance.

        Args:
            amount: Payment amount

        Returns:
            The new pending amount

        Raises:
            ValidationError: If the amount is not positive or exceeds the pending balance
        """
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValidationError("Payment amount must be greater than 0")
        if amount > self.pending_amount:
            raise ValidationError(
                f"Payment amount {amount} exceeds pending balance {self.pending_amount}"
            )

        self.paid_amount += amount
        return self.pending_amount

    @property
    def is_paid_in_full(self) -> bool:
        return self.pending_amount == 0
