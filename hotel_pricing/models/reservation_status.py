"""Booking lifecycle status as reported by the PMS."""

from enum import Enum


class BookingStatus(str, Enum):
    """Reservation lifecycle status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Bookings in these statuses never hold a room
NON_BLOCKING_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.NO_SHOW})


class BookingStatusMapper:
    """Maps PMS reservation status names to BookingStatus."""

    @staticmethod
    def from_pms_status(status: str | BookingStatus | None) -> BookingStatus:
        """Map a PMS reservation status name to a BookingStatus.

        Names are matched case-insensitively, with "-" read as "_". A missing
        status is PENDING, the state new reservations start in. Unknown names
        are rejected rather than guessed, since a wrong guess decides whether
        the booking holds its rooms.

        Args:
            status: Status name from the PMS

        Returns:
            Booking status

        Raises:
            ValueError: If the status is not a string or not a known name
        """
        if isinstance(status, BookingStatus):
            return status
        if status is None or status == "":
            return BookingStatus.PENDING
        if not isinstance(status, str):
            raise ValueError(f"Booking status must be a string, got {type(status).__name__}")

        normalized = status.strip().upper().replace("-", "_")
        if normalized not in BookingStatus.__members__:
            raise ValueError(f"Unknown booking status: {status!r}")
        return BookingStatus[normalized]

    @staticmethod
    def is_blocking(status: BookingStatus) -> bool:
        """True when a booking in this status keeps its rooms occupied."""
        return status not in NON_BLOCKING_STATUSES
