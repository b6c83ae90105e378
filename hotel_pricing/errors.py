"""Error taxonomy for availability and pricing calculations."""


class PricingError(Exception):
    """Base exception for engine errors.

    Each subclass carries the HTTP status code handlers report to callers.
    """

    status_code = 500


class InvalidRangeError(PricingError):
    """Raised when an end date is not strictly after its start date."""

    status_code = 400


class NotFoundError(PricingError):
    """Raised when a referenced room category, room or rule does not exist."""

    status_code = 404


class ValidationError(PricingError):
    """Raised for malformed input: dates, multipliers, capacities, payment amounts."""

    status_code = 400


class UnitUnavailableError(ValidationError):
    """Raised when a room is no longer free at booking commit time."""

    def __init__(self, room_id: str, message: str | None = None):
        self.room_id = room_id
        super().__init__(message or f"Room {room_id} is not available for the selected dates")


class DataSourceError(PricingError):
    """Raised when the underlying data source fails to supply records."""

    status_code = 500
