"""Unit tests for record models and their validation."""

from datetime import date
from decimal import Decimal

import pydantic
import pytest

from hotel_pricing.errors import ValidationError
from hotel_pricing.models import (
    Booking,
    BookingStatus,
    BookingStatusMapper,
    InventoryUnit,
    PriceRule,
    RoomCategory,
    SearchRequest,
)
from hotel_pricing.models.calendar import day_of_week, intervals_overlap, parse_iso_date
from hotel_pricing.storage import InMemoryDataSource, parse_record


class TestCalendar:
    """Tests for calendar helpers."""

    def test_parse_iso_datetime_truncates(self):
        """Test ISO datetimes are truncated to their date."""
        assert parse_iso_date("2024-12-20T15:30:00.000Z") == date(2024, 12, 20)
        assert parse_iso_date(date(2024, 12, 20)) == date(2024, 12, 20)

    @pytest.mark.parametrize(
        "value", ["", "20/12/2024", "2024-06-01garbage", "2024-06-01Tnoon", None, 20241220]
    )
    def test_parse_invalid_date(self, value):
        """Test unparseable values raise ValueError."""
        with pytest.raises(ValueError):
            parse_iso_date(value)

    def test_sunday_is_zero(self):
        """Test weekday indices start on Sunday."""
        assert day_of_week(date(2024, 12, 22)) == 0
        assert day_of_week(date(2024, 12, 21)) == 6

    def test_half_open_overlap(self):
        """Test touching intervals do not overlap."""
        assert intervals_overlap(date(2024, 7, 10), date(2024, 7, 15), date(2024, 7, 14), date(2024, 7, 16))
        assert not intervals_overlap(date(2024, 7, 10), date(2024, 7, 15), date(2024, 7, 15), date(2024, 7, 18))


class TestRoomModels:
    """Tests for RoomCategory and InventoryUnit."""

    def test_decimal_base_price_from_string(self):
        """Test decimal columns serialized as strings are parsed exactly."""
        category = RoomCategory.model_validate(
            {"id": "rt", "name": "Suite", "capacity": 4, "basePrice": "250000.50"}
        )

        assert category.base_price == Decimal("250000.50")
        assert category.is_active

    def test_non_positive_capacity_rejected(self):
        """Test a zero-capacity room type is invalid."""
        with pytest.raises(pydantic.ValidationError):
            RoomCategory.model_validate({"id": "rt", "name": "X", "capacity": 0, "basePrice": 1})

    def test_numeric_room_number(self):
        """Test integer room numbers are kept as strings."""
        room = InventoryUnit.model_validate({"id": "r", "number": 301, "roomTypeId": "rt"})

        assert room.number == "301"
        assert room.is_bookable

    def test_bookable_statuses(self):
        """Test only AVAILABLE and CLEANING rooms take bookings."""
        statuses = {
            status: InventoryUnit(id="r", number="1", room_category_id="rt", status=status).is_bookable
            for status in ["AVAILABLE", "CLEANING", "OCCUPIED", "MAINTENANCE", "BLOCKED"]
        }

        assert statuses == {
            "AVAILABLE": True,
            "CLEANING": True,
            "OCCUPIED": False,
            "MAINTENANCE": False,
            "BLOCKED": False,
        }


class TestPriceRule:
    """Tests for PriceRule validation."""

    def test_non_positive_multiplier_rejected(self, make_rule):
        """Test multipliers must be strictly positive."""
        with pytest.raises(pydantic.ValidationError):
            PriceRule.model_validate(make_rule("r", 1, 0))

    def test_float_multiplier_is_exact(self, make_rule):
        """Test float multipliers become exact decimals."""
        rule = PriceRule.model_validate(make_rule("r", 1, 1.2))

        assert rule.multiplier == Decimal("1.2")

    def test_bounded_rule_requires_end_date(self, make_rule):
        """Test bounded rules need an end date."""
        with pytest.raises(pydantic.ValidationError):
            PriceRule.model_validate(make_rule("r", 1, 1.2, end=None))

    def test_bounded_rule_end_before_start(self, make_rule):
        """Test inverted bounded ranges are rejected."""
        with pytest.raises(pydantic.ValidationError):
            PriceRule.model_validate(make_rule("r", 1, 1.2, start="2024-12-31", end="2024-12-20"))

    def test_single_day_rule_allowed(self, make_rule):
        """Test a rule may start and end on the same day."""
        rule = PriceRule.model_validate(make_rule("r", 1, 1.2, start="2024-12-24", end="2024-12-24"))

        assert rule.is_bounded

    def test_recurring_rule_requires_type(self, make_rule):
        """Test recurring rules need a cadence."""
        with pytest.raises(pydantic.ValidationError):
            PriceRule.model_validate(make_rule("r", 1, 1.2, isRecurring=True))

    def test_custom_rule_requires_days(self, make_rule):
        """Test custom rules need at least one weekday."""
        with pytest.raises(pydantic.ValidationError):
            PriceRule.model_validate(make_rule("r", 1, 1.2, isRecurring=True, recurringType="CUSTOM"))

    def test_days_of_week_out_of_range(self, make_rule):
        """Test weekday indices outside 0..6 are rejected."""
        with pytest.raises(pydantic.ValidationError):
            PriceRule.model_validate(
                make_rule("r", 1, 1.2, isRecurring=True, recurringType="WEEKLY", daysOfWeek=[7])
            )

    def test_parse_record_wraps_validation_errors(self, make_rule):
        """Test malformed records surface as the engine's ValidationError."""
        with pytest.raises(ValidationError):
            parse_record(PriceRule, make_rule("r", 1, -1))

    def test_malformed_snapshot_rejected(self, snapshot):
        """Test a snapshot with an invalid rule fails to load."""
        snapshot["priceRules"][0]["multiplier"] = 0

        with pytest.raises(ValidationError):
            InMemoryDataSource.from_dict(snapshot)


class TestBookingStatusMapper:
    """Tests for BookingStatusMapper."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("CONFIRMED", BookingStatus.CONFIRMED),
            ("checked_in", BookingStatus.CHECKED_IN),
            ("no-show", BookingStatus.NO_SHOW),
            (" CANCELLED ", BookingStatus.CANCELLED),
            (BookingStatus.CHECKED_OUT, BookingStatus.CHECKED_OUT),
            ("", BookingStatus.PENDING),
            (None, BookingStatus.PENDING),
        ],
    )
    def test_from_pms_status(self, status, expected):
        """Test PMS status names map to booking statuses."""
        assert BookingStatusMapper.from_pms_status(status) == expected

    @pytest.mark.parametrize("status", ["CXL", "UNKNOWN", 3, ["CONFIRMED"]])
    def test_unrecognized_status_rejected(self, status):
        """Test unknown names and non-string values raise ValueError."""
        with pytest.raises(ValueError):
            BookingStatusMapper.from_pms_status(status)

    def test_non_string_status_is_validation_error(self):
        """Test a numeric status in a PMS record is reported as a validation error."""
        record = {
            "id": "res-9",
            "checkIn": "2024-07-10",
            "checkOut": "2024-07-12",
            "status": 3,
            "totalAmount": "200000",
        }

        with pytest.raises(ValidationError) as exc_info:
            parse_record(Booking, record)
        assert exc_info.value.status_code == 400

    def test_blocking_statuses(self):
        """Test only cancelled and no-show bookings release their rooms."""
        assert not BookingStatusMapper.is_blocking(BookingStatus.CANCELLED)
        assert not BookingStatusMapper.is_blocking(BookingStatus.NO_SHOW)
        assert BookingStatusMapper.is_blocking(BookingStatus.PENDING)
        assert BookingStatusMapper.is_blocking(BookingStatus.CHECKED_OUT)


class TestBooking:
    """Tests for Booking amounts and payments."""

    def _booking(self, total="500000", paid="0"):
        return Booking.model_validate(
            {
                "id": "res-1",
                "checkIn": "2024-07-10",
                "checkOut": "2024-07-15",
                "status": "CONFIRMED",
                "totalAmount": total,
                "paidAmount": paid,
            }
        )

    def test_pending_amount(self):
        """Test pending amount is total minus paid."""
        booking = self._booking(paid="200000")

        assert booking.pending_amount == Decimal("300000")
        assert booking.nights == 5

    def test_payments_until_paid_in_full(self):
        """Test successive payments reduce the balance to zero."""
        booking = self._booking()

        assert booking.apply_payment(Decimal("200000")) == Decimal("300000")
        assert booking.apply_payment(300000) == Decimal("0")
        assert booking.is_paid_in_full
        assert booking.paid_amount == booking.total_amount

    def test_overpayment_rejected(self):
        """Test a payment larger than the balance is rejected and changes nothing."""
        booking = self._booking(paid="400000")

        with pytest.raises(ValidationError):
            booking.apply_payment(Decimal("100001"))
        assert booking.pending_amount == Decimal("100000")

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_payment_rejected(self, amount):
        """Test zero or negative payments are rejected."""
        with pytest.raises(ValidationError):
            self._booking().apply_payment(amount)

    def test_paid_cannot_exceed_total(self):
        """Test a record paid beyond its total is invalid."""
        with pytest.raises(pydantic.ValidationError):
            self._booking(total="100", paid="101")

    def test_checkout_must_follow_checkin(self):
        """Test a zero-night booking is invalid."""
        with pytest.raises(pydantic.ValidationError):
            Booking.model_validate({"id": "x", "checkIn": "2024-07-10", "checkOut": "2024-07-10"})


class TestSearchRequest:
    """Tests for SearchRequest defaults and validation."""

    def test_defaults(self):
        """Test missing party sizes default to one adult."""
        request = SearchRequest.model_validate(
            {"checkIn": "2024-07-10", "checkOut": "2024-07-12", "adults": "", "children": None}
        )

        assert (request.adults, request.children, request.guests) == (1, 0, 1)

    def test_zero_adults_rejected(self):
        """Test a party needs at least one adult."""
        with pytest.raises(pydantic.ValidationError):
            SearchRequest.model_validate({"checkIn": "2024-07-10", "checkOut": "2024-07-12", "adults": 0})
