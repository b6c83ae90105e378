"""Unit tests for QuoteAssembler."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from hotel_pricing.errors import NotFoundError, UnitUnavailableError, ValidationError
from hotel_pricing.models import BookingStatus, SearchRequest
from hotel_pricing.services import AvailabilityResolver, PriceRuleEngine, QuoteAssembler
from hotel_pricing.storage import InMemoryDataSource


class TestSearch:
    """Tests for QuoteAssembler.search."""

    def test_options_priced_and_ranked(self, data_source):
        """Test each free category is priced and the cheapest total comes first."""
        assembler = QuoteAssembler(data_source)

        result = assembler.search(
            {"checkIn": "2024-12-20", "checkOut": "2024-12-22", "adults": 2}
        )

        assert result.nights == 2
        assert [o.room_category.id for o in result.options] == ["rt-standard", "rt-suite"]
        assert result.options[0].total_final == Decimal("240000")
        assert result.options[1].total_final == Decimal("500000")

    def test_guests_filter_by_capacity(self, data_source):
        """Test adults and children together must fit the room type."""
        assembler = QuoteAssembler(data_source)

        result = assembler.search(
            SearchRequest(check_in=date(2024, 12, 20), check_out=date(2024, 12, 22), adults=2, children=1)
        )

        assert [o.room_category.id for o in result.options] == ["rt-suite"]

    def test_rules_can_reorder_by_base_price(self, make_rule):
        """Test ranking follows the final total, not the base price."""
        data_source = InMemoryDataSource(
            room_categories=[
                {"id": "rt-standard", "name": "Standard", "capacity": 2, "basePrice": 100000},
                {"id": "rt-deluxe", "name": "Deluxe", "capacity": 2, "basePrice": 150000},
            ],
            rooms=[
                {"id": "room-1", "number": "1", "roomTypeId": "rt-standard"},
                {"id": "room-2", "number": "2", "roomTypeId": "rt-deluxe"},
            ],
            price_rules=[make_rule("surge", 1, 2)],
        )

        result = QuoteAssembler(data_source).search(
            {"checkIn": "2024-05-01", "checkOut": "2024-05-02"}
        )

        assert [o.room_category.id for o in result.options] == ["rt-deluxe", "rt-standard"]

    def test_unknown_room_type(self, data_source):
        """Test searching an unknown room type raises NotFoundError."""
        with pytest.raises(NotFoundError):
            QuoteAssembler(data_source).search(
                {"checkIn": "2024-12-20", "checkOut": "2024-12-22", "roomTypeId": "rt-missing"}
            )

    def test_malformed_request(self, data_source):
        """Test a request without dates raises ValidationError."""
        with pytest.raises(ValidationError):
            QuoteAssembler(data_source).search({"checkIn": "2024-12-20"})

    def test_uses_injected_collaborators(self, data_source):
        """Test the resolver and engine can be replaced."""
        resolver = MagicMock(spec=AvailabilityResolver)
        resolver.find_available.return_value = []
        engine = MagicMock(spec=PriceRuleEngine)

        result = QuoteAssembler(data_source, resolver=resolver, engine=engine).search(
            {"checkIn": "2024-12-20", "checkOut": "2024-12-22", "adults": 3}
        )

        assert result.options == []
        resolver.find_available.assert_called_once_with(
            date(2024, 12, 20),
            date(2024, 12, 22),
            room_category_id=None,
            min_capacity=3,
        )
        engine.price_quote.assert_not_called()


class TestBookingDraft:
    """Tests for rate locking and booking drafts."""

    def test_lock_rates_uses_average_nightly_price(self, data_source):
        """Test each room is charged the quote's average nightly price."""
        quote = PriceRuleEngine(data_source).price_quote(
            "rt-standard", date(2024, 12, 20), date(2024, 12, 24)
        )

        units = QuoteAssembler.lock_rates(quote, ["room-101", "room-102"])

        assert [u.room_id for u in units] == ["room-101", "room-102"]
        assert all(u.nightly_rate == Decimal("135000") for u in units)
        assert all(u.nights == 4 for u in units)
        assert all(u.subtotal == Decimal("540000") for u in units)

    def test_lock_rates_requires_rooms(self, data_source):
        """Test locking rates with no rooms is rejected."""
        quote = PriceRuleEngine(data_source).price_quote(
            "rt-standard", date(2024, 12, 20), date(2024, 12, 22)
        )

        with pytest.raises(ValidationError):
            QuoteAssembler.lock_rates(quote, [])

    def test_draft_booking(self, data_source):
        """Test a draft booking is pending, unpaid and totals its rooms."""
        assembler = QuoteAssembler(data_source)
        quote = assembler.engine.price_quote("rt-standard", date(2024, 7, 12), date(2024, 7, 14))

        booking = assembler.draft_booking(
            quote, ["room-102"], guest_id="guest-9", adults=2, booking_id="res-new"
        )

        assert booking.id == "res-new"
        assert booking.status == BookingStatus.PENDING
        assert booking.total_amount == Decimal("240000")
        assert booking.pending_amount == Decimal("240000")
        assert booking.room_ids == ["room-102"]
        assert (booking.check_in, booking.check_out) == (date(2024, 7, 12), date(2024, 7, 14))

    def test_draft_booking_generates_id(self, data_source):
        """Test a booking id is generated when none is given."""
        assembler = QuoteAssembler(data_source)
        quote = assembler.engine.price_quote("rt-standard", date(2024, 7, 16), date(2024, 7, 17))

        booking = assembler.draft_booking(quote, ["room-101"], guest_id="guest-9")

        assert booking.id

    def test_draft_booking_rejects_taken_room(self, data_source):
        """Test a room booked in the meantime aborts the draft."""
        assembler = QuoteAssembler(data_source)
        quote = assembler.engine.price_quote("rt-standard", date(2024, 7, 12), date(2024, 7, 14))

        with pytest.raises(UnitUnavailableError) as exc_info:
            assembler.draft_booking(quote, ["room-102", "room-101"], guest_id="guest-9")

        assert exc_info.value.room_id == "room-101"
        assert exc_info.value.status_code == 400
