"""Quote assembly: availability search combined with per-category pricing."""

import uuid
from decimal import Decimal
from typing import Any, Optional

from structlog import get_logger

from hotel_pricing.errors import UnitUnavailableError, ValidationError
from hotel_pricing.models import (
    BookedUnit,
    Booking,
    BookingStatus,
    PriceQuote,
    SearchOption,
    SearchRequest,
    SearchResult,
)
from hotel_pricing.models.money import ZERO
from hotel_pricing.services.availability_service import AvailabilityResolver
from hotel_pricing.services.price_rule_engine import PriceRuleEngine
from hotel_pricing.storage import PricingDataSource, parse_record

logger = get_logger(__name__)


class QuoteAssembler:
    """Builds bookable, priced options for a search request."""

    def __init__(
        self,
        data_source: PricingDataSource,
        resolver: Optional[AvailabilityResolver] = None,
        engine: Optional[PriceRuleEngine] = None,
    ):
        self.data_source = data_source
        self.resolver = resolver or AvailabilityResolver(data_source)
        self.engine = engine or PriceRuleEngine(data_source)

    def search(self, request: SearchRequest | dict[str, Any]) -> SearchResult:
        """Find free categories for the stay and price each of them.

        Options are ranked by final total, cheapest first; categories with
        equal totals keep the resolver's order.

        Raises:
            InvalidRangeError: If check-out is not after check-in
            ValidationError: If the request is malformed
            NotFoundError: If the requested room category does not exist
        """
        request = parse_record(SearchRequest, request)

        availability = self.resolver.find_available(
            request.check_in,
            request.check_out,
            room_category_id=request.room_category_id,
            min_capacity=request.guests,
        )

        options = []
        for category_availability in availability:
            quote = self.engine.price_quote(
                category_availability.room_category.id,
                request.check_in,
                request.check_out,
            )
            options.append(SearchOption(availability=category_availability, quote=quote))

        options.sort(key=lambda option: option.total_final)

        logger.info(
            "Search complete",
            check_in=request.check_in.isoformat(),
            check_out=request.check_out.isoformat(),
            guests=request.guests,
            options_found=len(options),
        )
        return SearchResult(request=request, options=options)

    @staticmethod
    def lock_rates(quote: PriceQuote, room_ids: list[str]) -> list[BookedUnit]:
        """Capture the quoted rate for each room being booked.

        Each room is charged the quote's average nightly price for every night.
        The captured rate never changes afterwards, whatever happens to the rules.

        Raises:
            ValidationError: If no rooms are given
        """
        if not room_ids:
            raise ValidationError("At least one room is required")

        nightly_rate = quote.totals.average_price_per_night
        nights = quote.night_count
        return [
            BookedUnit(
                room_id=room_id,
                nightly_rate=nightly_rate,
                nights=nights,
                subtotal=nightly_rate * nights,
            )
            for room_id in room_ids
        ]

    def draft_booking(
        self,
        quote: PriceQuote,
        room_ids: list[str],
        guest_id: str,
        adults: int = 1,
        children: int = 0,
        booking_id: Optional[str] = None,
    ) -> Booking:
        """Build a PENDING booking from a quote after re-checking every room.

        The search result is advisory; availability is verified again here
        because another booking may have taken a room in between. The caller
        still has to persist the booking under its own overlap constraint.

        Raises:
            UnitUnavailableError: If a room is no longer free
            ValidationError: If no rooms are given
        """
        for room_id in room_ids:
            if not self.resolver.is_unit_available(room_id, quote.start_date, quote.end_date):
                logger.warning(
                    "Room taken before booking commit",
                    room_id=room_id,
                    check_in=quote.start_date.isoformat(),
                    check_out=quote.end_date.isoformat(),
                )
                raise UnitUnavailableError(room_id)

        units = self.lock_rates(quote, room_ids)
        total_amount = sum((unit.subtotal for unit in units), ZERO)

        return Booking(
            id=booking_id or str(uuid.uuid4()),
            guest_id=guest_id,
            check_in=quote.start_date,
            check_out=quote.end_date,
            adults=adults,
            children=children,
            status=BookingStatus.PENDING,
            total_amount=total_amount,
            paid_amount=Decimal("0"),
            rooms=units,
        )
