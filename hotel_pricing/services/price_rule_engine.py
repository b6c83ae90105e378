"""Nightly price calculation from base rates and prioritized pricing rules."""

from datetime import date
from decimal import Decimal
from typing import Optional

from structlog import get_logger

from hotel_pricing.config import settings
from hotel_pricing.errors import InvalidRangeError, NotFoundError
from hotel_pricing.models import (
    AppliedRule,
    NightlyPrice,
    PriceQuote,
    PriceRule,
    PriceTotals,
    RoomCategory,
    RuleNight,
)
from hotel_pricing.models.calendar import day_name, day_of_week, iter_nights
from hotel_pricing.models.money import ZERO, round_currency
from hotel_pricing.services.rule_matcher import rule_matches, select_rule, sort_rules
from hotel_pricing.storage import PricingDataSource

logger = get_logger(__name__)


class PriceRuleEngine:
    """Prices every night of a stay for one room category.

    For each night the active rules of the category are scanned in priority
    order and the first one whose temporal condition matches sets the price
    to ``base_price * multiplier``, rounded per night. Nights without a
    matching rule cost the base price.
    """

    def __init__(
        self,
        data_source: PricingDataSource,
        currency_decimals: Optional[int] = None,
    ):
        """Initialize the engine.

        Args:
            data_source: Supplier of room categories and price rules
            currency_decimals: Fractional digits kept when rounding prices
                (defaults to PRICING_CURRENCY_DECIMALS)
        """
        self.data_source = data_source
        self.currency_decimals = (
            settings.pricing.currency_decimals
            if currency_decimals is None
            else currency_decimals
        )

    def _load_category(self, room_category_id: str) -> RoomCategory:
        room_category = self.data_source.get_room_category(room_category_id)
        if room_category is None:
            logger.warning("Room category not found", room_category_id=room_category_id)
            raise NotFoundError(f"Room category {room_category_id} not found")
        return room_category

    def _load_active_rules(self, room_category_id: str) -> list[PriceRule]:
        rules = self.data_source.list_price_rules(room_category_id, active_only=True)
        return sort_rules(rule for rule in rules if rule.is_active)

    def price_night(
        self,
        base_price: Decimal,
        night: date,
        sorted_rules: list[PriceRule],
    ) -> NightlyPrice:
        """Price a single night against rules already sorted by priority."""
        rule = select_rule(sorted_rules, night)
        if rule is None:
            final_price = base_price
            applied_rule = None
        else:
            final_price = round_currency(base_price * rule.multiplier, self.currency_decimals)
            applied_rule = AppliedRule.from_rule(rule)

        return NightlyPrice(
            date=night,
            day_of_week=day_of_week(night),
            day_name=day_name(night),
            base_price=base_price,
            final_price=final_price,
            applied_rule=applied_rule,
        )

    def compute_totals(
        self,
        base_price: Decimal,
        nights: list[NightlyPrice],
    ) -> PriceTotals:
        """Aggregate nightly prices.

        The final total is the sum of the already-rounded nightly prices, so it
        can differ slightly from rounding base * average multiplier once.
        """
        night_count = len(nights)
        total_base = base_price * night_count
        total_final = sum((night.final_price for night in nights), ZERO)
        total_discount = total_base - total_final

        if total_base > 0:
            discount_percentage = round_currency(total_discount / total_base * 100, 2)
        else:
            discount_percentage = ZERO

        if night_count:
            average = round_currency(total_final / night_count, self.currency_decimals)
        else:
            average = ZERO

        return PriceTotals(
            total_base=total_base,
            total_final=total_final,
            total_discount=total_discount,
            discount_percentage=discount_percentage,
            average_price_per_night=average,
        )

    def price_quote(
        self,
        room_category_id: str,
        start_date: date,
        end_date: date,
    ) -> PriceQuote:
        """Price every night in [start_date, end_date) for a room category.

        Args:
            room_category_id: Room category to price
            start_date: First night (check-in date)
            end_date: Check-out date, not priced itself

        Returns:
            Per-night breakdown, totals and the category's active rules

        Raises:
            InvalidRangeError: If end_date is not after start_date
            NotFoundError: If the room category does not exist
        """
        if end_date <= start_date:
            raise InvalidRangeError("End date must be after start date")

        room_category = self._load_category(room_category_id)
        rules = self._load_active_rules(room_category_id)
        base_price = room_category.base_price

        nights = [
            self.price_night(base_price, night, rules)
            for night in iter_nights(start_date, end_date)
        ]
        totals = self.compute_totals(base_price, nights)

        logger.debug(
            "Calculated price quote",
            room_category_id=room_category_id,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            nights=len(nights),
            active_rules=len(rules),
            total_final=str(totals.total_final),
        )

        return PriceQuote(
            room_category=room_category,
            start_date=start_date,
            end_date=end_date,
            nights=nights,
            totals=totals,
            applicable_rules=rules,
        )

    def rule_calendar(
        self,
        rule_id: str,
        start_date: date,
        end_date: date,
    ) -> list[RuleNight]:
        """List the nights in [start_date, end_date) a rule's condition matches.

        Each night is flagged ``applied`` when this rule is the one that prices
        it; otherwise ``winning_rule_id`` names the rule that does. Inactive
        rules still report their matching nights but never apply.

        Raises:
            InvalidRangeError: If end_date is not after start_date
            NotFoundError: If the rule does not exist
        """
        if end_date <= start_date:
            raise InvalidRangeError("End date must be after start date")

        rule = self.data_source.get_price_rule(rule_id)
        if rule is None:
            logger.warning("Price rule not found", rule_id=rule_id)
            raise NotFoundError(f"Price rule {rule_id} not found")

        competing = self._load_active_rules(rule.room_category_id)

        calendar = []
        for night in iter_nights(start_date, end_date):
            if not rule_matches(rule, night):
                continue
            winner = select_rule(competing, night)
            calendar.append(
                RuleNight(
                    date=night,
                    day_of_week=day_of_week(night),
                    applied=winner is not None and winner.id == rule.id,
                    winning_rule_id=winner.id if winner else None,
                )
            )
        return calendar
