"""Pricing and availability services."""

from hotel_pricing.services.availability_service import AvailabilityResolver
from hotel_pricing.services.price_rule_engine import PriceRuleEngine
from hotel_pricing.services.quote_service import QuoteAssembler

__all__ = [
    "AvailabilityResolver",
    "PriceRuleEngine",
    "QuoteAssembler",
]
