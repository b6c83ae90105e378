"""Response transformation package."""

from hotel_pricing.transformers.response_transformer import (
    DailyAvailabilityTransformer,
    PriceQuoteTransformer,
    SearchTransformer,
    to_json_number,
)

__all__ = [
    "DailyAvailabilityTransformer",
    "PriceQuoteTransformer",
    "SearchTransformer",
    "to_json_number",
]
