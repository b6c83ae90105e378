"""Data sources supplying room, booking and rule records."""

from hotel_pricing.storage.base import PricingDataSource, parse_record, parse_records
from hotel_pricing.storage.factory import create_data_source
from hotel_pricing.storage.memory import InMemoryDataSource
from hotel_pricing.storage.pms_api import PMSAPIDataSource

__all__ = [
    "PricingDataSource",
    "InMemoryDataSource",
    "PMSAPIDataSource",
    "create_data_source",
    "parse_record",
    "parse_records",
]
