"""Data source factory driven by DATA_SOURCE_* settings."""

from typing import Optional

from hotel_pricing.config import settings
from hotel_pricing.storage.base import PricingDataSource
from hotel_pricing.storage.memory import InMemoryDataSource
from hotel_pricing.storage.pms_api import PMSAPIDataSource


def create_data_source(
    kind: Optional[str] = None,
    snapshot_path: Optional[str] = None,
) -> PricingDataSource:
    """Build the configured data source.

    Explicit arguments win over settings. ``file`` loads a JSON snapshot into
    memory; ``api`` reads through the PMS REST API on every call.

    Args:
        kind: ``file`` or ``api`` (defaults to DATA_SOURCE_KIND)
        snapshot_path: Snapshot location for ``file`` (defaults to DATA_SOURCE_SNAPSHOT_PATH)

    Raises:
        ValueError: If kind is not recognized
        DataSourceError: If the snapshot cannot be loaded
    """
    kind = kind or settings.data_source.kind
    if kind == "file":
        return InMemoryDataSource.from_json_file(
            snapshot_path or settings.data_source.snapshot_path
        )
    if kind == "api":
        return PMSAPIDataSource()
    raise ValueError(f"Unknown data source kind: {kind}")
