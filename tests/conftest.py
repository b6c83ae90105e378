import json
from pathlib import Path

import pytest
import structlog

from hotel_pricing.storage import InMemoryDataSource


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True, scope="session")
def stdlib_logging():
    """Send structlog events through stdlib logging so they stay off stdout."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def snapshot_path():
    """Path of the PMS snapshot fixture."""
    return FIXTURES_DIR / "snapshot.json"


@pytest.fixture
def snapshot(snapshot_path):
    """Load the PMS snapshot fixture."""
    with open(snapshot_path) as f:
        return json.load(f)


@pytest.fixture
def data_source(snapshot):
    """In-memory data source over the snapshot fixture."""
    return InMemoryDataSource.from_dict(snapshot)


@pytest.fixture
def standard_room_type():
    """Room type priced at 100000 with no rules attached."""
    return {
        "id": "rt-standard",
        "name": "Standard",
        "capacity": 2,
        "basePrice": 100000,
    }


@pytest.fixture
def make_rule():
    """Factory for raw rt-standard price rules."""

    def _make_rule(rule_id, priority, multiplier, start="2024-01-01", end="2024-12-31", **extra):
        rule = {
            "id": rule_id,
            "name": rule_id,
            "roomTypeId": "rt-standard",
            "startDate": start,
            "endDate": end,
            "multiplier": multiplier,
            "priority": priority,
            "isActive": True,
            "isRecurring": False,
        }
        rule.update(extra)
        return rule

    return _make_rule
