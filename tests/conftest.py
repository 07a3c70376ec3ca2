import sys
from pathlib import Path

# Ensure the project's src directory is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from flag_admin.domain.flag import FetchRequest  # noqa: E402
from flag_admin.infrastructure.notifications.memory_sink import (  # noqa: E402
    InMemoryNotificationSink,
)
from flag_admin.infrastructure.stores.memory import InMemoryFlagStore  # noqa: E402
from flag_admin.services.flag_manager import FlagManager  # noqa: E402
from flag_admin.services.flag_reader import FlagReader  # noqa: E402
from flag_admin.services.flag_writer import FlagWriter  # noqa: E402


def _listing_item(record_id, name, description=None, is_active=False, rollout=None):
    return {
        "id": record_id,
        "fields": {
            "Name": {"value": name},
            "Description__c": {"value": description},
            "Is_Active__c": {"value": is_active},
            "Percentage_Rollout__c": {"value": rollout},
        },
    }


@pytest.fixture
def listing_item():
    """Build one raw listing item the way the listing service returns it."""
    return _listing_item


@pytest.fixture
def mock_listing():
    """Create mock listing service returning two records."""
    listing = AsyncMock()
    listing.fetch = AsyncMock(
        return_value={
            "records": [
                _listing_item("1", "beta-banner", "Show beta banner", True, 50),
                _listing_item("2", "new-checkout", None, False, 0),
            ]
        }
    )
    return listing


@pytest.fixture
def mock_mutations():
    """Create mock mutation service where every call succeeds."""
    mutations = AsyncMock()
    mutations.create = AsyncMock(return_value={"id": "new-1", "fields": {}})
    mutations.update = AsyncMock(return_value={"id": "1", "fields": {}})
    return mutations


@pytest.fixture
def sink():
    return InMemoryNotificationSink()


@pytest.fixture
def fetch_request():
    return FetchRequest(collection="Feature_Flag__c", list_view="All", page_size=10)


@pytest.fixture
def reader(mock_listing, fetch_request):
    return FlagReader(mock_listing, fetch_request)


@pytest.fixture
def writer(mock_mutations, sink):
    return FlagWriter(mock_mutations, sink, collection="Feature_Flag__c")


@pytest.fixture
def manager(reader, writer):
    return FlagManager(reader, writer)


@pytest.fixture
def memory_store():
    store = InMemoryFlagStore()
    store.seed(
        {"Name": "beta-banner", "Description__c": "Show beta banner", "Is_Active__c": True,
         "Percentage_Rollout__c": 50},
        {"Name": "alpha-search", "Is_Active__c": False, "Percentage_Rollout__c": 10},
    )
    return store
