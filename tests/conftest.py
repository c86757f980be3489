"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from site_inventory.config import InventoryConfig
from site_inventory.generators import InventoryGenerator
from site_inventory.models import Capabilities, FlatId, FlatRecord, FlatStatus
from site_inventory.store import InMemoryFlatStore

@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def project_id() -> str:
    """Sample project ID."""
    return "site-test-001"


@pytest.fixture
def delete_token() -> str:
    """Shared secret confirming folder deletion."""
    return "test-delete-token"


@pytest.fixture
def config(project_id: str, delete_token: str) -> InventoryConfig:
    """Config with a delete token for the test project."""
    return InventoryConfig(project_id=project_id, delete_token=delete_token)


@pytest.fixture
def store() -> InMemoryFlatStore:
    """Create a fresh store for each test."""
    return InMemoryFlatStore()


@pytest.fixture
def full_access() -> Capabilities:
    """Capabilities of a full-control user."""
    return Capabilities.full()


@pytest.fixture
def populated_store(store: InMemoryFlatStore, project_id: str) -> InMemoryFlatStore:
    """Store holding towers A and B, 2 floors x 2 flats each."""
    gen = InventoryGenerator()
    layouts = gen.layouts("A, B", {"A": 2, "B": 2}, {"A": 2, "B": 2})
    gen.persist(layouts, store, project_id)
    return store


@pytest.fixture
def sold_flat() -> FlatRecord:
    """A sold flat with a deal value and no ledger history yet."""
    return FlatRecord(
        flat_id=FlatId("flat-001"),
        project_id="site-test-001",
        block="A",
        floor="3",
        flat_number="302",
        status=FlatStatus.SOLD,
        buyer_name="Test Buyer",
        buyer_mobile="9876543210",
        total_amount=Decimal("500000"),
    )
