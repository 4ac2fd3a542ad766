"""Pytest configuration and fixtures"""
import os
from typing import List, Optional
from unittest.mock import Mock

import pytest

# Keep a developer's .env from leaking into tests
os.environ.setdefault("ITEM_SERVICE_URL", "http://items.test/api")
os.environ.setdefault("STORE_ID", "main")

from storefront.core.config import CatalogConfig, ItemServiceConfig, ShippingConfig
from storefront.core.exceptions import StorageError
from storefront.db import create_storage_engine
from storefront.models.cart import CartLine
from storefront.models.item import CatalogItem
from storefront.repositories.base import CartStore
from storefront.repositories.cart_repository import SqlCartStore
from storefront.services.cart_service import CartService


class MemoryCartStore(CartStore):
    """Cart store kept in a string, with the same snapshot format as SQL"""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob
        self.saves = 0

    def load(self) -> Optional[List[CartLine]]:
        return self.deserialize(self.blob)

    def save(self, lines: List[CartLine]) -> bool:
        self.blob = self.serialize(lines)
        self.saves += 1
        return True


class BrokenCartStore(CartStore):
    """Store whose device storage is unavailable"""

    def load(self):
        raise StorageError("disk unavailable", "SELECT")

    def save(self, lines):
        raise StorageError("quota exceeded", "WRITE")


def make_item(item_id, name=None, price=100.0, category="Shirts", priority=5,
              is_available=True, description=""):
    return CatalogItem(
        id=item_id,
        name=name or f"Item {item_id}",
        description=description,
        price=price,
        category=category,
        priority=priority,
        is_available=is_available,
    )


@pytest.fixture
def memory_store():
    return MemoryCartStore()


@pytest.fixture
def broken_store():
    return BrokenCartStore()


@pytest.fixture
def cart_service(memory_store):
    return CartService(memory_store)


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'storefront.db'}"


@pytest.fixture
def sql_store(sqlite_url):
    engine = create_storage_engine(sqlite_url)
    yield SqlCartStore(engine)
    engine.dispose()


@pytest.fixture
def sample_catalog():
    """Small catalog covering every filter and sort dimension"""
    return [
        make_item("a1", "Linen Shirt", 450.0, "Shirts", 2, True, "Breathable summer shirt"),
        make_item("b2", "Denim Jacket", 1200.0, "Jackets", 1, True, "Classic blue denim"),
        make_item("c3", "Wool Scarf", 90.0, "Accessories", 4, False, "Warm and soft"),
        make_item("d4", "cotton tee", 150.0, "Shirts", 3, False, "Basic tee"),
        make_item("e5", "Chino Pants", 600.0, "Pants", 6, True, "Slim fit chinos"),
        make_item("f6", "Gift Card", 50.0, "", 9, True, "Any amount"),
    ]


@pytest.fixture
def item_service_config():
    return ItemServiceConfig(base_url="http://items.test/api/", store_id="main", timeout_seconds=2.0)


@pytest.fixture
def catalog_config():
    return CatalogConfig()


@pytest.fixture
def shipping_config():
    return ShippingConfig(free_shipping_threshold=500.0, flat_fee=50.0)


@pytest.fixture
def mock_item_client(sample_catalog):
    """Item client answering from the sample catalog"""
    by_id = {item.id: item for item in sample_catalog}

    client = Mock()
    client.get_item.side_effect = lambda item_id: by_id.get(item_id)
    client.list_items.return_value = list(sample_catalog)
    return client


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Skip tenacity backoff sleeps"""
    monkeypatch.setattr("time.sleep", lambda seconds: None)


@pytest.fixture
def item_factory():
    return make_item
