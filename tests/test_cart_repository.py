"""
Tests for cart snapshot storage
"""

import json
from unittest.mock import Mock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from storefront.core.exceptions import StorageError
from storefront.db import create_storage_engine
from storefront.models.cart import CartLine
from storefront.repositories.base import CartStore
from storefront.repositories.cart_repository import SqlCartStore
from storefront.services.cart_service import CartService


class TestSnapshotFormat:
    """Tests for the JSON snapshot helpers."""

    def test_serialize_uses_stored_field_names(self):
        blob = CartStore.serialize([CartLine("a", 2), CartLine("b", 1)])

        assert json.loads(blob) == [
            {"itemId": "a", "quantity": 2},
            {"itemId": "b", "quantity": 1},
        ]

    def test_deserialize_ignores_unknown_fields(self):
        lines = CartStore.deserialize('[{"itemId": "a", "quantity": 3, "note": "gift"}]')
        assert lines == [CartLine("a", 3)]

    @pytest.mark.parametrize("blob", [None, ""])
    def test_empty_blob_is_missing(self, blob):
        assert CartStore.deserialize(blob) is None

    @pytest.mark.parametrize("blob", [
        "{broken",
        '"cart"',
        '[{"quantity": 1}]',
        '[{"itemId": "", "quantity": 1}]',
        '[{"itemId": "a", "quantity": -1}]',
        '[{"itemId": "a", "quantity": 1.5}]',
        '[{"itemId": "a", "quantity": 1}, {"itemId": "a", "quantity": 1}]',
    ])
    def test_malformed_blob_is_missing(self, blob):
        assert CartStore.deserialize(blob) is None


class TestSqlCartStore:
    """Tests for the SQLite-backed store."""

    def test_load_without_snapshot(self, sql_store):
        assert sql_store.load() is None

    @pytest.mark.parametrize("lines", [
        [],
        [CartLine("sku1", 1)],
        [CartLine("sku1", 2), CartLine("sku2", 5), CartLine("sku3", 1)],
    ])
    def test_round_trip(self, sql_store, lines):
        assert sql_store.save(lines) is True
        assert sql_store.load() == lines

    def test_save_replaces_previous_snapshot(self, sql_store):
        sql_store.save([CartLine("a", 1)])
        sql_store.save([CartLine("b", 4)])

        assert sql_store.load() == [CartLine("b", 4)]

    def test_keys_are_independent(self, sqlite_url):
        engine = create_storage_engine(sqlite_url)
        cart_store = SqlCartStore(engine)
        other_store = SqlCartStore(engine, key="wishlist")

        cart_store.save([CartLine("a", 1)])

        assert other_store.load() is None
        engine.dispose()

    def test_malformed_row_loads_as_missing(self, sql_store):
        sql_store.ensure_schema()
        with sql_store.engine.connect() as conn:
            conn.execute(
                text("INSERT INTO storefront_storage (key, value) VALUES (:key, :value)"),
                {"key": "cartItems", "value": "[{\"itemId\": 5}]"}
            )
            conn.commit()

        assert sql_store.load() is None

    def test_survives_new_engine(self, sqlite_url):
        first = create_storage_engine(sqlite_url)
        SqlCartStore(first).save([CartLine("a", 2)])
        first.dispose()

        second = create_storage_engine(sqlite_url)
        assert SqlCartStore(second).load() == [CartLine("a", 2)]
        second.dispose()

    def test_creates_database_folder(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'nested' / 'dir' / 'cart.db'}"
        engine = create_storage_engine(url)

        SqlCartStore(engine).save([CartLine("a", 1)])

        assert (tmp_path / "nested" / "dir" / "cart.db").exists()
        engine.dispose()

    def test_read_failure_reported_as_read(self):
        engine = Mock()
        engine.connect.side_effect = OperationalError("connect", {}, Exception("disk I/O error"))
        store = SqlCartStore(engine)

        with pytest.raises(StorageError) as exc_info:
            store.load()

        assert exc_info.value.message == "Your saved cart could not be read on this device."
        assert exc_info.value.details == {"operation": "SELECT"}
        assert "disk I/O error" in exc_info.value.internal_message

    def test_write_failure_reported_as_save(self):
        engine = Mock()
        engine.connect.side_effect = OperationalError("connect", {}, Exception("database is locked"))
        store = SqlCartStore(engine)

        with pytest.raises(StorageError) as exc_info:
            store.save([CartLine("a", 1)])

        assert exc_info.value.message == "Your cart could not be saved on this device."
        assert exc_info.value.details == {"operation": "WRITE"}

    def test_failed_select_reported_as_read(self, sql_store):
        sql_store.ensure_schema()
        sql_store.execute_command(f"DROP TABLE {sql_store.table_name}")

        with pytest.raises(StorageError) as exc_info:
            sql_store.load()

        assert exc_info.value.details == {"operation": "SELECT"}
        assert "read" in exc_info.value.message


class TestCartServiceWithSqlStore:
    """Cart state engine over real storage."""

    def test_cart_survives_restart(self, sqlite_url):
        engine = create_storage_engine(sqlite_url)
        service = CartService(SqlCartStore(engine))
        service.add_item("sku1", 2)
        service.add_item("sku1", 3)
        service.add_item("sku2")
        engine.dispose()

        engine = create_storage_engine(sqlite_url)
        restored = CartService(SqlCartStore(engine))

        assert restored.quantity_of("sku1") == 5
        assert restored.total_item_count() == 6
        engine.dispose()

    def test_last_writer_wins(self, sqlite_url):
        engine = create_storage_engine(sqlite_url)
        first = CartService(SqlCartStore(engine))
        second = CartService(SqlCartStore(engine))
        first.load()
        second.load()

        first.add_item("a")
        second.add_item("b")

        assert SqlCartStore(engine).load() == [CartLine("b", 1)]
        engine.dispose()
