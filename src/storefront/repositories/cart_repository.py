from typing import Optional, List
import logging

from sqlalchemy.engine import Engine

from storefront.models.cart import CartLine
from storefront.repositories.base import CartStore, SqlRepository

logger = logging.getLogger(__name__)


class SqlCartStore(SqlRepository, CartStore):
    """
    Cart snapshot kept as a JSON blob under one key of a key/value table.

    The table is shared by anything the storefront keeps on the device;
    the cart only ever touches its own key.
    """

    def __init__(self, engine: Engine, key: str = "cartItems"):
        super().__init__(engine)
        self.key = key
        self._schema_ready = False

    @property
    def table_name(self) -> str:
        return "storefront_storage"

    def ensure_schema(self, operation: str = "WRITE") -> None:
        """Create the key/value table on first use. operation tags errors for the caller."""
        if self._schema_ready:
            return

        self.execute_command(f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            key VARCHAR(255) PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """, operation=operation)
        self._schema_ready = True

    def load(self) -> Optional[List[CartLine]]:
        """Read the stored cart, or None when nothing usable is stored"""
        self.ensure_schema("SELECT")

        row = self.execute_single_query(
            f"SELECT value FROM {self.table_name} WHERE key = :key",
            {"key": self.key}
        )

        if not row:
            logger.info(f"No stored cart under key '{self.key}'")
            return None

        lines = self.deserialize(row["value"])
        if lines is not None:
            logger.info(f"Loaded cart with {len(lines)} lines from key '{self.key}'")
        return lines

    def save(self, lines: List[CartLine]) -> bool:
        """Replace the stored cart with the given lines"""
        self.ensure_schema()

        # Upsert works on both SQLite (3.24+) and PostgreSQL
        query = f"""
        INSERT INTO {self.table_name} (key, value, updated_at)
        VALUES (:key, :value, CURRENT_TIMESTAMP)
        ON CONFLICT (key)
        DO UPDATE SET
            value = excluded.value,
            updated_at = CURRENT_TIMESTAMP
        """

        affected_rows = self.execute_command(query, {
            "key": self.key,
            "value": self.serialize(lines)
        })

        return affected_rows > 0

