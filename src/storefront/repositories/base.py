from abc import ABC, abstractmethod
from typing import Optional, List, Any, Dict
from contextlib import contextmanager
import logging

from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.exceptions import StorageError
from storefront.models.cart import CartLine
from storefront.schemas.cart_schemas import cart_snapshot_schema

logger = logging.getLogger(__name__)


class CartStore(ABC):
    """
    Durable home of the cart snapshot.

    load() returns None for a missing or malformed snapshot and raises
    StorageError only when the storage itself cannot be read.
    save() raises StorageError when the snapshot cannot be written.
    """

    @abstractmethod
    def load(self) -> Optional[List[CartLine]]:
        pass

    @abstractmethod
    def save(self, lines: List[CartLine]) -> bool:
        pass

    @staticmethod
    def serialize(lines: List[CartLine]) -> str:
        """Cart lines to the stored JSON array"""
        return cart_snapshot_schema.dumps(lines)

    @staticmethod
    def deserialize(blob: Optional[str]) -> Optional[List[CartLine]]:
        """Stored JSON array to cart lines, or None when the blob is unusable"""
        if not blob:
            return None

        try:
            lines = cart_snapshot_schema.loads(blob)
        except (ValueError, SchemaValidationError) as e:
            logger.warning(f"Discarding malformed cart snapshot: {e}")
            return None

        item_ids = [line.item_id for line in lines]
        if len(item_ids) != len(set(item_ids)):
            logger.warning("Discarding cart snapshot with duplicate item ids")
            return None

        return lines


class SqlRepository(ABC):
    """
    Base for stores kept in a SQLAlchemy database.
    Wraps driver errors in StorageError.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def get_db_connection(self, operation: Optional[str] = None):
        """Database connection context manager with error handling"""
        try:
            with self.engine.connect() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"Database connection error: {str(e)}")
            raise StorageError(f"Database connection failed: {str(e)}", operation)

    def execute_single_query(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Execute query expecting single result

        Returns:
            Single row dictionary or None if not found
        """
        try:
            with self.get_db_connection("SELECT") as conn:
                result = conn.execute(text(query), params or {}).first()
                return dict(result._mapping) if result else None
        except SQLAlchemyError as e:
            logger.error(f"Single query execution failed: {query}, Error: {str(e)}")
            raise StorageError(f"Single query execution failed: {str(e)}", "SELECT")

    def execute_command(
        self,
        command: str,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "WRITE"
    ) -> int:
        """
        Execute INSERT/UPDATE/DELETE/DDL command

        Returns:
            Number of affected rows
        """
        try:
            with self.get_db_connection(operation) as conn:
                result = conn.execute(text(command), params or {})
                conn.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Command execution failed: {command}, Error: {str(e)}")
            raise StorageError(f"Command execution failed: {str(e)}", operation)

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Table name for the store"""
        pass
