from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from vastraverse.exceptions import APIError, DatabaseError

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Base repository providing common database operations.

    Every helper accepts an optional ``conn``: when given, the statement runs
    on that connection and the caller owns the transaction (see
    ``transaction()``); otherwise the helper opens its own connection and
    commits.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Connection inside BEGIN ... COMMIT, rolled back on any exception."""
        try:
            with self.engine.begin() as conn:
                yield conn
        except APIError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Transaction failed on {self.table_name}: {e}")
            raise DatabaseError(f"Transaction failed: {e}", "TRANSACTION")

    @contextmanager
    def _connection(self, conn: Optional[Connection]) -> Iterator[Connection]:
        if conn is not None:
            yield conn
            return
        with self.engine.connect() as own:
            yield own
            own.commit()

    def execute_query(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> List[Dict[str, Any]]:
        """
        Execute SELECT query and return results as list of dictionaries

        Raises:
            DatabaseError: When query execution fails
        """
        try:
            with self._connection(conn) as c:
                result = c.execute(text(query), params or {})
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error(f"Query execution failed: {query}, Error: {e}")
            raise DatabaseError(f"Query execution failed: {e}", "SELECT")

    def execute_single_query(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> Optional[Dict[str, Any]]:
        """Single row dictionary or None if not found"""
        try:
            with self._connection(conn) as c:
                row = c.execute(text(query), params or {}).mappings().first()
                return dict(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Single query execution failed: {query}, Error: {e}")
            raise DatabaseError(f"Single query execution failed: {e}", "SELECT")

    def execute_command(
        self,
        command: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> int:
        """
        Execute INSERT/UPDATE/DELETE command

        Returns:
            Number of affected rows
        """
        try:
            with self._connection(conn) as c:
                return c.execute(text(command), params or {}).rowcount
        except SQLAlchemyError as e:
            logger.error(f"Command execution failed: {command}, Error: {e}")
            raise DatabaseError(f"Command execution failed: {e}", "WRITE")

    def execute_scalar(
        self,
        query: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> Any:
        """Execute query returning single scalar value (COUNT, SUM, etc.)"""
        try:
            with self._connection(conn) as c:
                return c.execute(text(query), params or {}).scalar()
        except SQLAlchemyError as e:
            logger.error(f"Scalar query execution failed: {query}, Error: {e}")
            raise DatabaseError(f"Scalar query execution failed: {e}", "SELECT")

    def execute_insert_returning_id(
        self,
        command: str,
        params: Optional[Dict[str, Any]] = None,
        conn: Optional[Connection] = None,
    ) -> int:
        """Execute INSERT command and return the generated ID"""
        try:
            with self._connection(conn) as c:
                return int(c.execute(text(command + " RETURNING id"), params or {}).scalar())
        except SQLAlchemyError as e:
            logger.error(f"Insert execution failed: {command}, Error: {e}")
            raise DatabaseError(f"Insert execution failed: {e}", "INSERT")

    def exists(self, entity_id: int, conn: Optional[Connection] = None) -> bool:
        """Check if entity exists by ID"""
        query = f"SELECT 1 FROM {self.table_name} WHERE id = :id"
        return self.execute_scalar(query, {"id": entity_id}, conn) is not None

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Table name for the entity"""
        pass
