"""
db/transaction.py
-----------------
Transaction scope shared by every repository operation.

Usage:
    with TransactionScope(provider) as conn:
        with conn.cursor() as cur:
            ...

The block commits when it finishes, rolls back when it raises, and the
connection is closed either way.
"""

from db.connection import ConnectionProvider
from db.errors import PersistenceError
from utils.logger import get_logger

logger = get_logger(__name__)


class TransactionScope:
    """
    One connection, one transaction.

    ``action`` names the operation in log messages, e.g. "insert project 'Deck'".

    Any exception escaping the ``with`` block is re-raised as a
    PersistenceError whose ``cause`` is the original exception, after the
    transaction has been rolled back.
    """

    def __init__(self, provider: ConnectionProvider, action: str = "run transaction"):
        self.provider = provider
        self.action = action
        self.conn = None

    def __enter__(self):
        # DbConnectionError propagates as is: there is nothing to roll back yet.
        self.conn = self.provider.acquire()
        try:
            self.conn.set_session(
                isolation_level=self.provider.config.isolation_level,
                autocommit=False,
            )
        except Exception as e:
            self._release()
            logger.error(f"Failed to start transaction for {self.action}: {e}")
            raise PersistenceError("Unable to start transaction", e) from e
        return self.conn

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc is None:
                try:
                    self.conn.commit()
                    return False
                except Exception as e:
                    exc = e
            self._rollback()
            if isinstance(exc, PersistenceError):
                return False
            if not isinstance(exc, Exception):
                # KeyboardInterrupt and friends are not persistence failures.
                return False
            logger.error(f"Failed to {self.action}: {exc}")
            raise PersistenceError(f"Failed to {self.action}: {exc!r}", exc) from exc
        finally:
            self._release()

    def _rollback(self) -> None:
        try:
            self.conn.rollback()
        except Exception as e:
            logger.error(f"Rollback failed: {e}")

    def _release(self) -> None:
        conn, self.conn = self.conn, None
        if conn is not None:
            self.provider.release(conn)
