"""
db/errors.py
------------
Exceptions raised by the database layer.

Absence of a record is never an error here: lookups return ``None`` and
update/delete return ``False``.
"""

from typing import Optional


class DbError(Exception):
    """Base class for all database layer failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DbConnectionError(DbError):
    """The database is unreachable or rejected the credentials. Never retried."""


class PersistenceError(DbError):
    """A statement or result mapping failed inside a transaction, which was rolled back."""
