"""Pytest fixtures: scripted psycopg2 fakes and an optional real PostgreSQL."""
import os

import pytest

from config import DbConfig, load_db_config
from db.connection import ConnectionProvider
from db.errors import DbConnectionError
from db.init_db import create_tables, drop_tables
from repositories.project_repo import ProjectRepository


class FakeCursor:
    """
    Cursor that replays a script, one entry per execute() call.

    A list entry is returned as result rows, an int sets rowcount, and an
    exception instance is raised.
    """

    def __init__(self, script):
        self.script = list(script)
        self.executed = []
        self.rows = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        step = self.script.pop(0) if self.script else []
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, int):
            self.rows, self.rowcount = [], step
        else:
            self.rows, self.rowcount = list(step), len(step)

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        rows, self.rows = self.rows, []
        return rows


class FakeConnection:
    def __init__(self, script=(), commit_error=None, rollback_error=None, session_error=None):
        self.cur = FakeCursor(script)
        self.session_error = session_error
        self.commit_error = commit_error
        self.rollback_error = rollback_error
        self.session = None
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def set_session(self, **kwargs):
        if self.session_error:
            raise self.session_error
        self.session = kwargs

    def cursor(self, cursor_factory=None):
        return self.cur

    def commit(self):
        if self.commit_error:
            raise self.commit_error
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1
        if self.rollback_error:
            raise self.rollback_error

    def close(self):
        self.closed = True


class FakeProvider:
    """Stands in for ConnectionProvider; hands out one scripted connection."""

    def __init__(self, conn: FakeConnection, config: DbConfig = DbConfig()):
        self.conn = conn
        self.config = config
        self.acquired = 0
        self.released = 0

    def acquire(self):
        self.acquired += 1
        return self.conn

    def release(self, conn):
        self.released += 1
        conn.close()


@pytest.fixture
def make_provider():
    """Factory: make_provider(script, **conn_kwargs) -> FakeProvider."""
    def _make(script=(), **kwargs):
        return FakeProvider(FakeConnection(script, **kwargs))
    return _make


# ── Integration ───────────────────────────────────────────

@pytest.fixture(scope="session")
def pg_provider():
    """Real provider for TEST_DB_*; skipped unless TEST_DB_NAME is set and reachable."""
    if not os.getenv("TEST_DB_NAME"):
        pytest.skip("TEST_DB_NAME not set; PostgreSQL integration tests skipped")
    provider = ConnectionProvider(load_db_config("TEST_DB_"))
    try:
        provider.release(provider.acquire())
    except DbConnectionError as e:
        pytest.skip(f"PostgreSQL test database unreachable: {e}")
    return provider


@pytest.fixture
def pg_repo(pg_provider):
    drop_tables(pg_provider)
    create_tables(pg_provider)
    try:
        yield ProjectRepository(pg_provider)
    finally:
        drop_tables(pg_provider)
