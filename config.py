"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed values.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# ── PostgreSQL ────────────────────────────────────────────
@dataclass(frozen=True)
class DbConfig:
    """
    Connection settings for the projects database.

    Attributes:
        host: Database server hostname.
        port: Database server port.
        name: Database (schema) name.
        user: Login role.
        password: Login password.
        isolation_level: Isolation level applied to every transaction.
        connect_timeout: Seconds to wait for the server before giving up.
    """
    host: str = "localhost"
    port: int = 5432
    name: str = "projects"
    user: str = "projects"
    password: str = ""
    isolation_level: str = "REPEATABLE READ"
    connect_timeout: int = 10

    @property
    def dsn(self) -> str:
        """Connection URI with the password masked, for log messages."""
        return f"postgresql://{self.user}:***@{self.host}:{self.port}/{self.name}"


def load_db_config(prefix: str = "DB_") -> DbConfig:
    """
    Build a DbConfig from environment variables.

    Args:
        prefix: Variable name prefix, e.g. ``DB_`` reads ``DB_HOST``.
            Tests use ``TEST_DB_`` to point at a scratch database.

    Returns:
        A frozen DbConfig.
    """
    return DbConfig(
        host=os.getenv(f"{prefix}HOST", "localhost"),
        port=int(os.getenv(f"{prefix}PORT", "5432")),
        name=os.getenv(f"{prefix}NAME", "projects"),
        user=os.getenv(f"{prefix}USER", "projects"),
        password=os.getenv(f"{prefix}PASS", ""),
        isolation_level=os.getenv(f"{prefix}ISOLATION_LEVEL", "REPEATABLE READ").upper(),
        connect_timeout=int(os.getenv(f"{prefix}CONNECT_TIMEOUT", "10")),
    )
