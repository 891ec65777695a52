"""
db/connection.py
----------------
Opens PostgreSQL connections for the repositories.
Every logical operation gets its own fresh connection; nothing is pooled.
"""

import psycopg2

from config import DbConfig
from db.errors import DbConnectionError
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionProvider:
    """Hands out new psycopg2 connections built from a fixed DbConfig."""

    def __init__(self, config: DbConfig):
        self.config = config

    def acquire(self):
        """
        Open a new connection to the database.

        Returns:
            A psycopg2 connection object. The caller owns it and must release it.

        Raises:
            DbConnectionError: If the database is unreachable or rejects the login.
        """
        cfg = self.config
        try:
            conn = psycopg2.connect(
                host=cfg.host,
                port=cfg.port,
                dbname=cfg.name,
                user=cfg.user,
                password=cfg.password,
                connect_timeout=cfg.connect_timeout,
            )
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to connect to {cfg.dsn}: {e}")
            raise DbConnectionError(f"Unable to connect to {cfg.dsn}", e) from e
        logger.debug(f"Connected to {cfg.dsn}")
        return conn

    @staticmethod
    def release(conn) -> None:
        """
        Close a connection obtained from acquire().

        Args:
            conn: The psycopg2 connection to close.
        """
        try:
            conn.close()
        except psycopg2.Error as e:
            logger.warning(f"Failed to close connection: {e}")
