"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import ConnectionProvider
from db.transaction import TransactionScope
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Projects: hours may not be negative; difficulty is stored as given and
-- its 1-5 range is checked by the caller
CREATE TABLE IF NOT EXISTS project (
    project_id      SERIAL PRIMARY KEY,
    project_name    VARCHAR(128) NOT NULL,
    estimated_hours NUMERIC(7,2) CHECK (estimated_hours >= 0),
    actual_hours    NUMERIC(7,2) CHECK (actual_hours >= 0),
    difficulty      INT,
    notes           TEXT
);

-- Materials owned by a single project
CREATE TABLE IF NOT EXISTS material (
    material_id     SERIAL PRIMARY KEY,
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    material_name   VARCHAR(128) NOT NULL,
    num_required    INT,
    cost            NUMERIC(7,2)
);

-- Ordered steps owned by a single project
CREATE TABLE IF NOT EXISTS step (
    step_id         SERIAL PRIMARY KEY,
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    step_text       TEXT NOT NULL,
    step_order      INT NOT NULL
);

-- Categories shared between projects
CREATE TABLE IF NOT EXISTS category (
    category_id     SERIAL PRIMARY KEY,
    category_name   VARCHAR(128) UNIQUE NOT NULL
);

-- Many-to-many link between projects and categories
CREATE TABLE IF NOT EXISTS project_category (
    project_id      INT NOT NULL REFERENCES project(project_id) ON DELETE CASCADE,
    category_id     INT NOT NULL REFERENCES category(category_id) ON DELETE CASCADE,
    UNIQUE (project_id, category_id)
);

CREATE INDEX IF NOT EXISTS idx_material_project ON material(project_id);
CREATE INDEX IF NOT EXISTS idx_step_project ON step(project_id);
"""

DROP_SQL = """
DROP TABLE IF EXISTS project_category;
DROP TABLE IF EXISTS material;
DROP TABLE IF EXISTS step;
DROP TABLE IF EXISTS category;
DROP TABLE IF EXISTS project;
"""


def create_tables(provider: ConnectionProvider) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with TransactionScope(provider, "initialize schema") as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
    logger.info("Database schema initialized successfully.")


def drop_tables(provider: ConnectionProvider) -> None:
    """Drop all project tables. Used to reset scratch databases in tests."""
    with TransactionScope(provider, "drop schema") as conn:
        with conn.cursor() as cur:
            cur.execute(DROP_SQL)
    logger.info("Database schema dropped.")


if __name__ == "__main__":
    from config import load_db_config
    create_tables(ConnectionProvider(load_db_config()))
    print("✅ Database schema created successfully.")
