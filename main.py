"""
main.py
-------
Entry point for the projects database.

Responsibilities:
    - Load the connection settings from the environment.
    - Make sure the schema exists.
    - Report the projects currently stored.

The interactive menu is a separate collaborator; it builds its own
ProjectRepository the same way `build_repository()` does here.
"""

from config import DbConfig, load_db_config
from db.connection import ConnectionProvider
from db.errors import DbError
from db.init_db import create_tables
from repositories.project_repo import ProjectRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def build_repository(config: DbConfig) -> ProjectRepository:
    """Wire a ProjectRepository to a connection provider for the given settings."""
    return ProjectRepository(ConnectionProvider(config))


def main() -> int:
    """Initialize the schema and list stored projects. Returns a process exit code."""
    config = load_db_config()
    logger.info(f"Using database {config.dsn}")
    repo = build_repository(config)

    try:
        create_tables(repo.provider)
        projects = repo.fetch_all()
    except DbError as e:
        logger.error(f"Startup failed: {e}")
        return 1

    logger.info(f"{len(projects)} project(s) stored.")
    for project in projects:
        logger.info(f"   {project.id}: {project.name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
