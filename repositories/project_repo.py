"""
repositories/project_repo.py
-----------------------------
Data access layer for projects and the materials, steps and categories
they own. All SQL touching the `project`, `material`, `step`, `category`
and `project_category` tables lives here.
"""

from typing import Optional

from psycopg2 import extras

from db.binding import SqlType, Statement, bind
from db.connection import ConnectionProvider
from db.extract import extract
from db.transaction import TransactionScope
from models.project import Category, Material, Project, Step
from utils.logger import get_logger

logger = get_logger(__name__)

CATEGORY_TABLE = "category"
MATERIAL_TABLE = "material"
PROJECT_TABLE = "project"
PROJECT_CATEGORY_TABLE = "project_category"
STEP_TABLE = "step"


class ProjectRepository:
    """
    Repository for CRUD operations on the project aggregate.

    Every public method runs in its own transaction on a fresh connection:
    it either commits completely or rolls back and raises PersistenceError.
    A missing project is reported as ``None`` or ``False``, never raised.
    """

    def __init__(self, provider: ConnectionProvider):
        self.provider = provider

    # ── CREATE ────────────────────────────────────────────

    def insert(self, project: Project) -> Project:
        """
        Insert a new project row.

        Args:
            project: The Project to persist. Child collections are not written.

        Returns:
            The same Project with its `id` populated.
        """
        sql = f"""
            INSERT INTO {PROJECT_TABLE}
                (project_name, estimated_hours, actual_hours, difficulty, notes)
            VALUES (%s, %s, %s, %s, %s);
        """
        with self._transaction(f"insert project '{project.name}'") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                self._bind_project_fields(stmt, project)
                stmt.execute(cur)
                project_id = self._last_insert_id(cur, PROJECT_TABLE, "project_id")
        project.id = project_id
        logger.info(f"Added project '{project.name}' #{project.id}")
        return project

    def add_material(self, project_id: int, material: Material) -> Material:
        """
        Insert a material owned by a project.

        Returns:
            The same Material with its `id` and `project_id` populated.
        """
        sql = f"""
            INSERT INTO {MATERIAL_TABLE} (project_id, material_name, num_required, cost)
            VALUES (%s, %s, %s, %s);
        """
        with self._transaction(f"add material to project #{project_id}") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                bind(stmt, 1, project_id, SqlType.INTEGER)
                bind(stmt, 2, material.name, SqlType.TEXT)
                bind(stmt, 3, material.num_required, SqlType.INTEGER)
                bind(stmt, 4, material.cost, SqlType.DECIMAL)
                stmt.execute(cur)
                material.id = self._last_insert_id(cur, MATERIAL_TABLE, "material_id")
        material.project_id = project_id
        return material

    def add_step(self, project_id: int, step: Step) -> Step:
        """
        Insert a step owned by a project.

        Returns:
            The same Step with its `id` and `project_id` populated.
        """
        sql = f"""
            INSERT INTO {STEP_TABLE} (project_id, step_text, step_order)
            VALUES (%s, %s, %s);
        """
        with self._transaction(f"add step to project #{project_id}") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                bind(stmt, 1, project_id, SqlType.INTEGER)
                bind(stmt, 2, step.text, SqlType.TEXT)
                bind(stmt, 3, step.order, SqlType.INTEGER)
                stmt.execute(cur)
                step.id = self._last_insert_id(cur, STEP_TABLE, "step_id")
        step.project_id = project_id
        return step

    def add_category(self, category: Category) -> Category:
        """Insert a category that projects can then be linked to."""
        sql = f"INSERT INTO {CATEGORY_TABLE} (category_name) VALUES (%s);"
        with self._transaction(f"add category '{category.name}'") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                bind(stmt, 1, category.name, SqlType.TEXT)
                stmt.execute(cur)
                category.id = self._last_insert_id(cur, CATEGORY_TABLE, "category_id")
        return category

    def add_category_to_project(self, project_id: int, category_name: str) -> bool:
        """
        Link a project to an existing category by name.

        Returns:
            True if linked, False if no category has that name.
        """
        sql = f"""
            INSERT INTO {PROJECT_CATEGORY_TABLE} (project_id, category_id)
            SELECT %s, category_id FROM {CATEGORY_TABLE} WHERE category_name = %s;
        """
        with self._transaction(f"add category '{category_name}' to project #{project_id}") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                bind(stmt, 1, project_id, SqlType.INTEGER)
                bind(stmt, 2, category_name, SqlType.TEXT)
                stmt.execute(cur)
                linked = cur.rowcount == 1
        return linked

    # ── READ ──────────────────────────────────────────────

    def fetch_all(self) -> list[Project]:
        """
        Get every project ordered by name.

        Returns:
            Projects without their materials, steps or categories.
        """
        sql = f"SELECT * FROM {PROJECT_TABLE} ORDER BY project_name;"
        with self._transaction("fetch all projects") as conn:
            with self._cursor(conn) as cur:
                cur.execute(sql)
                return [extract(r, Project) for r in cur.fetchall()]

    def fetch_by_id(self, project_id: int) -> Optional[Project]:
        """
        Fetch one project with its materials, steps and categories.

        All four queries run in the same transaction, so the result is either
        fully hydrated or the call raises.

        Args:
            project_id: Primary key.

        Returns:
            A Project or None if not found.
        """
        sql = f"SELECT * FROM {PROJECT_TABLE} WHERE project_id = %s;"
        with self._transaction(f"fetch project #{project_id}") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                bind(stmt, 1, project_id, SqlType.INTEGER)
                stmt.execute(cur)
                row = cur.fetchone()
                if row is None:
                    return None
                project = extract(row, Project)
                project.materials.extend(self._fetch_materials(cur, project_id))
                project.steps.extend(self._fetch_steps(cur, project_id))
                project.categories.extend(self._fetch_categories(cur, project_id))
        return project

    def fetch_all_categories(self) -> list[Category]:
        """Get every category ordered by name."""
        sql = f"SELECT * FROM {CATEGORY_TABLE} ORDER BY category_name;"
        with self._transaction("fetch all categories") as conn:
            with self._cursor(conn) as cur:
                cur.execute(sql)
                return [extract(r, Category) for r in cur.fetchall()]

    # ── UPDATE ────────────────────────────────────────────

    def update(self, project: Project) -> bool:
        """
        Replace all editable fields of an existing project.

        Args:
            project: The new field values, keyed by `project.id`.

        Returns:
            True if the project was updated, False if the id does not exist.
        """
        sql = f"""
            UPDATE {PROJECT_TABLE} SET
                project_name = %s,
                estimated_hours = %s,
                actual_hours = %s,
                difficulty = %s,
                notes = %s
            WHERE project_id = %s;
        """
        with self._transaction(f"update project #{project.id}") as conn:
            with self._cursor(conn) as cur:
                stmt = Statement(sql)
                self._bind_project_fields(stmt, project)
                bind(stmt, 6, project.id, SqlType.INTEGER)
                stmt.execute(cur)
                updated = cur.rowcount == 1
        if updated:
            logger.info(f"Updated project #{project.id}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, project_id: int) -> bool:
        """
        Delete a project and every row it owns.

        Materials, steps and category links are removed in the same
        transaction before the project row itself.

        Returns:
            True if the project was deleted, False if the id does not exist.
        """
        with self._transaction(f"delete project #{project_id}") as conn:
            with self._cursor(conn) as cur:
                for table in (MATERIAL_TABLE, STEP_TABLE, PROJECT_CATEGORY_TABLE, PROJECT_TABLE):
                    stmt = Statement(f"DELETE FROM {table} WHERE project_id = %s;")
                    bind(stmt, 1, project_id, SqlType.INTEGER)
                    stmt.execute(cur)
                deleted = cur.rowcount == 1
        if deleted:
            logger.info(f"Deleted project #{project_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    def _transaction(self, action: str) -> TransactionScope:
        return TransactionScope(self.provider, action)

    @staticmethod
    def _cursor(conn):
        return conn.cursor(cursor_factory=extras.RealDictCursor)

    @staticmethod
    def _bind_project_fields(stmt: Statement, project: Project) -> None:
        bind(stmt, 1, project.name, SqlType.TEXT)
        bind(stmt, 2, project.estimated_hours, SqlType.DECIMAL)
        bind(stmt, 3, project.actual_hours, SqlType.DECIMAL)
        bind(stmt, 4, project.difficulty, SqlType.INTEGER)
        bind(stmt, 5, project.notes, SqlType.TEXT)

    @staticmethod
    def _last_insert_id(cur, table: str, id_column: str) -> int:
        """Identity assigned by the last insert into `table` on this connection."""
        cur.execute(
            "SELECT currval(pg_get_serial_sequence(%s, %s)) AS last_id;",
            (table, id_column),
        )
        row = cur.fetchone()
        if row is None or row["last_id"] is None:
            raise LookupError(f"No identity generated for {table}.{id_column}")
        return row["last_id"]

    @staticmethod
    def _fetch_materials(cur, project_id: int) -> list[Material]:
        stmt = Statement(f"""
            SELECT m.* FROM {MATERIAL_TABLE} m
            JOIN {PROJECT_TABLE} p USING (project_id)
            WHERE project_id = %s
            ORDER BY m.material_id;
        """)
        bind(stmt, 1, project_id, SqlType.INTEGER)
        stmt.execute(cur)
        return [extract(r, Material) for r in cur.fetchall()]

    @staticmethod
    def _fetch_steps(cur, project_id: int) -> list[Step]:
        stmt = Statement(f"""
            SELECT s.* FROM {STEP_TABLE} s
            JOIN {PROJECT_TABLE} p USING (project_id)
            WHERE project_id = %s
            ORDER BY s.step_order, s.step_id;
        """)
        bind(stmt, 1, project_id, SqlType.INTEGER)
        stmt.execute(cur)
        return [extract(r, Step) for r in cur.fetchall()]

    @staticmethod
    def _fetch_categories(cur, project_id: int) -> list[Category]:
        stmt = Statement(f"""
            SELECT c.* FROM {CATEGORY_TABLE} c
            JOIN {PROJECT_CATEGORY_TABLE} pc USING (category_id)
            WHERE project_id = %s
            ORDER BY c.category_name;
        """)
        bind(stmt, 1, project_id, SqlType.INTEGER)
        stmt.execute(cur)
        return [extract(r, Category) for r in cur.fetchall()]
