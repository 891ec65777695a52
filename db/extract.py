"""
db/extract.py
-------------
Maps a single result row to a domain object.

Rows come from a RealDictCursor, so columns are read by name. Each entity has
its own explicit mapping function; nothing here runs queries.
"""

from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, TypeVar

from db.binding import to_decimal
from models.project import Category, Material, Project, Step

T = TypeVar("T")


def _decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def extract_project(row: Mapping[str, Any]) -> Project:
    """Convert a project row to a Project with empty child collections."""
    return Project(
        id=row["project_id"],
        name=row["project_name"],
        estimated_hours=_decimal(row["estimated_hours"]),
        actual_hours=_decimal(row["actual_hours"]),
        difficulty=row["difficulty"],
        notes=row["notes"],
    )


def extract_material(row: Mapping[str, Any]) -> Material:
    """Convert a material row to a Material."""
    return Material(
        id=row["material_id"],
        project_id=row["project_id"],
        name=row["material_name"],
        num_required=row["num_required"],
        cost=_decimal(row["cost"]),
    )


def extract_step(row: Mapping[str, Any]) -> Step:
    """Convert a step row to a Step."""
    return Step(
        id=row["step_id"],
        project_id=row["project_id"],
        text=row["step_text"],
        order=row["step_order"],
    )


def extract_category(row: Mapping[str, Any]) -> Category:
    """Convert a category row to a Category."""
    return Category(id=row["category_id"], name=row["category_name"])


_EXTRACTORS: dict[type, Callable[[Mapping[str, Any]], Any]] = {
    Project: extract_project,
    Material: extract_material,
    Step: extract_step,
    Category: extract_category,
}


def extract(row: Mapping[str, Any], kind: type[T]) -> T:
    """
    Convert a row to an entity of the given kind.

    Args:
        row: A mapping of column name to value.
        kind: One of Project, Material, Step or Category.

    Returns:
        A new entity instance.

    Raises:
        TypeError: If kind has no row mapping.
        KeyError: If the row lacks a column the mapping needs.
    """
    try:
        extractor = _EXTRACTORS[kind]
    except KeyError:
        raise TypeError(f"No row mapping for {kind!r}") from None
    return extractor(row)
