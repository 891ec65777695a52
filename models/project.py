"""
models/project.py
-----------------
Domain models for projects and the materials, steps and categories they own.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class Material:
    """
    A material needed to complete a project.

    Attributes:
        id: Database primary key (None for new records).
        project_id: Owning project.
        name: What the material is.
        num_required: How many units are needed.
        cost: Cost in currency units, two decimal places.
    """
    name: str
    num_required: Optional[int] = None
    cost: Optional[Decimal] = None
    project_id: Optional[int] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"ID={self.id}, name={self.name}, num_required={self.num_required}, cost={self.cost}"


@dataclass
class Step:
    """A single ordered instruction of a project."""
    text: str
    order: int
    project_id: Optional[int] = None
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"ID={self.id}, order={self.order}, text={self.text}"


@dataclass
class Category:
    """A label shared between any number of projects."""
    name: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"ID={self.id}, name={self.name}"


@dataclass
class Project:
    """
    Represents a project and, once fetched by id, its owned collections.

    Attributes:
        id: Database primary key (None until inserted).
        name: Project name.
        estimated_hours: Planned effort, two decimal places.
        actual_hours: Effort spent so far, two decimal places.
        difficulty: Rating from 1 (easy) to 5 (hard), validated by the caller.
        notes: Optional free text.
        materials: Materials needed, hydrated by fetch_by_id only.
        steps: Steps to follow, hydrated by fetch_by_id only.
        categories: Categories the project belongs to, hydrated by fetch_by_id only.
    """
    name: str
    estimated_hours: Optional[Decimal] = None
    actual_hours: Optional[Decimal] = None
    difficulty: Optional[int] = None
    notes: Optional[str] = None
    id: Optional[int] = None
    materials: list[Material] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [
            f"   ID={self.id}",
            f"   name={self.name}",
            f"   estimated_hours={self.estimated_hours}",
            f"   actual_hours={self.actual_hours}",
            f"   difficulty={self.difficulty}",
            f"   notes={self.notes}",
        ]
        lines.append("   Materials:")
        lines.extend(f"      {m}" for m in self.materials)
        lines.append("   Steps:")
        lines.extend(f"      {s}" for s in self.steps)
        lines.append("   Categories:")
        lines.extend(f"      {c}" for c in self.categories)
        return "\n".join(lines)
