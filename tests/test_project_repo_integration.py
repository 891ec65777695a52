"""
ProjectRepository against a real PostgreSQL database.

Skipped unless TEST_DB_NAME (and friends, see .env.example) point at a
scratch database whose project tables may be dropped.
"""
from decimal import Decimal

import psycopg2
import pytest

from db.errors import PersistenceError
from models.project import Category, Material, Project, Step
from repositories.project_repo import ProjectRepository

pytestmark = pytest.mark.integration


def deck() -> Project:
    return Project(
        name="Deck",
        estimated_hours=Decimal("12.50"),
        actual_hours=Decimal("14.00"),
        difficulty=3,
        notes="Build a deck",
    )


def test_deck_lifecycle(pg_repo):
    saved = pg_repo.insert(deck())
    assert saved.id is not None

    expected = deck()
    expected.id = saved.id
    fetched = pg_repo.fetch_by_id(saved.id)
    assert fetched == expected
    assert str(fetched.estimated_hours) == "12.50"

    assert pg_repo.delete(saved.id) is True
    assert pg_repo.fetch_by_id(saved.id) is None


def test_insert_keeps_nulls_and_out_of_range_difficulty(pg_repo):
    saved = pg_repo.insert(Project(name="Sketch", difficulty=9))

    fetched = pg_repo.fetch_by_id(saved.id)

    assert fetched.difficulty == 9
    assert fetched.estimated_hours is None
    assert fetched.notes is None


def test_update_round_trip(pg_repo):
    saved = pg_repo.insert(deck())
    changed = Project(
        id=saved.id,
        name="Bigger deck",
        estimated_hours=Decimal("20"),
        actual_hours=Decimal("22.255"),
        difficulty=4,
        notes=None,
    )

    assert pg_repo.update(changed) is True

    fetched = pg_repo.fetch_by_id(saved.id)
    assert fetched.name == "Bigger deck"
    assert fetched.estimated_hours == Decimal("20.00")
    assert fetched.actual_hours == Decimal("22.26")
    assert fetched.difficulty == 4
    assert fetched.notes is None


def test_update_and_delete_absent_id_change_nothing(pg_repo):
    saved = pg_repo.insert(deck())
    ghost = deck()
    ghost.id = saved.id + 1000

    assert pg_repo.update(ghost) is False
    assert pg_repo.delete(ghost.id) is False
    assert [p.id for p in pg_repo.fetch_all()] == [saved.id]


def test_fetch_all_is_ordered_by_name(pg_repo):
    for name in ["Shed", "Bird house", "Deck", "Arbor"]:
        pg_repo.insert(Project(name=name))

    names = [p.name for p in pg_repo.fetch_all()]

    assert names == sorted(names)
    assert len(names) == 4


def test_fetch_by_id_hydrates_aggregate(pg_repo):
    project = pg_repo.insert(deck())
    other = pg_repo.insert(Project(name="Shed"))
    pg_repo.add_material(project.id, Material(name="2x4", num_required=20, cost=Decimal("3.5")))
    pg_repo.add_step(project.id, Step(text="Frame", order=2))
    pg_repo.add_step(project.id, Step(text="Dig holes", order=1))
    pg_repo.add_step(other.id, Step(text="Pour slab", order=1))
    pg_repo.add_category(Category(name="Outdoor"))
    pg_repo.add_category(Category(name="Woodwork"))
    assert pg_repo.add_category_to_project(project.id, "Outdoor") is True
    assert pg_repo.add_category_to_project(other.id, "Outdoor") is True
    assert pg_repo.add_category_to_project(project.id, "Plumbing") is False

    fetched = pg_repo.fetch_by_id(project.id)

    assert [m.name for m in fetched.materials] == ["2x4"]
    assert fetched.materials[0].cost == Decimal("3.50")
    assert [s.text for s in fetched.steps] == ["Dig holes", "Frame"]
    assert [c.name for c in fetched.categories] == ["Outdoor"]
    assert [c.name for c in pg_repo.fetch_all_categories()] == ["Outdoor", "Woodwork"]


def test_delete_removes_owned_rows(pg_repo):
    project = pg_repo.insert(deck())
    pg_repo.add_material(project.id, Material(name="Nails"))
    pg_repo.add_category(Category(name="Outdoor"))
    pg_repo.add_category_to_project(project.id, "Outdoor")

    assert pg_repo.delete(project.id) is True

    conn = pg_repo.provider.acquire()
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT count(*) FROM material")
            assert cur.fetchone()[0] == 0
            cur.execute("SELECT count(*) FROM project_category")
            assert cur.fetchone()[0] == 0
            cur.execute("SELECT count(*) FROM category")
            assert cur.fetchone()[0] == 1
    finally:
        pg_repo.provider.release(conn)


def test_failed_hydration_returns_nothing(pg_repo, monkeypatch):
    project = pg_repo.insert(deck())

    def broken_steps(cur, project_id):
        raise psycopg2.OperationalError("injected fault")

    monkeypatch.setattr(ProjectRepository, "_fetch_steps", staticmethod(broken_steps))

    with pytest.raises(PersistenceError) as info:
        pg_repo.fetch_by_id(project.id)
    assert "injected fault" in str(info.value.cause)


def test_failed_insert_persists_nothing(pg_repo):
    with pytest.raises(PersistenceError):
        pg_repo.insert(Project(name=None))

    assert pg_repo.fetch_all() == []


def test_add_material_to_missing_project_fails(pg_repo):
    with pytest.raises(PersistenceError) as info:
        pg_repo.add_material(12345, Material(name="Nails"))
    assert isinstance(info.value.cause, psycopg2.IntegrityError)


def test_negative_hours_are_rejected(pg_repo):
    with pytest.raises(PersistenceError) as info:
        pg_repo.insert(Project(name="Time machine", estimated_hours=Decimal("-3")))

    assert isinstance(info.value.cause, psycopg2.IntegrityError)
    assert pg_repo.fetch_all() == []
