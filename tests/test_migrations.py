"""The initial alembic revision must produce the same tables as the ORM models."""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from server.db.models import Base

MIGRATION = Path(__file__).resolve().parent.parent / "alembic" / "versions" / "001_initial.py"


def _load_revision():
    spec = importlib.util.spec_from_file_location("initial_revision", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(engine, step):
    with engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            step()


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'migrate.db'}")
    try:
        yield eng
    finally:
        eng.dispose()


def test_upgrade_matches_models(engine):
    revision = _load_revision()
    _run(engine, revision.upgrade)

    insp = inspect(engine)
    assert set(insp.get_table_names()) == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        migrated = {c["name"] for c in insp.get_columns(name)}
        assert migrated == {c.name for c in table.columns}, name


def test_progress_table_constraints(engine):
    _run(engine, _load_revision().upgrade)
    insp = inspect(engine)
    uniques = insp.get_unique_constraints("user_flashcard_progress")
    assert any(u["column_names"] == ["user_id", "flashcard_id"] for u in uniques)
    indexed = {tuple(ix["column_names"]) for ix in insp.get_indexes("user_flashcard_progress")}
    assert ("next_review_date",) in indexed


def test_downgrade_drops_everything(engine):
    revision = _load_revision()
    _run(engine, revision.upgrade)
    _run(engine, revision.downgrade)
    assert inspect(engine).get_table_names() == []
