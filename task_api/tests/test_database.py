"""Tests for table creation and additive auto-migration."""

import logging
from datetime import datetime

from sqlalchemy import inspect, text

from task_api.database import Database
from task_api.repository import TaskRepository

LEGACY_DDL = (
    "CREATE TABLE tasks ("
    "id INTEGER NOT NULL PRIMARY KEY, "
    "title VARCHAR(255) NOT NULL, "
    "status VARCHAR(50) NOT NULL{extra})"
)


def _legacy_database(tmp_path, extra: str = "") -> Database:
    database = Database(f"sqlite:///{tmp_path / 'legacy.db'}")
    with database.engine.begin() as conn:
        conn.execute(text(LEGACY_DDL.format(extra=extra)))
        conn.execute(text("INSERT INTO tasks (id, title, status) VALUES (1, 'Old', 'done')"))
    return database


def _columns(database: Database) -> set:
    return {col["name"] for col in inspect(database.engine).get_columns("tasks")}


def test_create_all_creates_table(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'fresh.db'}")
    database.create_all()
    assert _columns(database) == {"id", "title", "status", "created_at"}
    database.dispose()


def test_missing_column_is_added_and_rows_kept(tmp_path):
    database = _legacy_database(tmp_path)
    database.create_all()

    assert "created_at" in _columns(database)
    with database.session() as session:
        task = TaskRepository(session).get_by_id(1)
    assert task.title == "Old"
    assert task.created_at.replace(tzinfo=None) == datetime(1970, 1, 1)
    database.dispose()


def test_unknown_columns_are_left_alone(tmp_path, caplog):
    database = _legacy_database(tmp_path, extra=", notes TEXT")
    with caplog.at_level(logging.WARNING, logger="task_api.database"):
        database.create_all()

    assert "notes" in _columns(database)
    assert "unknown to the model" in caplog.text
    with database.session() as session:
        assert TaskRepository(session).get_by_id(1).status == "done"
    database.dispose()


def test_create_all_is_idempotent(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'again.db'}")
    database.create_all()
    database.create_all()
    assert _columns(database) == {"id", "title", "status", "created_at"}
    database.dispose()
