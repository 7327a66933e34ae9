# task_api/database.py
"""Database engine wrapper, session factory, and additive auto-migration using SQLModel."""

import logging
from enum import Enum
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import Column, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from task_api import config

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    """SQLite needs cross-thread access, and in-memory SQLite a single shared connection."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


class Database:
    """Owns the engine for one task store.

    Parameters
    ----------
    url : str, optional
        SQLAlchemy database URL. Defaults to ``config.DATABASE_URL``.
    echo : bool
        Echo emitted SQL to the log.
    """

    def __init__(self, url: Optional[str] = None, echo: bool = config.SQL_ECHO) -> None:
        self.url = url or config.DATABASE_URL
        self.engine: Engine = create_engine(self.url, echo=echo, **_engine_kwargs(self.url))

    def create_all(self) -> None:
        """Create missing tables from SQLModel metadata, then auto-migrate schema diffs."""
        SQLModel.metadata.create_all(self.engine)
        auto_migrate(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def _compile_column_type(column: Column, engine: Engine) -> str:
    """Compile a SQLAlchemy column type to a DDL string for the engine's dialect."""
    return column.type.compile(dialect=engine.dialect)


def _column_default(column: Column, engine: Engine) -> str:
    """Derive a SQL DEFAULT clause for NOT NULL columns added via ALTER TABLE.

    Existing rows need a value for a new NOT NULL column. Returns an empty
    string if the column is nullable.
    """
    if column.nullable:
        return ""

    if column.default is not None and column.default.is_scalar:
        value = column.default.arg
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            return f" DEFAULT {int(value)}"
        if isinstance(value, (int, float)):
            return f" DEFAULT {value}"
        escaped = str(value).replace("'", "''")
        return f" DEFAULT '{escaped}'"

    type_str = _compile_column_type(column, engine).upper()
    if "INT" in type_str or "BOOL" in type_str:
        return " DEFAULT 0"
    if "FLOAT" in type_str or "REAL" in type_str or "NUMERIC" in type_str:
        return " DEFAULT 0.0"
    if "DATE" in type_str or "TIME" in type_str:
        return " DEFAULT '1970-01-01 00:00:00'"
    return " DEFAULT ''"


def auto_migrate(engine: Engine) -> None:
    """Add model columns missing from existing tables.

    Migration is additive only. Columns present in the database but not in
    the model, and type mismatches, are logged and left untouched.
    """
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())

    for table_name, table in SQLModel.metadata.tables.items():
        if table_name not in existing_tables:
            continue

        db_columns = {col["name"]: col for col in inspector.get_columns(table_name)}
        model_columns = {col.name: col for col in table.columns}

        added = set(model_columns) - set(db_columns)
        removed = set(db_columns) - set(model_columns)
        if removed:
            logger.warning(
                "Table '%s' has columns unknown to the model, leaving them: %s",
                table_name, sorted(removed),
            )

        for col_name in set(db_columns) & set(model_columns):
            db_type = str(db_columns[col_name]["type"]).upper()
            model_type = _compile_column_type(model_columns[col_name], engine).upper()
            if db_type != model_type:
                logger.warning(
                    "Type mismatch on '%s.%s': db=%s model=%s",
                    table_name, col_name, db_type, model_type,
                )

        if not added:
            continue

        logger.info("Adding columns to '%s': %s", table_name, sorted(added))
        quote = engine.dialect.identifier_preparer.quote
        with engine.begin() as conn:
            for col_name in sorted(added):
                col = model_columns[col_name]
                col_type = _compile_column_type(col, engine)
                nullable = "" if col.nullable else " NOT NULL"
                default = _column_default(col, engine)
                stmt = (
                    f"ALTER TABLE {quote(table_name)} "
                    f"ADD COLUMN {quote(col_name)} {col_type}{nullable}{default}"
                )
                logger.info("  %s", stmt)
                conn.execute(text(stmt))


def get_session(request: Request) -> Iterator[Session]:
    """Yield a session on the app's database for FastAPI dependency injection."""
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
