"""Pytest configuration: test environment, a fresh SQLite store per test, and helpers.

Environment is set before any ``tenantguard`` import because settings are read
once at import time.
"""

from __future__ import annotations

import os

os.environ["JWT_SECRET"] = "test-secret-key-0123456789-abcdefghij"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DB_CREATE_SCHEMA"] = "false"
os.environ.pop("JWT_EXP_MIN", None)

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine

from tenantguard.core import db
from tenantguard.domain.sqlalchemy_models import Tenant, User


def make_sqlite_engine(path: Path) -> Engine:
    """File-backed SQLite engine whose transactions take the write lock up front.

    BEGIN IMMEDIATE makes concurrent writers queue on the busy timeout instead of
    failing with "database is locked" when they race.
    """
    engine = create_engine(
        f"sqlite+pysqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


@pytest.fixture(autouse=True)
def store(tmp_path: Path) -> Iterator[Engine]:
    """Bind a fresh, schema-initialised store for every test."""
    engine = make_sqlite_engine(tmp_path / "store.db")
    db.bind_engine(engine)
    db.create_schema()
    yield engine
    engine.dispose()


@pytest.fixture
def row_counts() -> Callable[[], tuple[int, int]]:
    """Callable returning ``(tenant_rows, user_rows)`` currently in the store."""

    def _count(model: type) -> int:
        with db.transaction() as session:
            return session.scalar(select(func.count()).select_from(model))

    return lambda: (_count(Tenant), _count(User))
