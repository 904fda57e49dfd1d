"""
Relational storage for the price catalog, quotations, project patterns and users.

Tables are declared with SQLAlchemy Core; the stores issue single-statement
queries against an engine that is created once at start-up and passed in.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Engine,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
)
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

# Naming convention for consistent constraint names
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _utcnow() -> datetime:
    # Columns are naive DateTime holding UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


pricing_dataset = Table(
    "pricing_dataset",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("module_name", String(255), nullable=False, index=True),
    Column("complexity_level", String(16), nullable=False),
    Column("base_price", Float, nullable=False, default=0),
    Column("student_price", Float, nullable=False, default=0),
    Column("description", Text),
)

quotations = Table(
    "quotations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("project_title", String(255), nullable=False),
    Column("modules_json", Text, nullable=False, default="[]"),
    Column("total_price", Float, nullable=False, default=0),
    Column("quotation_text", Text),
    Column("is_student", Boolean, nullable=False, default=False),
    Column("status", Text, nullable=False, default="draft"),
    Column("created_at", DateTime, nullable=False, default=_utcnow, server_default=func.now()),
)

project_patterns = Table(
    "project_patterns",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("project_title", String(255), nullable=False),
    Column("project_description", Text),
    Column("modules_json", Text, nullable=False, default="[]"),
    Column("total_price", Float, nullable=False, default=0),
    Column("keywords", Text, nullable=False, default=""),
    Column("is_student", Boolean, nullable=False, default=False),
    Column("created_at", DateTime, nullable=False, default=_utcnow, server_default=func.now()),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(64), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("created_at", DateTime, nullable=False, default=_utcnow, server_default=func.now()),
)


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create the process-wide engine.

    In-memory SQLite shares one connection so every session sees the same
    database; file-backed SQLite gets its parent directory created.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True, echo=echo)

    database = url.database
    if not database or database == ":memory:":
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args={"check_same_thread": False}, echo=echo)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)


__all__ = [
    "build_engine",
    "init_db",
    "metadata",
    "pricing_dataset",
    "project_patterns",
    "quotations",
    "users",
]
