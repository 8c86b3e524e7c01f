"""Conflict-safe insert helpers built on each dialect's native upsert."""

from __future__ import annotations

from typing import Any, Dict, Sequence, Type

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlmodel import Session, SQLModel

from ..core.errors import StorageError


def _dialect_name(session: Session) -> str:
    return session.get_bind().dialect.name


def insert_ignore(
    session: Session,
    model: Type[SQLModel],
    values: Dict[str, Any],
    *,
    conflict_columns: Sequence[str],
) -> None:
    """Insert a row unless one already exists for ``conflict_columns``."""

    dialect = _dialect_name(session)
    if dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
        stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
    elif dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
        stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(model).values(**values)
        # Assigning the key columns to themselves leaves the existing row untouched.
        stmt = stmt.on_duplicate_key_update(
            {column: getattr(model, column) for column in conflict_columns}
        )
    else:
        raise StorageError(f"No conflict-safe insert for dialect {dialect!r}")
    session.exec(stmt)  # type: ignore[call-overload]


def insert_or_update(
    session: Session,
    model: Type[SQLModel],
    values: Dict[str, Any],
    *,
    conflict_columns: Sequence[str],
    update: Dict[str, Any],
) -> None:
    """Insert a row, or apply ``update`` to the row that conflicts with it."""

    dialect = _dialect_name(session)
    if dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_columns), set_=update
        )
    elif dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_columns), set_=update
        )
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(model).values(**values)
        stmt = stmt.on_duplicate_key_update(update)
    else:
        raise StorageError(f"No conflict-safe upsert for dialect {dialect!r}")
    session.exec(stmt)  # type: ignore[call-overload]


__all__ = ["insert_ignore", "insert_or_update"]
