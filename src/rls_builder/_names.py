"""Resolve SQLAlchemy tables, mapped classes and attributes to name strings."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Column, Table
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import ColumnProperty, Mapper

__all__ = ["resolve_column_name", "resolve_table_name"]


def _require_name(name: str, kind: str) -> str:
    if not name:
        raise ValueError(f"{kind} name must not be empty")
    return name


def _table_name(table: Any) -> str:
    if table.schema:
        return f"{table.schema}.{table.name}"
    return str(table.name)


def resolve_table_name(target: Any) -> str:
    """Return the table name for a string, ``Table`` or mapped class.

    Schema-qualified tables resolve to ``"schema.table"``.

    Raises:
        TypeError: If *target* cannot be resolved to a table.
        ValueError: If *target* is an empty string.

    Example::

        resolve_table_name(Post)              # "posts"
        resolve_table_name(Post.__table__)    # "posts"
    """
    if isinstance(target, str):
        return _require_name(target, "table")
    if isinstance(target, Table):
        return _table_name(target)
    mapper = sa_inspect(target, raiseerr=False)
    if isinstance(mapper, Mapper):
        return _table_name(mapper.local_table)
    raise TypeError(f"Cannot resolve a table name from {type(target).__name__}")


def resolve_column_name(target: Any) -> str:
    """Return the column name for a string, ``Column`` or mapped attribute.

    Raises:
        TypeError: If *target* cannot be resolved to a column.
        ValueError: If *target* is an empty string.

    Example::

        resolve_column_name(Post.author_id)   # "author_id"
    """
    if isinstance(target, str):
        return _require_name(target, "column")
    if isinstance(target, Column):
        return str(target.name)
    prop = getattr(target, "property", None)
    if isinstance(prop, ColumnProperty):
        return str(prop.columns[0].name)
    raise TypeError(f"Cannot resolve a column name from {type(target).__name__}")
