"""Attach policies to SQLAlchemy tables as PostgreSQL-only DDL."""

from __future__ import annotations

from typing import Any

from sqlalchemy import DDL, Table, event
from sqlalchemy import inspect as sa_inspect

from rls_builder._names import resolve_table_name
from rls_builder.escaping._escape import quote_identifier
from rls_builder.policy._group import PolicyLike

__all__ = [
    "attach_policies",
    "enable_row_level_security",
    "force_row_level_security",
    "policy_ddl",
]


def _ddl(statement: str) -> DDL:
    # DDL applies %-formatting to its statement; literal percent signs
    # (LIKE patterns) must be doubled.
    return DDL(statement.replace("%", "%%"))


def _as_table(target: Any) -> Table:
    if isinstance(target, Table):
        return target
    mapper = sa_inspect(target, raiseerr=False)
    local_table = getattr(mapper, "local_table", None)
    if isinstance(local_table, Table):
        return local_table
    raise TypeError(f"Expected a Table or mapped class, got {type(target).__name__}")


def enable_row_level_security(target: Any) -> DDL:
    """``ALTER TABLE ... ENABLE ROW LEVEL SECURITY``.

    Example::

        enable_row_level_security(Post).statement
        # ALTER TABLE "posts" ENABLE ROW LEVEL SECURITY
    """
    table = quote_identifier(resolve_table_name(target))
    return _ddl(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")


def force_row_level_security(target: Any) -> DDL:
    """``ALTER TABLE ... FORCE ROW LEVEL SECURITY``; policies then bind the owner too."""
    table = quote_identifier(resolve_table_name(target))
    return _ddl(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")


def policy_ddl(policy: PolicyLike, *, include_indexes: bool | None = None) -> list[DDL]:
    """One ``DDL`` element per statement: index suggestions, then the policy.

    Statements stay separate so drivers that reject multi-statement strings
    can execute them.
    """
    return [_ddl(stmt) for stmt in policy.statements(include_indexes=include_indexes)]


def attach_policies(
    target: Any,
    *policies: PolicyLike,
    enable: bool = True,
    force: bool = False,
    include_indexes: bool | None = None,
) -> list[DDL]:
    """Emit RLS DDL after *target* is created on PostgreSQL.

    Each statement is registered on the table's ``after_create`` event and
    only executes for the ``postgresql`` dialect, so ``create_all`` against
    other backends is unaffected. Policies render immediately, so
    construction errors surface here rather than at ``create_all``.

    Args:
        target: A ``Table`` or mapped class.
        *policies: Builders or definitions to attach, in order.
        enable: Also emit ``ENABLE ROW LEVEL SECURITY`` first.
        force: Also emit ``FORCE ROW LEVEL SECURITY`` (applies to table owners).
        include_indexes: Forwarded to each policy's ``statements``.

    Returns:
        The DDL elements registered, in execution order.

    Example::

        attach_policies(Post, user_owned(Post), public_access(Post))
        Base.metadata.create_all(pg_engine)
    """
    table = _as_table(target)
    elements: list[DDL] = []
    if enable:
        elements.append(enable_row_level_security(table))
    if force:
        elements.append(force_row_level_security(table))
    for policy in policies:
        elements.extend(policy_ddl(policy, include_indexes=include_indexes))

    attached: list[DDL] = []
    for element in elements:
        guarded = element.execute_if(dialect="postgresql")
        event.listen(table, "after_create", guarded)
        attached.append(guarded)
    return attached
