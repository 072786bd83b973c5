"""Prebuilt policies for the common row level security patterns.

Each template returns a :class:`PolicyBuilder`, so callers can still add a
role, a description or ``restrictive()`` before rendering.
"""

from __future__ import annotations

from typing import Any

from rls_builder._names import resolve_table_name
from rls_builder.condition._column import column, has_role
from rls_builder.policy._builder import PolicyBuilder, create_policy

__all__ = ["public_access", "role_access", "tenant_isolation", "user_owned"]


def user_owned(
    table: Any,
    operation: str = "ALL",
    *,
    user_id_column: str = "user_id",
    name: str | None = None,
) -> PolicyBuilder:
    """Rows are accessible only to the user whose id is in *user_id_column*.

    Example::

        user_owned("documents").to_sql()
        # CREATE POLICY "documents_user_owned_all" ON "documents" FOR ALL
        #   USING ("user_id" = auth.uid()) WITH CHECK ("user_id" = auth.uid())
    """
    table_name = resolve_table_name(table)
    return (
        create_policy(name or f"{table_name}_user_owned_{operation.lower()}")
        .on(table_name)
        .for_(operation)
        .allow(column(user_id_column).is_owner())
    )


def tenant_isolation(
    table: Any,
    *,
    tenant_column: str = "tenant_id",
    session_key: str = "app.current_tenant_id",
    name: str | None = None,
) -> PolicyBuilder:
    """Rows are confined to the tenant named by a session variable.

    Applies to ALL operations. Add ``.restrictive()`` to make the isolation
    hold even when other permissive policies grant access.
    """
    table_name = resolve_table_name(table)
    return (
        create_policy(name or f"{table_name}_tenant_isolation")
        .on(table_name)
        .for_("ALL")
        .allow(column(tenant_column).belongs_to_tenant(session_key))
    )


def public_access(
    table: Any,
    *,
    visibility_column: str = "is_public",
    name: str | None = None,
) -> PolicyBuilder:
    """Anyone may read rows whose *visibility_column* is true."""
    table_name = resolve_table_name(table)
    return (
        create_policy(name or f"{table_name}_public_access")
        .on(table_name)
        .for_("SELECT")
        .when(column(visibility_column).is_public())
    )


def role_access(
    table: Any,
    role: str,
    operation: str = "ALL",
    *,
    user_roles_table: str = "user_roles",
    name: str | None = None,
) -> PolicyBuilder:
    """Users holding *role* in *user_roles_table* get *operation* access."""
    table_name = resolve_table_name(table)
    return (
        create_policy(name or f"{table_name}_{role}_{operation.lower()}")
        .on(table_name)
        .for_(operation)
        .allow(has_role(role, user_roles_table))
    )
