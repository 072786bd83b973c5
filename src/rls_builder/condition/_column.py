"""Column-bound fluent API and free-standing helper leaves."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from rls_builder._names import resolve_column_name
from rls_builder._types import SQLRenderable
from rls_builder.condition._context import current_auth_id, session_variable
from rls_builder.condition._tree import (
    Comparison,
    ConditionChain,
    FunctionCall,
    Helper,
    Membership,
    NullCheck,
    Pattern,
)
from rls_builder.escaping._escape import SQLExpression, quote_identifier

if TYPE_CHECKING:
    from rls_builder.subquery._builder import SubqueryBuilder, SubqueryDefinition

__all__ = ["ColumnBuilder", "always_true", "call", "column", "has_role"]


def _normalize_value(value: Any) -> Any:
    if isinstance(value, ConditionChain):
        return value.to_condition()
    if isinstance(value, ColumnBuilder):
        return SQLExpression(quote_identifier(value.name))
    if isinstance(value, list):
        return tuple(_normalize_value(v) for v in value)
    return value


class ColumnBuilder:
    """Builds single-node conditions for one column reference.

    The reference is stored as given (``"user_id"``, ``"m.user_id"``,
    ``'"my table".col'``); quoting happens when the condition renders.

    Example::

        column("status").eq("active").and_(column("user_id").is_owner())
    """

    __slots__ = ("_column",)

    def __init__(self, column_name: str) -> None:
        self._column = column_name

    @property
    def name(self) -> str:
        return self._column

    def _compare(self, operator: Any, value: Any) -> ConditionChain:
        return ConditionChain(Comparison(self._column, operator, _normalize_value(value)))

    def eq(self, value: Any) -> ConditionChain:
        return self._compare("eq", value)

    def neq(self, value: Any) -> ConditionChain:
        return self._compare("neq", value)

    def gt(self, value: Any) -> ConditionChain:
        return self._compare("gt", value)

    def gte(self, value: Any) -> ConditionChain:
        return self._compare("gte", value)

    def lt(self, value: Any) -> ConditionChain:
        return self._compare("lt", value)

    def lte(self, value: Any) -> ConditionChain:
        return self._compare("lte", value)

    def like(self, pattern: str) -> ConditionChain:
        """Case-sensitive ``LIKE`` match."""
        return ConditionChain(Pattern(self._column, "like", pattern))

    def ilike(self, pattern: str) -> ConditionChain:
        """Case-insensitive ``ILIKE`` match."""
        return ConditionChain(Pattern(self._column, "ilike", pattern))

    def in_(
        self, values: Sequence[Any] | SubqueryBuilder | SubqueryDefinition
    ) -> ConditionChain:
        """``IN`` membership against literal values or a subquery.

        Example::

            column("status").in_(["draft", "published"])
            column("org_id").in_(from_("memberships").select("org_id"))
        """
        if isinstance(values, str):
            raise TypeError("in_() expects a sequence of values, not a single string")
        from rls_builder.subquery._builder import SubqueryBuilder

        if isinstance(values, SubqueryBuilder):
            return ConditionChain(Membership(self._column, "in", values.to_subquery()))
        if isinstance(values, SQLRenderable):
            return ConditionChain(Membership(self._column, "in", values))
        return ConditionChain(Membership(self._column, "in", _normalize_value(list(values))))

    def contains(self, value: Any) -> ConditionChain:
        """``@>`` containment for array and JSONB columns."""
        return ConditionChain(Membership(self._column, "contains", _normalize_value(value)))

    def is_null(self) -> ConditionChain:
        return ConditionChain(NullCheck(self._column, "is_null"))

    def is_not_null(self) -> ConditionChain:
        return ConditionChain(NullCheck(self._column, "is_not_null"))

    # Shortcuts

    def is_owner(self) -> ConditionChain:
        """Column equals the authenticated user's id."""
        return self.eq(current_auth_id())

    def is_public(self) -> ConditionChain:
        """Column equals ``TRUE``."""
        return self.eq(True)  # noqa: FBT003

    def belongs_to_tenant(self, session_key: str = "app.current_tenant_id") -> ConditionChain:
        """Column equals the integer tenant id held in *session_key*."""
        return self.eq(session_variable(session_key, "integer"))

    def is_member_of(
        self, join_table: str, foreign_key: str, local_key: str = "id"
    ) -> ConditionChain:
        """*local_key* is among the ids the current user is a member of.

        Renders ``"<local_key>" IN (SELECT "<foreign_key>" FROM "<join_table>"
        WHERE "user_id" = auth.uid())``.
        """
        return ConditionChain(
            Helper(
                "is_member_of",
                (
                    ("join_table", join_table),
                    ("foreign_key", foreign_key),
                    ("local_key", local_key),
                ),
            )
        )

    def user_belongs_to(
        self, membership_table: str, membership_column: str | None = None
    ) -> ConditionChain:
        """Column value appears in *membership_table* rows owned by the current user."""
        from rls_builder.subquery._builder import from_

        return self.in_(
            from_(membership_table)
            .select(membership_column or self._column)
            .where(column("user_id").eq(current_auth_id()))
        )

    def released_before(self, reference: datetime | None = None) -> ConditionChain:
        """Column is at or before *reference* (defaults to now, UTC)."""
        return self.lte(reference if reference is not None else datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"ColumnBuilder({self._column!r})"


def column(column_name: Any) -> ColumnBuilder:
    """Start a condition on *column_name*.

    Accepts a string reference, a SQLAlchemy ``Column`` or a mapped attribute.

    Example::

        column("user_id").eq(current_auth_id()).to_sql()
        # "user_id" = auth.uid()
    """
    return ColumnBuilder(resolve_column_name(column_name))


def has_role(role: str, user_roles_table: str = "user_roles") -> ConditionChain:
    """The current user holds *role* according to *user_roles_table*.

    Example::

        create_policy("admin_access").on("admin_data").for_("SELECT").when(has_role("admin"))
    """
    return ConditionChain(
        Helper("has_role", (("role", role), ("user_roles_table", user_roles_table)))
    )


def always_true() -> ConditionChain:
    """A predicate that admits every row."""
    return ConditionChain(Helper("always_true"))


def call(function_name: str, args: Sequence[Any] = ()) -> ConditionChain:
    """Invoke an SQL function as a predicate.

    String arguments are column/identifier references; anything else is
    rendered as a nested condition or escaped value.

    Example::

        call("check_permission", ["user_id", current_auth_id()])
        # check_permission("user_id", auth.uid())
    """
    normalized = tuple(_normalize_value(arg) for arg in args)
    return ConditionChain(FunctionCall(function_name, normalized))
