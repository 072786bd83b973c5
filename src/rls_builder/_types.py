"""Shared protocols and type aliases for rls-builder."""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

__all__ = [
    "ComparisonOperator",
    "ContextKind",
    "JoinKind",
    "LogicalOperator",
    "MembershipOperator",
    "NullOperator",
    "Operation",
    "PatternOperator",
    "SQLRenderable",
    "SessionVariableType",
]

ComparisonOperator = Literal["eq", "neq", "gt", "gte", "lt", "lte"]

PatternOperator = Literal["like", "ilike"]

MembershipOperator = Literal["in", "contains"]

NullOperator = Literal["is_null", "is_not_null"]

LogicalOperator = Literal["AND", "OR"]

ContextKind = Literal["auth_uid", "session", "current_user"]

# Valid values for session_variable(type_=...).
SessionVariableType = Literal["text", "integer", "uuid", "boolean", "timestamp"]

# Valid values for SubqueryBuilder.join(kind=...).
JoinKind = Literal["inner", "left", "right", "full"]

# Valid values for PolicyBuilder.for_().
Operation = Literal["SELECT", "INSERT", "UPDATE", "DELETE", "ALL"]


@runtime_checkable
class SQLRenderable(Protocol):
    """Structural type for anything that renders itself to SQL text.

    Conditions, condition chains, subqueries and raw SQL expressions all
    satisfy this protocol, so ``escape_value`` can embed them verbatim.

    Example::

        class Now:
            def to_sql(self) -> str:
                return "now()"

        assert isinstance(Now(), SQLRenderable)
    """

    def to_sql(self) -> str: ...
