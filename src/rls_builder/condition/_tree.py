"""Condition tree — immutable tagged-union nodes of the predicate algebra.

Each node is a frozen dataclass carrying a ``kind`` tag. Nodes render
themselves with ``to_sql()`` and expose their column references as plain
fields so the scope validator and index derivation never re-parse text.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from rls_builder._types import (
    ComparisonOperator,
    ContextKind,
    LogicalOperator,
    MembershipOperator,
    NullOperator,
    PatternOperator,
    SessionVariableType,
)
from rls_builder.escaping._escape import (
    escape_qualified_name,
    escape_value,
    quote_identifier,
)
from rls_builder.exceptions import StructuralError

__all__ = [
    "Comparison",
    "Condition",
    "ConditionChain",
    "Context",
    "FunctionCall",
    "Helper",
    "Logical",
    "Membership",
    "NullCheck",
    "Pattern",
    "as_condition",
    "combine",
    "is_condition",
]

_COMPARISON_SQL: dict[str, str] = {
    "eq": "=",
    "neq": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}

_SESSION_CASTS: dict[str, str] = {
    "text": "",
    "integer": "::INTEGER",
    "uuid": "::UUID",
    "boolean": "::BOOLEAN",
    "timestamp": "::TIMESTAMP",
}


@dataclass(frozen=True, slots=True)
class Comparison:
    """``column <op> value``; *value* may itself be a condition or context."""

    column: str
    operator: ComparisonOperator
    value: Any
    kind: ClassVar[str] = "comparison"

    def to_sql(self) -> str:
        return (
            f"{quote_identifier(self.column)} "
            f"{_COMPARISON_SQL[self.operator]} {escape_value(self.value)}"
        )


@dataclass(frozen=True, slots=True)
class Pattern:
    """``column LIKE pattern`` or ``column ILIKE pattern``."""

    column: str
    operator: PatternOperator
    pattern: str
    kind: ClassVar[str] = "pattern"

    def to_sql(self) -> str:
        keyword = "ILIKE" if self.operator == "ilike" else "LIKE"
        return f"{quote_identifier(self.column)} {keyword} {escape_value(self.pattern)}"


@dataclass(frozen=True, slots=True)
class Membership:
    """``column IN (...)`` or ``column @> value``.

    For ``in``, *value* is either a tuple of scalars or a subquery
    definition that renders its own parentheses.
    """

    column: str
    operator: MembershipOperator
    value: Any
    kind: ClassVar[str] = "membership"

    def to_sql(self) -> str:
        col = quote_identifier(self.column)
        if self.operator == "contains":
            return f"{col} @> {escape_value(self.value)}"
        if isinstance(self.value, tuple):
            if not self.value:
                return "FALSE"
            return f"{col} IN ({', '.join(escape_value(v) for v in self.value)})"
        return f"{col} IN {escape_value(self.value)}"

    @property
    def is_subquery(self) -> bool:
        return self.operator == "in" and not isinstance(self.value, tuple)


@dataclass(frozen=True, slots=True)
class NullCheck:
    column: str
    operator: NullOperator
    kind: ClassVar[str] = "null"

    def to_sql(self) -> str:
        suffix = "IS NOT NULL" if self.operator == "is_not_null" else "IS NULL"
        return f"{quote_identifier(self.column)} {suffix}"


@dataclass(frozen=True, slots=True)
class Logical:
    """An n-ary AND/OR group, always rendered inside parentheses.

    Direct children using the same operator are spliced in on
    construction, so ``Logical("AND", (Logical("AND", (a, b)), c))``
    holds ``(a, b, c)``.
    """

    operator: LogicalOperator
    conditions: tuple[Condition, ...]
    kind: ClassVar[str] = "logical"

    def __post_init__(self) -> None:
        if self.operator not in ("AND", "OR"):
            raise ValueError(f"operator must be 'AND' or 'OR', got {self.operator!r}")
        flattened: list[Condition] = []
        for child in self.conditions:
            if isinstance(child, Logical) and child.operator == self.operator:
                flattened.extend(child.conditions)
            else:
                flattened.append(child)
        if len(flattened) < 2:
            raise StructuralError(
                f"A logical {self.operator} group needs at least two conditions, "
                f"got {len(flattened)}"
            )
        # Frozen dataclass: normalise in place once, before anyone can see it.
        object.__setattr__(self, "conditions", tuple(flattened))

    def to_sql(self) -> str:
        return "(" + f" {self.operator} ".join(c.to_sql() for c in self.conditions) + ")"


def _render_has_role(params: dict[str, Any]) -> str:
    auth_uid = Context(context="auth_uid").to_sql()
    return (
        f"EXISTS (SELECT 1 FROM {quote_identifier(params['user_roles_table'])} "
        f"WHERE {quote_identifier('user_id')} = {auth_uid} "
        f"AND {quote_identifier('role')} = {escape_value(params['role'])})"
    )


def _render_is_member_of(params: dict[str, Any]) -> str:
    auth_uid = Context(context="auth_uid").to_sql()
    return (
        f"{quote_identifier(params['local_key'])} IN "
        f"(SELECT {quote_identifier(params['foreign_key'])} "
        f"FROM {quote_identifier(params['join_table'])} "
        f"WHERE {quote_identifier('user_id')} = {auth_uid})"
    )


def _render_always_true(params: dict[str, Any]) -> str:
    return "TRUE"


_HELPER_RENDERERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "has_role": _render_has_role,
    "is_member_of": _render_is_member_of,
    "always_true": _render_always_true,
}


@dataclass(frozen=True, slots=True)
class Helper:
    """A named boilerplate predicate with named parameters.

    *params* is stored as ordered ``(name, value)`` pairs so the node
    stays hashable; use :attr:`arguments` for dict access.
    """

    name: str
    params: tuple[tuple[str, Any], ...] = ()
    kind: ClassVar[str] = "helper"

    def __post_init__(self) -> None:
        if self.name not in _HELPER_RENDERERS:
            raise ValueError(
                f"helper must be one of {sorted(_HELPER_RENDERERS)!r}, got {self.name!r}"
            )

    @property
    def arguments(self) -> dict[str, Any]:
        return dict(self.params)

    def to_sql(self) -> str:
        return _HELPER_RENDERERS[self.name](self.arguments)


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """``name(arg, ...)``; string arguments are column/identifier references."""

    name: str
    arguments: tuple[Any, ...] = ()
    kind: ClassVar[str] = "function"

    def to_sql(self) -> str:
        rendered = ", ".join(
            quote_identifier(arg) if isinstance(arg, str) else escape_value(arg)
            for arg in self.arguments
        )
        return f"{escape_qualified_name(self.name)}({rendered})"


@dataclass(frozen=True, slots=True)
class Context:
    """Session-derived value: authenticated user, setting, or database role."""

    context: ContextKind
    key: str | None = None
    cast: SessionVariableType | None = None
    function: str = "auth.uid"
    kind: ClassVar[str] = "context"

    def to_sql(self) -> str:
        if self.context == "auth_uid":
            return f"{escape_qualified_name(self.function)}()"
        if self.context == "session":
            cast = _SESSION_CASTS[self.cast or "text"]
            return f"current_setting({escape_value(self.key or '')}, true){cast}"
        return "current_user"


Condition = Union[
    Comparison,
    Pattern,
    Membership,
    NullCheck,
    Logical,
    Helper,
    FunctionCall,
    Context,
]

_CONDITION_TYPES = (
    Comparison,
    Pattern,
    Membership,
    NullCheck,
    Logical,
    Helper,
    FunctionCall,
    Context,
)


class ConditionChain:
    """Chainable handle around a single condition tree.

    ``and_``/``or_`` (and the ``&``/``|`` operators) return a new chain;
    the wrapped tree is never mutated.

    Example::

        owner = column("user_id").is_owner()
        public = column("is_public").is_public()
        (owner | public).to_sql()
        # ("user_id" = auth.uid() OR "is_public" = TRUE)
    """

    __slots__ = ("_condition",)

    def __init__(self, condition: Condition) -> None:
        self._condition = condition

    def and_(self, other: Condition | ConditionChain) -> ConditionChain:
        return ConditionChain(combine("AND", self._condition, as_condition(other)))

    def or_(self, other: Condition | ConditionChain) -> ConditionChain:
        return ConditionChain(combine("OR", self._condition, as_condition(other)))

    def __and__(self, other: Condition | ConditionChain) -> ConditionChain:
        return self.and_(other)

    def __or__(self, other: Condition | ConditionChain) -> ConditionChain:
        return self.or_(other)

    def to_condition(self) -> Condition:
        return self._condition

    def to_sql(self) -> str:
        return self._condition.to_sql()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConditionChain):
            return NotImplemented
        return self._condition == other._condition

    def __hash__(self) -> int:
        return hash(self._condition)

    def __str__(self) -> str:
        return self.to_sql()

    def __repr__(self) -> str:
        return f"ConditionChain({self._condition!r})"


def is_condition(value: Any) -> bool:
    """Whether *value* is a condition node or a chain wrapping one."""
    return isinstance(value, (ConditionChain, *_CONDITION_TYPES))


def as_condition(value: Condition | ConditionChain) -> Condition:
    """Unwrap a chain, or pass a condition node through.

    Raises:
        TypeError: If *value* is neither.
    """
    if isinstance(value, ConditionChain):
        return value.to_condition()
    if isinstance(value, _CONDITION_TYPES):
        return value
    raise TypeError(f"Expected a condition or ConditionChain, got {type(value).__name__}")


def combine(operator: LogicalOperator, left: Condition, right: Condition) -> Logical:
    """Join two trees, splicing same-operator groups instead of nesting them."""
    return Logical(operator, (left, right))
