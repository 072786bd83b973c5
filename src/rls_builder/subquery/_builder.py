"""Subquery builder — one ``SELECT ... FROM ... [JOIN] [WHERE]`` fragment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, get_args

from rls_builder._names import resolve_column_name, resolve_table_name
from rls_builder._types import JoinKind
from rls_builder.condition._tree import Condition, ConditionChain, as_condition
from rls_builder.escaping._escape import quote_identifier
from rls_builder.exceptions import ScopeError, StructuralError
from rls_builder.validation._tables import detect_missing_joins, get_available_tables

__all__ = ["JoinDefinition", "SubqueryBuilder", "SubqueryDefinition", "from_"]

_VALID_JOIN_KINDS: set[str] = set(get_args(JoinKind))


@dataclass(frozen=True, slots=True)
class JoinDefinition:
    """A single ``<KIND> JOIN table [alias] ON condition`` clause."""

    table: str
    on: Condition
    kind: JoinKind = "inner"
    alias: str | None = None

    def to_sql(self) -> str:
        alias = f" {quote_identifier(self.alias)}" if self.alias else ""
        return (
            f"{self.kind.upper()} JOIN {quote_identifier(self.table)}{alias} "
            f"ON {self.on.to_sql()}"
        )


@dataclass(frozen=True, slots=True)
class SubqueryDefinition:
    """An immutable, fully validated subquery.

    Attributes:
        from_table: The table in the FROM clause.
        alias: Optional alias for *from_table*.
        select: A single column or a tuple of columns (``"*"`` by default).
        join: At most one join.
        where: Optional filter condition.
    """

    from_table: str
    alias: str | None = None
    select: str | tuple[str, ...] = "*"
    join: JoinDefinition | None = None
    where: Condition | None = None

    def to_sql(self) -> str:
        """Render the fragment, always wrapped in parentheses."""
        columns = (self.select,) if isinstance(self.select, str) else self.select
        parts = [
            f"SELECT {', '.join(quote_identifier(c) for c in columns)} "
            f"FROM {quote_identifier(self.from_table)}"
        ]
        if self.alias:
            parts.append(quote_identifier(self.alias))
        if self.join is not None:
            parts.append(self.join.to_sql())
        if self.where is not None:
            parts.append(f"WHERE {self.where.to_sql()}")
        return "(" + " ".join(parts) + ")"


class SubqueryBuilder:
    """Accumulates a subquery, validating table scope at every clause.

    ``join()`` may be called once; a second call raises
    :class:`~rls_builder.exceptions.StructuralError`. ``where()`` and
    ``join()`` raise :class:`~rls_builder.exceptions.ScopeError` as soon
    as a condition references a table the scope does not declare.

    Example::

        from_("memberships", "m").select("m.org_id").where(
            column("m.user_id").eq(current_auth_id())
        )
    """

    def __init__(self, table: Any, alias: str | None = None) -> None:
        self._from = resolve_table_name(table)
        self._alias = alias
        self._select: str | tuple[str, ...] = "*"
        self._join: JoinDefinition | None = None
        self._where: Condition | None = None

    def _joins(self) -> tuple[JoinDefinition, ...]:
        return (self._join,) if self._join is not None else ()

    def select(self, columns: Any) -> SubqueryBuilder:
        """Set the selected column or columns."""
        if isinstance(columns, (list, tuple)):
            self._select = tuple(resolve_column_name(c) for c in columns)
        else:
            self._select = resolve_column_name(columns)
        return self

    def join(
        self,
        table: Any,
        on: Condition | ConditionChain,
        kind: JoinKind = "inner",
        alias: str | None = None,
    ) -> SubqueryBuilder:
        """Add the scope's single join.

        The ON condition is checked against the tables available before this
        join; the joined table (or its alias) may reference itself.

        Raises:
            StructuralError: If a join was already added.
            ScopeError: If *on* references any other undeclared table.
            ValueError: If *kind* is not a supported join kind.
        """
        if self._join is not None:
            raise StructuralError(
                f"Subquery on {self._from!r} already joins {self._join.table!r}; "
                f"only one join per subquery scope is supported"
            )
        if kind not in _VALID_JOIN_KINDS:
            raise ValueError(f"kind must be one of {sorted(_VALID_JOIN_KINDS)!r}, got {kind!r}")
        table_name = resolve_table_name(table)
        condition = as_condition(on)
        available = get_available_tables(self._from, self._alias, self._joins())
        introduced = alias or table_name
        missing = [t for t in detect_missing_joins(condition, available) if t != introduced]
        if missing:
            raise ScopeError(missing_tables=missing, clause="join")
        self._join = JoinDefinition(table=table_name, on=condition, kind=kind, alias=alias)
        return self

    def where(self, condition: Condition | ConditionChain) -> SubqueryBuilder:
        """Set the filter condition, replacing any earlier one.

        Raises:
            ScopeError: If *condition* references a table that is neither the
                FROM table (or alias) nor the joined table.
        """
        normalized = as_condition(condition)
        available = get_available_tables(self._from, self._alias, self._joins())
        missing = detect_missing_joins(normalized, available)
        if missing:
            raise ScopeError(missing_tables=missing, clause="where")
        self._where = normalized
        return self

    def to_subquery(self) -> SubqueryDefinition:
        return SubqueryDefinition(
            from_table=self._from,
            alias=self._alias,
            select=self._select,
            join=self._join,
            where=self._where,
        )

    def to_sql(self) -> str:
        return self.to_subquery().to_sql()

    def __repr__(self) -> str:
        return f"SubqueryBuilder({self._from!r}, alias={self._alias!r})"


def from_(table: Any, alias: str | None = None) -> SubqueryBuilder:
    """Start a subquery reading from *table* (string, ``Table`` or mapped class)."""
    return SubqueryBuilder(table, alias)
