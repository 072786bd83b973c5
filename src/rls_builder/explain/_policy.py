"""Explain a policy — structured view of what a policy checks and emits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rls_builder.policy._builder import PolicyBuilder, PolicyDefinition
from rls_builder.validation._tables import extract_table_references

__all__ = ["PolicyExplanation", "explain_policy"]


@dataclass(frozen=True, slots=True)
class PolicyExplanation:
    """Everything a reviewer needs to understand one policy.

    Attributes:
        name: Policy name.
        table: Target table.
        operation: The covered command.
        roles: Roles the policy applies to (empty means ``PUBLIC``).
        restrictive: Whether the policy is ``AS RESTRICTIVE``.
        description: The policy's description, if any.
        using_sql: Rendered USING predicate, or ``None``.
        with_check_sql: Rendered WITH CHECK predicate, or ``None``.
        referenced_tables: Table qualifiers used by either predicate.
        index_columns: Columns the index pass would cover.
        sql: The policy statement without index suggestions.
    """

    name: str
    table: str
    operation: str
    roles: tuple[str, ...]
    restrictive: bool
    description: str | None
    using_sql: str | None
    with_check_sql: str | None
    referenced_tables: tuple[str, ...]
    index_columns: tuple[str, ...]
    sql: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "table": self.table,
            "operation": self.operation,
            "roles": list(self.roles),
            "restrictive": self.restrictive,
            "description": self.description,
            "using_sql": self.using_sql,
            "with_check_sql": self.with_check_sql,
            "referenced_tables": list(self.referenced_tables),
            "index_columns": list(self.index_columns),
            "sql": self.sql,
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        kind = "RESTRICTIVE" if self.restrictive else "PERMISSIVE"
        lines = [f"Policy {self.name!r} on {self.table} ({kind} {self.operation})"]
        if self.description:
            lines.append(f"  {self.description}")
        lines.append(f"  Roles: {', '.join(self.roles) if self.roles else 'PUBLIC'}")
        if self.using_sql is not None:
            lines.append(f"  USING: {self.using_sql}")
        if self.with_check_sql is not None:
            lines.append(f"  WITH CHECK: {self.with_check_sql}")
        if self.referenced_tables:
            lines.append(f"  Referenced tables: {', '.join(self.referenced_tables)}")
        if self.index_columns:
            lines.append(f"  Suggested indexes: {', '.join(self.index_columns)}")
        return "\n".join(lines)


def explain_policy(policy: PolicyBuilder | PolicyDefinition) -> PolicyExplanation:
    """Describe *policy* without rendering it to a database.

    Example::

        explanation = explain_policy(user_owned("documents"))
        print(explanation)
        explanation.to_dict()["index_columns"]   # ['user_id']
    """
    definition = policy.to_policy() if isinstance(policy, PolicyBuilder) else policy
    tables: dict[str, None] = {}
    for condition in (definition.using, definition.with_check):
        if condition is not None:
            for table in extract_table_references(condition):
                tables.setdefault(table, None)
    return PolicyExplanation(
        name=definition.name,
        table=definition.table,
        operation=definition.operation,
        roles=definition.roles,
        restrictive=definition.restrictive,
        description=definition.description,
        using_sql=definition.using.to_sql() if definition.using is not None else None,
        with_check_sql=(
            definition.with_check.to_sql() if definition.with_check is not None else None
        ),
        referenced_tables=tuple(tables),
        index_columns=tuple(definition.index_columns()),
        sql=definition.statement(),
    )
