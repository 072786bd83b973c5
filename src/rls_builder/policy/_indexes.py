"""Index suggestions derived from the columns a policy predicate filters on."""

from __future__ import annotations

from rls_builder.condition._tree import Comparison, Condition, Helper, Logical, Membership
from rls_builder.escaping._escape import (
    escape_identifier,
    quote_identifier,
    quote_name,
    split_qualified_name,
)
from rls_builder.validation._tables import extract_table_from_column

__all__ = ["derive_index_columns", "index_statements"]


def _plain_column(ref: str) -> str | None:
    if extract_table_from_column(ref) is not None:
        return None
    segments = split_qualified_name(ref)
    if len(segments) != 1 or segments[0] in ("", "*"):
        return None
    return segments[0]


def derive_index_columns(*conditions: Condition | None) -> list[str]:
    """Unqualified columns used in equality, ``IN`` or member-of checks.

    Columns qualified with another table belong to a different relation
    and are skipped. Results keep first-seen order across all *conditions*.

    Example::

        derive_index_columns(
            (column("a").eq(1) & column("b").eq(2) & column("a").eq(3)).to_condition()
        )
        # ['a', 'b']
    """
    found: dict[str, None] = {}

    def add(ref: str) -> None:
        name = _plain_column(ref)
        if name is not None:
            found.setdefault(name, None)

    def visit(node: Condition) -> None:
        if isinstance(node, Comparison):
            if node.operator == "eq":
                add(node.column)
        elif isinstance(node, Membership):
            if node.operator == "in":
                add(node.column)
        elif isinstance(node, Helper):
            if node.name == "is_member_of":
                add(node.arguments["local_key"])
        elif isinstance(node, Logical):
            for child in node.conditions:
                visit(child)

    for condition in conditions:
        if condition is not None:
            visit(condition)
    return list(found)


def index_statements(table: str, columns: list[str], *, prefix: str = "idx") -> list[str]:
    """One ``CREATE INDEX IF NOT EXISTS`` statement per column, in order."""
    table_part = "_".join(split_qualified_name(table))
    return [
        f"CREATE INDEX IF NOT EXISTS {escape_identifier(f'{prefix}_{table_part}_{col}')} "
        f"ON {quote_identifier(table)} ({quote_name(col)})"
        for col in columns
    ]
