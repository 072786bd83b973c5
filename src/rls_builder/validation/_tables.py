"""Table-reference analysis over condition trees.

Qualifier extraction from a bare column string is best-effort: a quoted
identifier that happens to contain a dot cannot always be told apart from
a qualified reference. The heuristic lives in
:func:`extract_table_from_column` alone so a stricter typed reference can
replace it later.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rls_builder.condition._tree import (
    Comparison,
    Condition,
    ConditionChain,
    FunctionCall,
    Helper,
    Logical,
    Membership,
    NullCheck,
    Pattern,
    as_condition,
    is_condition,
)

__all__ = [
    "detect_missing_joins",
    "extract_table_from_column",
    "extract_table_references",
    "get_available_tables",
]


def extract_table_from_column(ref: str) -> str | None:
    """Return the table qualifier of a column reference, if any.

    The qualifier is everything before the first dot that is not inside
    double quotes. A leading quoted segment is returned unquoted.

    Example::

        extract_table_from_column("user_id")              # None
        extract_table_from_column("m.user_id")            # "m"
        extract_table_from_column('"table name".col')     # "table name"
    """
    in_quotes = False
    for i, ch in enumerate(ref):
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "." and not in_quotes:
            if i == 0:
                return None
            prefix = ref[:i]
            if len(prefix) >= 2 and prefix[0] == '"' and prefix[-1] == '"':
                return prefix[1:-1].replace('""', '"')
            return prefix
    return None


def extract_table_references(condition: Condition | ConditionChain) -> list[str]:
    """Collect table qualifiers referenced anywhere in *condition*.

    Walks depth-first through logical children, comparison values that are
    themselves conditions, and string parameters of helper and function
    nodes. Subquery membership values are not entered; they carry their own
    scope. The result is de-duplicated in first-seen order.
    """
    found: dict[str, None] = {}

    def add(ref: str) -> None:
        table = extract_table_from_column(ref)
        if table is not None:
            found.setdefault(table, None)

    def visit(node: Condition) -> None:
        if isinstance(node, (Comparison, Pattern, NullCheck, Membership)):
            add(node.column)
            if isinstance(node, Comparison) and is_condition(node.value):
                visit(as_condition(node.value))
        elif isinstance(node, Logical):
            for child in node.conditions:
                visit(child)
        elif isinstance(node, Helper):
            for _, value in node.params:
                if isinstance(value, str):
                    add(value)
        elif isinstance(node, FunctionCall):
            for arg in node.arguments:
                if isinstance(arg, str):
                    add(arg)
                elif is_condition(arg):
                    visit(as_condition(arg))

    visit(as_condition(condition))
    return list(found)


def get_available_tables(
    from_table: str,
    from_alias: str | None,
    joins: Iterable[Any] = (),
) -> set[str]:
    """Names a condition may qualify columns with in this scope.

    Each entry is the alias when one is given, otherwise the table name.
    *joins* holds objects with ``table`` and ``alias`` attributes.
    """
    tables = {from_alias or from_table}
    for join in joins:
        tables.add(join.alias or join.table)
    return tables


def detect_missing_joins(
    condition: Condition | ConditionChain | None,
    available: set[str],
) -> list[str]:
    """Referenced tables that are not in *available*, in first-seen order."""
    if condition is None:
        return []
    return [table for table in extract_table_references(condition) if table not in available]
