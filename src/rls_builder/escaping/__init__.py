"""Escaping — identifier quoting and literal formatting for SQL text."""

from rls_builder.escaping._escape import (
    SQLExpression,
    escape_identifier,
    escape_qualified_name,
    escape_value,
    quote_identifier,
    quote_name,
    split_qualified_name,
    sql,
)

__all__ = [
    "SQLExpression",
    "escape_identifier",
    "escape_qualified_name",
    "escape_value",
    "quote_identifier",
    "quote_name",
    "split_qualified_name",
    "sql",
]
