"""Scope validation — find table references in condition trees."""

from rls_builder.validation._tables import (
    detect_missing_joins,
    extract_table_from_column,
    extract_table_references,
    get_available_tables,
)

__all__ = [
    "detect_missing_joins",
    "extract_table_from_column",
    "extract_table_references",
    "get_available_tables",
]
