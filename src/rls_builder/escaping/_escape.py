"""Identifier quoting and literal formatting.

``escape_value`` is the only place where caller-supplied data becomes SQL
text. Every builder routes literals through it.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from rls_builder._types import SQLRenderable

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

_SAFE_IDENTIFIER = re.compile(r"[A-Za-z0-9_]+")


class SQLExpression:
    """Raw SQL text emitted verbatim.

    The author is responsible for the safety of the wrapped text.

    Example::

        column("created_at").gte(sql("now() - interval '7 days'"))
    """

    __slots__ = ("_expression",)

    def __init__(self, expression: str) -> None:
        self._expression = expression

    def to_sql(self) -> str:
        return self._expression

    def __str__(self) -> str:
        return self._expression

    def __repr__(self) -> str:
        return f"SQLExpression({self._expression!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SQLExpression):
            return NotImplemented
        return self._expression == other._expression

    def __hash__(self) -> int:
        return hash(self._expression)


def sql(expression: str) -> SQLExpression:
    """Wrap *expression* so it is emitted without escaping."""
    return SQLExpression(expression)


def escape_identifier(name: str) -> str:
    """Quote *name* only when it is not a plain ``[A-Za-z0-9_]+`` token.

    Embedded double quotes are doubled. Safe names come back unchanged,
    so the function is idempotent on them.
    An empty name comes back as ``""``; the builders reject empty names
    before they reach rendering.

    Example::

        escape_identifier("user_id")     # user_id
        escape_identifier("user name")   # "user name"
        escape_identifier('say "hi"')    # quoted, inner quotes doubled
    """
    if _SAFE_IDENTIFIER.fullmatch(name):
        return name
    return quote_name(name)


def quote_name(name: str) -> str:
    """Always double-quote a single identifier token."""
    return '"' + name.replace('"', '""') + '"'


def split_qualified_name(ref: str) -> list[str]:
    """Split a dotted reference into its segments, honouring quoted parts.

    A double-quoted segment may contain dots and doubled quotes; the
    returned segment holds its unquoted content.

    Example::

        split_qualified_name('m.user_id')          # ['m', 'user_id']
        split_qualified_name('"my table".col')     # ['my table', 'col']
    """
    segments: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(ref):
        ch = ref[i]
        if in_quotes:
            if ch == '"':
                if ref[i + 1 : i + 2] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ".":
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    segments.append("".join(current))
    return segments


def quote_identifier(ref: str) -> str:
    """Render a column or table reference with every segment quoted.

    ``*`` is left bare so ``t.*`` and ``*`` select lists stay valid.

    Example::

        quote_identifier("user_id")    # "user_id"
        quote_identifier("m.user_id")  # "m"."user_id"
    """
    return ".".join(
        segment if segment == "*" else quote_name(segment)
        for segment in split_qualified_name(ref)
    )


def escape_qualified_name(ref: str) -> str:
    """Render a function or role name, quoting only segments that need it."""
    return ".".join(escape_identifier(segment) for segment in split_qualified_name(ref))


def _escape_string(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _escape_float(value: float) -> str:
    if math.isnan(value):
        return "'NaN'::DOUBLE PRECISION"
    if math.isinf(value):
        return "'Infinity'::DOUBLE PRECISION" if value > 0 else "'-Infinity'::DOUBLE PRECISION"
    return repr(value)


def _escape_decimal(value: Decimal) -> str:
    if value.is_nan():
        return "'NaN'::NUMERIC"
    if value.is_infinite():
        return "'Infinity'::NUMERIC" if value > 0 else "'-Infinity'::NUMERIC"
    return str(value)


def escape_value(value: Any) -> str:
    """Format *value* as a SQL literal.

    - ``None`` -> ``NULL``
    - ``bool`` -> ``TRUE`` / ``FALSE``
    - ``int`` / ``float`` / ``Decimal`` -> decimal text
    - ``datetime`` -> ISO-8601 literal cast to ``TIMESTAMP``
    - ``date`` -> ISO literal cast to ``DATE``
    - lists and tuples -> ``ARRAY[...]`` with each item escaped
    - mappings -> JSON text cast to ``JSONB``
    - anything with ``to_sql()`` (conditions, subqueries, ``sql(...)``) -> its own text
    - everything else -> single-quoted string with quotes doubled

    Never raises for any input shape.

    Example::

        escape_value(["a'b", 1, None])   # ARRAY['a''b', 1, NULL]
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _escape_float(value)
    if isinstance(value, Decimal):
        return _escape_decimal(value)
    if isinstance(value, datetime):
        return f"{_escape_string(value.isoformat())}::TIMESTAMP"
    if isinstance(value, date):
        return f"{_escape_string(value.isoformat())}::DATE"
    if isinstance(value, str):
        return _escape_string(value)
    if isinstance(value, SQLRenderable):
        return value.to_sql()
    if isinstance(value, (list, tuple)):
        return "ARRAY[" + ", ".join(escape_value(item) for item in value) + "]"
    if isinstance(value, Mapping):
        try:
            payload = json.dumps(value, default=str)
        except (TypeError, ValueError):
            payload = str(value)
        return f"{_escape_string(payload)}::JSONB"
    return _escape_string(str(value))
