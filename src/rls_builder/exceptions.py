"""Exception hierarchy for rls-builder."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

__all__ = [
    "RLSBuilderError",
    "ScopeError",
    "StructuralError",
]


class RLSBuilderError(Exception):
    """Base exception for all rls-builder errors."""


class ScopeError(RLSBuilderError):
    """A condition references a table that is not available in its scope.

    Raised by ``SubqueryBuilder.where()`` and ``SubqueryBuilder.join()``
    at the call that introduces the offending clause.

    Attributes:
        missing_tables: The table names or aliases that are not declared,
            in the order they were first referenced.
        clause: ``"where"`` or ``"join"``.

    Example::

        try:
            from_("posts").where(column("m.user_id").eq(1))
        except ScopeError as exc:
            print(exc.missing_tables)  # ('m',)
    """

    def __init__(
        self,
        *,
        missing_tables: Sequence[str],
        clause: Literal["where", "join"],
        message: str | None = None,
    ) -> None:
        self.missing_tables = tuple(missing_tables)
        self.clause = clause
        if message is None:
            listed = ", ".join(self.missing_tables)
            if clause == "join":
                message = f"Join condition references unavailable table(s): {listed}"
            else:
                message = (
                    f"Missing join(s) for table(s): {listed}. "
                    f"Add a join using .join('{self.missing_tables[0]}', ...) "
                    f"before calling .where()"
                )
        super().__init__(message)


class StructuralError(RLSBuilderError):
    """A builder was used in a way that cannot produce a valid statement.

    Raised when a subquery scope already has a join and a second one is
    attempted, or when a policy is rendered without a USING or WITH CHECK
    predicate or before its table and operation are set.
    """
