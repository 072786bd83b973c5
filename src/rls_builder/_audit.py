"""Audit logging for rendered policies."""

from __future__ import annotations

import logging

__all__ = ["log_policy_rendered"]

logger = logging.getLogger("rls_builder")


def log_policy_rendered(
    *,
    name: str,
    table: str,
    operation: str,
    index_count: int,
    statement: str,
) -> None:
    """Log a rendered policy.

    Logging levels:
    - INFO: Summary (policy, table, operation, index statement count)
    - DEBUG: The full statement text

    Example::

        log_policy_rendered(
            name="docs_owner",
            table="documents",
            operation="SELECT",
            index_count=1,
            statement=sql_text,
        )
    """
    logger.info(
        "Rendered policy %r on %s for %s — %d index statement(s)",
        name,
        table,
        operation,
        index_count,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Policy %r SQL:\n%s", name, statement)
