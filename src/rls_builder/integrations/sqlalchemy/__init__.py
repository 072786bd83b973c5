"""SQLAlchemy integration — emit row level security DDL from table events."""

from rls_builder.integrations.sqlalchemy._ddl import (
    attach_policies,
    enable_row_level_security,
    force_row_level_security,
    policy_ddl,
)

__all__ = [
    "attach_policies",
    "enable_row_level_security",
    "force_row_level_security",
    "policy_ddl",
]
