"""Condition tree, column builder, context leaves and helper predicates."""

from rls_builder.condition._column import ColumnBuilder, always_true, call, column, has_role
from rls_builder.condition._context import (
    current_auth_id,
    current_database_user,
    session_variable,
)
from rls_builder.condition._tree import (
    Comparison,
    Condition,
    ConditionChain,
    Context,
    FunctionCall,
    Helper,
    Logical,
    Membership,
    NullCheck,
    Pattern,
    as_condition,
    combine,
    is_condition,
)

__all__ = [
    "ColumnBuilder",
    "Comparison",
    "Condition",
    "ConditionChain",
    "Context",
    "FunctionCall",
    "Helper",
    "Logical",
    "Membership",
    "NullCheck",
    "Pattern",
    "always_true",
    "as_condition",
    "call",
    "column",
    "combine",
    "current_auth_id",
    "current_database_user",
    "has_role",
    "is_condition",
    "session_variable",
]
