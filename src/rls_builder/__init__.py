"""rls-builder — compile typed access predicates into PostgreSQL RLS DDL.

Builds ``CREATE POLICY`` (and optional ``CREATE INDEX``) text from an
immutable condition tree. Nothing is executed; output is text only.

Example::

    from rls_builder import column, create_policy, current_auth_id

    owner = (
        create_policy("documents_owner")
        .on("documents")
        .for_("UPDATE")
        .allow(column("user_id").eq(current_auth_id()))
    )
    owner.to_sql(include_indexes=True)
    # CREATE INDEX IF NOT EXISTS idx_documents_user_id ON "documents" ("user_id");
    #
    # CREATE POLICY "documents_owner" ON "documents" FOR UPDATE
    #   USING ("user_id" = auth.uid()) WITH CHECK ("user_id" = auth.uid())
"""

from importlib.metadata import PackageNotFoundError, version

from rls_builder.condition import (
    ColumnBuilder,
    ConditionChain,
    always_true,
    call,
    column,
    current_auth_id,
    current_database_user,
    has_role,
    session_variable,
)
from rls_builder.config import RLSConfig, configure
from rls_builder.escaping import SQLExpression, escape_identifier, escape_value, sql
from rls_builder.exceptions import RLSBuilderError, ScopeError, StructuralError
from rls_builder.explain import explain_policy
from rls_builder.policy import (
    PolicyBuilder,
    PolicyDefinition,
    PolicyGroup,
    create_policy,
    create_policy_group,
    policy_group_to_sql,
    public_access,
    role_access,
    tenant_isolation,
    user_owned,
)
from rls_builder.subquery import SubqueryBuilder, SubqueryDefinition, from_

try:
    __version__ = version("pg-rls-builder")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "ColumnBuilder",
    "ConditionChain",
    "PolicyBuilder",
    "PolicyDefinition",
    "PolicyGroup",
    "RLSBuilderError",
    "RLSConfig",
    "SQLExpression",
    "ScopeError",
    "StructuralError",
    "SubqueryBuilder",
    "SubqueryDefinition",
    "always_true",
    "call",
    "column",
    "configure",
    "create_policy",
    "create_policy_group",
    "current_auth_id",
    "current_database_user",
    "escape_identifier",
    "escape_value",
    "explain_policy",
    "from_",
    "has_role",
    "policy_group_to_sql",
    "public_access",
    "role_access",
    "session_variable",
    "sql",
    "tenant_isolation",
    "user_owned",
]
