"""Policy construction, templates, index suggestions and grouping."""

from rls_builder.policy._builder import PolicyBuilder, PolicyDefinition, create_policy
from rls_builder.policy._group import (
    PolicyGroup,
    PolicyLike,
    create_policy_group,
    policy_group_to_sql,
)
from rls_builder.policy._indexes import derive_index_columns, index_statements
from rls_builder.policy._templates import (
    public_access,
    role_access,
    tenant_isolation,
    user_owned,
)

__all__ = [
    "PolicyBuilder",
    "PolicyDefinition",
    "PolicyGroup",
    "PolicyLike",
    "create_policy",
    "create_policy_group",
    "derive_index_columns",
    "index_statements",
    "policy_group_to_sql",
    "public_access",
    "role_access",
    "tenant_isolation",
    "user_owned",
]
