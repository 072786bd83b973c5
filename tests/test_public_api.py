"""Tests for public API surface — verifies all __init__.py re-exports.

Every documented symbol must be importable from its package, and every
``__all__`` list must be complete and match the actual module attributes.
"""

from __future__ import annotations

import importlib
import inspect

import pytest

# ---------------------------------------------------------------------------
# Top-level: rls_builder
# ---------------------------------------------------------------------------


class TestTopLevelExports:
    """Verify rls_builder top-level exports."""

    EXPECTED = {
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
    }

    def test_callable_symbols_are_callable(self) -> None:
        from rls_builder import (
            column,
            configure,
            create_policy,
            create_policy_group,
            explain_policy,
            from_,
            policy_group_to_sql,
            sql,
        )

        for sym in [
            column,
            configure,
            create_policy,
            create_policy_group,
            explain_policy,
            from_,
            policy_group_to_sql,
            sql,
        ]:
            assert callable(sym), f"{sym!r} should be callable"

    def test_class_symbols_are_classes(self) -> None:
        from rls_builder import (
            ColumnBuilder,
            PolicyBuilder,
            PolicyDefinition,
            RLSBuilderError,
            RLSConfig,
            ScopeError,
            StructuralError,
            SubqueryBuilder,
        )

        for sym in [
            ColumnBuilder,
            PolicyBuilder,
            PolicyDefinition,
            RLSBuilderError,
            RLSConfig,
            ScopeError,
            StructuralError,
            SubqueryBuilder,
        ]:
            assert inspect.isclass(sym), f"{sym!r} should be a class"

    def test_version_is_string(self) -> None:
        import rls_builder

        assert isinstance(rls_builder.__version__, str)

    def test_all_is_complete(self) -> None:
        import rls_builder

        actual = set(rls_builder.__all__)
        assert actual == self.EXPECTED, (
            f"__all__ mismatch.\n"
            f"  Missing: {self.EXPECTED - actual}\n"
            f"  Extra:   {actual - self.EXPECTED}"
        )

    def test_all_matches_module_attrs(self) -> None:
        import rls_builder

        for name in rls_builder.__all__:
            assert hasattr(rls_builder, name), (
                f"rls_builder.__all__ lists {name!r} but it is not an attribute"
            )


# ---------------------------------------------------------------------------
# Sub-packages
# ---------------------------------------------------------------------------

SUBPACKAGE_EXPORTS = {
    "rls_builder.condition": {
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
    },
    "rls_builder.config": {"RLSConfig", "configure", "get_global_config"},
    "rls_builder.escaping": {
        "SQLExpression",
        "escape_identifier",
        "escape_qualified_name",
        "escape_value",
        "quote_identifier",
        "quote_name",
        "split_qualified_name",
        "sql",
    },
    "rls_builder.explain": {"PolicyExplanation", "explain_policy"},
    "rls_builder.policy": {
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
    },
    "rls_builder.subquery": {
        "JoinDefinition",
        "SubqueryBuilder",
        "SubqueryDefinition",
        "from_",
    },
    "rls_builder.validation": {
        "detect_missing_joins",
        "extract_table_from_column",
        "extract_table_references",
        "get_available_tables",
    },
    "rls_builder.integrations.sqlalchemy": {
        "attach_policies",
        "enable_row_level_security",
        "force_row_level_security",
        "policy_ddl",
    },
    "rls_builder.exceptions": {"RLSBuilderError", "ScopeError", "StructuralError"},
}


@pytest.mark.parametrize("module_name", sorted(SUBPACKAGE_EXPORTS))
class TestSubpackageExports:
    def test_all_is_complete(self, module_name: str) -> None:
        module = importlib.import_module(module_name)
        expected = SUBPACKAGE_EXPORTS[module_name]
        actual = set(module.__all__)
        assert actual == expected, (
            f"{module_name} __all__ mismatch.\n"
            f"  Missing: {expected - actual}\n"
            f"  Extra:   {actual - expected}"
        )

    def test_all_matches_module_attrs(self, module_name: str) -> None:
        module = importlib.import_module(module_name)
        for name in module.__all__:
            assert hasattr(module, name), (
                f"{module_name}.__all__ lists {name!r} but it is not an attribute"
            )
