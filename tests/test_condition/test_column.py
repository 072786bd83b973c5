"""Tests for condition/_column.py — the column builder and helper leaves."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from rls_builder.condition import (
    Comparison,
    ConditionChain,
    Logical,
    Membership,
    always_true,
    call,
    column,
    current_auth_id,
    has_role,
)
from rls_builder.escaping import sql
from rls_builder.subquery import SubqueryDefinition, from_
from tests.conftest import Document


class TestColumnOperations:
    """Per-column operations each produce one node in a chain."""

    def test_eq_current_auth_id(self):
        assert column("user_id").eq(current_auth_id()).to_sql() == '"user_id" = auth.uid()'

    def test_comparisons(self):
        assert column("age").gte(18).to_sql() == '"age" >= 18'
        assert column("age").lt(65).to_sql() == '"age" < 65'
        assert column("status").neq("banned").to_sql() == "\"status\" != 'banned'"

    def test_qualified_column(self):
        assert column("m.user_id").eq(1).to_sql() == '"m"."user_id" = 1'

    def test_like_and_ilike(self):
        assert column("email").like("%@acme.com").to_sql() == "\"email\" LIKE '%@acme.com'"
        assert column("email").ilike("%@ACME.com").to_sql() == "\"email\" ILIKE '%@ACME.com'"

    def test_in_literal_list(self):
        chain = column("status").in_(["draft", "live"])
        assert chain.to_sql() == "\"status\" IN ('draft', 'live')"
        node = chain.to_condition()
        assert isinstance(node, Membership)
        assert node.value == ("draft", "live")

    def test_in_subquery_builder(self):
        sub = from_("memberships").select("org_id")
        chain = column("org_id").in_(sub)
        assert chain.to_sql() == '"org_id" IN (SELECT "org_id" FROM "memberships")'
        node = chain.to_condition()
        assert isinstance(node, Membership)
        assert isinstance(node.value, SubqueryDefinition)
        assert node.is_subquery

    def test_in_subquery_definition(self):
        definition = from_("memberships").select("org_id").to_subquery()
        assert column("org_id").in_(definition).to_sql() == (
            '"org_id" IN (SELECT "org_id" FROM "memberships")'
        )

    def test_contains(self):
        assert column("tags").contains(["a", "b"]).to_sql() == "\"tags\" @> ARRAY['a', 'b']"

    def test_null_checks(self):
        assert column("deleted_at").is_null().to_sql() == '"deleted_at" IS NULL'
        assert column("deleted_at").is_not_null().to_sql() == '"deleted_at" IS NOT NULL'

    def test_chain_value_is_unwrapped(self):
        chain = column("a").eq(column("b").eq(1))
        node = chain.to_condition()
        assert isinstance(node, Comparison)
        assert isinstance(node.value, Comparison)

    def test_sqlalchemy_attribute(self):
        assert column(Document.user_id).is_owner().to_sql() == '"user_id" = auth.uid()'

    def test_sqlalchemy_attribute_uses_column_name(self):
        # Document.tenant_id maps to the "tenant" column.
        assert column(Document.tenant_id).eq(1).to_sql() == '"tenant" = 1'

    def test_sqlalchemy_column_object(self):
        assert column(Document.__table__.c.title).eq("x").to_sql() == "\"title\" = 'x'"

    def test_column_value_renders_as_reference(self):
        assert column("a").eq(column("b")).to_sql() == '"a" = "b"'
        assert column("d.owner_id").neq(column("m.user_id")).to_sql() == (
            '"d"."owner_id" != "m"."user_id"'
        )

    def test_in_rejects_bare_string(self):
        with pytest.raises(TypeError, match="not a single string"):
            column("status").in_("abc")

    def test_unresolvable_column_rejected(self):
        with pytest.raises(TypeError):
            column(42)

    def test_empty_column_name_rejected(self):
        with pytest.raises(ValueError, match="column name must not be empty"):
            column("")


class TestChaining:
    """and_/or_ composition flattens same-operator chains."""

    def test_three_way_and_is_one_node(self):
        a, b, c = column("a").eq(1), column("b").eq(2), column("c").eq(3)
        node = a.and_(b).and_(c).to_condition()
        assert isinstance(node, Logical)
        assert node.operator == "AND"
        assert len(node.conditions) == 3

    def test_right_side_group_spliced_in_order(self):
        a, b, c = column("a").eq(1), column("b").eq(2), column("c").eq(3)
        node = a.or_(b.or_(c)).to_condition()
        assert isinstance(node, Logical)
        assert [child.column for child in node.conditions] == ["a", "b", "c"]

    def test_mixed_operators_nest_with_parentheses(self):
        owner = column("user_id").is_owner()
        public = column("is_public").is_public()
        active = column("status").eq("active")
        sql_text = active.and_(owner.or_(public)).to_sql()
        assert sql_text == (
            "(\"status\" = 'active' AND (\"user_id\" = auth.uid() OR \"is_public\" = TRUE))"
        )

    def test_operator_overloads(self):
        a, b = column("a").eq(1), column("b").eq(2)
        assert (a & b).to_sql() == '("a" = 1 AND "b" = 2)'
        assert (a | b).to_sql() == '("a" = 1 OR "b" = 2)'

    def test_accepts_raw_condition_node(self):
        chain = column("a").eq(1).and_(Comparison("b", "eq", 2))
        assert chain.to_sql() == '("a" = 1 AND "b" = 2)'

    def test_str_renders(self):
        assert str(column("a").eq(1)) == '"a" = 1'

    def test_repr(self):
        assert repr(column("a")) == "ColumnBuilder('a')"


class TestShortcuts:
    """Domain shortcuts are compositions of the basic operations."""

    def test_is_owner(self):
        assert column("user_id").is_owner() == column("user_id").eq(current_auth_id())

    def test_is_public(self):
        assert column("is_public").is_public().to_sql() == '"is_public" = TRUE'

    def test_belongs_to_tenant_default_key(self):
        assert column("tenant_id").belongs_to_tenant().to_sql() == (
            "\"tenant_id\" = current_setting('app.current_tenant_id', true)::INTEGER"
        )

    def test_belongs_to_tenant_custom_key(self):
        assert "current_setting('app.org', true)" in column("org").belongs_to_tenant(
            "app.org"
        ).to_sql()

    def test_is_member_of(self):
        chain = column("org").is_member_of("memberships", "org_id", "org_id")
        assert chain.to_sql() == (
            '"org_id" IN (SELECT "org_id" FROM "memberships" WHERE "user_id" = auth.uid())'
        )

    def test_is_member_of_default_local_key(self):
        assert column("x").is_member_of("team_members", "team_id").to_sql().startswith('"id" IN')

    def test_user_belongs_to(self):
        chain = column("org_id").user_belongs_to("memberships")
        assert chain.to_sql() == (
            '"org_id" IN (SELECT "org_id" FROM "memberships" WHERE "user_id" = auth.uid())'
        )

    def test_user_belongs_to_custom_column(self):
        chain = column("team").user_belongs_to("team_members", "team_id")
        assert '(SELECT "team_id" FROM "team_members"' in chain.to_sql()

    def test_released_before_explicit_date(self):
        when = datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert column("released_at").released_before(when).to_sql() == (
            "\"released_at\" <= '2024-06-01T00:00:00+00:00'::TIMESTAMP"
        )

    def test_released_before_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        node = column("released_at").released_before().to_condition()
        assert isinstance(node, Comparison)
        assert node.operator == "lte"
        assert node.value >= before


class TestHelperLeaves:
    def test_has_role(self):
        assert has_role("admin").to_sql() == (
            'EXISTS (SELECT 1 FROM "user_roles" WHERE "user_id" = auth.uid() '
            "AND \"role\" = 'admin')"
        )

    def test_has_role_custom_table_and_escaping(self):
        sql_text = has_role("o'wner", "account_roles").to_sql()
        assert 'FROM "account_roles"' in sql_text
        assert "'o''wner'" in sql_text

    def test_always_true(self):
        assert always_true().to_sql() == "TRUE"

    def test_call_with_column_and_condition(self):
        chain = call("check_permission", ["user_id", current_auth_id()])
        assert chain.to_sql() == 'check_permission("user_id", auth.uid())'

    def test_call_with_chain_argument(self):
        chain = call("coalesce_flag", [column("a").eq(1), sql("FALSE")])
        assert chain.to_sql() == 'coalesce_flag("a" = 1, FALSE)'

    def test_call_schema_qualified_function(self):
        assert call("private.can_read", ["id"]).to_sql() == 'private.can_read("id")'

    def test_helpers_chain(self):
        combined = has_role("admin").or_(column("user_id").is_owner())
        assert isinstance(combined, ConditionChain)
        assert combined.to_sql().startswith("(EXISTS (")
