"""Tests for policy/_group.py — grouped rendering."""

from __future__ import annotations

from rls_builder.condition import column
from rls_builder.policy import (
    PolicyGroup,
    create_policy,
    create_policy_group,
    policy_group_to_sql,
    public_access,
    user_owned,
)


class TestPolicyGroup:
    def test_aggregate_fields(self):
        group = create_policy_group("docs", [public_access("d")], "Document access")
        assert isinstance(group, PolicyGroup)
        assert group.name == "docs"
        assert len(group.policies) == 1
        assert group.description == "Document access"

    def test_joined_with_blank_lines(self):
        first = public_access("d")
        second = user_owned("d", "INSERT")
        sql_text = policy_group_to_sql(create_policy_group("docs", [first, second]))
        assert sql_text == f"{first.to_sql()};\n\n{second.to_sql()};"

    def test_description_comment(self):
        group = create_policy_group("docs", [public_access("d")], "Document access")
        assert policy_group_to_sql(group).startswith("-- Document access\nCREATE POLICY")

    def test_multiline_description_stays_commented(self):
        group = create_policy_group("docs", [public_access("d")], "line one\nDROP TABLE d;")
        sql_text = policy_group_to_sql(group)
        assert sql_text.startswith("-- line one\n-- DROP TABLE d;\nCREATE POLICY")

    def test_accepts_definitions(self):
        definition = public_access("d").to_policy()
        sql_text = policy_group_to_sql(create_policy_group("docs", [definition]))
        assert sql_text == definition.to_sql() + ";"

    def test_options_forwarded(self):
        policy = create_policy("p").on("t").for_("SELECT").when(column("a").eq(1))
        sql_text = policy_group_to_sql(create_policy_group("g", [policy]), include_indexes=True)
        assert sql_text.startswith('CREATE INDEX IF NOT EXISTS idx_t_a ON "t" ("a");\n\n')

    def test_empty_group(self):
        assert policy_group_to_sql(create_policy_group("g", [])) == ""
