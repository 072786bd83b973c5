"""Policy builder — accumulates a named policy and renders ``CREATE POLICY``."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, get_args

from rls_builder._names import resolve_table_name
from rls_builder._types import Operation
from rls_builder.condition._tree import Condition, ConditionChain, as_condition
from rls_builder.config._config import get_global_config
from rls_builder.escaping._escape import escape_qualified_name, quote_identifier, quote_name
from rls_builder.exceptions import StructuralError
from rls_builder.policy._indexes import derive_index_columns, index_statements

__all__ = ["PolicyBuilder", "PolicyDefinition", "create_policy"]

_VALID_OPERATIONS: set[str] = set(get_args(Operation))


@dataclass(frozen=True, slots=True)
class PolicyDefinition:
    """A complete, renderable row level security policy.

    Construction validates the operation and requires at least one
    predicate, so an instance can always render. ``when`` and
    ``with_check`` are taken as given; ``PolicyBuilder.allow`` is the
    place that picks the clauses an operation uses.

    Attributes:
        name: Policy name.
        table: Target table (optionally schema-qualified).
        operation: ``SELECT``, ``INSERT``, ``UPDATE``, ``DELETE`` or ``ALL``.
        roles: Roles the policy applies to; empty means PostgreSQL's default
            (``PUBLIC``).
        using: The USING predicate.
        with_check: The WITH CHECK predicate.
        restrictive: Combine with other policies by AND instead of OR.
        description: Free text kept as metadata.

    Raises:
        StructuralError: If neither predicate is set.
    """

    name: str
    table: str
    operation: Operation
    roles: tuple[str, ...] = ()
    using: Condition | None = None
    with_check: Condition | None = None
    restrictive: bool = False
    description: str | None = None

    def __post_init__(self) -> None:
        if self.operation not in _VALID_OPERATIONS:
            raise ValueError(
                f"operation must be one of {sorted(_VALID_OPERATIONS)!r}, "
                f"got {self.operation!r}"
            )
        if self.using is None and self.with_check is None:
            raise StructuralError(
                f"Policy {self.name!r} has neither a USING nor a WITH CHECK condition; "
                f"call .when(), .with_check() or .allow() before rendering"
            )

    def index_columns(self) -> list[str]:
        """Columns worth indexing for this policy, in first-seen order."""
        return derive_index_columns(self.using, self.with_check)

    def statement(self) -> str:
        """The bare ``CREATE POLICY`` statement, without index suggestions."""
        parts = [f"CREATE POLICY {quote_name(self.name)} ON {quote_identifier(self.table)}"]
        if self.restrictive:
            parts.append("AS RESTRICTIVE")
        parts.append(f"FOR {self.operation}")
        if self.roles:
            parts.append("TO " + ", ".join(escape_qualified_name(r) for r in self.roles))
        if self.using is not None:
            parts.append(f"USING ({self.using.to_sql()})")
        if self.with_check is not None:
            parts.append(f"WITH CHECK ({self.with_check.to_sql()})")
        return " ".join(parts)

    def statements(self, *, include_indexes: bool | None = None) -> list[str]:
        """Index statements (when enabled) followed by the policy statement.

        Args:
            include_indexes: Emit ``CREATE INDEX IF NOT EXISTS`` for each
                column the predicates filter on. ``None`` uses the global
                configuration.
        """
        config = get_global_config()
        with_indexes = include_indexes if include_indexes is not None else config.include_indexes
        result: list[str] = []
        if with_indexes:
            result = index_statements(
                self.table, self.index_columns(), prefix=config.index_name_prefix
            )
        result.append(self.statement())

        if config.log_generated_sql:
            from rls_builder._audit import log_policy_rendered

            log_policy_rendered(
                name=self.name,
                table=self.table,
                operation=self.operation,
                index_count=len(result) - 1,
                statement=result[-1],
            )
        return result

    def to_sql(self, *, include_indexes: bool | None = None) -> str:
        """Render the policy, optionally preceded by index statements.

        Index statements end in ``;`` and are separated from the policy by
        a blank line; the policy statement itself is not terminated.
        """
        *indexes, statement = self.statements(include_indexes=include_indexes)
        if not indexes:
            return statement
        return "".join(f"{stmt};\n" for stmt in indexes) + "\n" + statement


class PolicyBuilder:
    """Fluent builder for one policy.

    Call order is ``on`` -> ``for_`` -> optional ``to`` -> any of ``when``,
    ``with_check``, ``allow`` -> optional ``restrictive`` and
    ``description`` -> ``to_sql``. Rendering has no side effects and may be
    repeated.

    Example::

        create_policy("docs_owner").on("documents").for_("UPDATE").allow(
            column("user_id").is_owner()
        ).to_sql()
        # CREATE POLICY "docs_owner" ON "documents" FOR UPDATE
        #   USING ("user_id" = auth.uid()) WITH CHECK ("user_id" = auth.uid())
    """

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("policy name must not be empty")
        self._name = name
        self._table: str | None = None
        self._operation: Operation | None = None
        self._roles: tuple[str, ...] = ()
        self._using: Condition | None = None
        self._with_check: Condition | None = None
        self._restrictive = False
        self._description: str | None = None

    @property
    def name(self) -> str:
        return self._name

    def on(self, table: Any) -> PolicyBuilder:
        """Target *table* (string, ``Table`` or mapped class)."""
        self._table = resolve_table_name(table)
        return self

    def for_(self, operation: str) -> PolicyBuilder:
        """Set the command the policy covers (case-insensitive).

        Raises:
            ValueError: If *operation* is not a policy command.
        """
        normalized = operation.upper()
        if normalized not in _VALID_OPERATIONS:
            raise ValueError(
                f"operation must be one of {sorted(_VALID_OPERATIONS)!r}, got {operation!r}"
            )
        self._operation = normalized  # type: ignore[assignment]
        return self

    def to(self, role: str | Sequence[str]) -> PolicyBuilder:
        """Restrict the policy to one role or a list of roles."""
        self._roles = (role,) if isinstance(role, str) else tuple(role)
        return self

    def when(self, condition: Condition | ConditionChain) -> PolicyBuilder:
        """Set the USING predicate."""
        self._using = as_condition(condition)
        return self

    def with_check(self, condition: Condition | ConditionChain) -> PolicyBuilder:
        """Set the WITH CHECK predicate."""
        self._with_check = as_condition(condition)
        return self

    def allow(self, condition: Condition | ConditionChain) -> PolicyBuilder:
        """Place *condition* in whichever clauses the operation uses.

        INSERT -> WITH CHECK; SELECT and DELETE -> USING; UPDATE and ALL ->
        both.

        Raises:
            StructuralError: If the operation has not been set yet.
        """
        if self._operation is None:
            raise StructuralError(
                f"Policy {self._name!r}: call .for_(operation) before .allow()"
            )
        normalized = as_condition(condition)
        if self._operation in ("SELECT", "DELETE", "UPDATE", "ALL"):
            self._using = normalized
        if self._operation in ("INSERT", "UPDATE", "ALL"):
            self._with_check = normalized
        return self

    def restrictive(self) -> PolicyBuilder:
        """Make the policy ``AS RESTRICTIVE``."""
        self._restrictive = True
        return self

    def description(self, text: str) -> PolicyBuilder:
        self._description = text
        return self

    def to_policy(self) -> PolicyDefinition:
        """Snapshot the builder as an immutable definition.

        Raises:
            StructuralError: If the table or operation is missing, or no
                predicate is set.
        """
        if self._table is None:
            raise StructuralError(f"Policy {self._name!r}: call .on(table) before rendering")
        if self._operation is None:
            raise StructuralError(
                f"Policy {self._name!r}: call .for_(operation) before rendering"
            )
        return PolicyDefinition(
            name=self._name,
            table=self._table,
            operation=self._operation,
            roles=self._roles,
            using=self._using,
            with_check=self._with_check,
            restrictive=self._restrictive,
            description=self._description,
        )

    def statements(self, *, include_indexes: bool | None = None) -> list[str]:
        return self.to_policy().statements(include_indexes=include_indexes)

    def to_sql(self, *, include_indexes: bool | None = None) -> str:
        return self.to_policy().to_sql(include_indexes=include_indexes)

    def __repr__(self) -> str:
        return f"PolicyBuilder({self._name!r})"


def create_policy(name: str) -> PolicyBuilder:
    """Start building a policy called *name*."""
    return PolicyBuilder(name)
