"""Policy groups — render related policies as one script."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from rls_builder.policy._builder import PolicyBuilder, PolicyDefinition

__all__ = ["PolicyGroup", "PolicyLike", "create_policy_group", "policy_group_to_sql"]

PolicyLike = Union[PolicyBuilder, PolicyDefinition]


@dataclass(frozen=True, slots=True)
class PolicyGroup:
    """An ordered, labelled collection of policies.

    Attributes:
        name: Label for the group.
        policies: Builders or definitions, rendered in order.
        description: Emitted as a leading SQL comment when present.
    """

    name: str
    policies: tuple[PolicyLike, ...]
    description: str | None = None


def create_policy_group(
    name: str,
    policies: Sequence[PolicyLike],
    description: str | None = None,
) -> PolicyGroup:
    return PolicyGroup(name=name, policies=tuple(policies), description=description)


def policy_group_to_sql(group: PolicyGroup, *, include_indexes: bool | None = None) -> str:
    """Render every member and join them into one script.

    Statements are separated by ``;`` and a blank line, and the script ends
    with ``;``. A description becomes ``-- `` comment lines at the top.

    Example::

        group = create_policy_group("documents", [owner_policy, public_policy])
        policy_group_to_sql(group, include_indexes=True)
    """
    body = ";\n\n".join(p.to_sql(include_indexes=include_indexes) for p in group.policies)
    if body:
        body += ";"
    if group.description:
        comment = "\n".join(f"-- {line}" for line in group.description.splitlines())
        return f"{comment}\n{body}"
    return body
