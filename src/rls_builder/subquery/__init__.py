"""Subquery builder — scoped ``SELECT`` fragments for membership checks."""

from rls_builder.subquery._builder import (
    JoinDefinition,
    SubqueryBuilder,
    SubqueryDefinition,
    from_,
)

__all__ = ["JoinDefinition", "SubqueryBuilder", "SubqueryDefinition", "from_"]
