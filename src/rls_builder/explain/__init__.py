"""Explain mode — structured insight into what a policy checks."""

from rls_builder.explain._policy import PolicyExplanation, explain_policy

__all__ = ["PolicyExplanation", "explain_policy"]
