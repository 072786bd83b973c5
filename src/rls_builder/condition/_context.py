"""Context leaves — the authenticated user, session settings and the database role."""

from __future__ import annotations

from typing import get_args

from rls_builder._types import SessionVariableType
from rls_builder.condition._tree import Context

__all__ = ["current_auth_id", "current_database_user", "session_variable"]

_VALID_SESSION_TYPES: set[str] = set(get_args(SessionVariableType))


def current_auth_id(function: str = "auth.uid") -> Context:
    """The authenticated user's id, rendered as ``auth.uid()``.

    Args:
        function: The identity function to call. Defaults to the Supabase
            convention ``auth.uid``.

    Example::

        column("user_id").eq(current_auth_id())   # "user_id" = auth.uid()
    """
    return Context(context="auth_uid", function=function)


def session_variable(key: str, type_: SessionVariableType = "text") -> Context:
    """Read a session configuration variable, cast to *type_*.

    Renders ``current_setting('<key>', true)`` followed by the cast, so an
    unset variable yields NULL rather than an error.

    Raises:
        ValueError: If *type_* is not a supported cast.

    Example::

        session_variable("app.current_tenant_id", "integer")
        # current_setting('app.current_tenant_id', true)::INTEGER
    """
    if type_ not in _VALID_SESSION_TYPES:
        raise ValueError(
            f"type_ must be one of {sorted(_VALID_SESSION_TYPES)!r}, got {type_!r}"
        )
    return Context(context="session", key=key, cast=type_)


def current_database_user() -> Context:
    """The current database role (``current_user``)."""
    return Context(context="current_user")
