"""Layered configuration for rls-builder."""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "RLSConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]

_VALID_INDEX_PREFIX = re.compile(r"[A-Za-z0-9_]+")


@dataclass(frozen=True, slots=True)
class RLSConfig:
    """Output and logging defaults (global -> call site).

    Configuration selects what is emitted and logged; it never changes how
    a given condition tree renders.

    Attributes:
        include_indexes: Default for ``to_sql(include_indexes=None)``.
        log_generated_sql: Log each rendered policy via the ``rls_builder``
            logger.
        index_name_prefix: Prefix for derived index names
            (``<prefix>_<table>_<column>``).

    Example::

        config = RLSConfig(include_indexes=True)
        merged = config.merge(index_name_prefix="rls_idx")
    """

    include_indexes: bool = False
    log_generated_sql: bool = False
    index_name_prefix: str = "idx"

    def __post_init__(self) -> None:
        if not _VALID_INDEX_PREFIX.fullmatch(self.index_name_prefix):
            raise ValueError(
                f"index_name_prefix must match [A-Za-z0-9_]+, got {self.index_name_prefix!r}"
            )

    def merge(
        self,
        *,
        include_indexes: bool | None = None,
        log_generated_sql: bool | None = None,
        index_name_prefix: str | None = None,
    ) -> RLSConfig:
        """Return a new config with non-None overrides applied.

        Example::

            base = RLSConfig()
            verbose = base.merge(log_generated_sql=True)
        """
        return RLSConfig(
            include_indexes=(
                include_indexes if include_indexes is not None else self.include_indexes
            ),
            log_generated_sql=(
                log_generated_sql if log_generated_sql is not None else self.log_generated_sql
            ),
            index_name_prefix=(
                index_name_prefix if index_name_prefix is not None else self.index_name_prefix
            ),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = RLSConfig()


def get_global_config() -> RLSConfig:
    """Return the current global configuration."""
    return _global_config


def configure(
    *,
    include_indexes: bool | None = None,
    log_generated_sql: bool | None = None,
    index_name_prefix: str | None = None,
) -> RLSConfig:
    """Update the global configuration by merging overrides.

    Only non-None values are applied. Returns the new global config.

    Example::

        configure(include_indexes=True)
        # Every to_sql() call now emits CREATE INDEX statements by default
    """
    global _global_config
    _global_config = _global_config.merge(
        include_indexes=include_indexes,
        log_generated_sql=log_generated_sql,
        index_name_prefix=index_name_prefix,
    )
    return _global_config


def _set_global_config(cfg: RLSConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = RLSConfig()
