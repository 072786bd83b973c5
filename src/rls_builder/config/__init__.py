"""Configuration — layered output and logging defaults."""

from rls_builder.config._config import RLSConfig, configure, get_global_config

__all__ = ["RLSConfig", "configure", "get_global_config"]
