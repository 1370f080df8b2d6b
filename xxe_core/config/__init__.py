"""
Configuration Management
========================

Configuration utilities for the validation pipeline.
"""

from xxe_core.config.settings import (
    ValidatorConfig,
    SecurityConfig,
    NamespaceConfig,
    ResourcesConfig,
    load_config,
    save_config,
    get_default_config,
)

__all__ = [
    "ValidatorConfig",
    "SecurityConfig",
    "NamespaceConfig",
    "ResourcesConfig",
    "load_config",
    "save_config",
    "get_default_config",
]
