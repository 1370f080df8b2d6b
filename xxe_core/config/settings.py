"""
Configuration Settings
======================

Configuration dataclasses for the validation pipeline, loadable from JSON or
YAML files.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict
import json
import logging

import yaml

from xxe_core.parsing.factory import ResourceLimits

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"


@dataclass
class SecurityConfig:
    """Resource limits applied while secure processing is enabled."""

    max_document_bytes: int = 10 * 1024 * 1024
    max_depth: int = 256
    max_elements: int = 1_000_000
    time_budget_seconds: float = 10.0

    def to_limits(self) -> ResourceLimits:
        return ResourceLimits(**asdict(self))


@dataclass
class NamespaceConfig:
    """
    Namespace normalization settings.

    ``required_namespace`` is forced onto every element before validation.
    The empty string moves every element into no namespace, which lets a
    namespace-qualified document validate against a schema without a
    targetNamespace.
    """

    required_namespace: str = ""


@dataclass
class ResourcesConfig:
    """Default schema/document pair used when no paths are given."""

    default_xsd: str = str(RESOURCES_DIR / "GoodSchema.xsd")
    default_xml: str = str(RESOURCES_DIR / "GoodXml.xml")


@dataclass
class ValidatorConfig:
    """
    Complete validator configuration.

    Example:
        config = ValidatorConfig()
        config.security.max_depth = 64
        config.namespace.required_namespace = "urn:example:person"
        save_config(config, Path("validator.yaml"))
    """

    security: SecurityConfig = field(default_factory=SecurityConfig)
    namespace: NamespaceConfig = field(default_factory=NamespaceConfig)
    resources: ResourcesConfig = field(default_factory=ResourcesConfig)

    log_level: str = "INFO"

    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'security': asdict(self.security),
            'namespace': asdict(self.namespace),
            'resources': asdict(self.resources),
            'log_level': self.log_level,
            'custom': self.custom,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ValidatorConfig':
        """Create from dictionary."""
        config = cls()

        if 'security' in data:
            config.security = SecurityConfig(**data['security'])
        if 'namespace' in data:
            config.namespace = NamespaceConfig(**data['namespace'])
        if 'resources' in data:
            config.resources = ResourcesConfig(**data['resources'])

        if 'log_level' in data:
            config.log_level = data['log_level']
        if 'custom' in data:
            config.custom = data['custom']

        return config


def load_config(config_path: Path) -> ValidatorConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        ValidatorConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f) or {}
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return ValidatorConfig.from_dict(data)


def save_config(config: ValidatorConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Raises:
        ValueError: If file format is not supported
    """
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        elif suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Saved configuration to {config_path}")


def get_default_config() -> ValidatorConfig:
    """Get default configuration."""
    return ValidatorConfig()
