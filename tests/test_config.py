"""
Tests for configuration loading.

Run with: pytest tests/test_config.py -v
"""

import json
import sys
from pathlib import Path

import pytest
import yaml

sys.path.insert(0, str(Path(__file__).parent.parent))

from xxe_core.config import (
    ValidatorConfig,
    get_default_config,
    load_config,
    save_config,
)
from xxe_core.parsing import ResourceLimits


class TestValidatorConfig:
    """Tests for ValidatorConfig."""

    def test_defaults(self):
        """Defaults point at the bundled pair and require no namespace."""
        config = get_default_config()
        assert config.namespace.required_namespace == ""
        assert Path(config.resources.default_xsd).name == "GoodSchema.xsd"
        assert Path(config.resources.default_xsd).exists()
        assert Path(config.resources.default_xml).exists()
        assert config.log_level == "INFO"

    def test_to_limits(self):
        """Security settings become ResourceLimits."""
        config = ValidatorConfig()
        config.security.max_depth = 12
        limits = config.security.to_limits()
        assert isinstance(limits, ResourceLimits)
        assert limits.max_depth == 12
        assert limits.max_document_bytes == config.security.max_document_bytes

    def test_from_partial_dict(self):
        """Sections missing from the data keep their defaults."""
        config = ValidatorConfig.from_dict({"security": {"max_elements": 50}})
        assert config.security.max_elements == 50
        assert config.security.max_depth == 256
        assert config.namespace.required_namespace == ""


class TestConfigFiles:
    """Tests for load_config / save_config."""

    def test_yaml_file(self, tmp_path):
        """YAML configs are saved and loaded."""
        config = ValidatorConfig()
        config.namespace.required_namespace = "urn:example:person"
        config.custom = {"team": "platform"}
        path = tmp_path / "nested" / "validator.yaml"

        save_config(config, path)
        assert yaml.safe_load(path.read_text())["namespace"]["required_namespace"] == "urn:example:person"

        loaded = load_config(path)
        assert loaded.to_dict() == config.to_dict()

    def test_json_file(self, tmp_path):
        """JSON configs are loaded."""
        path = tmp_path / "validator.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "security": {"max_depth": 4}}))
        config = load_config(path)
        assert config.log_level == "DEBUG"
        assert config.security.to_limits().max_depth == 4

    def test_empty_yaml_file(self, tmp_path):
        """An empty YAML file gives the defaults."""
        path = tmp_path / "validator.yml"
        path.write_text("")
        assert load_config(path).to_dict() == ValidatorConfig().to_dict()

    def test_missing_file(self, tmp_path):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        """Only JSON and YAML are supported."""
        path = tmp_path / "validator.toml"
        path.write_text("")
        with pytest.raises(ValueError):
            load_config(path)
        with pytest.raises(ValueError):
            save_config(ValidatorConfig(), path)
