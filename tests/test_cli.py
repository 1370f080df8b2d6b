"""
Tests for the validate_xml command line tool.

Run with: pytest tests/test_cli.py -v
"""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from validate_xml import main
from payloads import BAD_XML_PATH, GOOD_XSD_PATH, INVALID_XML, NAMESPACED_XML


@pytest.fixture
def write_xml(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    return _write


class TestMain:
    """Tests for main()."""

    def test_bundled_pair(self, capsys):
        """With no arguments the bundled pair is validated."""
        assert main([]) == 0
        assert "Validation result: success!" in capsys.readouterr().out

    def test_invalid_document(self, capsys, write_xml):
        """A failing document exits 1 and prints a summary."""
        xml_path = write_xml("invalid.xml", INVALID_XML)
        assert main([str(GOOD_XSD_PATH), xml_path]) == 1
        out = capsys.readouterr().out
        assert "Validation result: failed." in out
        assert "schema_violation" in out

    def test_json_output(self, capsys):
        """--json prints the structured verdict."""
        assert main([str(GOOD_XSD_PATH), str(BAD_XML_PATH), "--json"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["valid"] is False
        assert data["kind"] == "security_policy"

    def test_owasp_variant(self, capsys):
        """--variant owasp runs the access-policy validator."""
        assert main(["--variant", "owasp"]) == 0
        assert "Validation result: success!" in capsys.readouterr().out

    def test_namespace_option(self, write_xml):
        """--namespace overrides the required namespace."""
        xml_path = write_xml("namespaced.xml", NAMESPACED_XML)
        assert main([str(GOOD_XSD_PATH), xml_path]) == 0
        assert main([str(GOOD_XSD_PATH), xml_path, "--namespace", "http://a"]) == 1

    def test_show_person(self, capsys):
        """--show-person prints the record read from the document."""
        assert main(["--show-person"]) == 0
        assert "[+] Person name=Jane Doe, age=42, valid=True" in capsys.readouterr().out

    def test_show_person_hostile(self, capsys):
        """A blocked document is reported instead of printed."""
        main([str(GOOD_XSD_PATH), str(BAD_XML_PATH), "--show-person"])
        assert "[-] Could not load person (security_policy)" in capsys.readouterr().out

    def test_config_file(self, tmp_path, write_xml):
        """Settings are read from a config file."""
        config_path = tmp_path / "validator.json"
        config_path.write_text(json.dumps({"namespace": {"required_namespace": "http://a"}}))
        xml_path = write_xml("namespaced.xml", NAMESPACED_XML)
        assert main([str(GOOD_XSD_PATH), xml_path, "--config", str(config_path)]) == 1

    def test_missing_config_file(self, tmp_path, capsys):
        """An unreadable config file exits 2."""
        assert main(["--config", str(tmp_path / "missing.yaml")]) == 2
        assert "Error loading config" in capsys.readouterr().err
