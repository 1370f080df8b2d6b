"""
Known-bad reference versus the secure pipeline.

The same hostile inputs are fed to the deliberately vulnerable validator in
``tests/corpus`` and to the secure pipeline: the vulnerable one leaks or
expands, the secure one refuses.

Run with: pytest tests/test_vulnerable_reference.py -v
"""

import sys
from pathlib import Path

import pytest
from lxml import etree

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from corpus import vulnerable_validator
from xxe_core.errors import FailureKind, SecurityPolicyError
from xxe_core.person import load_person
from xxe_core.validation import validate
from payloads import GOOD_XML_PATH, GOOD_XSD_PATH, SECRET, SMALL_LAUGHS_XML, file_disclosure_xml


@pytest.fixture
def xxe_document(tmp_path):
    secret = tmp_path / "secret.txt"
    secret.write_text(SECRET)
    path = tmp_path / "xxe.xml"
    path.write_bytes(file_disclosure_xml(secret.as_uri()))
    return path


@pytest.fixture
def laughs_document(tmp_path):
    path = tmp_path / "laughs.xml"
    path.write_bytes(SMALL_LAUGHS_XML)
    return path


class TestBenignInput:
    """Both paths agree on a benign document."""

    def test_both_accept_good_pair(self):
        """The good pair passes the vulnerable and the secure path."""
        assert vulnerable_validator.validate_xml(str(GOOD_XSD_PATH), str(GOOD_XML_PATH))
        assert validate(GOOD_XSD_PATH, GOOD_XML_PATH, required_namespace="").is_valid

    def test_both_read_the_same_person(self):
        """The person record is identical on both paths."""
        unsafe = vulnerable_validator.load_person(str(GOOD_XML_PATH))
        safe = load_person(GOOD_XML_PATH)
        assert unsafe["name"] == safe.name
        assert int(unsafe["age"]) == safe.age


class TestFileDisclosure:
    """External entity reading a local file."""

    def test_vulnerable_path_leaks_file(self, xxe_document):
        """The vulnerable path validates the document and exposes the file."""
        assert vulnerable_validator.validate_xml(str(GOOD_XSD_PATH), str(xxe_document))
        assert vulnerable_validator.load_person(str(xxe_document))["name"] == SECRET

    def test_secure_path_refuses(self, xxe_document):
        """The secure path reports a security failure and never sees the file."""
        verdict = validate(GOOD_XSD_PATH, xxe_document, required_namespace="")
        assert verdict.kind == FailureKind.SECURITY_POLICY
        assert SECRET not in verdict.summary()
        with pytest.raises(SecurityPolicyError):
            load_person(xxe_document)


class TestEntityExpansion:
    """Nested internal entities."""

    def test_vulnerable_path_expands(self, laughs_document):
        """The vulnerable path expands the entities (or trips libxml2's own guard)."""
        try:
            person = vulnerable_validator.load_person(str(laughs_document))
        except etree.XMLSyntaxError:
            return
        assert person["name"] == "lol" * 1000

    def test_secure_path_refuses(self, laughs_document):
        """The secure path refuses the declarations before expanding anything."""
        verdict = validate(GOOD_XSD_PATH, laughs_document, required_namespace="")
        assert verdict.kind == FailureKind.SECURITY_POLICY
