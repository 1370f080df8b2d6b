#!/usr/bin/env python3
"""
Validate XML Against an XSD

Runs the secure (default) or OWASP-style validation path on a schema and
document pair and prints the result.

Usage:
    python validate_xml.py [xsd_file] [xml_file] [--variant secure|owasp]

Examples:
    # Validate the bundled GoodSchema.xsd / GoodXml.xml pair
    python validate_xml.py

    # Validate a specific pair
    python validate_xml.py schema.xsd document.xml

    # Force every element into a namespace before validation
    python validate_xml.py schema.xsd document.xml --namespace urn:example:person

    # Structured verdict as JSON
    python validate_xml.py schema.xsd document.xml --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from xxe_core.config import ValidatorConfig, get_default_config, load_config
from xxe_core.errors import ValidationPipelineError
from xxe_core.parsing import ParserConfiguration, build_secure_parser_factory
from xxe_core.person import load_person
from xxe_core.validation import ValidationVerdict, validate, validate_owasp

logger = logging.getLogger("validate_xml")


def run(xsd_path: Path, xml_path: Path, variant: str,
        config: ValidatorConfig) -> ValidationVerdict:
    """Run one validation variant."""
    limits = config.security.to_limits()
    if variant == "owasp":
        return validate_owasp(xsd_path, xml_path, limits=limits)
    return validate(
        xsd_path,
        xml_path,
        required_namespace=config.namespace.required_namespace,
        limits=limits,
    )


def print_person(xml_path: Path, parser_config: ParserConfiguration) -> None:
    """Print the person record a secured reader extracts from the document."""
    try:
        print(load_person(xml_path, parser_config))
    except ValidationPipelineError as e:
        print(f"[-] Could not load person ({e.kind.value}): {e.message}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate an XML document against an XSD without resolving external entities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Bundled good pair:
    python validate_xml.py

  Specific pair, OWASP-style variant:
    python validate_xml.py schema.xsd document.xml --variant owasp
        """
    )

    parser.add_argument(
        "xsd_file",
        nargs="?",
        type=Path,
        default=None,
        help="Path to the XSD schema (default: bundled GoodSchema.xsd)"
    )

    parser.add_argument(
        "xml_file",
        nargs="?",
        type=Path,
        default=None,
        help="Path to the XML document (default: bundled GoodXml.xml)"
    )

    parser.add_argument(
        "--variant",
        choices=["secure", "owasp"],
        default="secure",
        help="Validation path to run (default: secure)"
    )

    parser.add_argument(
        "-n", "--namespace",
        default=None,
        help="Required namespace forced onto every element (default: from config, normally empty)"
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="JSON or YAML validator configuration file"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the structured verdict as JSON"
    )

    parser.add_argument(
        "--show-person",
        action="store_true",
        help="Also print the person record read from the document"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else get_default_config()
    except (OSError, ValueError) as e:
        print(f"✗ Error loading config: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.namespace is not None:
        config.namespace.required_namespace = args.namespace

    xsd_path = args.xsd_file or Path(config.resources.default_xsd)
    xml_path = args.xml_file or Path(config.resources.default_xml)
    logger.debug(f"Validating {xml_path} against {xsd_path} ({args.variant})")

    verdict = run(xsd_path, xml_path, args.variant, config)

    if args.json:
        print(json.dumps(verdict.to_dict(), indent=2))
    else:
        print(verdict.message)
        if not verdict.is_valid:
            print(verdict.summary())

    if args.show_person:
        print_person(xml_path, build_secure_parser_factory(config.security.to_limits()))

    return 0 if verdict.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
