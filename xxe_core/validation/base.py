"""
Base Validation Classes
=======================

Verdict container and the abstract validator interface shared by the
secure and OWASP-style validators.
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import logging

from xxe_core.errors import (
    FailureKind,
    SchemaViolationError,
    ValidationPipelineError,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Validation result: success!"
FAILURE_MESSAGE = "Validation result: failed."


@dataclass
class ValidationVerdict:
    """
    Tagged validation result.

    Attributes:
        is_valid: Whether validation passed
        kind: FailureKind of the failure, None on success
        error: The pipeline error that caused the failure
        error_count: Total number of errors
        errors: List of error dictionaries with keys:
            - file: Source file name
            - line: Line number (optional)
            - column: Column number (optional)
            - type: Error type/category
            - message: Error description
            - severity: 'Error', 'Warning', or 'Info'
        metadata: Additional validation metadata
    """
    is_valid: bool = True
    kind: Optional[FailureKind] = None
    error: Optional[ValidationPipelineError] = None
    error_count: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, **metadata) -> 'ValidationVerdict':
        return cls(metadata=dict(metadata))

    @classmethod
    def failure(cls, error: ValidationPipelineError, file: str = "", **metadata) -> 'ValidationVerdict':
        """Build a failed verdict from a pipeline error."""
        verdict = cls(metadata=dict(metadata))
        verdict.record_failure(error, file)
        return verdict

    @property
    def is_security_failure(self) -> bool:
        return self.kind == FailureKind.SECURITY_POLICY

    @property
    def message(self) -> str:
        """One-line outcome, as returned by the HTTP endpoint."""
        return SUCCESS_MESSAGE if self.is_valid else FAILURE_MESSAGE

    def record_failure(self, error: ValidationPipelineError, file: str = "") -> None:
        """Mark the verdict failed with ``error`` and copy its error entries."""
        self.is_valid = False
        self.kind = error.kind
        self.error = error

        entries = error.errors if isinstance(error, SchemaViolationError) else []
        if entries:
            for entry in entries:
                self.add_error(
                    file=entry.get('file') or file,
                    message=entry.get('message', ""),
                    error_type=entry.get('type', "Validation Error"),
                    line=entry.get('line'),
                    column=entry.get('column'),
                )
        else:
            self.add_error(file=file, message=error.message, error_type=error.kind.value)

    def add_error(self,
                  file: str,
                  message: str,
                  error_type: str = "Validation Error",
                  line: Optional[int] = None,
                  column: Optional[int] = None,
                  severity: str = "Error") -> None:
        """
        Add an error to the verdict.

        Args:
            file: Source file name
            message: Error description
            error_type: Error type/category
            line: Line number (optional)
            column: Column number (optional)
            severity: 'Error', 'Warning', or 'Info'
        """
        self.errors.append({
            'file': file,
            'line': line,
            'column': column,
            'type': error_type,
            'message': message,
            'severity': severity,
        })

        if severity == "Error":
            self.error_count += 1
            self.is_valid = False

    def raise_for_failure(self) -> None:
        """Re-raise the underlying error of a failed verdict."""
        if self.error is not None:
            raise self.error

    def get_errors_by_type(self) -> Dict[str, int]:
        """Count error entries per type, for the summary."""
        return dict(Counter(error["type"] for error in self.errors))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the verdict."""
        return {
            'valid': self.is_valid,
            'kind': self.kind.value if self.kind else None,
            'message': self.message,
            'detail': self.error.message if self.error else None,
            'errors': list(self.errors),
        }

    def summary(self) -> str:
        """Generate a text summary of the verdict."""
        if self.is_valid:
            return "Validation PASSED - No errors found"

        lines = [
            f"Validation FAILED ({self.kind.value if self.kind else 'unknown'}) - {self.error_count} error(s)",
            "",
            "Errors by type:",
        ]
        for error_type, count in sorted(self.get_errors_by_type().items(), key=lambda x: -x[1]):
            lines.append(f"  {error_type}: {count}")

        lines.extend(["", "Errors:"])
        for error in self.errors:
            location = f"{error['file']}:{error['line']}" if error.get('line') else error['file']
            lines.append(f"  [{error['type']}] {location} {error['message']}".rstrip())

        return "\n".join(lines)


class BaseValidator(ABC):
    """
    Abstract base class for XSD validators.

    Subclasses compile their schema once and validate any number of
    documents against it.
    """

    @abstractmethod
    def validate_file(self, file_path: Path, **kwargs) -> ValidationVerdict:
        """
        Validate a single XML file.

        Args:
            file_path: Path to the XML file
            **kwargs: Additional validation options

        Returns:
            ValidationVerdict with validation outcome
        """
        pass

    def validate_string(self, xml_string: str, file_context: str = "string") -> ValidationVerdict:
        """Validate XML from a string (optional to implement)."""
        raise NotImplementedError("String validation not supported by this validator")

    def validate_many(self, file_paths: Iterable[Path]) -> Dict[str, ValidationVerdict]:
        """Validate several files, keyed by path."""
        return {str(path): self.validate_file(Path(path)) for path in file_paths}

    @property
    def schema_type(self) -> str:
        """Return the type of schema this validator uses."""
        return "XSD"

    @property
    def schema_path(self) -> Optional[Path]:
        """Return the path to the schema file (if applicable)."""
        return None
