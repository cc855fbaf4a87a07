"""
Type definitions for XML output module.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..types.common import SitemapError


SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Child elements of <url>, in the order they must appear
URL_CHILD_ORDER = ("loc", "lastmod", "changefreq", "priority")

# Protocol limits; exceeding them is reported as a warning
MAX_LOC_LENGTH = 2048
MAX_URLS_PER_SITEMAP = 50000


class XMLError(SitemapError):
    """Base exception for XML output errors."""
    pass


class ValidationError(XMLError):
    """Generated sitemap failed validation."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        super().__init__(message)


class OutputFormat(Enum):
    """XML output formatting options."""
    COMPACT = "compact"           # No whitespace between elements
    PRETTY = "pretty"             # Human-readable with indentation


@dataclass
class XMLConfig:
    """Configuration for sitemap XML output."""

    output_format: OutputFormat = OutputFormat.COMPACT
    validate_output: bool = True
    schema_location: Optional[Path] = None

    @classmethod
    def for_production(cls) -> "XMLConfig":
        """Create configuration optimized for production output."""
        return cls(output_format=OutputFormat.COMPACT, validate_output=True)

    @classmethod
    def for_debugging(cls) -> "XMLConfig":
        """Create configuration optimized for reading the output."""
        return cls(output_format=OutputFormat.PRETTY, validate_output=True)


@dataclass
class FormattingOptions:
    """Options for pretty XML formatting."""

    indent_size: int = 2
    indent_char: str = " "
    newline: str = "\n"

    @property
    def indent(self) -> str:
        return self.indent_char * self.indent_size


@dataclass
class ValidationResult:
    """Outcome of validating one sitemap document."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    validation_time: float = 0.0

    # Every error and warning, in document order, with its source position
    issues: List[Dict[str, Any]] = field(default_factory=list)

    def add_error(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """Record an error; the document is no longer valid."""
        self.errors.append(message)
        self._record("error", message, line, column)
        self.is_valid = False

    def add_warning(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """Record a protocol limit the document exceeds without being invalid."""
        self.warnings.append(message)
        self._record("warning", message, line, column)

    def _record(self, severity: str, message: str, line: Optional[int], column: Optional[int]):
        self.issues.append({"severity": severity, "message": message, "line": line, "column": column})

    def issues_of(self, severity: str) -> List[Dict[str, Any]]:
        return [issue for issue in self.issues if issue["severity"] == severity]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def summary(self) -> str:
        if self.has_errors:
            return f"Validation failed: {len(self.errors)} errors, {len(self.warnings)} warnings"
        if self.has_warnings:
            return f"Validation passed ({len(self.warnings)} warnings)"
        return "Validation passed"
