"""
Sitemap XML output generation and validation.

This module provides deterministic sitemap output with:
- Fixed child element order (loc, lastmod, changefreq, priority)
- Escaping of all XML-reserved characters
- Priorities always written with a fractional digit
- Compact or pretty layout
- lxml-based structural and optional XSD validation
"""

from .converter import SitemapXMLConverter
from .formatter import XMLFormatter, escape_text, format_priority
from .types import (
    SITEMAP_NAMESPACE,
    FormattingOptions,
    OutputFormat,
    ValidationError,
    ValidationResult,
    XMLConfig,
    XMLError,
)
from .validator import SchemaValidator

__all__ = [
    # Core classes
    "SitemapXMLConverter",
    "SchemaValidator",
    "XMLFormatter",
    "escape_text",
    "format_priority",
    # Configuration
    "XMLConfig",
    "OutputFormat",
    "FormattingOptions",
    "ValidationResult",
    "SITEMAP_NAMESPACE",
    # Exceptions
    "XMLError",
    "ValidationError",
]
