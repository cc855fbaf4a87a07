"""
Resolved entries to sitemap XML converter.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from ..entries.types import ResolvedEntry
from .formatter import XMLFormatter, escape_text, format_priority
from .types import (
    OutputFormat, SITEMAP_NAMESPACE, ValidationError, ValidationResult, XMLConfig
)
from .validator import SchemaValidator


logger = structlog.get_logger(__name__)


class SitemapXMLConverter:
    """
    Converts resolved entries into a sitemap document.

    Child elements are always written in schema order (loc, lastmod,
    changefreq, priority) and all text content is escaped.
    """

    def __init__(self, config: Optional[XMLConfig] = None):
        """
        Initialize sitemap XML converter.

        Args:
            config: XML configuration
        """
        self.config = config or XMLConfig()
        self.logger = logger.bind(component="SitemapXMLConverter")

        self.validator = SchemaValidator(self.config) if self.config.validate_output else None
        self.formatter = XMLFormatter(self.config)

        self.stats = {
            "total_conversions": 0,
            "urls_written": 0,
            "validation_warnings": 0,
            "total_processing_time": 0.0,
        }

    def serialize(self, entries: Sequence[ResolvedEntry], output_format: Optional[OutputFormat] = None) -> str:
        """
        Render entries as a sitemap document.

        Args:
            entries: Resolved entries in output order
            output_format: Overrides the configured output format

        Returns:
            XML document text
        """
        urls = [self._url_elements(entry) for entry in entries]
        return self.formatter.format_document(SITEMAP_NAMESPACE, urls, output_format)

    def convert(self, entries: Sequence[ResolvedEntry], output_format: Optional[OutputFormat] = None) -> str:
        """
        Render entries and validate the result when validation is enabled.

        Raises:
            ValidationError: If the generated document is not a valid sitemap
        """
        start_time = time.time()

        xml_content = self.serialize(entries, output_format)

        if self.validator:
            validation_result = self.validator.validate_xml_string(xml_content)
            if validation_result.has_errors:
                self.logger.error("Generated sitemap failed validation",
                                  errors=validation_result.issues_of("error"))
                raise ValidationError(validation_result.summary(), errors=validation_result.errors)
            if validation_result.has_warnings:
                self.stats["validation_warnings"] += len(validation_result.warnings)
                self.logger.warning("Generated sitemap has warnings",
                                    warnings=validation_result.warnings)

        conversion_time = time.time() - start_time
        self.stats["total_conversions"] += 1
        self.stats["urls_written"] += len(entries)
        self.stats["total_processing_time"] += conversion_time

        self.logger.debug("Sitemap XML conversion completed",
                          urls=len(entries),
                          conversion_time=conversion_time,
                          validated=self.validator is not None)

        return xml_content

    def _url_elements(self, entry: ResolvedEntry) -> List[Tuple[str, str]]:
        """Build the escaped child elements of one url element."""
        elements = [("loc", escape_text(entry.loc))]

        if entry.lastmod is not None:
            elements.append(("lastmod", escape_text(entry.lastmod)))

        if entry.changefreq is not None:
            elements.append(("changefreq", escape_text(entry.changefreq)))

        if entry.priority is not None:
            elements.append(("priority", format_priority(entry.priority)))

        return elements

    def validate_xml_string(self, xml_content: str) -> ValidationResult:
        """Validate a sitemap document."""
        if not self.validator:
            return ValidationResult(is_valid=True, warnings=["Validation disabled"])

        return self.validator.validate_xml_string(xml_content)

    def get_conversion_statistics(self) -> Dict[str, Any]:
        """Get conversion performance statistics."""
        total_conversions = self.stats["total_conversions"]

        return {
            "total_conversions": total_conversions,
            "urls_written": self.stats["urls_written"],
            "validation_warnings": self.stats["validation_warnings"],
            "average_processing_time": (
                self.stats["total_processing_time"] / max(1, total_conversions)
            ),
            "schema_validation_enabled": self.validator is not None,
            "output_format": self.config.output_format.value,
        }
