"""
Sitemap validation using lxml.
"""

import time
from pathlib import Path
from typing import Optional

import structlog
from lxml import etree

from ..entries.types import ChangeFreq
from .types import (
    MAX_LOC_LENGTH, MAX_URLS_PER_SITEMAP, SITEMAP_NAMESPACE, URL_CHILD_ORDER, ValidationError,
    ValidationResult, XMLConfig
)


logger = structlog.get_logger(__name__)

_CHANGEFREQ_VALUES = {freq.value for freq in ChangeFreq}


def _qualified(tag: str) -> str:
    return f"{{{SITEMAP_NAMESPACE}}}{tag}"


class SchemaValidator:
    """
    Sitemap validator.

    Checks well-formedness and the urlset structure of generated documents,
    and validates against an XSD when a schema location is configured.
    """

    def __init__(self, config: Optional[XMLConfig] = None):
        """
        Initialize schema validator.

        Args:
            config: XML configuration
        """
        self.config = config or XMLConfig()
        self.logger = logger.bind(component="SchemaValidator")

        self._schema = None
        self._schema_path = None
        self._validation_stats = {
            "total_validations": 0,
            "successful_validations": 0,
            "failed_validations": 0,
        }

        if self.config.schema_location:
            self._load_schema(Path(self.config.schema_location))

    def _load_schema(self, schema_path: Path) -> None:
        """Load XSD schema for validation."""
        if not schema_path.exists():
            raise ValidationError(f"Schema file not found: {schema_path}")

        self.logger.info("Loading XML schema", schema_path=str(schema_path))

        try:
            with open(schema_path, 'rb') as f:
                schema_doc = etree.parse(f)
            self._schema = etree.XMLSchema(schema_doc)
        except (etree.XMLSyntaxError, etree.XMLSchemaParseError) as e:
            raise ValidationError(f"Failed to load schema: {e}") from e

        self._schema_path = schema_path

    def validate_xml_string(self, xml_content: str) -> ValidationResult:
        """
        Validate a sitemap document.

        Args:
            xml_content: XML content as string

        Returns:
            Validation result with detailed error information
        """
        start_time = time.time()

        try:
            xml_doc = etree.fromstring(xml_content.encode('utf-8'))
        except etree.XMLSyntaxError as e:
            result = ValidationResult(is_valid=False)
            result.add_error(f"XML parsing error: {e.msg}", line=e.lineno, column=e.offset)
            result.validation_time = time.time() - start_time
            self._update_validation_stats(result)
            return result

        result = ValidationResult(is_valid=True)

        if self._schema is not None and not self._schema.validate(xml_doc):
            for error in self._schema.error_log:
                result.add_error(error.message, line=error.line, column=error.column)

        self._validate_structure(xml_doc, result)

        result.validation_time = time.time() - start_time
        self._update_validation_stats(result)

        self.logger.debug("Sitemap validation completed",
                          is_valid=result.is_valid,
                          errors=len(result.errors),
                          validation_time=result.validation_time)

        return result

    def validate_xml_file(self, xml_path: Path) -> ValidationResult:
        """Validate a sitemap file."""
        try:
            with open(xml_path, 'r', encoding='utf-8') as f:
                xml_content = f.read()
        except OSError as e:
            result = ValidationResult(is_valid=False)
            result.add_error(f"Failed to read XML file: {e}")
            return result

        return self.validate_xml_string(xml_content)

    def _validate_structure(self, xml_doc, result: ValidationResult) -> None:
        """Check the urlset/url structure and element values."""
        if xml_doc.tag != _qualified("urlset"):
            result.add_error(f"Root element must be urlset in {SITEMAP_NAMESPACE}, got {xml_doc.tag}")
            return

        locations = set()
        url_count = 0
        for url in xml_doc:
            if not isinstance(url.tag, str):
                continue
            if url.tag != _qualified("url"):
                result.add_error(f"Unexpected element in urlset: {url.tag}", line=url.sourceline)
                continue
            url_count += 1

            positions = []
            for child in url:
                if not isinstance(child.tag, str):
                    continue
                local_tag = etree.QName(child).localname
                if child.tag != _qualified(local_tag) or local_tag not in URL_CHILD_ORDER:
                    result.add_error(f"Unexpected element in url: {child.tag}", line=child.sourceline)
                    continue
                positions.append(URL_CHILD_ORDER.index(local_tag))
                self._validate_value(local_tag, child.text or "", result, child.sourceline)

            if not positions or positions[0] != 0:
                result.add_error("url element must start with loc", line=url.sourceline)
            elif positions != sorted(set(positions)):
                result.add_error("url children are duplicated or out of order", line=url.sourceline)

            loc = url.findtext(_qualified("loc"))
            if loc:
                if len(loc) > MAX_LOC_LENGTH:
                    result.add_warning(f"Location longer than {MAX_LOC_LENGTH} characters: {loc[:64]}...",
                                       line=url.sourceline)
                if loc in locations:
                    result.add_error(f"Duplicate location: {loc}", line=url.sourceline)
                locations.add(loc)

        if url_count > MAX_URLS_PER_SITEMAP:
            result.add_warning(f"Sitemap has {url_count} urls, more than {MAX_URLS_PER_SITEMAP} allowed per file")

    def _validate_value(self, tag: str, text: str, result: ValidationResult, line: Optional[int]) -> None:
        if not text.strip():
            result.add_error(f"Empty {tag} element", line=line)
        elif tag == "changefreq" and text not in _CHANGEFREQ_VALUES:
            result.add_error(f"Invalid changefreq value: {text}", line=line)
        elif tag == "priority":
            try:
                priority = float(text)
            except ValueError:
                result.add_error(f"Invalid priority format: {text}", line=line)
                return
            if not 0.0 <= priority <= 1.0:
                result.add_error(f"Priority {priority} out of range [0.0, 1.0]", line=line)

    def _update_validation_stats(self, result: ValidationResult) -> None:
        """Update validation statistics."""
        self._validation_stats["total_validations"] += 1

        if result.is_valid:
            self._validation_stats["successful_validations"] += 1
        else:
            self._validation_stats["failed_validations"] += 1

    def get_schema_info(self) -> dict:
        """Get information about the loaded schema."""
        return {
            "schema_path": str(self._schema_path) if self._schema_path else None,
            "target_namespace": SITEMAP_NAMESPACE,
            "validation_stats": self._validation_stats.copy(),
        }

    def is_schema_loaded(self) -> bool:
        """Check if an XSD schema is loaded."""
        return self._schema is not None
