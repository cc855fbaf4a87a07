"""
Text escaping, number formatting and layout of sitemap XML.
"""

from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import structlog

from .types import FormattingOptions, OutputFormat, XMLConfig, XML_DECLARATION


logger = structlog.get_logger(__name__)

# Quotes are escaped on top of &, < and >
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# (tag, escaped text) pairs of one <url> element
UrlElement = Sequence[Tuple[str, str]]


def escape_text(text: str) -> str:
    """Escape the five XML-reserved characters."""
    return escape(text, _QUOTE_ENTITIES)


def format_priority(value: float) -> str:
    """Render a priority as a decimal with at least one fractional digit."""
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = f"{float(value):.16f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    return text


class XMLFormatter:
    """
    Lays out sitemap documents deterministically.

    Compact output has no whitespace between elements; pretty output puts
    every element on its own line.
    """

    def __init__(self, config: Optional[XMLConfig] = None, options: Optional[FormattingOptions] = None):
        self.config = config or XMLConfig()
        self.options = options or FormattingOptions()
        self.logger = logger.bind(component="XMLFormatter")

        self.stats = {
            "documents_formatted": 0,
            "elements_written": 0,
        }

    def format_document(
        self,
        namespace: str,
        urls: Sequence[UrlElement],
        output_format: Optional[OutputFormat] = None,
    ) -> str:
        """
        Lay out a urlset document.

        Args:
            namespace: Namespace of the urlset element
            urls: Child (tag, escaped text) pairs of each url element
            output_format: Overrides the configured output format

        Returns:
            Complete XML document
        """
        output_format = output_format or self.config.output_format

        if output_format == OutputFormat.PRETTY:
            document = self._format_pretty(namespace, urls)
        else:
            document = self._format_compact(namespace, urls)

        self.stats["documents_formatted"] += 1
        self.stats["elements_written"] += sum(len(url) + 1 for url in urls) + 1

        return document

    def _format_compact(self, namespace: str, urls: Sequence[UrlElement]) -> str:
        parts: List[str] = [XML_DECLARATION, f'<urlset xmlns="{namespace}">']
        for url in urls:
            parts.append("<url>")
            parts.extend(f"<{tag}>{text}</{tag}>" for tag, text in url)
            parts.append("</url>")
        parts.append("</urlset>")
        return "".join(parts)

    def _format_pretty(self, namespace: str, urls: Sequence[UrlElement]) -> str:
        indent = self.options.indent
        lines: List[str] = [XML_DECLARATION, f'<urlset xmlns="{namespace}">']
        for url in urls:
            lines.append(f"{indent}<url>")
            lines.extend(f"{indent * 2}<{tag}>{text}</{tag}>" for tag, text in url)
            lines.append(f"{indent}</url>")
        lines.append("</urlset>")
        return self.options.newline.join(lines) + self.options.newline

    def get_formatting_stats(self):
        """Get formatting statistics."""
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset formatting statistics."""
        for key in self.stats:
            self.stats[key] = 0
