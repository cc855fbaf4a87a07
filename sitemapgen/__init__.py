"""
Sitemap generation from declarative site descriptions.

Static URL entries and static or dynamic route definitions, together with
per-entry, per-route, per-slug and global metadata, are resolved into a
single deterministic sitemap document.
"""

from .entries import (
    ChangeFreq,
    InvalidDateError,
    MetaFields,
    ResolvedEntry,
    RouteEntry,
    SitemapConfig,
    SlugEntry,
    SlugSourceError,
    UrlEntry,
)
from .generator import SitemapGenerator, generate_sitemap_xml
from .types import SitemapError
from .xml_output import OutputFormat, ValidationError, XMLError

__all__ = [
    # Entry point
    "generate_sitemap_xml",
    "SitemapGenerator",
    # Configuration
    "SitemapConfig",
    "UrlEntry",
    "RouteEntry",
    "SlugEntry",
    "MetaFields",
    "ChangeFreq",
    "ResolvedEntry",
    "OutputFormat",
    # Exceptions
    "SitemapError",
    "InvalidDateError",
    "SlugSourceError",
    "XMLError",
    "ValidationError",
]
