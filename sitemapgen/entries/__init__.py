"""
Sitemap entry resolution.

This module turns a sitemap configuration into resolved entries:
- Three-level metadata precedence (slug > route/URL > defaults)
- Date normalization to ISO 8601 UTC
- Location joining, trailing slash policy and URI encoding
- Concurrent, order-preserving route and slug expansion
- Deduplication by final location
"""

from .dates import normalize_date
from .fields import resolve_fields
from .locations import apply_trailing_slash, encode_uri, resolve_location
from .pipeline import EntryPipeline
from .routes import RouteExpander, resolve_slug_source
from .types import (
    CandidateEntry,
    ChangeFreq,
    EntryOrigin,
    InvalidDateError,
    LocSource,
    MetaFields,
    ResolvedEntry,
    RouteEntry,
    SitemapConfig,
    SlugEntry,
    SlugSourceError,
    UrlEntry,
)

__all__ = [
    # Components
    "EntryPipeline",
    "RouteExpander",
    "resolve_fields",
    "normalize_date",
    "resolve_location",
    "apply_trailing_slash",
    "encode_uri",
    "resolve_slug_source",
    # Types
    "SitemapConfig",
    "UrlEntry",
    "RouteEntry",
    "SlugEntry",
    "MetaFields",
    "ChangeFreq",
    "CandidateEntry",
    "ResolvedEntry",
    "LocSource",
    "EntryOrigin",
    # Exceptions
    "InvalidDateError",
    "SlugSourceError",
]
