"""
Type definitions for sitemap entry resolution.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, AsyncIterable, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from ..types.common import SitemapError


DateLike = Union[str, int, float, datetime, date]

# A slug is a bare value, a dict with a "slug" key plus meta fields, or a SlugEntry
SlugValue = Union[str, int, Dict[str, Any], "SlugEntry"]
SlugSource = Union[
    Iterable[SlugValue],
    Awaitable[Iterable[SlugValue]],
    AsyncIterable[SlugValue],
    Callable[[], Any],
]

META_FIELD_NAMES = ("changefreq", "lastmod", "priority")

WILDCARD_PATH = "*"


class InvalidDateError(SitemapError):
    """Raised when a last-modification date cannot be parsed into an instant."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class SlugSourceError(SitemapError):
    """Raised when a route's slug source fails to produce its slugs."""

    def __init__(self, message: str, route_path: Optional[str] = None):
        self.route_path = route_path
        super().__init__(message)


class ChangeFreq(Enum):
    """Allowed values of the changefreq element."""
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


class LocSource(Enum):
    """Where a candidate's location value comes from."""
    EXPLICIT_LOC = "explicit-loc"
    PATH = "path"


class EntryOrigin(Enum):
    """Which input produced a candidate entry."""
    URL = "url"
    ROUTE = "route"
    SLUG = "slug"


@dataclass
class MetaFields:
    """Sitemap metadata shared by defaults, URLs, routes and slugs."""

    changefreq: Optional[ChangeFreq] = None
    lastmod: Optional[DateLike] = None
    priority: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.changefreq, str):
            self.changefreq = ChangeFreq(self.changefreq)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MetaFields":
        """Pick the meta fields out of a dict, ignoring any other keys."""
        if not data:
            return cls()
        return cls(**{name: data.get(name) for name in META_FIELD_NAMES})

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in META_FIELD_NAMES)


@dataclass
class SlugEntry:
    """A single slug of a dynamic route."""

    slug: str
    # None when the slug was given as a bare value rather than an object
    meta: Optional[MetaFields] = None

    @classmethod
    def from_value(cls, value: SlugValue) -> "SlugEntry":
        if isinstance(value, SlugEntry):
            return value
        if isinstance(value, dict):
            return cls(slug=str(value["slug"]), meta=MetaFields.from_dict(value))
        return cls(slug=str(value))


@dataclass
class UrlEntry:
    """An explicit URL, absolute or relative to the base URL."""

    loc: str
    meta: MetaFields = field(default_factory=MetaFields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UrlEntry":
        return cls(loc=data["loc"], meta=MetaFields.from_dict(data))


@dataclass
class RouteEntry:
    """A route definition, static or dynamic."""

    path: str
    loc: Optional[str] = None
    name: Optional[str] = None
    ignore_route: bool = False
    slugs: Optional[SlugSource] = None
    meta: MetaFields = field(default_factory=MetaFields)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RouteEntry":
        """
        Build a route from its dict form.

        Keys of a nested ``sitemap`` object override the same-named top-level
        keys; both are treated as the route's own metadata level.
        """
        merged = {**data, **(data.get("sitemap") or {})}
        return cls(
            path=merged["path"],
            loc=merged.get("loc"),
            name=merged.get("name"),
            ignore_route=bool(merged.get("ignoreRoute", merged.get("ignore_route", False))),
            slugs=merged.get("slugs"),
            meta=MetaFields.from_dict(merged),
        )


@dataclass
class SitemapConfig:
    """Validated input of a sitemap generation."""

    base_url: str = ""
    trailing_slash: bool = False
    defaults: MetaFields = field(default_factory=MetaFields)
    urls: List[UrlEntry] = field(default_factory=list)
    routes: List[RouteEntry] = field(default_factory=list)
    pretty: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SitemapConfig":
        return cls(
            base_url=data.get("baseURL", data.get("base_url")) or "",
            trailing_slash=bool(data.get("trailingSlash", data.get("trailing_slash", False))),
            defaults=MetaFields.from_dict(data.get("defaults")),
            urls=[
                u if isinstance(u, UrlEntry) else UrlEntry.from_dict(u)
                for u in data.get("urls") or []
            ],
            routes=[
                r if isinstance(r, RouteEntry) else RouteEntry.from_dict(r)
                for r in data.get("routes") or []
            ],
            pretty=bool(data.get("pretty", False)),
        )


@dataclass
class CandidateEntry:
    """An entry awaiting metadata and location resolution."""

    loc_source: LocSource
    value: str
    meta: MetaFields
    origin: EntryOrigin
    slug_meta: Optional[MetaFields] = None


@dataclass(frozen=True)
class ResolvedEntry:
    """A finalized sitemap entry, ready for serialization."""

    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None
