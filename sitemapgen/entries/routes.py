"""
Expansion of route definitions into candidate entries.
"""

import inspect
import re
from typing import Any, List, Optional

import structlog

from .types import (
    CandidateEntry, EntryOrigin, LocSource, RouteEntry, SlugEntry, SlugSource,
    SlugSourceError, WILDCARD_PATH
)


logger = structlog.get_logger(__name__)

# A path segment starting with the parameter marker, e.g. ":id" or ":id(\\d+)?"
DYNAMIC_SEGMENT_PATTERN = re.compile(r"(^|/):[^/]*")


def is_dynamic_path(path: str) -> bool:
    """Check if a route path contains a dynamic segment."""
    return bool(DYNAMIC_SEGMENT_PATTERN.search(path))


def substitute_slug(path: str, slug: str) -> str:
    """Replace every dynamic segment of a path with the slug."""
    return DYNAMIC_SEGMENT_PATTERN.sub(lambda match: match.group(1) + slug, path)


def dedupe_slugs(slugs: List[SlugEntry]) -> List[SlugEntry]:
    """Remove slugs whose identity was already seen, keeping the first."""
    seen = set()
    unique: List[SlugEntry] = []
    for slug in slugs:
        if slug.slug in seen:
            continue
        seen.add(slug.slug)
        unique.append(slug)
    return unique


async def resolve_slug_source(source: Optional[SlugSource], route_path: str = "") -> List[SlugEntry]:
    """
    Resolve any kind of slug source into a list of slugs.

    The source may be a sequence, an awaitable, an async iterable, or a
    zero-argument callable returning any of those.

    Raises:
        SlugSourceError: If the source raises or its awaitable fails
    """
    if source is None:
        return []

    try:
        value: Any = source() if callable(source) else source
        if inspect.isawaitable(value):
            value = await value
        if value is None:
            return []
        if hasattr(value, "__aiter__"):
            values = [item async for item in value]
        else:
            values = list(value)
        return [SlugEntry.from_value(item) for item in values]
    except Exception as e:
        raise SlugSourceError(
            f"Slug source of route '{route_path}' failed: {e}", route_path=route_path
        ) from e


class RouteExpander:
    """
    Expands a route into zero or more candidate entries.

    Static routes yield a single candidate; dynamic routes yield one
    candidate per unique slug, tagged so slug metadata takes precedence.
    """

    def __init__(self):
        self.logger = logger.bind(component="RouteExpander")

    async def expand(self, route: RouteEntry) -> List[CandidateEntry]:
        """
        Expand a route definition.

        Args:
            route: Route to expand

        Returns:
            Candidate entries in slug order

        Raises:
            SlugSourceError: If the route's slug source fails
        """
        if route.ignore_route or route.path == WILDCARD_PATH:
            self.logger.debug("Skipping route", path=route.path,
                              ignore_route=route.ignore_route)
            return []

        if not is_dynamic_path(route.path):
            if route.loc:
                return [CandidateEntry(LocSource.EXPLICIT_LOC, route.loc, route.meta, EntryOrigin.ROUTE)]
            return [CandidateEntry(LocSource.PATH, route.path, route.meta, EntryOrigin.ROUTE)]

        slugs = dedupe_slugs(await resolve_slug_source(route.slugs, route.path))
        if not slugs:
            self.logger.debug("Skipping dynamic route without slugs", path=route.path)
            return []

        self.logger.debug("Expanded dynamic route", path=route.path, slugs=len(slugs))

        return [
            CandidateEntry(
                loc_source=LocSource.PATH,
                value=substitute_slug(route.path, slug.slug),
                meta=route.meta,
                origin=EntryOrigin.SLUG,
                slug_meta=slug.meta,
            )
            for slug in slugs
        ]
