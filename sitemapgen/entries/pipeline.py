"""
Entry pipeline: merges URL entries and expanded routes into resolved, deduplicated entries.
"""

import asyncio
from datetime import timezone, tzinfo
from typing import Any, Dict, List, Optional

import structlog

from .dates import normalize_date
from .fields import resolve_fields
from .locations import resolve_location
from .routes import RouteExpander
from .types import CandidateEntry, EntryOrigin, LocSource, ResolvedEntry, SitemapConfig


logger = structlog.get_logger(__name__)


class EntryPipeline:
    """
    Orchestrates candidate building, metadata and location resolution,
    date normalization and deduplication.

    Route expansions run concurrently but their results are merged by
    route position, so output order only depends on input order.
    """

    def __init__(
        self,
        route_expander: Optional[RouteExpander] = None,
        assume_tz: tzinfo = timezone.utc,
    ):
        """
        Initialize entry pipeline.

        Args:
            route_expander: Expander used for route definitions
            assume_tz: Timezone for dates without an offset
        """
        self.route_expander = route_expander or RouteExpander()
        self.assume_tz = assume_tz
        self.logger = logger.bind(component="EntryPipeline")

        # Counters of the last run
        self.last_run: Dict[str, int] = {
            "candidates": 0,
            "duplicates_dropped": 0,
            "entries": 0,
        }

    async def run(self, config: SitemapConfig) -> List[ResolvedEntry]:
        """
        Resolve a configuration into the ordered list of sitemap entries.

        Args:
            config: Sitemap configuration

        Returns:
            Resolved entries, unique by location, in input order

        Raises:
            SlugSourceError: If a slug source fails
            InvalidDateError: If a lastmod value cannot be parsed
        """
        candidates = await self.build_candidates(config)

        seen = set()
        entries: List[ResolvedEntry] = []
        duplicates = 0

        for candidate in candidates:
            entry = self.resolve_candidate(candidate, config)
            if entry.loc in seen:
                duplicates += 1
                self.logger.debug("Dropping duplicate location", loc=entry.loc,
                                  origin=candidate.origin.value)
                continue
            seen.add(entry.loc)
            entries.append(entry)

        self.last_run = {
            "candidates": len(candidates),
            "duplicates_dropped": duplicates,
            "entries": len(entries),
        }
        self.logger.info("Entry pipeline completed", **self.last_run)

        return entries

    async def build_candidates(self, config: SitemapConfig) -> List[CandidateEntry]:
        """Build URL candidates followed by all route expansions, in input order."""
        candidates = [
            CandidateEntry(LocSource.EXPLICIT_LOC, url.loc, url.meta, EntryOrigin.URL)
            for url in config.urls
        ]

        expansions = await self._expand_routes(config)
        for expansion in expansions:
            candidates.extend(expansion)

        return candidates

    def resolve_candidate(self, candidate: CandidateEntry, config: SitemapConfig) -> ResolvedEntry:
        """Resolve metadata, location and date of a single candidate."""
        meta = resolve_fields(config.defaults, candidate.meta, candidate.slug_meta)
        loc = resolve_location(
            config.base_url, candidate.loc_source, candidate.value, config.trailing_slash
        )

        lastmod = None
        if meta.lastmod is not None:
            lastmod = normalize_date(meta.lastmod, self.assume_tz)

        return ResolvedEntry(
            loc=loc,
            lastmod=lastmod,
            changefreq=meta.changefreq.value if meta.changefreq is not None else None,
            priority=meta.priority,
        )

    async def _expand_routes(self, config: SitemapConfig) -> List[List[CandidateEntry]]:
        """Expand every route concurrently; results are indexed by route position."""
        if not config.routes:
            return []

        tasks = [
            asyncio.ensure_future(self.route_expander.expand(route))
            for route in config.routes
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            raise

    def get_statistics(self) -> Dict[str, Any]:
        """Get counters of the last pipeline run."""
        return dict(self.last_run)
