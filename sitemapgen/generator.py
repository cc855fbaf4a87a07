"""
Sitemap generation entry point.

Runs the entry pipeline on a configuration and converts the resolved
entries into a sitemap document. Generation is all-or-nothing: any error
aborts it and no document is returned.
"""

import time
import uuid
from typing import Any, Dict, Optional, Union

import structlog

from .core.config import Settings, get_settings
from .core.logging import bind_generation_id, clear_generation_id, log_error_with_context
from .entries.pipeline import EntryPipeline
from .entries.types import SitemapConfig
from .xml_output.converter import SitemapXMLConverter
from .xml_output.types import OutputFormat


logger = structlog.get_logger(__name__)

ConfigLike = Union[SitemapConfig, Dict[str, Any]]


class SitemapGenerator:
    """Generates sitemap documents from site configurations."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        pipeline: Optional[EntryPipeline] = None,
        converter: Optional[SitemapXMLConverter] = None,
    ):
        self.settings = settings or get_settings()
        self.pipeline = pipeline or EntryPipeline(assume_tz=self.settings.tzinfo)
        self.converter = converter or SitemapXMLConverter(self.settings.xml_config())
        self.logger = logger.bind(component="SitemapGenerator")

        self.stats = {
            "total_generations": 0,
            "failed_generations": 0,
            "urls_in": 0,
            "routes_in": 0,
            "candidates": 0,
            "duplicates_dropped": 0,
            "entries_written": 0,
            "total_generation_time": 0.0,
        }

    async def generate(self, config: ConfigLike) -> str:
        """
        Generate a sitemap document.

        Args:
            config: Sitemap configuration or its dict form

        Returns:
            Sitemap XML text

        Raises:
            SlugSourceError: If a route's slug source fails
            InvalidDateError: If a lastmod value cannot be parsed
            ValidationError: If output validation is enabled and fails
        """
        if not isinstance(config, SitemapConfig):
            config = SitemapConfig.from_dict(config)

        bind_generation_id(uuid.uuid4().hex)
        start_time = time.time()

        try:
            self.logger.info("Starting sitemap generation",
                             base_url=config.base_url,
                             urls=len(config.urls),
                             routes=len(config.routes))

            entries = await self.pipeline.run(config)

            output_format = OutputFormat.PRETTY if config.pretty else None
            xml_content = self.converter.convert(entries, output_format)

        except Exception as e:
            self.stats["failed_generations"] += 1
            log_error_with_context(self.logger, e, {"base_url": config.base_url},
                                   event="Sitemap generation failed")
            raise
        finally:
            clear_generation_id()

        generation_time = time.time() - start_time
        self._update_stats(config, generation_time)

        self.logger.info("Sitemap generation completed",
                         entries=self.pipeline.last_run["entries"],
                         generation_time=generation_time)

        return xml_content

    def _update_stats(self, config: SitemapConfig, generation_time: float) -> None:
        last_run = self.pipeline.last_run
        self.stats["total_generations"] += 1
        self.stats["urls_in"] += len(config.urls)
        self.stats["routes_in"] += len(config.routes)
        self.stats["candidates"] += last_run["candidates"]
        self.stats["duplicates_dropped"] += last_run["duplicates_dropped"]
        self.stats["entries_written"] += last_run["entries"]
        self.stats["total_generation_time"] += generation_time

    def get_statistics(self) -> Dict[str, Any]:
        """Get generation statistics."""
        total = self.stats["total_generations"]
        return {
            **self.stats,
            "average_generation_time": self.stats["total_generation_time"] / max(1, total),
        }


async def generate_sitemap_xml(config: ConfigLike, settings: Optional[Settings] = None) -> str:
    """
    Generate a sitemap document from a configuration.

    Args:
        config: Sitemap configuration or its dict form
        settings: Settings to use instead of the environment ones

    Returns:
        Sitemap XML text
    """
    return await SitemapGenerator(settings).generate(config)
