"""
Common types used across multiple modules to avoid circular imports.
"""


class SitemapError(Exception):
    """Base exception for all sitemap generation errors."""
    pass
