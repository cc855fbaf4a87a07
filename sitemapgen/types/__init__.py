"""
Shared types for the sitemap generation system.
"""

from .common import SitemapError

__all__ = ["SitemapError"]
