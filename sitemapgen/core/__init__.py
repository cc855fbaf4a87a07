"""
Settings and logging for sitemap generation.
"""

from .config import Settings, get_settings
from .logging import bind_generation_id, clear_generation_id, configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_generation_id",
    "clear_generation_id",
]
