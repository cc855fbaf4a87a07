"""
Three-level metadata precedence resolution.
"""

from typing import Optional

from .types import META_FIELD_NAMES, MetaFields


def resolve_fields(
    defaults: Optional[MetaFields],
    level: Optional[MetaFields],
    slug: Optional[MetaFields] = None,
) -> MetaFields:
    """
    Resolve each meta field independently from the most specific level.

    Args:
        defaults: Global default metadata
        level: Metadata of the URL entry or route
        slug: Metadata of the slug, for candidates produced by a slug object

    Returns:
        Resolved metadata; fields absent at every level stay absent
    """
    layers = [meta for meta in (slug, level, defaults) if meta is not None]

    resolved = {}
    for name in META_FIELD_NAMES:
        resolved[name] = next(
            (getattr(meta, name) for meta in layers if getattr(meta, name) is not None),
            None,
        )

    return MetaFields(**resolved)
