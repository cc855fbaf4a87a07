"""
Resolution of final sitemap locations: base joining, trailing slashes and URI encoding.
"""

import re
from urllib.parse import quote, urlsplit, urlunsplit

from .types import LocSource


SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
PERCENT_TRIPLET_PATTERN = re.compile(r"(%[0-9A-Fa-f]{2})")

# Reserved characters and marks left untouched when encoding a whole URI
URI_SAFE_CHARS = ";,/?:@&=+$#!*'()"


def has_scheme(value: str) -> bool:
    """Check if a location is absolute."""
    return bool(SCHEME_PATTERN.match(value))


def join_base(base_url: str, path: str) -> str:
    """Join a base origin and a path with exactly one slash between them."""
    if not path.startswith("/"):
        path = "/" + path
    return base_url.rstrip("/") + path


def apply_trailing_slash(url: str, trailing_slash: bool) -> str:
    """
    Apply the trailing slash policy to the path component of a URL.

    Without trailing slashes the root path collapses to the bare origin;
    with them every path, root included, ends with exactly one slash.
    """
    parts = urlsplit(url)
    path = parts.path.rstrip("/")
    if trailing_slash:
        path += "/"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def encode_uri(url: str) -> str:
    """Percent-encode a URI, keeping reserved characters and valid escapes."""
    pieces = PERCENT_TRIPLET_PATTERN.split(url)
    return "".join(
        piece if PERCENT_TRIPLET_PATTERN.fullmatch(piece) else quote(piece, safe=URI_SAFE_CHARS)
        for piece in pieces
    )


def resolve_location(
    base_url: str,
    loc_source: LocSource,
    value: str,
    trailing_slash: bool = False,
) -> str:
    """
    Resolve the final, encoded location of a candidate entry.

    Args:
        base_url: Origin prepended to relative locations
        loc_source: Whether the value is an explicit location or a route path
        value: Location or path of the candidate
        trailing_slash: Whether paths should end with a slash

    Returns:
        Absolute, percent-encoded location
    """
    if loc_source is LocSource.EXPLICIT_LOC and has_scheme(value):
        url = value
    else:
        url = join_base(base_url, value)

    return encode_uri(apply_trailing_slash(url, trailing_slash))
