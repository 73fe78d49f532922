"""Utility helpers for slug derivation and URL path handling."""

from __future__ import annotations

import posixpath
import re
from urllib.parse import unquote, urlparse

TITLE_STRIP_PATTERN = re.compile(r"[\u0000-\u002f\u007b-\u00a0]+")
HEX_SUFFIX_PATTERN = re.compile(r"-[0-9a-f]+$")


def slugify_title(title: str) -> str:
    """Lower-case a title and collapse punctuation and whitespace runs to '-'."""
    return TITLE_STRIP_PATTERN.sub("-", title).lower()


def url_basename(url: str) -> str:
    """Return the last path segment of a URL, ignoring query and fragment."""
    path = urlparse(url).path
    return posixpath.basename(path.rstrip("/"))


def slug_from_canonical_link(link: str) -> str:
    """Recover the post slug from a canonical link such as ``.../title-5e1c53a62ef2``."""
    segment = unquote(url_basename(link))
    return HEX_SUFFIX_PATTERN.sub("", segment)
