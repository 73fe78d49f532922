"""Metadata extraction from exported post HTML."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from bs4 import BeautifulSoup
from dateutil.parser import isoparse

from .models import PostMetadata
from .utils import slug_from_canonical_link, slugify_title

logger = logging.getLogger("medium_jekyll")

PUBLISHED_SELECTOR = "time.dt-published"
CANONICAL_SELECTOR = "a.p-canonical"
BODY_HEADING_SELECTOR = '[data-field="body"] h3'


def _parse_published_at(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        published = isoparse(raw.strip())
    except (ValueError, OverflowError) as exc:
        logger.warning("Ignoring unparseable publish date %r: %s", raw, exc)
        return None
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published


def extract_metadata(html: str) -> PostMetadata:
    """Derive title, publish date, canonical link and slug from an export file.

    Missing elements leave the matching field empty instead of raising, so a
    half-broken export still yields a usable (if sparse) record.
    """
    soup = BeautifulSoup(html, "html.parser")

    title: Optional[str] = None
    if soup.title:
        title = soup.title.get_text() or None

    published_tag = soup.select_one(PUBLISHED_SELECTOR)
    published_at = _parse_published_at(
        published_tag.get("datetime") if published_tag else None
    )

    canonical_tag = soup.select_one(CANONICAL_SELECTOR)
    canonical_link: Optional[str] = None
    if canonical_tag and canonical_tag.get("href"):
        canonical_link = canonical_tag["href"]

    if canonical_link:
        slug: Optional[str] = slug_from_canonical_link(canonical_link)
    elif title:
        slug = slugify_title(title)
    else:
        slug = None

    # A post always opens with an <h3> title; replies exported alongside
    # posts do not.
    looks_like_comment = not soup.select(BODY_HEADING_SELECTOR)

    metadata = PostMetadata(
        title=title,
        published_at=published_at,
        canonical_link=canonical_link,
        slug=slug or None,
        looks_like_comment=looks_like_comment,
    )
    logger.debug("Extracted metadata: %s", metadata)
    return metadata
