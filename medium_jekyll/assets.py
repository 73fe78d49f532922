"""Image reference scraping and URL rewriting."""

from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, List, Pattern

from bs4 import BeautifulSoup

from .config import MEDIUM_IMAGE_PATTERN
from .models import AssetReference
from .utils import url_basename

logger = logging.getLogger("medium_jekyll")


def local_asset_path(remote_url: str, url_prefix: str) -> str:
    """Map a remote image URL to ``url_prefix/<original filename>``."""
    return posixpath.join(url_prefix, url_basename(remote_url))


def scrape_assets(html: str, pattern: Pattern[str] = MEDIUM_IMAGE_PATTERN) -> List[str]:
    """List matching image URLs in document order, each URL once."""
    soup = BeautifulSoup(html, "html.parser")
    seen: Dict[str, None] = {}
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src or not pattern.search(src):
            continue
        seen.setdefault(src, None)
    return list(seen)


def build_asset_references(urls: Iterable[str], url_prefix: str) -> List[AssetReference]:
    return [
        AssetReference(remote_url=url, local_path=local_asset_path(url, url_prefix))
        for url in urls
    ]


def rewrite_asset_urls(
    html: str,
    pattern: Pattern[str] = MEDIUM_IMAGE_PATTERN,
    url_prefix: str = "/images",
) -> str:
    """Return a copy of ``html`` with matching ``<img src>`` pointing at ``url_prefix``."""
    soup = BeautifulSoup(html, "html.parser")
    rewritten = 0
    for img in soup.find_all("img"):
        src = img.get("src")
        if not src or not pattern.search(src):
            continue
        img["src"] = local_asset_path(src, url_prefix)
        rewritten += 1
    logger.debug("Rewrote %d image reference(s) under %s", rewritten, url_prefix)
    return soup.decode()
