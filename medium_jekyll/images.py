"""Image downloading and validation utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import requests
from filetype import guess

from .models import AssetReference, DownloadResult
from .utils import url_basename

logger = logging.getLogger("medium_jekyll")

DOWNLOAD_TIMEOUT = 15


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def download_path(directory: Path, url: str) -> Path:
    return directory / url_basename(url)


def download_assets(
    assets: Iterable[AssetReference],
    directory: Path,
    session: Optional[requests.Session] = None,
) -> List[DownloadResult]:
    """Fetch every asset into ``directory``; failures are reported, never raised."""
    assets = list(assets)
    if not assets:
        return []
    directory.mkdir(parents=True, exist_ok=True)

    session = session or requests.Session()
    results: List[DownloadResult] = []
    for asset in assets:
        url = asset.remote_url
        destination = download_path(directory, url)
        if destination.exists():
            logger.info("Skipping %s: %s already exists", url, destination)
            results.append(DownloadResult(url=url, local_path=destination, ok=True))
            continue

        try:
            resp = session.get(url, timeout=DOWNLOAD_TIMEOUT)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Failed to fetch image %s: %s", url, exc)
            results.append(
                DownloadResult(url=url, local_path=destination, ok=False, error=str(exc))
            )
            continue

        data = resp.content
        if detect_image_format(data) is None:
            message = "response is not an image (Content-Type=%s)" % resp.headers.get(
                "Content-Type", ""
            )
            logger.warning("Skipping %s: %s", url, message)
            results.append(
                DownloadResult(url=url, local_path=destination, ok=False, error=message)
            )
            continue

        try:
            destination.write_bytes(data)
        except OSError as exc:
            logger.warning("Failed to write image %s: %s", destination, exc)
            results.append(
                DownloadResult(url=url, local_path=destination, ok=False, error=str(exc))
            )
            continue

        logger.info("Downloaded %s to %s", url, destination)
        results.append(DownloadResult(url=url, local_path=destination, ok=True))
    return results
