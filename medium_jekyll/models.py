"""Data models used throughout the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class PostMetadata:
    """Metadata scraped from one exported post."""

    title: Optional[str]
    published_at: Optional[datetime]
    canonical_link: Optional[str]
    slug: Optional[str]
    looks_like_comment: bool

    @property
    def is_published(self) -> bool:
        return self.published_at is not None


@dataclass(frozen=True)
class AssetReference:
    """Remote image and the path it is served from after conversion."""

    remote_url: str
    local_path: str


@dataclass
class ConversionResult:
    """Markdown document plus the assets it references."""

    content: str
    assets: List[AssetReference]


@dataclass
class PostConversion:
    """Result of converting a whole export document."""

    metadata: PostMetadata
    output_basename: str
    content: str
    assets: List[AssetReference]


@dataclass
class FileResult:
    """Files produced for one input path."""

    source_path: Path
    output_path: Path
    download_dir: Path
    assets: List[AssetReference]
    image_list_path: Optional[Path] = None


@dataclass
class DownloadResult:
    """Outcome of fetching a single asset."""

    url: str
    local_path: Path
    ok: bool
    error: Optional[str] = None


@dataclass
class RunSummary:
    """Per-file outcome of a batch run."""

    converted: List[FileResult] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)
