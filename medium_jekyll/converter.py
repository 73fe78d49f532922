"""High-level orchestration for turning export files into Jekyll posts."""

from __future__ import annotations

import asyncio
import logging
import posixpath
from dataclasses import replace
from datetime import tzinfo
from pathlib import Path
from typing import List, Optional, Sequence

from .assets import build_asset_references, rewrite_asset_urls, scrape_assets
from .cleanup import cleanup_html
from .config import ConverterOptions, RunConfig
from .languages import detect_code_block_languages
from .markdown import compose_markdown, render_markdown
from .metadata import extract_metadata
from .models import ConversionResult, FileResult, PostConversion, PostMetadata, RunSummary

logger = logging.getLogger("medium_jekyll")


class ConversionError(Exception):
    """Base class for errors raised while converting a single post."""


class NotAPostError(ConversionError):
    """The document is a reply or stub rather than an article."""


class OutputNameError(ConversionError):
    """Neither a slug nor a title is available to name the output file."""


def suggested_output_basename(
    metadata: PostMetadata, tz: Optional[tzinfo] = None
) -> Optional[str]:
    """Return ``YYYY-MM-DD-slug`` for published posts and ``draft-slug`` otherwise."""
    if not metadata.slug:
        return None
    if metadata.published_at is not None:
        prefix = metadata.published_at.astimezone(tz).strftime("%Y-%m-%d")
    else:
        prefix = "draft"
    return f"{prefix}-{metadata.slug}"


def convert_medium_html(
    html: str, metadata: PostMetadata, options: ConverterOptions
) -> ConversionResult:
    """Run the scrape, rewrite, cleanup, detection and rendering stages."""
    pattern = options.image_url_pattern
    urls = scrape_assets(html, pattern)
    assets = build_asset_references(urls, options.image_url_prefix)

    rewritten = rewrite_asset_urls(html, pattern, options.image_url_prefix)
    body_html = cleanup_html(rewritten)
    if options.detect_languages:
        body_html = detect_code_block_languages(body_html, options.languages)
    body = render_markdown(body_html, options.render)
    content = compose_markdown(metadata, body, options.timezone)
    return ConversionResult(content=content, assets=assets)


def convert_html_to_markdown(
    html: str, options: ConverterOptions, source_name: str = "<html>"
) -> PostConversion:
    """Convert one export document, refusing comments and unnameable posts."""
    metadata = extract_metadata(html)
    if metadata.looks_like_comment:
        raise NotAPostError(f"{source_name} looks like a comment, not a post")

    basename = suggested_output_basename(metadata, options.timezone)
    if basename is None:
        raise OutputNameError(
            f"Unable to derive an output file name for {source_name!r}: "
            "the post has neither a canonical link nor a title"
        )

    post_options = replace(
        options, image_url_prefix=posixpath.join(options.image_url_prefix, basename)
    )
    result = convert_medium_html(html, metadata, post_options)
    return PostConversion(
        metadata=metadata,
        output_basename=basename,
        content=result.content,
        assets=result.assets,
    )


def build_image_list(file_result: FileResult) -> str:
    """Render an aria2c input file listing each asset and its target directory."""
    lines: List[str] = []
    for asset in file_result.assets:
        lines.append(asset.remote_url)
        lines.append(f"  dir={file_result.download_dir}")
    return "\n".join(lines) + "\n"


def convert_file(path: Path, config: RunConfig) -> FileResult:
    """Convert an export file and write the Markdown next to it (or to ``output_dir``)."""
    html = path.read_text(encoding="utf-8")
    post = convert_html_to_markdown(html, config.converter, source_name=path.name)

    output_dir = config.output_dir or path.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{post.output_basename}.md"
    output_path.write_text(post.content, encoding="utf-8")
    logger.info("Saved Markdown to %s", output_path)

    image_root = config.image_dir
    if not image_root.is_absolute():
        image_root = output_dir / image_root
    result = FileResult(
        source_path=path,
        output_path=output_path,
        download_dir=image_root / post.output_basename,
        assets=post.assets,
    )

    if config.write_image_list and post.assets:
        image_list_path = output_dir / f"{post.output_basename}.images.txt"
        image_list_path.write_text(build_image_list(result), encoding="utf-8")
        result.image_list_path = image_list_path
        logger.info("Saved image list to %s", image_list_path)
    return result


async def run_converter(paths: Sequence[Path], config: RunConfig) -> RunSummary:
    """Convert every path concurrently; one bad file never stops the others."""
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(convert_file, path, config) for path in paths),
        return_exceptions=True,
    )

    summary = RunSummary()
    for path, outcome in zip(paths, outcomes):
        if isinstance(outcome, NotAPostError):
            logger.info("Skip %s: not a post", path)
            summary.skipped.append(path)
        elif isinstance(outcome, Exception):
            logger.error("Failed to convert %s: %s", path, outcome)
            summary.failed.append(path)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            summary.converted.append(outcome)
    return summary
