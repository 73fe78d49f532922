"""Command-line entry point for the Medium to Jekyll converter."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import __version__
from .config import (
    BULLET_MARKERS,
    CODE_BLOCK_STYLES,
    DEFAULT_IMAGE_DIR,
    DEFAULT_IMAGE_URL_PREFIX,
    DEFAULT_LANGUAGES,
    EM_DELIMITERS,
    FENCES,
    FIGURE_STYLES,
    HEADING_STYLES,
    HR_STYLES,
    LINK_REFERENCE_STYLES,
    LINK_STYLES,
    STRONG_DELIMITERS,
    ConverterOptions,
    RenderOptions,
    RunConfig,
)
from .converter import run_converter
from .images import download_assets
from .languages import is_supported_language

logger = logging.getLogger("medium_jekyll.cli")


def _language_id(value: str) -> str:
    if not is_supported_language(value):
        raise argparse.ArgumentTypeError(f"unsupported language {value!r}")
    return value


def _timezone(value: str) -> ZoneInfo:
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"unknown timezone {value!r}") from exc


def _add_markdown_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("Markdown style")
    group.add_argument(
        "--md-hh", choices=HEADING_STYLES, default="atx", help="Heading style"
    )
    group.add_argument("--md-hr", choices=HR_STYLES, default="---", help="Thematic break")
    group.add_argument(
        "--md-ul", choices=BULLET_MARKERS, default="-", help="Bullet list marker"
    )
    group.add_argument(
        "--md-code", choices=CODE_BLOCK_STYLES, default="fenced", help="Code block style"
    )
    group.add_argument("--md-fence", choices=FENCES, default="```", help="Code fence")
    group.add_argument(
        "--md-em", choices=EM_DELIMITERS, default="_", help="Emphasis delimiter"
    )
    group.add_argument(
        "--md-strong", choices=STRONG_DELIMITERS, default="**", help="Strong delimiter"
    )
    group.add_argument("--md-link", choices=LINK_STYLES, default="inlined", help="Link style")
    group.add_argument(
        "--md-ref",
        choices=LINK_REFERENCE_STYLES,
        default="full",
        help="Link reference style (with --md-link referenced)",
    )
    group.add_argument(
        "--md-figure",
        choices=FIGURE_STYLES,
        default="no",
        help='Figure style: caption as alt text, as title, or "no" to keep a <figure> tag',
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Convert posts from a Medium export (posts/*.html) into Jekyll Markdown. "
            "Download your export from https://medium.com/me/settings, extract it, "
            "and pass the post files."
        ),
    )
    parser.add_argument("files", nargs="+", type=Path, metavar="FILE", help="Input HTML files")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory for Markdown files (default: next to each input file)",
    )
    parser.add_argument(
        "--image-url-prefix",
        default=DEFAULT_IMAGE_URL_PREFIX,
        help="URL prefix for rewritten image references",
    )
    parser.add_argument(
        "--image-dir",
        type=Path,
        default=Path(DEFAULT_IMAGE_DIR),
        help="Directory for downloaded images, relative to the output directory",
    )
    parser.add_argument(
        "--languages",
        action="append",
        type=_language_id,
        default=None,
        metavar="LANG",
        help="Programming language to detect in code blocks; repeat for more "
        f"(default: {' '.join(DEFAULT_LANGUAGES)})",
    )
    parser.add_argument(
        "--no-detect-languages",
        dest="detect_languages",
        action="store_false",
        help="Disable programming language detection",
    )
    parser.add_argument(
        "--timezone",
        type=_timezone,
        default=None,
        help="IANA timezone for post dates (default: system local time)",
    )
    parser.add_argument(
        "--no-download",
        dest="download",
        action="store_false",
        help="Do not download images after converting",
    )
    parser.add_argument(
        "--image-list",
        action="store_true",
        help="Write <post>.images.txt listing image URLs in aria2c input format",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    _add_markdown_arguments(parser)
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RunConfig:
    render = RenderOptions(
        heading_style=args.md_hh,
        hr=args.md_hr,
        bullet_list_marker=args.md_ul,
        code_block_style=args.md_code,
        fence=args.md_fence,
        em_delimiter=args.md_em,
        strong_delimiter=args.md_strong,
        link_style=args.md_link,
        link_reference_style=args.md_ref,
        figure_style=args.md_figure,
    )
    converter = ConverterOptions(
        languages=tuple(args.languages or DEFAULT_LANGUAGES),
        detect_languages=args.detect_languages,
        image_url_prefix=args.image_url_prefix,
        timezone=args.timezone,
        render=render,
    )
    return RunConfig(
        converter=converter,
        output_dir=args.output.resolve() if args.output else None,
        image_dir=args.image_dir,
        download_assets=args.download,
        write_image_list=args.image_list,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    config = build_config(args)
    logger.debug("Converter options: %s", config)

    overall_start = time.perf_counter()
    summary = asyncio.run(run_converter(args.files, config))

    download_failures = 0
    if config.download_assets:
        for result in summary.converted:
            if not result.assets:
                continue
            logger.info("Downloading %d image(s) to %s", len(result.assets), result.download_dir)
            downloads = download_assets(result.assets, result.download_dir)
            download_failures += sum(1 for item in downloads if not item.ok)

    total_elapsed = time.perf_counter() - overall_start
    logger.info(
        "Finished in %.2fs (%d converted, %d skipped, %d failed, %d image download(s) failed)",
        total_elapsed,
        len(summary.converted),
        len(summary.skipped),
        len(summary.failed),
        download_failures,
    )
    return 1 if summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
