"""Configuration objects and constants for the converter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from typing import Optional, Pattern, Tuple

MEDIUM_IMAGE_PATTERN = re.compile(r"^https://cdn-images-.+\.medium\.com")
DEFAULT_IMAGE_URL_PREFIX = "/images"
DEFAULT_IMAGE_DIR = "images"
DEFAULT_LANGUAGES = ("js", "css", "html", "py", "rb", "java", "sql", "go")

HEADING_STYLES = ("atx", "setext")
HR_STYLES = ("---", "* * *", "___")
BULLET_MARKERS = ("-", "+", "*")
CODE_BLOCK_STYLES = ("fenced", "indented")
FENCES = ("```", "~~~")
EM_DELIMITERS = ("_", "*")
STRONG_DELIMITERS = ("**", "__")
LINK_STYLES = ("inlined", "referenced")
LINK_REFERENCE_STYLES = ("full", "collapsed", "shortcut")
FIGURE_STYLES = ("alt", "title", "no")


@dataclass
class RenderOptions:
    """Markdown style knobs handed to the renderer."""

    heading_style: str = "atx"
    hr: str = "---"
    bullet_list_marker: str = "-"
    code_block_style: str = "fenced"
    fence: str = "```"
    em_delimiter: str = "_"
    strong_delimiter: str = "**"
    link_style: str = "inlined"
    link_reference_style: str = "full"
    figure_style: str = "no"

    def __post_init__(self) -> None:
        for name, allowed in (
            ("heading_style", HEADING_STYLES),
            ("hr", HR_STYLES),
            ("bullet_list_marker", BULLET_MARKERS),
            ("code_block_style", CODE_BLOCK_STYLES),
            ("fence", FENCES),
            ("em_delimiter", EM_DELIMITERS),
            ("strong_delimiter", STRONG_DELIMITERS),
            ("link_style", LINK_STYLES),
            ("link_reference_style", LINK_REFERENCE_STYLES),
            ("figure_style", FIGURE_STYLES),
        ):
            value = getattr(self, name)
            if value not in allowed:
                raise ValueError(
                    f"Invalid {name} {value!r}; expected one of {', '.join(allowed)}"
                )


@dataclass
class ConverterOptions:
    """Settings that control a single document conversion."""

    languages: Tuple[str, ...] = ()
    detect_languages: bool = True
    image_url_prefix: str = DEFAULT_IMAGE_URL_PREFIX
    image_url_pattern: Pattern[str] = MEDIUM_IMAGE_PATTERN
    timezone: Optional[tzinfo] = None
    render: RenderOptions = field(default_factory=RenderOptions)


@dataclass
class RunConfig:
    """Top-level settings for a batch run over several export files."""

    converter: ConverterOptions = field(default_factory=ConverterOptions)
    output_dir: Optional[Path] = None
    image_dir: Path = Path(DEFAULT_IMAGE_DIR)
    download_assets: bool = True
    write_image_list: bool = False
