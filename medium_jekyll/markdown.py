"""Markdown rendering and front matter composition."""

from __future__ import annotations

import html as html_lib
import logging
import re
from datetime import tzinfo
from typing import Any, Dict, List, Optional, Sequence, Set

import yaml
from bs4 import Tag
from markdownify import UNDERLINED, MarkdownConverter, abstract_inline_conversion, chomp

from .config import RenderOptions
from .languages import LANGUAGE_CLASS_PREFIX
from .models import PostMetadata

logger = logging.getLogger("medium_jekyll")

DATE_FORMAT = "%Y-%m-%d %H:%M"
_PRE_LEADING = re.compile(r"^[ \n]*\n")
_PRE_TRAILING = re.compile(r"[ \n]*$")


class ElementRule:
    """A per-element rendering override consulted before the generic converter."""

    def matches(self, el: Tag) -> bool:
        raise NotImplementedError

    def replacement(
        self, converter: "PostMarkdownConverter", el: Tag, parent_tags: Set[str]
    ) -> str:
        raise NotImplementedError


def _title_part(title: str) -> str:
    return ' "%s"' % title.replace('"', r"\"") if title else ""


class FigureRule(ElementRule):
    """Fold ``<figure><img><figcaption>`` into a single image.

    ``figure_style`` picks where the caption ends up: the alt text, the title,
    or (``no``) a literal ``<figure>`` block that keeps rich caption markup.
    """

    def matches(self, el: Tag) -> bool:
        return (
            el.name == "figure"
            and el.find("img") is not None
            and el.find("figcaption") is not None
        )

    def replacement(self, converter, el, parent_tags):
        img = el.find("img")
        caption = el.find("figcaption")
        src = img.get("src") or ""
        alt = img.get("alt") or ""
        title = img.get("title") or ""
        caption_text = caption.get_text().strip()
        style = converter.options["figure_style"]

        if style == "alt":
            return "\n\n![%s](%s%s)\n\n" % (caption_text or alt, src, _title_part(title))
        if style == "title":
            return "\n\n![%s](%s%s)\n\n" % (alt, src, _title_part(caption_text or title))

        attrs = " ".join(
            '%s="%s"' % (name, html_lib.escape(value, quote=True))
            for name, value in (("alt", alt), ("src", src), ("title", title))
        )
        return (
            "\n\n<figure>\n"
            f"  <img {attrs} />\n"
            f"  <figcaption>{caption.decode_contents()}</figcaption>\n"
            "</figure>\n\n"
        )


DEFAULT_ELEMENT_RULES: Sequence[ElementRule] = (FigureRule(),)


def code_block_language(pre: Tag) -> Optional[str]:
    """Read the ``language-*`` class left on ``pre > code`` by detection."""
    code = pre.find("code")
    if code is None:
        return None
    for cls in code.get("class", []):
        if cls.startswith(LANGUAGE_CLASS_PREFIX):
            return cls[len(LANGUAGE_CLASS_PREFIX):]
    return None


class PostMarkdownConverter(MarkdownConverter):
    """markdownify converter honoring the full set of post render options."""

    class Options:
        code_block_style = "fenced"
        fence = "```"
        em_delimiter = "_"
        strong_delimiter = "**"
        hr = "---"
        link_style = "inlined"
        link_reference_style = "full"
        figure_style = "no"
        element_rules: Sequence[ElementRule] = ()

    def __init__(self, **options: Any) -> None:
        super().__init__(**options)
        self._references: List[str] = []

    def convert_soup(self, soup):
        self._references = []
        text = super().convert_soup(soup)
        if self._references:
            text = text.rstrip("\n") + "\n\n" + "\n".join(self._references)
        return text

    def process_tag(self, node, parent_tags=None):
        for rule in self.options["element_rules"]:
            if rule.matches(node):
                return rule.replacement(self, node, parent_tags or set())
        return super().process_tag(node, parent_tags=parent_tags)

    convert_em = abstract_inline_conversion(lambda self: self.options["em_delimiter"])
    convert_i = convert_em
    convert_strong = abstract_inline_conversion(
        lambda self: self.options["strong_delimiter"]
    )
    convert_b = convert_strong

    def convert_hr(self, el, text, parent_tags):
        return "\n\n%s\n\n" % self.options["hr"]

    def convert_a(self, el, text, parent_tags):
        if self.options["link_style"] != "referenced":
            return super().convert_a(el, text, parent_tags)
        if "_noformat" in parent_tags:
            return text
        prefix, suffix, text = chomp(text)
        if not text:
            return ""
        href = el.get("href")
        if not href:
            return text
        title_part = _title_part(el.get("title") or "")

        style = self.options["link_reference_style"]
        if style == "collapsed":
            link = "[%s][]" % text
            self._references.append("[%s]: %s%s" % (text, href, title_part))
        elif style == "shortcut":
            link = "[%s]" % text
            self._references.append("[%s]: %s%s" % (text, href, title_part))
        else:
            number = len(self._references) + 1
            link = "[%s][%d]" % (text, number)
            self._references.append("[%d]: %s%s" % (number, href, title_part))
        return prefix + link + suffix

    def convert_pre(self, el, text, parent_tags):
        if not text:
            return ""
        text = _PRE_LEADING.sub("", text)
        text = _PRE_TRAILING.sub("", text)

        if self.options["code_block_style"] == "indented":
            indented = "\n".join(
                "    " + line if line else "" for line in text.split("\n")
            )
            return "\n\n%s\n\n" % indented

        fence = self.options["fence"]
        language = code_block_language(el) or ""
        return "\n\n%s%s\n%s\n%s\n\n" % (fence, language, text, fence)


def render_markdown(
    html: str,
    options: Optional[RenderOptions] = None,
    element_rules: Sequence[ElementRule] = DEFAULT_ELEMENT_RULES,
) -> str:
    """Convert cleaned post HTML to Markdown without front matter."""
    options = options or RenderOptions()
    converter = PostMarkdownConverter(
        heading_style=UNDERLINED if options.heading_style == "setext" else "atx",
        bullets=options.bullet_list_marker,
        code_block_style=options.code_block_style,
        fence=options.fence,
        em_delimiter=options.em_delimiter,
        strong_delimiter=options.strong_delimiter,
        hr=options.hr,
        link_style=options.link_style,
        link_reference_style=options.link_reference_style,
        figure_style=options.figure_style,
        element_rules=tuple(element_rules),
    )
    return converter.convert(html)


def front_matter(metadata: PostMetadata, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
    """Build the Jekyll front matter mapping for a post."""
    matter: Dict[str, Any] = {
        "layout": "post",
        "title": metadata.title,
        "published": metadata.is_published,
    }
    if metadata.published_at is not None:
        matter["date"] = metadata.published_at.astimezone(tz).strftime(DATE_FORMAT)
    return matter


def compose_markdown(
    metadata: PostMetadata, body: str, tz: Optional[tzinfo] = None
) -> str:
    """Generate final Markdown including front matter."""
    header = yaml.safe_dump(
        front_matter(metadata, tz), sort_keys=False, allow_unicode=True
    ).strip()
    return "---\n%s\n---\n\n%s\n" % (header, body.strip())
