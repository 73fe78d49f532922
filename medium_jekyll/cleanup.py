"""Structural rewrites that undo Medium export quirks before rendering."""

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional

from bs4 import BeautifulSoup, Comment, Tag

logger = logging.getLogger("medium_jekyll")

BODY_ATTRS = {"data-field": "body"}
HEADING_SHIFT = {"h3": "h2", "h4": "h3", "h5": "h4", "h6": "h5"}


def _previous_element(tag: Tag) -> Optional[Tag]:
    """Return the previous sibling tag, looking past whitespace and comments."""
    node = tag.previous_sibling
    while node is not None:
        if isinstance(node, Tag):
            return node
        if isinstance(node, Comment) or not str(node).strip():
            node = node.previous_sibling
            continue
        return None
    return None


def _first_content_section(body: Tag) -> Tag:
    section = body.find("section", class_="section")
    if section is None:
        section = body.find("section")
    return section if section is not None else body


def _remove_title_artifacts(body: Tag) -> None:
    section = _first_content_section(body)
    divider = section.find(class_="section-divider")
    if divider is not None:
        divider.decompose()
    title_heading = section.find("h3")
    if title_heading is not None:
        logger.debug("Dropping duplicated title heading %r", title_heading.get_text())
        title_heading.decompose()


def _escalate_headings(body: Tag) -> None:
    for heading in body.find_all(list(HEADING_SHIFT)):
        heading.name = HEADING_SHIFT[heading.name]


def _flatten_code_blocks(soup: BeautifulSoup, body: Tag) -> None:
    for pre in body.find_all("pre"):
        for br in pre.find_all("br"):
            br.replace_with(soup.new_string("\n"))
        children = [child for child in pre.children if isinstance(child, Tag)]
        if len(children) == 1 and children[0].name == "code":
            children[0].unwrap()


def _merge_adjacent(body: Tag, name: str, separator: Callable[[], List]) -> int:
    groups: List[List[Tag]] = []
    for element in body.find_all(name):
        if groups and _previous_element(element) is groups[-1][-1]:
            groups[-1].append(element)
        else:
            groups.append([element])

    merged = 0
    for head, *followers in groups:
        for follower in followers:
            for node in separator():
                head.append(node)
            for child in list(follower.contents):
                head.append(child.extract())
            follower.decompose()
            merged += 1
    return merged


def _rewrap_code_blocks(soup: BeautifulSoup, body: Tag) -> None:
    for pre in body.find_all("pre"):
        code = soup.new_tag("code")
        for child in list(pre.contents):
            code.append(child.extract())
        pre.append(code)


def _localize_images(body: Tag, local_assets: Mapping[str, str]) -> None:
    for img in body.find_all("img"):
        src = img.get("src")
        if src in local_assets:
            img["src"] = local_assets[src]


def cleanup_html(html: str, local_assets: Optional[Mapping[str, str]] = None) -> str:
    """Return the cleaned inner HTML of the post body.

    Each pass collects its targets before touching the tree, and every pass
    runs exactly once per call: running the heading shift twice would push
    headings up two levels.
    """
    soup = BeautifulSoup(html, "html.parser")
    body = soup.find(attrs=BODY_ATTRS)
    if body is None:
        logger.warning("No body section found; nothing to convert")
        return ""

    _remove_title_artifacts(body)
    _escalate_headings(body)
    _flatten_code_blocks(soup, body)
    merged_pre = _merge_adjacent(body, "pre", lambda: [soup.new_string("\n\n")])
    _rewrap_code_blocks(soup, body)
    merged_quotes = _merge_adjacent(
        body, "blockquote", lambda: [soup.new_tag("br"), soup.new_tag("br")]
    )
    if local_assets:
        _localize_images(body, local_assets)

    logger.debug(
        "Cleanup merged %d code block(s) and %d quote(s)", merged_pre, merged_quotes
    )
    return body.decode_contents()
