"""Best-effort programming language detection for code blocks."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import FrozenSet, List, Optional, Sequence

from bs4 import BeautifulSoup
from pygments.lexer import Lexer
from pygments.lexers import get_all_lexers, get_lexer_by_name, guess_lexer
from pygments.token import Error, Keyword, Name, Punctuation
from pygments.util import ClassNotFound

logger = logging.getLogger("medium_jekyll")

LANGUAGE_CLASS_PREFIX = "language-"

# A block is tagged only when its best score reaches this value.
MIN_CONFIDENCE = 0.1
ERROR_PENALTY = 2.0
ANALYSER_WEIGHT = 0.1
_TAG_OPENERS = ("<", "/")


@lru_cache(maxsize=None)
def _known_aliases() -> FrozenSet[str]:
    aliases = set()
    for _name, lexer_aliases, _filenames, _mimetypes in get_all_lexers():
        aliases.update(lexer_aliases)
    return frozenset(aliases)


def supported_languages() -> List[str]:
    """Every language alias the classifier knows about, sorted."""
    return sorted(_known_aliases())


def is_supported_language(alias: str) -> bool:
    return alias in _known_aliases()


def _resolve_lexers(languages: Sequence[str]) -> List[Lexer]:
    lexers: List[Lexer] = []
    for alias in languages:
        try:
            lexers.append(get_lexer_by_name(alias))
        except ClassNotFound:
            logger.debug("Unknown language %r ignored for detection", alias)
    return lexers


def _primary_alias(lexer: Lexer) -> Optional[str]:
    return lexer.aliases[0] if lexer.aliases else None


def token_score(lexer: Lexer, code: str) -> float:
    """Rate how well ``lexer`` understands ``code``.

    The score is the share of non-blank characters lexed as keywords,
    builtins or markup tag names, minus a penalty for characters the lexer
    rejects as errors. Most lexers read any identifier as a plain name, so
    only the constructs a language reserves move the score.
    """
    total = recognized = errors = 0
    previous = None
    for ttype, value in lexer.get_tokens(code):
        size = len("".join(value.split()))
        if not size:
            continue
        total += size
        if ttype in Error:
            errors += size
        elif ttype in Keyword or ttype in Name.Builtin:
            recognized += size
        elif (
            ttype in Name.Tag
            and previous is not None
            and previous[0] in Punctuation
            and previous[1] in _TAG_OPENERS
        ):
            recognized += size
        previous = (ttype, value.strip())
    if not total:
        return 0.0
    return (recognized - ERROR_PENALTY * errors) / total


def guess_language(code: str, languages: Sequence[str] = ()) -> Optional[str]:
    """Return the most likely language alias for ``code`` or ``None``.

    With ``languages`` the candidates are limited to those aliases. Each is
    scored with :func:`token_score` plus a small bonus from the lexer's own
    ``analyse_text`` hint; the best score wins if it reaches
    ``MIN_CONFIDENCE``, earlier aliases winning ties. Without it every known
    lexer is considered.
    """
    if not code.strip():
        return None

    if not languages:
        try:
            return _primary_alias(guess_lexer(code))
        except ClassNotFound:
            return None

    best: Optional[Lexer] = None
    best_score = MIN_CONFIDENCE
    for lexer in _resolve_lexers(languages):
        score = token_score(lexer, code) + ANALYSER_WEIGHT * lexer.analyse_text(code)
        logger.debug("Language score %s=%.3f", lexer.name, score)
        if score > best_score or (best is None and score == best_score):
            best, best_score = lexer, score
    return _primary_alias(best) if best is not None else None


def detect_code_block_languages(html: str, languages: Sequence[str] = ()) -> str:
    """Tag every ``pre > code`` block with a ``language-*`` class when one is detected."""
    soup = BeautifulSoup(html, "html.parser")
    for pre in soup.find_all("pre"):
        code = pre.find("code", recursive=False)
        if code is None:
            continue
        try:
            language = guess_language(code.get_text(), languages)
        except Exception as exc:  # noqa: BLE001 - detection is best effort
            logger.debug("Language detection failed: %s", exc)
            language = None
        if not language:
            continue
        classes = list(code.get("class", []))
        classes.append(LANGUAGE_CLASS_PREFIX + language)
        code["class"] = classes
        logger.debug("Detected %s code block", language)
    return soup.decode()
