"""Text normalization shared by indexing and search.

Both sides must normalize identically; a pass that runs only at index
time would make stored keywords unreachable from queries.

The pipeline is an ordered tuple of rewrite passes.  Order matters:
markup goes first so tags inside code fences do not confuse the fence
patterns, and punctuation goes last so delimiters of the earlier passes
need no escaping.
"""

from __future__ import annotations

import re
import string
import unicodedata
from typing import Callable

from bs4 import BeautifulSoup
from bs4.element import CData, NavigableString, Script, Stylesheet, TemplateString

ASCII_PUNCTUATION = frozenset(string.punctuation)

# get_text() skips <script>/<style>/<template> bodies by default; an unclosed
# tag mentioned in prose would otherwise swallow the rest of the document.
TEXT_TYPES = (NavigableString, CData, Script, Stylesheet, TemplateString)

# Lazy quantifiers / negated classes keep every match as short as possible,
# so an unterminated marker never swallows the rest of the document.
FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")
INLINE_CODE_RE = re.compile(r"`[^`]*`")
BLOCK_MATH_RE = re.compile(r"\$\$[\s\S]*?\$\$")
INLINE_MATH_RE = re.compile(r"\$[^$]*\$")
IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]+\)")
LINK_RE = re.compile(r"\[[^\]]*\]\([^)]+\)")


def is_punctuation(char: str) -> bool:
    """ASCII punctuation or any Unicode P* character (，。「」 …)."""
    return char in ASCII_PUNCTUATION or unicodedata.category(char).startswith("P")


# ── Passes ──────────────────────────────────────────────────────────


def strip_markup(text: str) -> str:
    """Drop HTML/XML tags, keep their text content."""
    if "<" not in text:
        return text
    return BeautifulSoup(text, "html.parser").get_text(types=TEXT_TYPES)


def remove_fenced_code(text: str) -> str:
    return FENCED_CODE_RE.sub(" ", text)


def remove_inline_code(text: str) -> str:
    return INLINE_CODE_RE.sub(" ", text)


def remove_block_math(text: str) -> str:
    return BLOCK_MATH_RE.sub(" ", text)


def remove_inline_math(text: str) -> str:
    return INLINE_MATH_RE.sub(" ", text)


def remove_images(text: str) -> str:
    return IMAGE_RE.sub(" ", text)


def remove_links(text: str) -> str:
    return LINK_RE.sub(" ", text)


def remove_punctuation(text: str) -> str:
    return "".join(" " if is_punctuation(c) else c for c in text)


PIPELINE: tuple[Callable[[str], str], ...] = (
    strip_markup,
    remove_fenced_code,
    remove_inline_code,
    remove_block_math,
    remove_inline_math,
    remove_images,
    remove_links,
    remove_punctuation,
)


def normalize(text: str) -> str:
    """Markup → code → math → images → links → punctuation → trim."""
    for rewrite in PIPELINE:
        text = rewrite(text)
    return text.strip()
