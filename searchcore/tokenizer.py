"""Turns raw document or query text into a keyword set.

normalize → segment → split on single spaces → drop empty and
punctuation-only tokens → dedupe → drop stopwords.  Tokens are not
lowercased or stemmed; stopword matching is exact.
"""

from __future__ import annotations

import logging
import threading
from functools import lru_cache
from pathlib import Path

from searchcore.config import Settings
from searchcore.normalizer import is_punctuation, normalize
from searchcore.segmenter import Segmenter, get_segmenter

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_stopwords(path: str | None) -> frozenset[str]:
    """Read a line-delimited stopword list.  Missing file → empty set."""
    if not path:
        return frozenset()
    p = Path(path)
    if not p.is_file():
        logger.debug("Stopword list not found, using none: %s", path)
        return frozenset()
    lines = p.read_text(encoding="utf-8").splitlines()
    words = frozenset(line.strip() for line in lines if line.strip())
    logger.debug("Loaded %d stopwords from %s", len(words), path)
    return words


def is_punctuation_token(token: str) -> bool:
    return all(is_punctuation(c) for c in token)


class Tokenizer:
    def __init__(
        self,
        segmenter: Segmenter | None = None,
        stopwords: frozenset[str] | set[str] | None = None,
    ):
        """
        Args:
            segmenter: Segmentation adapter; defaults to the process-wide one,
                resolved on each call.
            stopwords: Tokens never emitted; defaults to the configured
                stopword list.  Pass an empty set to keep every token.
        """
        self._segmenter = segmenter
        if stopwords is None:
            stopwords = load_stopwords(Settings.from_env().stopwords_path)
        self.stopwords = frozenset(stopwords)

    @property
    def segmenter(self) -> Segmenter:
        return self._segmenter if self._segmenter is not None else get_segmenter()

    def tokenize(self, text: str) -> set[str]:
        normalized = normalize(text)
        if not normalized:
            return set()

        segmented = self.segmenter.segment(normalized)
        # jieba emits newlines and tabs as tokens of their own; treat them as empty.
        tokens = {
            t
            for t in segmented.split(" ")
            if t.strip() and not is_punctuation_token(t)
        }
        return tokens - self.stopwords


# ── Default instance ────────────────────────────────────────────────

_default_tokenizer: Tokenizer | None = None
_default_lock = threading.Lock()


def get_tokenizer() -> Tokenizer:
    global _default_tokenizer
    if _default_tokenizer is None:
        with _default_lock:
            if _default_tokenizer is None:
                _default_tokenizer = Tokenizer()
    return _default_tokenizer


def tokenize(text: str) -> set[str]:
    """Tokenize with the default segmenter and the configured stopword list."""
    return get_tokenizer().tokenize(text)
