"""Word segmentation for text without whitespace word boundaries.

Wraps jieba behind a one-method interface: normalized text in,
space-joined tokens out.  The jieba dictionary is expensive to build, so
each adapter builds its engine once, on first use, and keeps it for the
life of the process.  A process-wide default adapter is exposed through
get_segmenter()/set_segmenter(); tests swap in a deterministic fake.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

import jieba

from searchcore.config import Settings

logger = logging.getLogger(__name__)


class SegmenterInitError(RuntimeError):
    """The segmentation engine could not be built."""


class Segmenter(Protocol):
    def segment(self, text: str) -> str: ...


class JiebaSegmenter:
    """jieba in precise mode.

    Precise mode (cut_all=False) picks the maximum-probability path over
    the dictionary DAG, i.e. maximal matching disambiguated by word
    frequency.  HMM=True lets jieba merge runs of single characters into
    multi-character words missing from the dictionary.
    """

    def __init__(
        self,
        dictionary: str | None = None,
        user_dict: str | None = None,
        hmm: bool = True,
    ):
        self.dictionary = dictionary
        self.user_dict = user_dict
        self.hmm = hmm
        self._engine: jieba.Tokenizer | None = None
        self._error: Exception | None = None
        self._lock = threading.Lock()

    def _build(self) -> jieba.Tokenizer:
        if self.dictionary:
            engine = jieba.Tokenizer(dictionary=self.dictionary)
        else:
            engine = jieba.Tokenizer()
        engine.initialize()
        if self.user_dict:
            engine.load_userdict(self.user_dict)
        return engine

    def _ensure_engine(self) -> jieba.Tokenizer:
        engine = self._engine
        if engine is not None:
            return engine

        with self._lock:
            if self._engine is not None:
                return self._engine
            if self._error is not None:
                raise SegmenterInitError(
                    f"segmenter failed to initialize earlier: {self._error}"
                ) from self._error
            try:
                self._engine = self._build()
            except Exception as e:
                self._error = e
                raise SegmenterInitError(f"cannot initialize jieba: {e}") from e
            logger.info(
                "Segmenter ready (dictionary=%s, user_dict=%s)",
                self.dictionary or "default",
                self.user_dict or "none",
            )
            return self._engine

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    def reset(self) -> None:
        """Forget the engine and any earlier init failure."""
        with self._lock:
            self._engine = None
            self._error = None

    def segment(self, text: str) -> str:
        engine = self._ensure_engine()
        return " ".join(engine.cut(text, cut_all=False, HMM=self.hmm))


# ── Process-wide default ────────────────────────────────────────────

_default: Segmenter | None = None
_default_lock = threading.Lock()


def get_segmenter() -> Segmenter:
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                settings = Settings.from_env()
                _default = JiebaSegmenter(settings.dictionary, settings.user_dict)
    return _default


def set_segmenter(segmenter: Segmenter | None) -> None:
    """Replace the default segmenter; None restores lazy jieba construction."""
    global _default
    with _default_lock:
        _default = segmenter


def segment(text: str) -> str:
    return get_segmenter().segment(text)
