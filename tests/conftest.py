import pytest

from searchcore.indexer import InvertedIndex
from searchcore.segmenter import set_segmenter
from searchcore.store import IndexStore
from searchcore.tokenizer import Tokenizer


class WhitespaceSegmenter:
    """Deterministic stand-in for jieba: words are already space separated."""

    def __init__(self):
        self.calls = 0

    def segment(self, text: str) -> str:
        self.calls += 1
        return " ".join(text.split())


class FixedSegmenter:
    """Ignores its input and returns a canned segmentation."""

    def __init__(self, output: str):
        self.output = output

    def segment(self, text: str) -> str:
        return self.output


@pytest.fixture(autouse=True)
def segmenter():
    """Install the whitespace segmenter as the process-wide default."""
    seg = WhitespaceSegmenter()
    set_segmenter(seg)
    yield seg
    set_segmenter(None)


@pytest.fixture
def store(tmp_path):
    s = IndexStore(str(tmp_path / "index.db"))
    yield s
    s.close()


@pytest.fixture
def index(store, segmenter):
    tokenizer = Tokenizer(segmenter=segmenter, stopwords={"the", "a", "of"})
    return InvertedIndex(store, tokenizer)
