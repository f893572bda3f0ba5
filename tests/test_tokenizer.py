from conftest import FixedSegmenter

from searchcore.config import DEFAULT_STOPWORDS_PATH
from searchcore.tokenizer import Tokenizer, is_punctuation_token, load_stopwords, tokenize


class ExplodingSegmenter:
    def segment(self, text: str) -> str:
        raise AssertionError("segmenter should not be called")


def test_deduplicates(segmenter):
    tok = Tokenizer(segmenter=segmenter)
    assert tok.tokenize("alpha alpha alpha beta") == {"alpha", "beta"}


def test_removes_stopwords(segmenter):
    tok = Tokenizer(segmenter=segmenter, stopwords={"the"})
    assert tok.tokenize("the cat on the mat") == {"cat", "on", "mat"}


def test_stopwords_are_exact_match(segmenter):
    tok = Tokenizer(segmenter=segmenter, stopwords={"the"})
    assert tok.tokenize("The cat") == {"The", "cat"}


def test_no_case_folding(segmenter):
    tok = Tokenizer(segmenter=segmenter)
    assert tok.tokenize("Python python") == {"Python", "python"}


def test_drops_empty_whitespace_and_punctuation_tokens():
    tok = Tokenizer(segmenter=FixedSegmenter("alpha  ， \n beta ... 。"))
    assert tok.tokenize("anything") == {"alpha", "beta"}


def test_empty_text_skips_segmenter():
    tok = Tokenizer(segmenter=ExplodingSegmenter())
    assert tok.tokenize("") == set()
    assert tok.tokenize("  !!! `code` ") == set()


def test_uses_default_segmenter(segmenter):
    tok = Tokenizer()
    assert tok.tokenize("one two") == {"one", "two"}
    assert segmenter.calls == 1


def test_default_stopwords_come_from_settings(segmenter):
    assert Tokenizer(segmenter=segmenter).tokenize("the quick fox") == {"quick", "fox"}


def test_empty_stopword_set_keeps_every_token(segmenter):
    tok = Tokenizer(segmenter=segmenter, stopwords=frozenset())
    assert tok.tokenize("the quick fox") == {"the", "quick", "fox"}


def test_module_tokenize_applies_bundled_stopwords():
    assert tokenize("the quick fox") == {"quick", "fox"}


def test_is_punctuation_token():
    assert is_punctuation_token("...")
    assert is_punctuation_token("，。")
    assert not is_punctuation_token("a.")


def test_load_stopwords(tmp_path):
    path = tmp_path / "stop.txt"
    path.write_text("的\n\n  了 \nthe\n", encoding="utf-8")
    assert load_stopwords(str(path)) == frozenset({"的", "了", "the"})


def test_load_stopwords_missing_file(tmp_path):
    assert load_stopwords(str(tmp_path / "missing.txt")) == frozenset()
    assert load_stopwords(None) == frozenset()


def test_bundled_stopwords():
    words = load_stopwords(DEFAULT_STOPWORDS_PATH)
    assert "的" in words
    assert "the" in words
