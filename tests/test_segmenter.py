import threading

import pytest

from searchcore.segmenter import (
    JiebaSegmenter,
    SegmenterInitError,
    get_segmenter,
    segment,
    set_segmenter,
)


class FakeEngine:
    def cut(self, text, cut_all=False, HMM=True):
        return iter(text.split())


def test_jieba_segments_chinese():
    seg = JiebaSegmenter()
    tokens = seg.segment("我爱北京天安门").split(" ")
    assert "北京" in tokens
    assert "天安门" in tokens


def test_initializes_lazily_and_once(monkeypatch):
    builds = []

    def fake_build(self):
        builds.append(1)
        return FakeEngine()

    monkeypatch.setattr(JiebaSegmenter, "_build", fake_build)
    seg = JiebaSegmenter()
    assert not seg.initialized

    threads = [threading.Thread(target=seg.segment, args=("a b",)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert seg.segment("x y") == "x y"
    assert seg.initialized
    assert len(builds) == 1


def test_init_failure_is_sticky(monkeypatch):
    builds = []

    def broken_build(self):
        builds.append(1)
        raise OSError("dictionary unreadable")

    monkeypatch.setattr(JiebaSegmenter, "_build", broken_build)
    seg = JiebaSegmenter()

    with pytest.raises(SegmenterInitError):
        seg.segment("text")
    with pytest.raises(SegmenterInitError) as exc_info:
        seg.segment("text")

    assert isinstance(exc_info.value.__cause__, OSError)
    assert len(builds) == 1


def test_reset_allows_retry(monkeypatch):
    def broken_build(self):
        raise OSError("dictionary unreadable")

    monkeypatch.setattr(JiebaSegmenter, "_build", broken_build)
    seg = JiebaSegmenter()
    with pytest.raises(SegmenterInitError):
        seg.segment("text")

    monkeypatch.setattr(JiebaSegmenter, "_build", lambda self: FakeEngine())
    seg.reset()
    assert seg.segment("ok then") == "ok then"


def test_missing_dictionary_fails(tmp_path):
    seg = JiebaSegmenter(dictionary=str(tmp_path / "no_such_dict.txt"))
    with pytest.raises(SegmenterInitError):
        seg.segment("北京")


def test_default_segmenter_is_replaceable(segmenter):
    assert get_segmenter() is segmenter
    assert segment("a  b") == "a b"

    set_segmenter(None)
    assert isinstance(get_segmenter(), JiebaSegmenter)
