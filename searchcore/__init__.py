"""Keyword inverted index: normalize → segment → filter → store → search."""

from searchcore.indexer import InvertedIndex, index_directory
from searchcore.normalizer import normalize
from searchcore.segmenter import JiebaSegmenter, SegmenterInitError
from searchcore.store import IndexStore
from searchcore.tokenizer import Tokenizer, tokenize

__all__ = [
    "InvertedIndex",
    "index_directory",
    "normalize",
    "JiebaSegmenter",
    "SegmenterInitError",
    "IndexStore",
    "Tokenizer",
    "tokenize",
]
