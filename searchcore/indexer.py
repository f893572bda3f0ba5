"""Indexer: maintains the keyword → document mapping and answers searches.

A document's keyword rows are always replaced wholesale: delete every
row of the document, insert the freshly tokenized set, all inside a single
store transaction.
"""

from __future__ import annotations

import logging
from pathlib import Path

from searchcore.store import IndexRepository
from searchcore.tokenizer import Tokenizer, get_tokenizer

logger = logging.getLogger(__name__)


class InvertedIndex:
    def __init__(self, store: IndexRepository, tokenizer: Tokenizer | None = None):
        self.store = store
        self._tokenizer = tokenizer

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer if self._tokenizer is not None else get_tokenizer()

    def index_document(self, document_id: str, text: str) -> set[str]:
        """(Re)index a document.  Returns the keyword set now stored for it.

        An empty keyword set leaves the document unindexed: old rows are
        deleted and nothing is inserted.
        """
        keywords = self.tokenizer.tokenize(text)

        with self.store.transaction():
            removed = self.store.delete_document(document_id)
            inserted = self.store.insert_entries(document_id, keywords) if keywords else 0

        logger.debug(
            "Indexed %s: %d keywords (%d old rows replaced)",
            document_id,
            inserted,
            removed,
        )
        return keywords

    def remove_document(self, document_id: str) -> int:
        """Drop every row of a document.  Removing an unknown id is a no-op."""
        with self.store.transaction():
            removed = self.store.delete_document(document_id)
        logger.debug("Removed %s: %d rows", document_id, removed)
        return removed

    def search(self, query: str) -> set[str]:
        """Ids of documents containing any keyword of the query."""
        keywords = self.tokenizer.tokenize(query)
        if not keywords:
            return set()
        return self.store.find_documents(keywords)

    def keywords(self, document_id: str) -> set[str]:
        return self.store.keywords_for(document_id)

    def stats(self) -> dict:
        return self.store.stats()


# ── Bulk indexing ───────────────────────────────────────────────────


def index_directory(
    index: InvertedIndex,
    directory: str,
    pattern: str = "*.md",
) -> dict:
    """Index every file matching pattern under directory (recursively).

    Document ids are POSIX paths relative to directory.  Files that cannot
    be read as UTF-8 are logged and skipped; their existing rows are left
    alone.  Returns a summary dict with counts.
    """
    root = Path(directory)
    files = sorted(p for p in root.rglob(pattern) if p.is_file())

    indexed = 0
    skipped = 0
    for path in files:
        doc_id = path.relative_to(root).as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            logger.warning("Skipping %s: %s", path, e)
            skipped += 1
            continue
        if index.index_document(doc_id, text):
            indexed += 1

    logger.info("Indexed %d/%d files from %s", indexed, len(files), directory)
    return {
        "documents": len(files),
        "indexed": indexed,
        "unindexed": len(files) - indexed - skipped,
        "skipped": skipped,
    }
