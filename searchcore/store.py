"""SQLite storage layer for the keyword index.

One table, index_entries(document_id, keyword), keyed on the pair.  All
I/O is synchronous.  The connection is shared between threads under a
re-entrant lock; transaction() holds that lock for its whole body, so a
search running in another thread sees either the old keyword rows of a
document or the new ones, never the gap between delete and insert.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import AbstractContextManager, contextmanager
from typing import Iterable, Iterator, Protocol

from searchcore.config import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

# Stay well under SQLITE_MAX_VARIABLE_NUMBER (999 on older builds).
MAX_PARAMS = 500


class IndexRepository(Protocol):
    def transaction(self) -> AbstractContextManager: ...

    def delete_document(self, document_id: str) -> int: ...

    def insert_entries(self, document_id: str, keywords: Iterable[str]) -> int: ...

    def find_documents(self, keywords: Iterable[str]) -> set[str]: ...

    def keywords_for(self, document_id: str) -> set[str]: ...

    def stats(self) -> dict: ...


class IndexStore:
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        # isolation_level=None: no implicit transactions, BEGIN/COMMIT are ours.
        self.conn = sqlite3.connect(
            db_path, check_same_thread=False, isolation_level=None
        )
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._lock = threading.RLock()
        self._in_transaction = False
        self._init_tables()

    # ── Schema ──────────────────────────────────────────────────────

    def _init_tables(self) -> None:
        stmts = [
            """CREATE TABLE IF NOT EXISTS index_entries (
                document_id TEXT NOT NULL,
                keyword     TEXT NOT NULL,
                PRIMARY KEY (document_id, keyword)
            )""",
            "CREATE INDEX IF NOT EXISTS idx_index_entries_keyword "
            "ON index_entries (keyword)",
        ]
        with self._lock:
            for stmt in stmts:
                self.conn.execute(stmt)

    # ── Transactions ────────────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator[IndexStore]:
        """Run the body atomically: COMMIT on success, ROLLBACK on any error."""
        with self._lock:
            if self._in_transaction:
                # Nested scope joins the outer transaction.
                yield self
                return
            self.conn.execute("BEGIN IMMEDIATE")
            self._in_transaction = True
            try:
                yield self
            except BaseException:
                # SQLite may already have rolled back on its own (e.g. SQLITE_FULL).
                if self.conn.in_transaction:
                    self.conn.execute("ROLLBACK")
                logger.debug("Transaction rolled back on %s", self.db_path)
                raise
            else:
                self.conn.execute("COMMIT")
            finally:
                self._in_transaction = False

    # ── Entries ─────────────────────────────────────────────────────

    def delete_document(self, document_id: str) -> int:
        with self._lock:
            cur = self.conn.execute(
                "DELETE FROM index_entries WHERE document_id = ?", (document_id,)
            )
            return cur.rowcount

    def insert_entries(self, document_id: str, keywords: Iterable[str]) -> int:
        """Insert (document_id, keyword) rows; existing pairs are skipped."""
        rows = [(document_id, kw) for kw in keywords]
        if not rows:
            return 0
        with self._lock:
            cur = self.conn.executemany(
                "INSERT OR IGNORE INTO index_entries (document_id, keyword) "
                "VALUES (?, ?)",
                rows,
            )
            return cur.rowcount

    def find_documents(self, keywords: Iterable[str]) -> set[str]:
        """Distinct document ids having at least one of the keywords."""
        terms = list(keywords)
        if not terms:
            return set()
        found: set[str] = set()
        with self._lock:
            for i in range(0, len(terms), MAX_PARAMS):
                batch = terms[i : i + MAX_PARAMS]
                placeholders = ",".join("?" for _ in batch)
                rows = self.conn.execute(
                    f"SELECT document_id FROM index_entries "
                    f"WHERE keyword IN ({placeholders}) GROUP BY document_id",
                    batch,
                ).fetchall()
                found.update(row["document_id"] for row in rows)
        return found

    def keywords_for(self, document_id: str) -> set[str]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT keyword FROM index_entries WHERE document_id = ?",
                (document_id,),
            ).fetchall()
        return {row["keyword"] for row in rows}

    # ── Utilities ───────────────────────────────────────────────────

    def stats(self) -> dict:
        with self._lock:
            row = self.conn.execute(
                "SELECT COUNT(DISTINCT document_id) AS documents, "
                "COUNT(DISTINCT keyword) AS keywords, "
                "COUNT(*) AS entries FROM index_entries"
            ).fetchone()
        return dict(row)

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    def __enter__(self) -> IndexStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
