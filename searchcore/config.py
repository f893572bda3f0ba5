"""Runtime settings.

Defaults live in module constants; each can be overridden through a
FULLSEARCH_* environment variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DB_PATH = "fullsearch.db"
DEFAULT_STOPWORDS_PATH = str(Path(__file__).parent / "data" / "stopwords.txt")


@dataclass(frozen=True)
class Settings:
    db_path: str = DEFAULT_DB_PATH
    stopwords_path: str | None = DEFAULT_STOPWORDS_PATH
    dictionary: str | None = None
    user_dict: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            db_path=os.environ.get("FULLSEARCH_DB", DEFAULT_DB_PATH),
            stopwords_path=os.environ.get("FULLSEARCH_STOPWORDS", DEFAULT_STOPWORDS_PATH),
            dictionary=os.environ.get("FULLSEARCH_DICT") or None,
            user_dict=os.environ.get("FULLSEARCH_USER_DICT") or None,
        )
