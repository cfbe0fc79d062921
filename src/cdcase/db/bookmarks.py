from __future__ import annotations

import sqlite3
from typing import Optional, Protocol

KIND_FILE = "file"
KIND_FOLDER = "folder"


class BookmarkStore(Protocol):
    """Persisted file/folder references, keyed by absolute path."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryBookmarkStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class SqliteBookmarkStore:
    def __init__(self, db: sqlite3.Connection):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.execute("SELECT value FROM bookmarks WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.execute(
            """
            INSERT INTO bookmarks (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )
        self.db.commit()

    def delete(self, key: str) -> None:
        self.db.execute("DELETE FROM bookmarks WHERE key = ?", (key,))
        self.db.commit()

    def keys(self) -> list[str]:
        cursor = self.db.execute("SELECT key FROM bookmarks ORDER BY key")
        return [row["key"] for row in cursor.fetchall()]
