"""Async key-value stores backing budget persistence."""

import asyncio
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from budgetrule.paths import get_db_path


class KeyValueStore(ABC):
    """
    Minimal async persistence contract: string keys to string values.

    Implementations may raise on failure. BudgetPersistence catches and logs
    those errors so callers of the budget store never see them.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        ...

    @abstractmethod
    async def multi_remove(self, keys: Iterable[str]) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    """
    In-process store, suitable for testing.

    All state is lost when the process exits.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    async def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    async def multi_remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.items.pop(key, None)


class SqliteKeyValueStore(KeyValueStore):
    """
    Durable store in the ``key_values`` table of an SQLite file.

    Each operation opens its own connection on a worker thread so the event
    loop is never blocked. Run ``init_database`` before first use.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path if db_path is not None else get_db_path()

    def _get(self, key: str) -> str | None:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT value FROM key_values WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def _set(self, key: str, value: str) -> None:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute(
                """
                INSERT INTO key_values (key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _remove(self, keys: list[str]) -> None:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.executemany("DELETE FROM key_values WHERE key = ?", [(key,) for key in keys])
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, [key])

    async def multi_remove(self, keys: Iterable[str]) -> None:
        await asyncio.to_thread(self._remove, list(keys))
