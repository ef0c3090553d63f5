"""Session store abstractions with in-memory and SQLite implementations.

Stores keep one ``ConversationState`` per session id. When more sessions than
``capacity`` are held, the oldest-created session is evicted; writing to an
existing session does not refresh its position.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Iterable

from gazapay.core.db import sqlite_connection
from gazapay.dialogue.types import ConversationState

from .models import SessionRecord, utcnow

logger = logging.getLogger("gazapay.sessions")

DEFAULT_CAPACITY = 100


class SessionStore(ABC):
    """Abstract interface for reading and writing conversation states."""

    capacity: int

    @abstractmethod
    def get(self, session_id: str) -> ConversationState | None:
        """Return the stored state, or ``None`` for an unknown session."""

    @abstractmethod
    def put(self, session_id: str, state: ConversationState) -> None:
        """Persist ``state`` and evict the oldest sessions when over capacity."""

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Forget a session; return whether it existed."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every session."""

    @abstractmethod
    def records(self) -> list[SessionRecord]:
        """Return all stored sessions, oldest first."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored sessions."""

    def iter_sessions(self) -> Iterable[str]:
        return [record.session_id for record in self.records()]

    def ping(self) -> bool:
        """Return whether the backing storage is usable."""

        return True


class InMemorySessionStore(SessionStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self.capacity = capacity
        self._lock = threading.Lock()
        self._records: dict[str, SessionRecord] = {}

    def get(self, session_id: str) -> ConversationState | None:
        with self._lock:
            record = self._records.get(session_id)
            return record.state if record else None

    def put(self, session_id: str, state: ConversationState) -> None:
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                self._records[session_id] = SessionRecord(session_id=session_id, state=state)
            else:
                record.state = state
                record.updated_at = utcnow()

            while len(self._records) > self.capacity:
                oldest = next(iter(self._records))
                del self._records[oldest]
                logger.debug("Evicted session %s", oldest)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._records.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def records(self) -> list[SessionRecord]:
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SQLiteSessionStore(SessionStore):
    """SQLite-backed store so sessions survive restarts and worker recycling."""

    def __init__(self, db_path: Path, capacity: int = DEFAULT_CAPACITY) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.capacity = capacity
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        """Create required tables if they do not exist."""

        with sqlite_connection(self.db_path) as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL UNIQUE,
                    state TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def get(self, session_id: str) -> ConversationState | None:
        with sqlite_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT state FROM sessions WHERE session_id = ?",
                (session_id,),
            ).fetchone()

        if row is None:
            return None
        return self._decode(session_id, row["state"])

    def put(self, session_id: str, state: ConversationState) -> None:
        now = utcnow().isoformat()
        payload = json.dumps(state.to_dict(), ensure_ascii=False, separators=(",", ":"))

        with sqlite_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO sessions (session_id, state, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(session_id) DO UPDATE SET
                    state = excluded.state,
                    updated_at = excluded.updated_at
                """,
                (session_id, payload, now, now),
            )
            total = conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0]
            evicted = max(total - self.capacity, 0)
            if evicted:
                conn.execute(
                    "DELETE FROM sessions WHERE seq IN (SELECT seq FROM sessions ORDER BY seq ASC LIMIT ?)",
                    (evicted,),
                )
        if evicted:
            logger.debug("Evicted %d sessions over capacity %d", evicted, self.capacity)

    def delete(self, session_id: str) -> bool:
        with sqlite_connection(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM sessions WHERE session_id = ?", (session_id,))
            return cursor.rowcount > 0

    def clear(self) -> None:
        with sqlite_connection(self.db_path) as conn:
            conn.execute("DELETE FROM sessions")

    def records(self) -> list[SessionRecord]:
        with sqlite_connection(self.db_path) as conn:
            rows = conn.execute(
                "SELECT session_id, state, created_at, updated_at FROM sessions ORDER BY seq ASC"
            ).fetchall()

        return [
            SessionRecord(
                session_id=row["session_id"],
                state=self._decode(row["session_id"], row["state"]),
                created_at=datetime.fromisoformat(row["created_at"]),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
            for row in rows
        ]

    def __len__(self) -> int:
        with sqlite_connection(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0]

    def ping(self) -> bool:
        try:
            with sqlite_connection(self.db_path) as conn:
                conn.execute("SELECT 1 FROM sessions LIMIT 1")
        except Exception as exc:  # noqa: BLE001
            logger.warning("Session DB unavailable at %s: %s", self.db_path, exc)
            return False
        return True

    def _decode(self, session_id: str, payload: str) -> ConversationState:
        try:
            return ConversationState.from_dict(json.loads(payload))
        except ValueError as exc:
            logger.warning("Stored state for %s is unreadable, starting over: %s", session_id, exc)
            return ConversationState.idle()


def create_session_store(backend: str, capacity: int, sqlite_path: Path) -> SessionStore:
    """Instantiate the configured session store backend."""

    if backend == "sqlite":
        return SQLiteSessionStore(sqlite_path, capacity=capacity)
    return InMemorySessionStore(capacity=capacity)
