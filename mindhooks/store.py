"""
mindhooks.store — Single-file memory store.

The hooks only talk to a store through the MemoryStore protocol:
put / find / ask / timeline / stats over "frames" (plain dicts). The
default implementation keeps every frame in one SQLite file with an FTS5
index over title and text.

Frame shape:
  {
    "frame_id": "a1b2c3d4e5f60718",
    "title": "[discovery] Read app.py (120 lines)",
    "label": "discovery",
    "text": "...",
    "metadata": {"sessionId": "...", "files": [...]},
    "tags": ["discovery", "Read"],
    "timestamp": 1712345678901,       # ms since epoch
    # search hits only:
    "score": 3.2,
    "snippet": "...",
  }

Errors are sqlite3.Error subclasses and are never caught here, except for
FTS query syntax failures which degrade to a LIKE scan.
"""

import json
import re
import sqlite3
from pathlib import Path
from typing import Protocol

from mindhooks.models import generate_id, now_ms

# Search and retrieval limits
DEFAULT_FIND_LIMIT = 10
DEFAULT_ASK_LIMIT = 5
DEFAULT_TIMELINE_LIMIT = 50
SNIPPET_FALLBACK_CHARS = 200
SNIPPET_TOKENS = 24


class MemoryStore(Protocol):
    """Operations the hooks need from a memory store."""

    def put(self, record: dict) -> str: ...

    def find(self, query: str, k: int = DEFAULT_FIND_LIMIT, mode: str = "lex") -> dict: ...

    def ask(self, question: str, k: int = DEFAULT_ASK_LIMIT, mode: str = "lex") -> dict: ...

    def timeline(self, limit: int = DEFAULT_TIMELINE_LIMIT, reverse: bool = True) -> list[dict]: ...

    def stats(self) -> dict: ...


def fts_query(text: str) -> str:
    """OR of quoted terms, so punctuation in the query can't break FTS5 syntax."""
    terms = dict.fromkeys(re.findall(r"\w+", text or ""))
    return " OR ".join(f'"{term}"' for term in terms)


# ============================================================================
# SQLITE STORAGE
# ============================================================================

class SQLiteMemoryStore:
    """SQLite + FTS5 implementation of MemoryStore."""

    SCHEMA = """
    CREATE TABLE IF NOT EXISTS frames (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        frame_id TEXT NOT NULL UNIQUE,
        title TEXT NOT NULL,
        label TEXT NOT NULL,
        text TEXT NOT NULL,
        metadata TEXT NOT NULL,  -- JSON object
        tags TEXT NOT NULL,  -- JSON array
        session_id TEXT NOT NULL DEFAULT '',
        timestamp INTEGER NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_frames_session ON frames(session_id);
    CREATE INDEX IF NOT EXISTS idx_frames_label ON frames(label);
    CREATE INDEX IF NOT EXISTS idx_frames_timestamp ON frames(timestamp);

    CREATE VIRTUAL TABLE IF NOT EXISTS frames_fts USING fts5(
        title, text,
        content='frames',
        content_rowid='id'
    );

    CREATE TRIGGER IF NOT EXISTS frames_ai AFTER INSERT ON frames BEGIN
        INSERT INTO frames_fts(rowid, title, text)
        VALUES (new.id, new.title, new.text);
    END;

    CREATE TRIGGER IF NOT EXISTS frames_ad AFTER DELETE ON frames BEGIN
        INSERT INTO frames_fts(frames_fts, rowid, title, text)
        VALUES('delete', old.id, old.title, old.text);
    END;
    """

    COLUMNS = "f.frame_id, f.title, f.label, f.text, f.metadata, f.tags, f.timestamp"

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self):
        """Initialize database schema."""
        conn = self._connect()
        try:
            conn.executescript(self.SCHEMA)
            conn.commit()
        finally:
            conn.close()

    def put(self, record: dict) -> str:
        """Append a frame and return its id."""
        frame_id = record.get("frame_id") or generate_id()
        metadata = record.get("metadata") or {}
        conn = self._connect()
        try:
            conn.execute("""
                INSERT INTO frames
                (frame_id, title, label, text, metadata, tags, session_id, timestamp)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                frame_id,
                record.get("title") or "",
                record.get("label") or "",
                record.get("text") or "",
                json.dumps(metadata, ensure_ascii=False),
                json.dumps([t for t in record.get("tags") or [] if t], ensure_ascii=False),
                str(metadata.get("sessionId") or ""),
                int(record.get("timestamp") or now_ms()),
            ))
            conn.commit()
        finally:
            conn.close()
        return frame_id

    def find(self, query: str, k: int = DEFAULT_FIND_LIMIT, mode: str = "lex") -> dict:
        """Ranked lexical search. Only the lexical mode exists."""
        match = fts_query(query)
        if not match:
            return {"frames": []}

        conn = self._connect()
        try:
            cursor = conn.execute(f"""
                SELECT {self.COLUMNS}, bm25(frames_fts) AS bm25_rank,
                       snippet(frames_fts, 1, '', '', '...', {SNIPPET_TOKENS})
                FROM frames f
                JOIN frames_fts ON f.id = frames_fts.rowid
                WHERE frames_fts MATCH ?
                ORDER BY bm25_rank
                LIMIT ?
            """, (match, k))
            frames = []
            for row in cursor.fetchall():
                frame = self._row_to_frame(row)
                frame["score"] = -row[7]
                frame["snippet"] = row[8] or frame["text"][:SNIPPET_FALLBACK_CHARS]
                frames.append(frame)
            return {"frames": frames}
        except sqlite3.OperationalError:
            # FTS query failed, fall back to LIKE
            return {"frames": self._find_like(query, k)}
        finally:
            conn.close()

    def _find_like(self, query: str, k: int) -> list[dict]:
        """Fallback LIKE search."""
        conn = self._connect()
        try:
            pattern = f"%{query}%"
            cursor = conn.execute(f"""
                SELECT {self.COLUMNS} FROM frames f
                WHERE f.title LIKE ? OR f.text LIKE ?
                ORDER BY f.id DESC
                LIMIT ?
            """, (pattern, pattern, k))
            frames = []
            for row in cursor.fetchall():
                frame = self._row_to_frame(row)
                frame["score"] = 0.0
                frame["snippet"] = frame["text"][:SNIPPET_FALLBACK_CHARS]
                frames.append(frame)
            return frames
        finally:
            conn.close()

    def ask(self, question: str, k: int = DEFAULT_ASK_LIMIT, mode: str = "lex") -> dict:
        """Lexical answer: the best matching frames as bullet lines."""
        hits = self.find(question, k=k, mode=mode)["frames"]
        answer = "\n".join(f"- {hit['title']}: {hit['snippet']}" for hit in hits)
        return {"answer": answer, "frames": hits}

    def timeline(self, limit: int = DEFAULT_TIMELINE_LIMIT, reverse: bool = True) -> list[dict]:
        """Frames in insertion order, newest first when reverse is set."""
        order = "DESC" if reverse else "ASC"
        conn = self._connect()
        try:
            cursor = conn.execute(f"""
                SELECT {self.COLUMNS} FROM frames f
                ORDER BY f.id {order}
                LIMIT ?
            """, (limit,))
            return [self._row_to_frame(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def stats(self) -> dict:
        """Frame count, file size, distinct sessions and per-label counts."""
        conn = self._connect()
        try:
            total, sessions = conn.execute("""
                SELECT COUNT(*), COUNT(DISTINCT NULLIF(session_id, ''))
                FROM frames
            """).fetchone()
            label_counts = dict(conn.execute("""
                SELECT label, COUNT(*) FROM frames
                GROUP BY label
                ORDER BY COUNT(*) DESC
            """).fetchall())
        finally:
            conn.close()

        return {
            "frame_count": total,
            "size_bytes": self.db_path.stat().st_size if self.db_path.exists() else 0,
            "session_count": sessions,
            "label_counts": label_counts,
        }

    @staticmethod
    def _row_to_frame(row: tuple) -> dict:
        """Convert database row to a frame dict."""
        return {
            "frame_id": row[0],
            "title": row[1],
            "label": row[2],
            "text": row[3],
            "metadata": json.loads(row[4]) if row[4] else {},
            "tags": json.loads(row[5]) if row[5] else [],
            "timestamp": row[6],
        }
