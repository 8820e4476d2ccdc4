"""Pytest configuration and fixtures for mindhooks tests."""

import pytest


class FakeStore:
    """In-memory MemoryStore: substring search, insertion-order timeline."""

    def __init__(self):
        self.frames = []

    def put(self, record):
        frame = dict(record)
        frame.setdefault("frame_id", f"frame{len(self.frames)}")
        self.frames.append(frame)
        return frame["frame_id"]

    def find(self, query, k=10, mode="lex"):
        q = query.lower()
        hits = []
        for frame in reversed(self.frames):
            text = f"{frame.get('title', '')} {frame.get('text', '')}".lower()
            if q in text:
                hits.append({**frame, "score": 1.0, "snippet": frame.get("text", "")[:50]})
        return {"frames": hits[:k]}

    def ask(self, question, k=5, mode="lex"):
        hits = self.find(question, k=k)["frames"]
        return {"answer": "\n".join(f"- {h['title']}" for h in hits)}

    def timeline(self, limit=50, reverse=True):
        frames = list(reversed(self.frames)) if reverse else list(self.frames)
        return frames[:limit]

    def stats(self):
        return {"frame_count": len(self.frames), "size_bytes": 4096}


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def mind(fake_store):
    """Mind over an in-memory store, session 'sess-1'."""
    from mindhooks.config import MindConfig
    from mindhooks.mind import Mind
    return Mind(fake_store, MindConfig(), "sess-1")


@pytest.fixture
def sqlite_store(tmp_path):
    from mindhooks.store import SQLiteMemoryStore
    return SQLiteMemoryStore(tmp_path / "mind.db")


@pytest.fixture
def make_obs():
    """Factory for observations with explicit type/summary/files."""
    from mindhooks.models import Observation, ObservationMetadata, ObservationType

    counter = {"n": 0}

    def _make(type=ObservationType.DISCOVERY, summary="Read app.py (10 lines)",
              files=(), tool="Read", timestamp=None, session_id="sess-1"):
        counter["n"] += 1
        return Observation(
            id=f"obs{counter['n']}",
            timestamp=timestamp if timestamp is not None else 1_700_000_000_000 + counter["n"],
            type=ObservationType.parse(type),
            summary=summary,
            content=f"content {counter['n']}",
            tool=tool,
            metadata=ObservationMetadata(session_id=session_id, files=tuple(files)),
        )

    return _make


@pytest.fixture(autouse=True)
def _quiet_env(monkeypatch):
    """Keep host env vars from leaking into tests."""
    for var in ("MINDHOOKS_DEBUG", "CLAUDE_SESSION_ID", "CLAUDE_PROJECT_DIR"):
        monkeypatch.delenv(var, raising=False)
    from mindhooks.hook_lib import enable_debug
    enable_debug(False)


@pytest.fixture
def sample_python_code():
    """Sample Python code for testing."""
    return '''
def calculate_sum(a: int, b: int) -> int:
    """Calculate the sum of two numbers."""
    return a + b


class Calculator:
    """A simple calculator class."""

    def __init__(self):
        self.history = []

    def add(self, x, y):
        result = x + y
        self.history.append(result)
        return result

    def subtract(self, x, y):
        result = x - y
        self.history.append(result)
        return result


def main():
    calc = Calculator()
    print(calc.add(1, 2))
'''
