"""
mindhooks.mind — Session-scoped memory facade.

Mind owns nothing but a store handle, the config and the session id.
It turns Observations into store frames on the way in, and frames back
into Observations on the way out. Store failures propagate unchanged.

Usage:
  mind = Mind.open(load_config(project), session_id)
  mind.remember(ObservationType.DECISION, "Chose SQLite over JSONL", "...")
  context = mind.get_context("myproject")
"""

import json
import re
from datetime import datetime
from pathlib import Path

from mindhooks.config import MindConfig
from mindhooks.context_builder import MAX_RELEVANT_MEMORIES, assemble
from mindhooks.hook_lib import debug, project_dir
from mindhooks.models import (
    InjectedContext,
    MemorySearchResult,
    MindStats,
    Observation,
    ObservationMetadata,
    ObservationType,
    SessionSummary,
    SessionSummaryDraft,
    normalize_timestamp,
    now_ms,
)
from mindhooks.store import MemoryStore, SQLiteMemoryStore

SESSION_LABEL = "session"
NO_ANSWER = "No relevant memories found."
SESSION_SCAN_LIMIT = 500
SNIPPET_CHARS = 200

_TITLE_PREFIX = re.compile(r"^\[.*?\]\s*")


def _frames(result) -> list[dict]:
    """Timeline/find results may be a bare list or {"frames": [...]}."""
    if isinstance(result, dict):
        return list(result.get("frames") or [])
    return list(result or [])


def frame_to_observation(frame: dict) -> Observation:
    """Rebuild an Observation from a stored frame."""
    meta = dict(frame.get("metadata") or {})
    obs_id = meta.pop("observationId", None) or frame.get("frame_id") or ""
    ts = meta.pop("timestamp", None) or frame.get("timestamp")
    tool = meta.pop("tool", None)
    label = frame.get("label") or meta.get("type")
    meta.pop("type", None)

    title = frame.get("title") or ""
    summary = _TITLE_PREFIX.sub("", title, count=1) if title else (frame.get("preview") or "")[:100]

    return Observation(
        id=str(obs_id),
        timestamp=normalize_timestamp(ts),
        type=ObservationType.parse(label),
        summary=summary,
        content=frame.get("text") or frame.get("preview") or "",
        tool=tool,
        metadata=ObservationMetadata.from_dict(meta),
    )


def _is_session_frame(frame: dict) -> bool:
    return frame.get("label") == SESSION_LABEL


class Mind:
    """Persistent memory for one host session."""

    def __init__(self, store: MemoryStore, config: MindConfig | None = None,
                 session_id: str = "", memory_path: Path | None = None):
        self.store = store
        self.config = config or MindConfig()
        self.session_id = session_id
        self.memory_path = memory_path

    @classmethod
    def open(cls, config: MindConfig | None = None, session_id: str = "",
             project: str | Path | None = None) -> "Mind":
        """Open (creating if needed) the SQLite store under the project dir."""
        config = config or MindConfig()
        path = Path(project or project_dir()) / config.memory_path
        path.parent.mkdir(parents=True, exist_ok=True)
        store = SQLiteMemoryStore(path)
        debug(f"Opened: {path}")
        return cls(store, config, session_id, memory_path=path)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def remember(self, type: ObservationType, summary: str, content: str,
                 tool: str | None = None,
                 metadata: ObservationMetadata | None = None) -> str:
        """Store one observation for this session. Returns the frame id."""
        metadata = (metadata or ObservationMetadata()).with_session(self.session_id)
        obs = Observation.create(type, summary, content, tool=tool, metadata=metadata)

        frame_meta = {
            "observationId": obs.id,
            "timestamp": obs.timestamp,
            "tool": obs.tool,
            **obs.metadata.to_dict(),
        }
        frame_id = self.store.put({
            "title": f"[{obs.type.value}] {obs.summary}",
            "label": obs.type.value,
            "text": obs.content,
            "metadata": frame_meta,
            "tags": [t for t in (obs.type.value, obs.tool) if t],
            "timestamp": obs.timestamp,
        })
        debug(f"Remembered: {obs.summary}")
        return frame_id

    def save_session_summary(self, draft: SessionSummaryDraft,
                             observations: list[Observation] | None = None) -> str:
        """Persist the end-of-session summary as a 'session' frame."""
        observations = observations or []
        end = now_ms()
        start = min((obs.timestamp for obs in observations if obs.timestamp), default=end)
        summary = SessionSummary(
            id=self.session_id,
            start_time=start,
            end_time=end,
            observation_count=len(observations),
            key_decisions=list(draft.key_decisions),
            files_modified=list(draft.files_modified),
            summary=draft.summary,
        )
        data = summary.to_dict()
        frame_id = self.store.put({
            "title": f"Session Summary: {datetime.now().strftime('%Y-%m-%d')}",
            "label": SESSION_LABEL,
            "text": json.dumps(data, indent=2),
            "metadata": {**data, "sessionId": self.session_id},
            "tags": ["session", "summary"],
            "timestamp": end,
        })
        debug(f"Session summary saved: {draft.summary}")
        return frame_id

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = 10) -> list[MemorySearchResult]:
        """Ranked lexical search over stored observations."""
        results = []
        for frame in _frames(self.store.find(query, k=limit, mode="lex")):
            if _is_session_frame(frame):
                continue
            text = frame.get("text") or ""
            results.append(MemorySearchResult(
                observation=frame_to_observation(frame),
                score=float(frame.get("score") or 0),
                snippet=frame.get("snippet") or text[:SNIPPET_CHARS],
            ))
        return results

    def ask(self, question: str) -> str:
        result = self.store.ask(question, k=5, mode="lex") or {}
        return result.get("answer") or NO_ANSWER

    def recent(self, limit: int | None = None) -> list[Observation]:
        """Newest-first observations, session summaries excluded."""
        limit = self.config.max_context_observations if limit is None else limit
        if limit <= 0:
            return []

        # Session frames share the timeline; widen the scan until `limit` remain
        fetch = limit
        while True:
            frames = _frames(self.store.timeline(limit=fetch, reverse=True))
            found = [frame_to_observation(f) for f in frames if not _is_session_frame(f)]
            if len(found) >= limit or len(frames) < fetch:
                return found[:limit]
            fetch += limit

    def get_context(self, query: str | None = None) -> InjectedContext:
        """Recent window plus query hits, budgeted by max_context_tokens."""
        recent = self.recent()
        relevant = []
        if query:
            relevant = [r.observation for r in self.search(query, MAX_RELEVANT_MEMORIES)]
        return assemble(recent, relevant, self.config.max_context_tokens)

    def session_observations(self, limit: int = SESSION_SCAN_LIMIT) -> list[Observation]:
        """Observations recorded under this session id, oldest first."""
        frames = _frames(self.store.timeline(limit=limit, reverse=True))
        found = [
            frame_to_observation(f) for f in frames
            if not _is_session_frame(f)
            and (f.get("metadata") or {}).get("sessionId") == self.session_id
        ]
        found.reverse()
        return found

    def stats(self) -> MindStats:
        raw = self.store.stats() or {}
        oldest = _frames(self.store.timeline(limit=1, reverse=False))
        newest = _frames(self.store.timeline(limit=1, reverse=True))

        def first_ts(frames):
            if not frames:
                return 0
            frame = frames[0]
            return normalize_timestamp((frame.get("metadata") or {}).get("timestamp") or frame.get("timestamp"))

        types = {t.value for t in ObservationType}
        top_types = {
            label: count for label, count in (raw.get("label_counts") or {}).items()
            if label in types
        }
        return MindStats(
            total_observations=int(raw.get("frame_count") or 0),
            total_sessions=int(raw.get("session_count") or 0),
            oldest_memory=first_ts(oldest),
            newest_memory=first_ts(newest),
            file_size=int(raw.get("size_bytes") or 0),
            top_types=top_types,
        )
