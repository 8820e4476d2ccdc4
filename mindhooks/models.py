"""
mindhooks.models — Records passed between the hooks, the core and the store.

Observations are immutable once created. Everything else here is either
transient (InjectedContext, CompressionResult) or written exactly once
(SessionSummary).
"""

import secrets
import time
from dataclasses import asdict, dataclass, field
from enum import Enum

# Content ceiling for a stored observation, marker included
MAX_CONTENT_LENGTH = 2500
CONTENT_TRUNCATION_MARKER = "\n... (compressed)"

# Keys that ObservationMetadata owns; anything else lands in `extra`
_METADATA_KEYS = {
    "sessionId": "session_id",
    "files": "files",
    "command": "command",
    "pattern": "pattern",
    "searchPath": "search_path",
    "compressed": "compressed",
    "originalSize": "original_size",
    "compressedSize": "compressed_size",
}


class ObservationType(str, Enum):
    DISCOVERY = "discovery"
    DECISION = "decision"
    PROBLEM = "problem"
    SOLUTION = "solution"
    PATTERN = "pattern"
    WARNING = "warning"
    SUCCESS = "success"
    REFACTOR = "refactor"
    BUGFIX = "bugfix"
    FEATURE = "feature"

    @classmethod
    def parse(cls, value) -> "ObservationType":
        """Map a stored label back to a type. Unknown labels become discovery."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").lower())
        except ValueError:
            return cls.DISCOVERY


class ToolKind(Enum):
    READ = "read"
    EDIT = "edit"
    WRITE = "write"
    BASH = "bash"
    GREP = "grep"
    GLOB = "glob"
    WEB = "web"
    TASK = "task"
    OTHER = "other"


_TOOL_KINDS = {
    "read": ToolKind.READ,
    "edit": ToolKind.EDIT,
    "multiedit": ToolKind.EDIT,
    "update": ToolKind.EDIT,
    "notebookedit": ToolKind.EDIT,
    "write": ToolKind.WRITE,
    "bash": ToolKind.BASH,
    "grep": ToolKind.GREP,
    "glob": ToolKind.GLOB,
    "webfetch": ToolKind.WEB,
    "websearch": ToolKind.WEB,
    "task": ToolKind.TASK,
}


def tool_kind(tool_name: str | None) -> ToolKind:
    """Resolve a host tool name (case-insensitive) to its ToolKind."""
    return _TOOL_KINDS.get((tool_name or "").lower(), ToolKind.OTHER)


def generate_id() -> str:
    """16 hex characters from 8 random bytes."""
    return secrets.token_hex(8)


def now_ms() -> int:
    return int(time.time() * 1000)


def normalize_timestamp(ts) -> int:
    """Coerce a store timestamp to milliseconds (seconds are scaled up)."""
    try:
        ts = int(ts or 0)
    except (TypeError, ValueError):
        return 0
    if 0 < ts < 4102444800:
        ts *= 1000
    return ts


def truncate_content(content: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    """Hard-truncate content so the result, marker included, fits in limit."""
    if len(content) <= limit:
        return content
    return content[:limit - len(CONTENT_TRUNCATION_MARKER)] + CONTENT_TRUNCATION_MARKER


@dataclass(frozen=True)
class ObservationMetadata:
    """Well-known observation metadata plus a free-form extension map."""
    session_id: str = ""
    files: tuple[str, ...] = ()
    command: str | None = None
    pattern: str | None = None
    search_path: str | None = None
    compressed: bool = False
    original_size: int | None = None
    compressed_size: int | None = None
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Flat camelCase mapping, omitting unset optional fields."""
        data = dict(self.extra)
        data["sessionId"] = self.session_id
        if self.files:
            data["files"] = list(self.files)
        if self.command is not None:
            data["command"] = self.command
        if self.pattern is not None:
            data["pattern"] = self.pattern
        if self.search_path is not None:
            data["searchPath"] = self.search_path
        if self.compressed:
            data["compressed"] = True
            data["originalSize"] = self.original_size
            data["compressedSize"] = self.compressed_size
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> "ObservationMetadata":
        data = data or {}
        known = {}
        extra = {}
        for key, value in data.items():
            attr = _METADATA_KEYS.get(key)
            if attr:
                known[attr] = value
            else:
                extra[key] = value
        files = known.get("files") or ()
        if isinstance(files, str):
            files = (files,)
        return cls(
            session_id=str(known.get("session_id") or ""),
            files=tuple(str(f) for f in files),
            command=known.get("command"),
            pattern=known.get("pattern"),
            search_path=known.get("search_path"),
            compressed=bool(known.get("compressed", False)),
            original_size=known.get("original_size"),
            compressed_size=known.get("compressed_size"),
            extra=extra,
        )

    def with_session(self, session_id: str) -> "ObservationMetadata":
        return ObservationMetadata(
            session_id=session_id,
            files=self.files,
            command=self.command,
            pattern=self.pattern,
            search_path=self.search_path,
            compressed=self.compressed,
            original_size=self.original_size,
            compressed_size=self.compressed_size,
            extra=dict(self.extra),
        )


@dataclass(frozen=True)
class Observation:
    """A single immutable memory record."""
    id: str
    timestamp: int                    # ms since epoch
    type: ObservationType
    summary: str
    content: str
    tool: str | None = None
    metadata: ObservationMetadata = field(default_factory=ObservationMetadata)

    @classmethod
    def create(cls, type: ObservationType, summary: str, content: str,
               tool: str | None = None,
               metadata: ObservationMetadata | None = None) -> "Observation":
        return cls(
            id=generate_id(),
            timestamp=now_ms(),
            type=ObservationType.parse(type),
            summary=summary,
            content=truncate_content(content or ""),
            tool=tool,
            metadata=metadata or ObservationMetadata(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "tool": self.tool,
            "summary": self.summary,
            "content": self.content,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class SessionSummaryDraft:
    key_decisions: list[str]
    files_modified: list[str]
    summary: str


@dataclass(frozen=True)
class SessionSummary:
    id: str
    start_time: int
    end_time: int
    observation_count: int
    key_decisions: list[str]
    files_modified: list[str]
    summary: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "observationCount": self.observation_count,
            "keyDecisions": list(self.key_decisions),
            "filesModified": list(self.files_modified),
            "summary": self.summary,
        }


@dataclass
class InjectedContext:
    """Built fresh at every session start; never persisted."""
    recent_observations: list[Observation]
    relevant_memories: list[Observation]
    session_summaries: list[SessionSummary]
    token_count: int


@dataclass(frozen=True)
class CompressionResult:
    compressed: str
    was_compressed: bool
    original_size: int


@dataclass(frozen=True)
class CompressionStats:
    ratio: float
    saved: int
    saved_percent: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MemorySearchResult:
    observation: Observation
    score: float
    snippet: str


@dataclass
class MindStats:
    total_observations: int
    total_sessions: int
    oldest_memory: int
    newest_memory: int
    file_size: int
    top_types: dict[str, int] = field(default_factory=dict)
