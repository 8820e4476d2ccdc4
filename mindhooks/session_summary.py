"""
mindhooks.session_summary — End-of-session synthesis.

Turns the observations recorded during one session (plus, optionally, the
raw transcript) into key decisions, touched files and a one-line
narrative. Total: bad or missing input yields a thinner summary, never an
exception. Whether a summary is worth writing at all is the caller's call
(see MIN_OBSERVATIONS_FOR_SUMMARY).
"""

import re
from collections import Counter

from mindhooks.models import Observation, ObservationType, SessionSummaryDraft

MIN_OBSERVATIONS_FOR_SUMMARY = 3
MAX_KEY_DECISIONS = 10
MAX_FILES_MODIFIED = 20

DECISION_WORDS = ("chose", "decided")

# Paths mentioned in transcripts: JSON `"file_path": "..."`, loose
# `file_path: ...` / `file_path=...`, and rendered calls like `Edit(src/a.py)`
TRANSCRIPT_PATH_PATTERNS = (
    re.compile(r'"file_path"\s*:\s*"([^"]+)"'),
    re.compile(r'\bfile_path\s*[:=]\s*[\'"]?([^\s"\',}]+)'),
    re.compile(r'\b(?:Read|Edit|Write|MultiEdit|NotebookEdit)\(([^()\s]+)\)'),
)

# Dependency/vendor directories never count as session files
VENDOR_DIRS = ("node_modules", "site-packages", "vendor", ".venv", "venv")

# Narrative clause per type, in the order clauses are emitted
NARRATIVE = (
    (ObservationType.FEATURE, "Added {n} feature(s)"),
    (ObservationType.BUGFIX, "Fixed {n} bug(s)"),
    (ObservationType.REFACTOR, "Refactored {n} item(s)"),
    (ObservationType.DISCOVERY, "Made {n} discovery(ies)"),
    (ObservationType.PROBLEM, "Encountered {n} problem(s)"),
    (ObservationType.SOLUTION, "Found {n} solution(s)"),
)


def is_key_decision(obs: Observation) -> bool:
    summary = (obs.summary or "").lower()
    return obs.type is ObservationType.DECISION or any(w in summary for w in DECISION_WORDS)


def _is_vendored(path: str) -> bool:
    parts = path.replace("\\", "/").split("/")
    return any(part in VENDOR_DIRS for part in parts)


def transcript_files(transcript: str) -> list[str]:
    """Project file paths mentioned in a transcript, first-seen order."""
    if not transcript:
        return []
    found = {}
    for pattern in TRANSCRIPT_PATH_PATTERNS:
        for match in pattern.finditer(transcript):
            path = match.group(1).strip()
            if not path or path.startswith(".") or _is_vendored(path):
                continue
            found[path] = None
    return list(found)


def narrative(observations: list[Observation]) -> str:
    counts = Counter(obs.type for obs in observations)
    clauses = [template.format(n=counts[t]) for t, template in NARRATIVE if counts.get(t)]
    if not clauses:
        return f"Session with {len(observations)} observations."
    return ". ".join(clauses) + "."


def synthesize(observations: list[Observation], transcript: str | None = None) -> SessionSummaryDraft:
    """Build the session summary draft from the session's observations."""
    observations = list(observations or [])

    key_decisions = [obs.summary for obs in observations if is_key_decision(obs)]

    files_modified = {}
    for obs in observations:
        for path in obs.metadata.files:
            files_modified[path] = None
    for path in transcript_files(transcript or ""):
        files_modified[path] = None

    return SessionSummaryDraft(
        key_decisions=key_decisions[:MAX_KEY_DECISIONS],
        files_modified=list(files_modified)[:MAX_FILES_MODIFIED],
        summary=narrative(observations),
    )
