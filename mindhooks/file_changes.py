"""
mindhooks.file_changes — Record which files a session touched.

Runs at session end. Two signals are merged:
  1. git: unstaged + staged changes against HEAD (plus a --stat summary)
  2. mtime: source/doc files modified within the last hour

Neither signal is required; a project without git (or without git on
PATH) still gets the mtime scan. Subprocess failures and timeouts are
logged on the debug channel and otherwise ignored.
"""

import os
import re
import subprocess
import time
from pathlib import Path

from mindhooks.hook_lib import debug
from mindhooks.models import ObservationMetadata, ObservationType

GIT_NAMES_TIMEOUT = 5
GIT_STAT_TIMEOUT = 10
GIT_STAT_LINES = 50

RECENT_WINDOW_SECONDS = 60 * 60
RECENT_MAX_DEPTH = 5
RECENT_MAX_FILES = 50
RECENT_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx", ".md", ".json", ".py", ".rs"}
SKIP_DIRS = {"node_modules", ".git", "dist", "build", ".next", "target", "__pycache__", ".venv", "venv"}

IMPORTANT_FILE = re.compile(r"^(README|CHANGELOG|package\.json|Cargo\.toml|pyproject\.toml|\.env)", re.IGNORECASE)

CAPTURE_METHOD = "git-diff-plus-recent"


def _git(args: list[str], cwd: Path, timeout: int) -> str:
    """stdout of a git command, or "" if it fails for any reason."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(cwd), capture_output=True, text=True, timeout=timeout,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        debug(f"git {' '.join(args)} failed: {e}")
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def git_changed_files(work_dir: Path) -> list[str]:
    names = _git(["diff", "--name-only", "HEAD"], work_dir, GIT_NAMES_TIMEOUT)
    if not names:
        names = _git(["diff", "--name-only"], work_dir, GIT_NAMES_TIMEOUT)
    staged = _git(["diff", "--cached", "--name-only"], work_dir, GIT_NAMES_TIMEOUT)
    lines = names.split("\n") + staged.split("\n")
    return list(dict.fromkeys(line for line in lines if line))


def git_diff_stat(work_dir: Path) -> str:
    stat = _git(["diff", "HEAD", "--stat"], work_dir, GIT_STAT_TIMEOUT)
    return "\n".join(stat.split("\n")[:GIT_STAT_LINES])


def recently_modified_files(work_dir: Path, window: int = RECENT_WINDOW_SECONDS,
                            now: float | None = None) -> list[str]:
    """Source/doc files under work_dir modified in the last `window` seconds."""
    cutoff = (now if now is not None else time.time()) - window
    found = []
    root = str(work_dir)
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        depth = 0 if rel_dir == "." else rel_dir.count(os.sep) + 1
        if depth >= RECENT_MAX_DEPTH - 1:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)

        for name in sorted(filenames):
            if os.path.splitext(name)[1] not in RECENT_EXTENSIONS:
                continue
            full = os.path.join(dirpath, name)
            try:
                if os.path.getmtime(full) < cutoff:
                    continue
            except OSError:
                continue
            found.append(os.path.relpath(full, root).replace(os.sep, "/"))
            if len(found) >= RECENT_MAX_FILES:
                return found
    return found


def changes_report(files: list[str], diff_stat: str = "") -> str:
    parts = ["## Files Modified This Session\n\n" + "\n".join(f"- {f}" for f in files)]
    if diff_stat:
        parts.append(f"\n## Git Changes Summary\n```\n{diff_stat}\n```")
    return "\n".join(parts)


def capture_file_changes(mind, work_dir: Path | str | None = None) -> list[str]:
    """Store a refactor observation for the session's file edits. Returns the files."""
    if work_dir is None:
        work_dir = Path(mind.memory_path).parent.parent if mind.memory_path else Path.cwd()
    work_dir = Path(work_dir)

    files = git_changed_files(work_dir)
    diff_stat = git_diff_stat(work_dir) if files else ""
    for path in recently_modified_files(work_dir):
        if path not in files:
            files.append(path)

    if not files:
        debug("No file changes detected")
        return []

    debug(f"Capturing {len(files)} changed files")
    mind.remember(
        ObservationType.REFACTOR,
        f"Session edits: {len(files)} file(s) modified",
        changes_report(files, diff_stat),
        tool="FileChanges",
        metadata=ObservationMetadata(
            files=tuple(files),
            extra={"fileCount": len(files), "captureMethod": CAPTURE_METHOD},
        ),
    )

    for path in files:
        name = path.split("/")[-1] or path
        if IMPORTANT_FILE.match(name):
            mind.remember(
                ObservationType.REFACTOR,
                f"Modified {name}",
                f"File edited: {path}\nThis file was modified during the session.",
                tool="FileEdit",
                metadata=ObservationMetadata(files=(path,), extra={"fileName": name}),
            )
            debug(f"Stored individual edit: {name}")
    return files
