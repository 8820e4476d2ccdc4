"""
mindhooks.compressor — Structure-preserving compression of tool output.

Large tool outputs (file reads, command logs, search results) are reduced
to the parts that are cheap to re-derive meaning from: symbol names, error
lines, file counts, and a few lines of head/tail for grounding. The goal
is roughly 20x smaller with little loss for a coding assistant's working
memory.

Pipeline:
  output <= COMPRESSION_THRESHOLD  → returned untouched
  otherwise                        → renderer for the tool kind
                                   → hard cut at TARGET_COMPRESSED_SIZE

No I/O, no state. Every ToolKind has exactly one renderer.
"""

import json
from collections.abc import Callable

from mindhooks.extractors import (
    error_lines,
    extract_exports,
    extract_functions,
    extract_imports,
    extract_markers,
    extract_types,
    grep_files,
    group_by_directory,
    success_lines,
)
from mindhooks.models import CompressionResult, CompressionStats, ToolKind, tool_kind

# ============================================================================
# LIMITS
# ============================================================================

COMPRESSION_THRESHOLD = 3000       # Outputs up to this many chars pass through
TARGET_COMPRESSED_SIZE = 2000      # Hard ceiling on rendered output
TRUNCATION_MARKER = "\n... (compressed)"

SYMBOL_DISPLAY_LIMIT = 10          # Names shown per symbol bucket
MARKER_DISPLAY_LIMIT = 5           # TODO/FIXME lines shown
HEAD_LINES = 10
TAIL_LINES = 5

COMMAND_CHARS = 100
ERROR_LINE_LIMIT = 10
SUCCESS_LINE_LIMIT = 5
FULL_OUTPUT_MAX_LINES = 20

PATTERN_CHARS = 50
GREP_FILE_LIMIT = 15
GREP_MATCH_LIMIT = 10

GLOB_TOP_DIRS = 5
GLOB_SAMPLE_FILES = 15

EDIT_PREVIEW_CHARS = 500

GENERIC_MAX_LINES = 30
GENERIC_HEAD_LINES = 15
GENERIC_TAIL_LINES = 10


# ============================================================================
# HELPERS
# ============================================================================

def _input_str(tool_input, key: str, default: str) -> str:
    """Read a string field from tool input, tolerating missing/odd input."""
    if not isinstance(tool_input, dict):
        return default
    value = tool_input.get(key)
    if not isinstance(value, str) or not value:
        return default
    return value


def file_name(path: str, default: str = "file") -> str:
    return path.rstrip("/").split("/")[-1] or default


def _capped(items: list[str], limit: int, sep: str = ", ") -> str:
    """Join the first `limit` items, noting how many were left out."""
    text = sep.join(items[:limit])
    if len(items) > limit:
        text += f" (+{len(items) - limit} more)"
    return text


def truncate_to_target(text: str, limit: int = TARGET_COMPRESSED_SIZE) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


# ============================================================================
# RENDERERS
# ============================================================================

def render_file_read(tool_input, output: str) -> str:
    path = _input_str(tool_input, "file_path", "unknown")
    lines = output.split("\n")

    parts = [f"File: {file_name(path)} ({len(lines)} lines)"]

    buckets = (
        ("Imports", extract_imports(output)),
        ("Exports", extract_exports(output)),
        ("Functions", extract_functions(output)),
        ("Classes", extract_types(output)),
    )
    for label, names in buckets:
        if names:
            parts.append(f"{label}: {_capped(names, SYMBOL_DISPLAY_LIMIT)}")

    markers = extract_markers(output)
    if markers:
        parts.append(f"TODOs: {_capped(markers, MARKER_DISPLAY_LIMIT, sep='; ')}")

    parts.append("--- First 10 lines ---")
    parts.extend(lines[:HEAD_LINES])
    parts.append("--- Last 5 lines ---")
    parts.extend(lines[-TAIL_LINES:])
    return "\n".join(parts)


def render_command(tool_input, output: str) -> str:
    command = _input_str(tool_input, "command", "command")
    short_cmd = command.split("\n")[0][:COMMAND_CHARS]
    lines = output.split("\n")

    parts = [f"Command: {short_cmd}"]

    errors = error_lines(lines)
    if errors:
        parts.append(f"Errors ({len(errors)}):")
        parts.extend(errors[:ERROR_LINE_LIMIT])

    successes = success_lines(lines)
    if successes:
        parts.append("Success indicators:")
        parts.extend(successes[:SUCCESS_LINE_LIMIT])

    parts.append(f"Output: {len(lines)} lines total")
    if len(lines) > FULL_OUTPUT_MAX_LINES:
        parts.append("--- First 10 lines ---")
        parts.extend(lines[:HEAD_LINES])
        parts.append("--- Last 5 lines ---")
        parts.extend(lines[-TAIL_LINES:])
    else:
        parts.append("--- Full output ---")
        parts.extend(lines)
    return "\n".join(parts)


def render_grep(tool_input, output: str) -> str:
    pattern = _input_str(tool_input, "pattern", "pattern")
    lines = [line for line in output.split("\n") if line]
    files = grep_files(lines)

    parts = [
        f'Grep: "{pattern[:PATTERN_CHARS]}"',
        f"Found in {len(files)} files, {len(lines)} matches",
    ]
    if files:
        parts.append(f"Files: {_capped(files, GREP_FILE_LIMIT)}")

    parts.append("--- Top matches ---")
    parts.extend(lines[:GREP_MATCH_LIMIT])
    if len(lines) > GREP_MATCH_LIMIT:
        parts.append(f"... and {len(lines) - GREP_MATCH_LIMIT} more matches")
    return "\n".join(parts)


def parse_file_list(output: str) -> list[str]:
    """File list from a glob result: structured JSON if possible, else lines."""
    try:
        parsed = json.loads(output)
    except (json.JSONDecodeError, TypeError, ValueError):
        parsed = None

    if isinstance(parsed, dict):
        parsed = parsed.get("filenames")
    if isinstance(parsed, list):
        return [str(f) for f in parsed if f]
    return [line for line in output.split("\n") if line]


def render_glob(tool_input, output: str) -> str:
    pattern = _input_str(tool_input, "pattern", "pattern")
    files = parse_file_list(output)
    by_dir = group_by_directory(files)

    parts = [
        f'Glob: "{pattern[:PATTERN_CHARS]}"',
        f"Found {len(files)} files in {len(by_dir)} directories",
        "--- Top directories ---",
    ]
    top_dirs = sorted(by_dir.items(), key=lambda item: len(item[1]), reverse=True)[:GLOB_TOP_DIRS]
    for directory, dir_files in top_dirs:
        short_dir = "/".join(directory.split("/")[-3:])
        parts.append(f"{short_dir}/ ({len(dir_files)} files)")

    parts.append("--- Sample files ---")
    parts.append(", ".join(file_name(f, f) for f in files[:GLOB_SAMPLE_FILES]))
    return "\n".join(parts)


def render_edit(tool_input, output: str) -> str:
    path = _input_str(tool_input, "file_path", "") or _input_str(tool_input, "notebook_path", "unknown")
    return "\n".join([
        f"Edited: {file_name(path)}",
        "Edited successfully",
        output[:EDIT_PREVIEW_CHARS],
    ])


def render_generic(tool_input, output: str) -> str:
    lines = output.split("\n")
    if len(lines) <= GENERIC_MAX_LINES:
        return output
    return "\n".join([
        f"Output: {len(lines)} lines",
        "--- First 15 lines ---",
        *lines[:GENERIC_HEAD_LINES],
        "--- Last 10 lines ---",
        *lines[-GENERIC_TAIL_LINES:],
    ])


RENDERERS: dict[ToolKind, Callable[[object, str], str]] = {
    ToolKind.READ: render_file_read,
    ToolKind.BASH: render_command,
    ToolKind.GREP: render_grep,
    ToolKind.GLOB: render_glob,
    ToolKind.EDIT: render_edit,
    ToolKind.WRITE: render_edit,
    ToolKind.WEB: render_generic,
    ToolKind.TASK: render_generic,
    ToolKind.OTHER: render_generic,
}


# ============================================================================
# PUBLIC API
# ============================================================================

def compress(tool_name: str, tool_input, output: str) -> CompressionResult:
    """Compress a tool's output if it is over the threshold."""
    output = output or ""
    original_size = len(output)
    if original_size <= COMPRESSION_THRESHOLD:
        return CompressionResult(compressed=output, was_compressed=False, original_size=original_size)

    renderer = RENDERERS[tool_kind(tool_name)]
    return CompressionResult(
        compressed=truncate_to_target(renderer(tool_input, output)),
        was_compressed=True,
        original_size=original_size,
    )


def compression_stats(original_size: int, compressed_size: int) -> CompressionStats:
    """Ratio, chars saved and percent saved for one compression."""
    saved = original_size - compressed_size
    ratio = original_size / compressed_size if compressed_size else 0.0
    saved_percent = round(saved / original_size * 100, 1) if original_size else 0.0
    return CompressionStats(ratio=ratio, saved=saved, saved_percent=saved_percent)
