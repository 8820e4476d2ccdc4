"""
mindhooks.captions — One-line titles and metadata for tool invocations.

Captions are computed from the uncompressed output so line and match
counts stay accurate. Missing input fields fall back to literal
placeholders ("file", "command", "pattern").
"""

from mindhooks.compressor import file_name
from mindhooks.models import ObservationMetadata, ToolKind, tool_kind

CAPTION_COMMAND_CHARS = 50
CAPTION_PATTERN_CHARS = 30
CAPTION_URL_CHARS = 50
METADATA_COMMAND_CHARS = 200


def _field(tool_input, *keys: str) -> str | None:
    if not isinstance(tool_input, dict):
        return None
    for key in keys:
        value = tool_input.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _non_empty_lines(text: str) -> int:
    return sum(1 for line in text.split("\n") if line)


def summarize(tool_name: str, tool_input, output: str) -> str:
    """Single-line caption for a tool invocation."""
    output = output or ""
    kind = tool_kind(tool_name)

    if kind is ToolKind.READ:
        path = _field(tool_input, "file_path")
        name = file_name(path) if path else "file"
        line_count = len(output.split("\n"))
        return f"Read {name} ({line_count} lines)"

    if kind is ToolKind.EDIT:
        path = _field(tool_input, "file_path", "notebook_path")
        return f"Edited {file_name(path) if path else 'file'}"

    if kind is ToolKind.WRITE:
        path = _field(tool_input, "file_path")
        return f"Created {file_name(path) if path else 'file'}"

    if kind is ToolKind.BASH:
        cmd = _field(tool_input, "command")
        short_cmd = cmd.split("\n")[0][:CAPTION_COMMAND_CHARS] if cmd else "command"
        lower = output.lower()
        if "error" in lower or "failed" in lower:
            return f"Command failed: {short_cmd}"
        return f"Ran: {short_cmd}"

    if kind is ToolKind.GREP:
        pattern = (_field(tool_input, "pattern") or "pattern")[:CAPTION_PATTERN_CHARS]
        return f'Found {_non_empty_lines(output)} matches for "{pattern}"'

    if kind is ToolKind.GLOB:
        pattern = (_field(tool_input, "pattern") or "pattern")[:CAPTION_PATTERN_CHARS]
        return f'Found {_non_empty_lines(output)} files matching "{pattern}"'

    if kind is ToolKind.WEB:
        target = _field(tool_input, "url", "query") or "url"
        return f"Fetched: {target[:CAPTION_URL_CHARS]}"

    return f"{tool_name or 'tool'} completed"


def extract_metadata(tool_name: str, tool_input) -> ObservationMetadata:
    """Well-known metadata derived from the tool's input arguments."""
    kind = tool_kind(tool_name)

    if kind in (ToolKind.READ, ToolKind.EDIT, ToolKind.WRITE):
        path = _field(tool_input, "file_path", "notebook_path")
        return ObservationMetadata(files=(path,) if path else ())

    if kind is ToolKind.BASH:
        cmd = _field(tool_input, "command")
        return ObservationMetadata(command=cmd[:METADATA_COMMAND_CHARS] if cmd else None)

    if kind in (ToolKind.GREP, ToolKind.GLOB):
        return ObservationMetadata(
            pattern=_field(tool_input, "pattern"),
            search_path=_field(tool_input, "path"),
        )

    if kind is ToolKind.WEB:
        target = _field(tool_input, "url", "query")
        return ObservationMetadata(extra={"url": target} if target else {})

    return ObservationMetadata()
