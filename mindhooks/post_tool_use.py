#!/usr/bin/env python3
"""
mindhooks.post_tool_use — PostToolUse Hook

Turns one tool invocation into one stored observation:
  filter → compress → classify → caption → remember

Never blocks the host: every outcome, including failures, is
{"continue": true}.

Hook: PostToolUse
"""
import json
from dataclasses import replace

from mindhooks.captions import extract_metadata, summarize
from mindhooks.classifier import classify
from mindhooks.compressor import compress, compression_stats, file_name
from mindhooks.config import MindConfig, load_config
from mindhooks.context_builder import CONTEXT_TAG
from mindhooks.hook_lib import (
    CONTINUE,
    count_tokens,
    debug,
    debug_enabled,
    enable_debug,
    get_session_id,
    project_dir,
    read_hook_input,
    windows_utf8_io,
    write_output,
)
from mindhooks.mind import Mind

OBSERVED_TOOLS = {
    "Read", "Edit", "Write", "Update", "MultiEdit", "Bash", "Grep", "Glob",
    "WebFetch", "WebSearch", "Task", "NotebookEdit",
}
ALWAYS_CAPTURE_TOOLS = {"Edit", "Write", "Update", "MultiEdit", "NotebookEdit"}
MIN_OUTPUT_LENGTH = 50

SKIP_MARKERS = ("<system-reminder>", f"<{CONTEXT_TAG}>")


def tool_output_text(tool_response) -> str:
    if tool_response is None:
        return ""
    if isinstance(tool_response, str):
        return tool_response
    return json.dumps(tool_response, indent=2, ensure_ascii=False)


def effective_output(tool_name: str, tool_input, output: str) -> str | None:
    """The text worth remembering for this call, or None to skip it."""
    if tool_name in ALWAYS_CAPTURE_TOOLS:
        if len(output) < MIN_OUTPUT_LENGTH:
            path = None
            if isinstance(tool_input, dict):
                path = tool_input.get("file_path") or tool_input.get("notebook_path")
            path = path or "unknown file"
            output = f"File modified: {file_name(path)}\nPath: {path}\nTool: {tool_name}"
    elif len(output) < MIN_OUTPUT_LENGTH:
        return None

    if any(marker in output for marker in SKIP_MARKERS):
        return None
    return output


def handle_post_tool_use(hook_input: dict, mind: Mind, config: MindConfig | None = None) -> dict:
    """Record one tool call. Returns the hook output envelope."""
    config = config or mind.config
    tool_name = hook_input.get("tool_name")
    tool_input = hook_input.get("tool_input") or {}
    debug(f"Tool received: {tool_name}")

    if not tool_name or tool_name not in OBSERVED_TOOLS:
        debug(f"Skipping tool: {tool_name} (not observed)")
        return dict(CONTINUE)

    output = effective_output(tool_name, tool_input, tool_output_text(hook_input.get("tool_response")))
    if output is None:
        return dict(CONTINUE)

    if config.auto_compress:
        result = compress(tool_name, tool_input, output)
    else:
        result = None
    compressed = result.compressed if result else output
    was_compressed = bool(result and result.was_compressed)

    if was_compressed and debug_enabled():
        stats = compression_stats(result.original_size, len(compressed))
        debug(
            f"Compressed {tool_name}: {stats.saved_percent}% saved "
            f"({result.original_size} → {len(compressed)} chars, "
            f"{count_tokens(output)} → {count_tokens(compressed)} tokens)"
        )

    obs_type = classify(tool_name, compressed)
    summary = summarize(tool_name, tool_input, output)
    metadata = extract_metadata(tool_name, tool_input)
    if was_compressed:
        metadata = replace(
            metadata,
            compressed=True,
            original_size=result.original_size,
            compressed_size=len(compressed),
        )

    mind.remember(obs_type, summary, compressed, tool=tool_name, metadata=metadata)
    debug(f"Stored: [{obs_type.value}] {summary}{' (compressed)' if was_compressed else ''}")
    return dict(CONTINUE)


def main():
    windows_utf8_io()
    try:
        hook_input = read_hook_input()
        project = project_dir(hook_input)
        config = load_config(project)
        enable_debug(config.debug)
        mind = Mind.open(config, get_session_id(hook_input), project)
        output = handle_post_tool_use(hook_input, mind, config)
    except Exception as e:
        debug(f"Error: {e}")
        output = dict(CONTINUE)
    write_output(output)


if __name__ == "__main__":
    main()
