#!/usr/bin/env python3
"""
mindhooks.session_init — SessionStart Hook

Pulls the recent window plus project-relevant memories out of the store
and injects them as additional context for the new session.

Hook: SessionStart
"""
import os

from mindhooks.config import MindConfig, load_config
from mindhooks.context_builder import render_context
from mindhooks.hook_lib import (
    CONTINUE,
    debug,
    enable_debug,
    get_session_id,
    project_dir,
    read_hook_input,
    windows_utf8_io,
    write_output,
)
from mindhooks.mind import Mind


def project_query(hook_input: dict) -> str:
    """Search query for relevant memories: the project directory's name."""
    cwd = hook_input.get("cwd")
    directory = cwd if isinstance(cwd, str) and cwd else project_dir(hook_input)
    return os.path.basename(os.path.normpath(directory))


def handle_session_start(hook_input: dict, mind: Mind, config: MindConfig | None = None) -> dict:
    config = config or mind.config
    debug(f"Session starting: {hook_input.get('session_id')}")

    query = project_query(hook_input)
    context = mind.get_context(query)
    stats = mind.stats()

    text = render_context(
        context,
        total_memories=stats.total_observations,
        file_size=stats.file_size,
        query=query,
        memory_path=config.memory_path,
    )

    output = dict(CONTINUE)
    if text:
        output["hookSpecificOutput"] = {
            "hookEventName": "SessionStart",
            "additionalContext": text,
        }
        debug(f"Injected {len(context.recent_observations)} recent, "
              f"{len(context.relevant_memories)} relevant ({context.token_count} tokens)")
    return output


def main():
    windows_utf8_io()
    try:
        hook_input = read_hook_input()
        project = project_dir(hook_input)
        config = load_config(project)
        enable_debug(config.debug)
        mind = Mind.open(config, get_session_id(hook_input), project)
        output = handle_session_start(hook_input, mind, config)
    except Exception as e:
        debug(f"Error: {e}")
        output = dict(CONTINUE)
    write_output(output)


if __name__ == "__main__":
    main()
