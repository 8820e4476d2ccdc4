#!/usr/bin/env python3
"""
mindhooks.session_stop — Stop Hook

End of session: records which files changed, then, if the session left
enough observations behind, synthesizes and stores a session summary.

Hook: Stop
"""
from pathlib import Path

from mindhooks.config import load_config
from mindhooks.file_changes import capture_file_changes
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
from mindhooks.session_summary import MIN_OBSERVATIONS_FOR_SUMMARY, synthesize


def read_transcript(path) -> str:
    """Transcript text, or "" when there is no readable transcript."""
    if not path:
        return ""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        debug(f"Transcript unreadable: {e}")
        return ""


def handle_stop(hook_input: dict, mind: Mind, work_dir: str | Path | None = None) -> dict:
    debug(f"Session stopping: {hook_input.get('session_id')}")

    # A failed capture must not cost the session its summary
    try:
        capture_file_changes(mind, work_dir or project_dir(hook_input))
    except Exception as e:
        debug(f"File change capture failed: {e}")

    transcript = read_transcript(hook_input.get("transcript_path"))
    observations = mind.session_observations()
    if len(observations) >= MIN_OBSERVATIONS_FOR_SUMMARY:
        draft = synthesize(observations, transcript)
        mind.save_session_summary(draft, observations)
        debug(f"Session summary saved: {len(draft.key_decisions)} decisions, "
              f"{len(draft.files_modified)} files")
    else:
        debug(f"Only {len(observations)} observations this session, no summary")

    return dict(CONTINUE)


def main():
    windows_utf8_io()
    try:
        hook_input = read_hook_input()
        project = project_dir(hook_input)
        config = load_config(project)
        enable_debug(config.debug)
        mind = Mind.open(config, get_session_id(hook_input), project)
        output = handle_stop(hook_input, mind, project)
    except Exception as e:
        debug(f"Error: {e}")
        output = dict(CONTINUE)
    write_output(output)


if __name__ == "__main__":
    main()
