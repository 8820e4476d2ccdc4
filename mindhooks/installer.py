#!/usr/bin/env python3
"""
mindhooks.installer — Cross-platform Setup for Claude Code Hooks

Detects the Python command, builds the hook entries for PostToolUse,
SessionStart and Stop, and merges them into settings.json without
touching unrelated hooks or settings.

Usage: mindhooks init [--global]
"""

import json
import shutil
import subprocess
import sys
from pathlib import Path

from mindhooks import __version__ as VERSION
from mindhooks.config import CONFIG_FILE, MindConfig
from mindhooks.hook_lib import windows_utf8_io

GLOBAL_SETTINGS_FILE = Path.home() / ".claude" / "settings.json"
PROJECT_SETTINGS_FILE = Path(".claude") / "settings.json"

# event -> (entry point, module run with `python -m`)
HOOKS = {
    "PostToolUse": ("mindhooks-post-tool-use", "mindhooks.post_tool_use"),
    "SessionStart": ("mindhooks-session-start", "mindhooks.session_init"),
    "Stop": ("mindhooks-stop", "mindhooks.session_stop"),
}


def detect_python_command() -> str:
    """Find the correct Python 3 command for this OS."""
    candidates = ["py -3", "python3", "python"]
    for cmd in candidates:
        try:
            parts = cmd.split()
            result = subprocess.run(
                parts + ["--version"],
                capture_output=True, text=True, timeout=5
            )
            if result.returncode == 0 and "Python 3" in result.stdout:
                return cmd
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
            continue
    return "python3"  # Best guess fallback


def detect_entry_points() -> bool:
    """Check if mindhooks entry points are available on PATH."""
    return shutil.which("mindhooks-post-tool-use") is not None


def build_hook_command(entry_point: str, module: str, python_cmd: str, use_entry_points: bool) -> str:
    """Build the correct hook command string."""
    if use_entry_points:
        return entry_point
    return f"{python_cmd} -m {module}"


def build_settings(python_cmd: str, use_entry_points: bool) -> dict:
    """Build the Claude Code settings.json hook configuration."""
    hooks = {}
    for event, (entry_point, module) in HOOKS.items():
        group = {"hooks": [
            {"type": "command", "command": build_hook_command(
                entry_point, module, python_cmd, use_entry_points
            )},
        ]}
        if event == "PostToolUse":
            group = {"matcher": "*", **group}
        hooks[event] = [group]
    return {"hooks": hooks}


def _commands(groups: list) -> set:
    found = set()
    for group in groups:
        for hook in group.get("hooks", []):
            found.add(hook.get("command", "") if isinstance(hook, dict) else hook)
    return found


def merge_hooks(existing: dict, new: dict) -> dict:
    """
    Merge new hook groups into existing ones, event by event.

    Existing groups are kept as they are. A new hook whose command string
    is already registered for that event is dropped; groups left with no
    hooks are not added.
    """
    merged = {event: list(groups) for event, groups in (existing or {}).items()}
    for event, groups in (new or {}).items():
        current = merged.setdefault(event, [])
        seen = _commands(current)
        for group in groups:
            fresh = []
            for hook in group.get("hooks", []):
                cmd = hook.get("command", "") if isinstance(hook, dict) else hook
                if cmd in seen:
                    continue
                seen.add(cmd)
                fresh.append(hook)
            if fresh:
                current.append({**group, "hooks": fresh})
    return merged


def install(settings_file: Path, python_cmd: str, use_entry_points: bool) -> dict:
    """Write merged settings to settings_file and return them."""
    existing = {}
    if settings_file.exists():
        try:
            existing = json.loads(settings_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            print(f"  Warning: could not parse {settings_file} ({e}), rewriting hooks only")
    if not isinstance(existing, dict):
        existing = {}

    new_settings = build_settings(python_cmd, use_entry_points)
    settings = dict(existing)
    settings["hooks"] = merge_hooks(existing.get("hooks", {}), new_settings["hooks"])

    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    return settings


def write_default_config(project: Path) -> Path | None:
    """Create .claude/mindhooks.json with defaults if the project has none."""
    path = project / CONFIG_FILE
    if path.exists():
        return None
    defaults = MindConfig()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "memoryPath": defaults.memory_path,
        "maxContextObservations": defaults.max_context_observations,
        "maxContextTokens": defaults.max_context_tokens,
        "autoCompress": defaults.auto_compress,
        "debug": defaults.debug,
    }, indent=2) + "\n", encoding="utf-8")
    return path


def main(global_install: bool = False, project: Path | None = None):
    """Main installer entry point."""
    windows_utf8_io()
    project = Path(project or Path.cwd())

    print()
    print(f"  mindhooks v{VERSION}")
    print("  Persistent memory hooks for Claude Code")
    print("─" * 56)
    print()

    python_cmd = detect_python_command()
    use_entry_points = detect_entry_points()
    mode = "pip entry points" if use_entry_points else f"module commands ({python_cmd} -m)"
    print(f"  Platform   {sys.platform}")
    print(f"  Python     {python_cmd}")
    print(f"  Mode       {mode}")
    print()

    settings_file = GLOBAL_SETTINGS_FILE if global_install else project / PROJECT_SETTINGS_FILE
    settings = install(settings_file, python_cmd, use_entry_points)
    print(f"  Settings: {settings_file} (updated)")

    hook_count = sum(
        len(group.get("hooks", []))
        for event in HOOKS
        for group in settings["hooks"].get(event, [])
    )
    print(f"  Hooks registered: {hook_count} across {len(HOOKS)} events")

    if not global_install:
        config_path = write_default_config(project)
        if config_path:
            print(f"  Config: {config_path} (created)")

    print()
    print("─" * 56)
    print("  Ready. Hooks activate on next Claude Code session.")
    print()


if __name__ == "__main__":
    main(global_install="--global" in sys.argv[1:])
