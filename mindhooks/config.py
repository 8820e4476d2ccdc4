"""
mindhooks.config — Per-project configuration.

Read from <project>/.claude/mindhooks.json. Keys may be camelCase
(memoryPath) or snake_case (memory_path); unknown keys are ignored.

Example:
  {
    "memoryPath": ".claude/mind.db",
    "maxContextObservations": 20,
    "maxContextTokens": 2000,
    "autoCompress": true,
    "debug": false
  }
"""

import json
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path

from mindhooks.hook_lib import DEBUG_ENV, warn

CONFIG_FILE = Path(".claude") / "mindhooks.json"


@dataclass(frozen=True)
class MindConfig:
    memory_path: str = ".claude/mind.db"
    max_context_observations: int = 20
    max_context_tokens: int = 2000
    auto_compress: bool = True
    min_confidence: float = 0.6       # accepted but not enforced anywhere
    debug: bool = False


_FIELD_TYPES = {f.name: f.type for f in fields(MindConfig)}


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def config_from_dict(data: dict) -> MindConfig:
    """Build a MindConfig from a mapping, ignoring unknown or mistyped keys."""
    values = {}
    for key, value in data.items():
        name = _snake_case(key)
        cast = _FIELD_TYPES.get(name)
        if cast is None:
            continue
        if cast is bool and not isinstance(value, bool):
            warn(f"config key '{key}' must be true or false, ignoring")
            continue
        try:
            values[name] = cast(value)
        except (TypeError, ValueError):
            warn(f"config key '{key}' has invalid value {value!r}, ignoring")
    return MindConfig(**values)


def load_config(project_dir: str | Path | None = None) -> MindConfig:
    """Load the project's config file, falling back to defaults on any problem."""
    path = Path(project_dir or os.getcwd()) / CONFIG_FILE
    config = MindConfig()
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            config = config_from_dict(data)
        except (OSError, ValueError) as e:
            warn(f"could not read {path}: {e}; using defaults")
            config = MindConfig()

    if os.environ.get(DEBUG_ENV) == "1":
        config = replace(config, debug=True)
    return config
