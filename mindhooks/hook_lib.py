"""
mindhooks.hook_lib — Shared utilities for the hook entry points.

Provides stdin/stdout envelope I/O, the opt-in debug channel, session id
resolution, and tokenizer-backed token counting used by all hooks.
"""
import io
import json
import math
import os
import sys

import tiktoken

from mindhooks.compat import LazyLoader
from mindhooks.models import generate_id

LOG_PREFIX = "[mindhooks]"
DEBUG_ENV = "MINDHOOKS_DEBUG"
SESSION_ENV = "CLAUDE_SESSION_ID"
PROJECT_DIR_ENV = "CLAUDE_PROJECT_DIR"

CONTINUE = {"continue": True}


# ============================================================================
# WINDOWS ENCODING FIX
# ============================================================================

def windows_utf8_io():
    """Fix Windows cp1252 encoding for stdout/stderr. Call once at script top."""
    if (sys.stdout.encoding or '').lower() != 'utf-8':
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    if (sys.stderr.encoding or '').lower() != 'utf-8':
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')


# ============================================================================
# DEBUG CHANNEL
# ============================================================================

_debug_enabled = False


def enable_debug(enabled: bool = True):
    global _debug_enabled
    _debug_enabled = enabled


def debug_enabled() -> bool:
    return _debug_enabled or os.environ.get(DEBUG_ENV) == "1"


def debug(message: str):
    """Diagnostic line on stderr, only when debugging is on."""
    if debug_enabled():
        print(f"{LOG_PREFIX} {message}", file=sys.stderr)


def warn(message: str):
    """Always printed: something the user should fix."""
    print(f"{LOG_PREFIX} WARN: {message}", file=sys.stderr)


# ============================================================================
# HOOK ENVELOPE I/O
# ============================================================================

def read_hook_input(stream=None) -> dict:
    """Parse the JSON envelope the host writes to stdin. Empty input is {}."""
    raw = (stream or sys.stdin).read()
    if not raw.strip():
        return {}
    data = json.loads(raw)
    return data if isinstance(data, dict) else {}


def write_output(payload: dict, stream=None):
    out = stream or sys.stdout
    out.write(json.dumps(payload))
    out.write("\n")
    out.flush()


def project_dir(hook_input: dict | None = None) -> str:
    """Project root: CLAUDE_PROJECT_DIR, then the envelope cwd, then cwd."""
    env_dir = os.environ.get(PROJECT_DIR_ENV)
    if env_dir:
        return env_dir
    cwd = (hook_input or {}).get("cwd")
    if isinstance(cwd, str) and cwd:
        return cwd
    return os.getcwd()


# ============================================================================
# SESSION ID
# ============================================================================

def get_session_id(hook_input: dict | None = None) -> str:
    """Host session id from the envelope, then the environment, else a fresh one."""
    session_id = (hook_input or {}).get("session_id")
    if isinstance(session_id, str) and session_id:
        return session_id
    env_id = os.environ.get(SESSION_ENV)
    if env_id:
        return env_id
    return generate_id()


# ============================================================================
# TOKEN COUNTING
# ============================================================================

CHARS_PER_TOKEN_FALLBACK = 4

# cl100k_base may need a download on first use; a failure disables it for the process
_encoding = LazyLoader(lambda: tiktoken.get_encoding("cl100k_base"))


def count_tokens(text: str) -> int:
    """
    BPE token count of text using tiktoken's cl100k_base encoding.

    Falls back to ceil(chars / 4) when the encoding cannot be loaded.
    """
    if not text:
        return 0
    enc = _encoding.get()
    if enc is not None:
        return len(enc.encode(text, disallowed_special=()))
    return math.ceil(len(text) / CHARS_PER_TOKEN_FALLBACK)


def tokenizer_name() -> str:
    return "cl100k_base" if _encoding.is_available() else "heuristic"
