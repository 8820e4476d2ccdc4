"""
mindhooks - Persistent memory for AI coding assistants

Observes tool calls, compresses large outputs into compact structured
records, and resurfaces the most recent and most relevant ones at the
start of the next session. Everything lives in one SQLite file per project.

Features:
- Structure-preserving compression of file reads, command logs and searches
- Ten-way observation classification
- Token-budgeted context injection at session start
- End-of-session summaries

Quick start:
    pip install mindhooks
    mindhooks init
    mindhooks status
"""

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "Mind",
    "MindConfig",
    "Observation",
    "ObservationType",
    "SQLiteMemoryStore",
    "assemble",
    "classify",
    "compress",
    "synthesize",
]

from mindhooks.classifier import classify  # noqa: E402
from mindhooks.compressor import compress  # noqa: E402
from mindhooks.config import MindConfig  # noqa: E402
from mindhooks.context_builder import assemble  # noqa: E402
from mindhooks.mind import Mind  # noqa: E402
from mindhooks.models import Observation, ObservationType  # noqa: E402
from mindhooks.session_summary import synthesize  # noqa: E402
from mindhooks.store import SQLiteMemoryStore  # noqa: E402
