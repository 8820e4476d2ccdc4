"""
mindhooks.context_builder — Token-budgeted context assembly for SessionStart.

assemble() decides how many recent observations fit the budget; it does
not drop anything from the fetched window. The full window travels in the
InjectedContext and the reported token_count marks where the budget ran
out. render_context() is the consumer that honours that cutoff.

Output format (render_context):
  <mindhooks-context>
  # Memory Bank: 42 memories
  ## Recent Activity
  ### Files Edited
  - **Edited app.py** _(5m ago)_
  ### Other Activity
  - [discovery] **Read config.py (120 lines)** _(1h ago)_
  ## Relevant to "myproject"
  ...
  </mindhooks-context>
"""

import math
from collections import Counter
from datetime import datetime

from mindhooks.models import InjectedContext, Observation, now_ms

CHARS_PER_TOKEN = 4
MAX_RELEVANT_MEMORIES = 10

# Rendering limits
CONTEXT_TAG = "mindhooks-context"
MAX_RENDERED_RECENT = 8
MAX_RENDERED_EDITS = 5
MAX_RENDERED_RELEVANT = 5
FILE_EDIT_TOOLS = {"Edit", "Write", "MultiEdit", "FileEdit", "FileChanges"}
FILE_CHANGE_TOOLS = {"FileEdit", "FileChanges"}


def estimate_tokens(text: str) -> int:
    """Coarse token estimate: 4 characters per token, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def observation_tokens(obs: Observation) -> int:
    return estimate_tokens(f"[{obs.type.value}] {obs.summary}")


def assemble(recent_observations: list[Observation],
             relevant_memories: list[Observation],
             max_tokens: int) -> InjectedContext:
    """Build the session-start context, counting recent items against max_tokens."""
    token_count = 0
    for obs in recent_observations:
        tokens = observation_tokens(obs)
        if token_count + tokens > max_tokens:
            break
        token_count += tokens

    return InjectedContext(
        recent_observations=list(recent_observations),
        relevant_memories=list(relevant_memories[:MAX_RELEVANT_MEMORIES]),
        session_summaries=[],
        token_count=token_count,
    )


def within_budget(context: InjectedContext) -> list[Observation]:
    """The prefix of recent observations whose cost makes up token_count."""
    included = []
    spent = 0
    for obs in context.recent_observations:
        tokens = observation_tokens(obs)
        if spent + tokens > context.token_count:
            break
        included.append(obs)
        spent += tokens
    return included


# ============================================================================
# RENDERING
# ============================================================================

def format_timestamp(ts: int, now: int | None = None) -> str:
    """Relative time for recent memories, calendar date for older ones."""
    now = now_ms() if now is None else now
    diff = now - ts
    minutes = diff // 60000
    hours = diff // 3600000
    days = diff // 86400000
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d")


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _is_other_activity(obs: Observation) -> bool:
    return (obs.tool not in FILE_CHANGE_TOOLS
            and obs.tool != "Bash"
            and "Command:" not in obs.summary)


def render_context(context: InjectedContext, total_memories: int = 0,
                   file_size: int = 0, query: str | None = None,
                   memory_path: str = "", now: int | None = None) -> str:
    """Markdown block injected at session start; empty when there is nothing."""
    shown = within_budget(context)
    if not shown and not context.relevant_memories and total_memories == 0:
        return ""

    lines = [
        f"<{CONTEXT_TAG}>",
        f"# Memory Bank: {total_memories} memories",
        "",
    ]

    if shown:
        lines.append("## Recent Activity")
        edits = [obs for obs in shown if obs.tool in FILE_EDIT_TOOLS]
        others = [obs for obs in shown if obs not in edits and _is_other_activity(obs)]

        if edits:
            lines.append("### Files Edited")
            for obs in edits[:MAX_RENDERED_EDITS]:
                lines.append(f"- **{obs.summary}** _({format_timestamp(obs.timestamp, now)})_")
            lines.append("")

        room = MAX_RENDERED_RECENT - min(len(edits), MAX_RENDERED_EDITS)
        if others and room > 0:
            lines.append("### Other Activity")
            for obs in others[:room]:
                lines.append(f"- [{obs.type.value}] **{obs.summary}** _({format_timestamp(obs.timestamp, now)})_")
            lines.append("")

    if context.relevant_memories:
        lines.append(f'## Relevant to "{query}"' if query else "## Relevant Memories")
        for obs in context.relevant_memories[:MAX_RENDERED_RELEVANT]:
            lines.append(f"- [{obs.type.value}] {obs.summary}")
        lines.append("")

    by_type = Counter(obs.type.value for obs in context.recent_observations)
    if len(by_type) > 1:
        lines.append("## Quick Stats")
        lines.append(" | ".join(f"{count} {t}" for t, count in by_type.items()))
        lines.append("")

    lines.append("---")
    footer = f"Memory file: `{memory_path}` | {format_file_size(file_size)}" if memory_path \
        else f"Memory size: {format_file_size(file_size)}"
    lines.append(footer)
    lines.append(f"</{CONTEXT_TAG}>")
    return "\n".join(lines)
