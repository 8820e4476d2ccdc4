"""
mindhooks.classifier — Map a tool invocation to an observation category.

Output markers are checked first (errors beat successes beat warnings),
then the tool kind decides. Total: every input gets a category.
"""

from mindhooks.models import ObservationType, ToolKind, tool_kind

PROBLEM_MARKERS = ("error", "failed", "exception")
SUCCESS_MARKERS = ("success", "passed", "completed")
WARNING_MARKERS = ("warning", "deprecated")
BUGFIX_MARKERS = ("fix", "bug")

# Category by tool kind when the output carries no marker.
# EDIT is resolved separately (bugfix vs refactor).
_KIND_TYPES = {
    ToolKind.READ: ObservationType.DISCOVERY,
    ToolKind.GREP: ObservationType.DISCOVERY,
    ToolKind.GLOB: ObservationType.DISCOVERY,
    ToolKind.WRITE: ObservationType.FEATURE,
}


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(m in text for m in markers)


def classify(tool_name: str, output: str) -> ObservationType:
    """Classify a tool's output into one of the ten observation types."""
    lower = (output or "").lower()

    if _contains_any(lower, PROBLEM_MARKERS):
        return ObservationType.PROBLEM
    if _contains_any(lower, SUCCESS_MARKERS):
        return ObservationType.SUCCESS
    if _contains_any(lower, WARNING_MARKERS):
        return ObservationType.WARNING

    kind = tool_kind(tool_name)
    if kind is ToolKind.EDIT:
        if _contains_any(lower, BUGFIX_MARKERS):
            return ObservationType.BUGFIX
        return ObservationType.REFACTOR
    return _KIND_TYPES.get(kind, ObservationType.DISCOVERY)
