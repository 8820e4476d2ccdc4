"""
mindhooks.extractors — Regex symbol mining over arbitrary source text.

One rule table covers several language conventions at once (Python,
JS/TS, Rust, Go, Java/C-family). Adding a convention means adding a row,
not a code path. Every rule captures a `name` group; rules marked `split`
capture a comma-separated list.

These are heuristics: misses are fine, raising is not. Results are
deduplicated in first-seen order and never capped here.
"""

import re
from dataclasses import dataclass
from enum import Enum


class SymbolKind(Enum):
    IMPORT = "import"
    EXPORT = "export"
    FUNCTION = "function"
    TYPE = "type"


@dataclass(frozen=True)
class ExtractionRule:
    kind: SymbolKind
    pattern: re.Pattern
    split: bool = False


def _rule(kind: SymbolKind, pattern: str, split: bool = False, flags: int = 0) -> ExtractionRule:
    return ExtractionRule(kind, re.compile(pattern, flags), split)


# Start of a source line, allowing the `   12→` gutter that file-read tools prepend
LINE_START = r"^[ \t]*(?:\d+[→\t:|-][ \t]*)?"


RULES: tuple[ExtractionRule, ...] = (
    # Imports / dependencies
    _rule(SymbolKind.IMPORT, r"""\bimport\s+(?:type\s+)?(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)(?:\s*,\s*\{[^}]*\})?\s+from\s+['"](?P<name>[^'"]+)['"]"""),
    _rule(SymbolKind.IMPORT, r"""\bfrom\s+(?P<name>[\w.]+)\s+import\b"""),
    _rule(SymbolKind.IMPORT, LINE_START + r"""import[ \t]+(?P<name>[\w.]+(?:[ \t]*,[ \t]*[\w.]+)*)[ \t]*(?:;[ \t]*)?$""", split=True, flags=re.MULTILINE),
    _rule(SymbolKind.IMPORT, r"""\brequire\s*\(\s*['"](?P<name>[^'"]+)['"]\s*\)"""),
    _rule(SymbolKind.IMPORT, r"""\bimport\s+['"](?P<name>[^'"]+)['"]"""),
    _rule(SymbolKind.IMPORT, LINE_START + r"""use\s+(?P<name>\w+(?:::\w+)*)""", flags=re.MULTILINE),
    # Exports / public symbols
    _rule(SymbolKind.EXPORT, r"""\bexport\s+(?:default\s+)?(?:async\s+)?(?:function\*?|class|const|let|var|interface|type|enum)\s+(?P<name>\w+)"""),
    _rule(SymbolKind.EXPORT, r"""\bexport\s*\{(?P<name>[^}]+)\}""", split=True),
    _rule(SymbolKind.EXPORT, r"""\bpub(?:\([^)]*\))?\s+(?:async\s+)?(?:fn|struct|enum|trait|mod|const|type)\s+(?P<name>\w+)"""),
    # Functions / methods
    _rule(SymbolKind.FUNCTION, r"""\bfunction\b\s*\*?\s*(?P<name>\w+)"""),
    _rule(SymbolKind.FUNCTION, r"""\b(?P<name>\w+)\s*:\s*(?:async\s+)?\([^)]*\)\s*=>"""),
    _rule(SymbolKind.FUNCTION, r"""\b(?:const|let|var)\s+(?P<name>\w+)\s*=\s*(?:async\s+)?\([^)]*\)\s*=>"""),
    _rule(SymbolKind.FUNCTION, r"""\bfn\s+(?P<name>\w+)"""),
    _rule(SymbolKind.FUNCTION, r"""\bdef\s+(?P<name>\w+)"""),
    _rule(SymbolKind.FUNCTION, r"""\bfunc\s+(?:\([^)]*\)\s*)?(?P<name>\w+)"""),
    # Types / classes
    _rule(SymbolKind.TYPE, r"""\bclass\s+(?P<name>[A-Za-z_]\w*)"""),
    _rule(SymbolKind.TYPE, r"""\bstruct\s+(?P<name>[A-Za-z_]\w*)"""),
    _rule(SymbolKind.TYPE, r"""\binterface\s+(?P<name>[A-Za-z_]\w*)"""),
    _rule(SymbolKind.TYPE, r"""\btrait\s+(?P<name>[A-Za-z_]\w*)"""),
    _rule(SymbolKind.TYPE, r"""\btype\s+(?P<name>[A-Za-z_]\w*)\s*(?:<[^>]*>)?\s*="""),
    _rule(SymbolKind.TYPE, r"""\btype\s+(?P<name>[A-Za-z_]\w*)\s+(?:struct|interface)\b"""),
)

MARKERS = ("TODO", "FIXME", "HACK", "XXX", "BUG")
MARKER_LINE_CHARS = 100


def _dedupe(items) -> list[str]:
    return list(dict.fromkeys(items))


def extract(text: str, kind: SymbolKind) -> list[str]:
    """Run every rule of one kind over text."""
    if not isinstance(text, str) or not text:
        return []

    found = []
    for rule in RULES:
        if rule.kind is not kind:
            continue
        for match in rule.pattern.finditer(text):
            value = match.group("name") or ""
            if rule.split:
                found.extend(part.strip() for part in value.split(",") if part.strip())
            elif value:
                found.append(value.strip())
    return _dedupe(found)


def extract_imports(text: str) -> list[str]:
    return extract(text, SymbolKind.IMPORT)


def extract_exports(text: str) -> list[str]:
    return extract(text, SymbolKind.EXPORT)


def extract_functions(text: str) -> list[str]:
    return extract(text, SymbolKind.FUNCTION)


def extract_types(text: str) -> list[str]:
    return extract(text, SymbolKind.TYPE)


def extract_markers(text: str) -> list[str]:
    """Lines carrying a TODO/FIXME/HACK/XXX/BUG marker, stripped and clipped."""
    if not isinstance(text, str) or not text:
        return []
    lines = (
        line.strip()[:MARKER_LINE_CHARS]
        for line in text.split("\n")
        if any(marker in line for marker in MARKERS)
    )
    return _dedupe(line for line in lines if line)


# Error/success line filters used on command output

ERROR_LINE_MARKERS = ("error", "failed", "exception", "warning")
SUCCESS_LINE_MARKERS = ("success", "passed", "completed", "done")


def filter_lines(lines: list[str], markers: tuple[str, ...]) -> list[str]:
    """Lines containing any marker (case-insensitive), in order."""
    return [line for line in lines if any(m in line.lower() for m in markers)]


def error_lines(lines: list[str]) -> list[str]:
    return filter_lines(lines, ERROR_LINE_MARKERS)


def success_lines(lines: list[str]) -> list[str]:
    return filter_lines(lines, SUCCESS_LINE_MARKERS)


# Search output aggregation

_GREP_FILE = re.compile(r"^([^:\n]+):")


def grep_files(lines: list[str]) -> list[str]:
    """Distinct file prefixes of `path:...` match lines, first-seen order."""
    files = []
    for line in lines:
        match = _GREP_FILE.match(line)
        if match:
            files.append(match.group(1))
    return _dedupe(files)


def group_by_directory(paths: list[str]) -> dict[str, list[str]]:
    """{directory: [file names]} in first-seen order; bare names go under '/'."""
    by_dir: dict[str, list[str]] = {}
    for path in paths:
        parts = path.split("/")
        directory = "/".join(parts[:-1]) or "/"
        by_dir.setdefault(directory, []).append(parts[-1] or path)
    return by_dir
