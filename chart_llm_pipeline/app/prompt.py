"""
Prompt construction for the chart recommendation call.

Rationale:
- The instruction text and output contract live in prompts/chart_analysis.txt, next to the code.
- Input data is restated as indented "- key: value" lines rather than raw JSON, so every
  caller-controlled string can go through sanitize() without breaking the structure.
- Output is a pure function of its inputs: no timestamps, ids or random ordering.
"""

import os
from functools import lru_cache
from string import Template
from typing import Any, List, Optional

from .utils import sanitize

# Prompt file paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CHART_PROMPT_PATH = os.path.join(BASE_DIR, "prompts", "chart_analysis.txt")

# Keep prompts bounded regardless of payload size.
MAX_DATA_ENTRIES = 200
MAX_DEPTH = 5

NO_DATA = "(no data provided)"


@lru_cache(maxsize=1)
def _read_template(path: str = CHART_PROMPT_PATH) -> Template:
    """Read a prompt text file."""
    with open(path, "r", encoding="utf-8") as f:
        return Template(f.read())


def _format_scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (dict, list)):
        return "(empty)"
    return sanitize(value)


class _DatasetFormatter:
    """Walks nested JSON and emits one line per entry until the entry budget runs out."""

    def __init__(self, max_entries: int = MAX_DATA_ENTRIES, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        self.remaining = max_entries
        self.omitted = 0
        self.lines: List[str] = []

    def format(self, data: Any) -> str:
        if data is None or (isinstance(data, (dict, list)) and not data):
            return NO_DATA
        if isinstance(data, (dict, list)):
            self._walk(data, 0)
        else:
            self._emit(f"- value: {_format_scalar(data)}")
        if self.omitted:
            self.lines.append(f"... {self.omitted} more entries omitted")
        return "\n".join(self.lines)

    @staticmethod
    def _entries(node):
        if isinstance(node, dict):
            return ((sanitize(key), value) for key, value in node.items())
        return ((f"item {index}", value) for index, value in enumerate(node, start=1))

    def _walk(self, node, depth: int) -> None:
        indent = "  " * depth
        for label, value in self._entries(node):
            if self.remaining <= 0:
                self.omitted += 1
                continue
            if isinstance(value, (dict, list)) and value:
                if depth + 1 >= self.max_depth:
                    self._emit(f"{indent}- {label}: ({len(value)} nested entries)")
                    continue
                self._emit(f"{indent}- {label}:")
                self._walk(value, depth + 1)
            else:
                self._emit(f"{indent}- {label}: {_format_scalar(value)}")

    def _emit(self, line: str) -> None:
        self.remaining -= 1
        self.lines.append(line)


def format_dataset(data: Any) -> str:
    """Render the dataset as stable, human-readable text with sanitized strings."""
    return _DatasetFormatter().format(data)


def build_prompt(
    data: Any,
    title: Optional[str] = None,
    description: Optional[str] = None,
    chart_type: Optional[str] = None,
) -> str:
    """
    Build the user message sent to the LLM.

    Args:
        data: Normalized dataset (mapping, list or any JSON value)
        title: Optional chart title hint
        description: Optional free-text description
        chart_type: Optional requested chart type hint

    Returns:
        Prompt text including the JSON output contract.
    """
    hints = []
    for label, value in (
        ("Requested chart type", chart_type),
        ("User Title", title),
        ("User Description", description),
    ):
        clean = sanitize(value)
        if clean:
            hints.append(f"{label}: {clean}")
    hint_block = "\n" + "\n".join(hints) + "\n" if hints else ""

    return _read_template().substitute(dataset=format_dataset(data), hints=hint_block)
