"""
Small utilities: prompt-input sanitizing, numeric coercion and request data normalization.

Rationale:
- Caller text is embedded in an LLM prompt, so it is length-limited and stripped of
  characters that could close the textual slot or forge JSON (prompt-injection mitigation).
- Numeric checks live in one place so the interpreter and the fallback agree on what a number is.
"""

import math
import re
from typing import Any, Dict, Optional

from .schemas import ChartRequest


# Maximum length of any caller-controlled text placed in a prompt.
MAX_INPUT_LENGTH = 100

_LINE_BREAKS = re.compile(r"[\r\n\x0b\x0c\x85\u2028\u2029]+")
_RESERVED_CHARS = re.compile(r"[{}\[\]\"'`]")


def sanitize(text: Any) -> str:
    """
    Make untrusted text safe to embed in a prompt.
    - None -> ""
    - truncate to MAX_INPUT_LENGTH, collapse line breaks to one space
    - drop braces, brackets, quotes and backticks, trim
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    sanitized = text[:MAX_INPUT_LENGTH]
    sanitized = _LINE_BREAKS.sub(" ", sanitized)
    sanitized = _RESERVED_CHARS.sub("", sanitized)
    return sanitized.strip()


def is_number(value: Any) -> bool:
    """True for finite ints/floats; booleans are not numbers here."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and math.isfinite(value)


def to_float(value: Any) -> Optional[float]:
    """Coerce numbers and numeric strings to a finite float, else None."""
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def resolve_data(request: ChartRequest) -> Any:
    """
    Pick the dataset a request describes.
    A non-empty `data` mapping wins; otherwise labels/values are zipped (up to the
    shorter list); otherwise whatever JSON `data` holds; otherwise an empty mapping.
    """
    if isinstance(request.data, dict) and request.data:
        return request.data

    if request.labels is not None and request.values is not None:
        paired: Dict[str, float] = {}
        for label, value in zip(request.labels, request.values):
            paired[label] = value
        return paired

    if request.data is not None:
        return request.data
    return {}
