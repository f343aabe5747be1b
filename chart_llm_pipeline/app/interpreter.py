"""
Turns free-form model output into a ChartAnalysis.

Two tiers of tolerance:
1. Structural: strip markdown fences, cut the outermost {...} span, decode. If no JSON
   object comes out, return ParseFailure and let the caller fall back.
2. Per field: each field is decoded on its own; a missing or mistyped field takes its
   default instead of discarding an otherwise usable response.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .outcomes import ParseFailure
from .schemas import (
    DEFAULT_TITLE,
    DEFAULT_X_LABEL,
    DEFAULT_Y_LABEL,
    ChartAnalysis,
    ChartType,
)
from .utils import to_float

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[\w+-]*[^\S\n]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")

# Older recommendation payloads used different field names for the same things.
CHART_TYPE_KEYS = ("chartType", "recommendedChartType")
TITLE_KEYS = ("title", "suggestedTitle")
REASONING_KEYS = ("reasoning", "insights")


def extract_json_candidate(text: str) -> str:
    """
    Return the substring most likely to be the JSON object.
    - drop one leading ``` / ```json fence and one trailing ``` fence
    - then keep the span from the first "{" to the last "}", when there is one
    """
    candidate = (text or "").strip()
    candidate = _LEADING_FENCE.sub("", candidate, count=1)
    candidate = _TRAILING_FENCE.sub("", candidate, count=1).strip()

    start = candidate.find("{")
    end = candidate.rfind("}")
    if start != -1 and end > start:
        return candidate[start:end + 1]
    return candidate


def _first_present(obj: Dict[str, Any], keys) -> Any:
    for key in keys:
        if key in obj:
            return obj[key]
    return None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _category(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _series_value(value: Any) -> float:
    number = to_float(value)
    return 0.0 if number is None else number


@dataclass(frozen=True)
class AnalysisFields:
    """Decoded model answer; None means the field was absent or unusable."""

    chart_type: Optional[str] = None
    title: Optional[str] = None
    x_axis_label: Optional[str] = None
    y_axis_label: Optional[str] = None
    categories: Optional[List[str]] = None
    series: Optional[Dict[str, List[float]]] = None
    reasoning: Optional[str] = None

    @classmethod
    def decode(cls, obj: Dict[str, Any]) -> "AnalysisFields":
        categories = obj.get("categories")
        series = obj.get("series")
        reasoning = _first_present(obj, REASONING_KEYS)

        decoded_series = None
        if isinstance(series, dict):
            decoded_series = {
                str(name): [_series_value(v) for v in values]
                for name, values in series.items()
                if isinstance(values, list)
            }

        return cls(
            chart_type=_text(_first_present(obj, CHART_TYPE_KEYS)),
            title=_text(_first_present(obj, TITLE_KEYS)),
            x_axis_label=_text(obj.get("xAxisLabel")),
            y_axis_label=_text(obj.get("yAxisLabel")),
            categories=[_category(c) for c in categories] if isinstance(categories, list) else None,
            series=decoded_series,
            reasoning=reasoning if isinstance(reasoning, str) else None,
        )

    def to_analysis(self) -> ChartAnalysis:
        return ChartAnalysis(
            chart_type=ChartType.parse(self.chart_type),
            title=self.title or DEFAULT_TITLE,
            x_axis_label=self.x_axis_label or DEFAULT_X_LABEL,
            y_axis_label=self.y_axis_label or DEFAULT_Y_LABEL,
            categories=self.categories if self.categories is not None else [],
            series=self.series if self.series is not None else {},
            reasoning=self.reasoning or "",
        )


def interpret(raw_text: str) -> Union[ChartAnalysis, ParseFailure]:
    """Map raw model text onto a ChartAnalysis, or report why it could not be parsed."""
    candidate = extract_json_candidate(raw_text)
    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Unparseable model output: {(raw_text or '')[:500]!r}")
        return ParseFailure(f"Invalid JSON in LLM response: {e}")

    if not isinstance(parsed, dict):
        return ParseFailure(f"Expected a JSON object, got {type(parsed).__name__}")

    return AnalysisFields.decode(parsed).to_analysis()
