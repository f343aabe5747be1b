"""
Model-free chart analysis derived from the shape of the input data.

Used whenever the LLM is not configured, unreachable, or answers with something
unparseable. It cannot fail: every JSON value maps to some ChartAnalysis.
"""

import logging
from typing import Any, Iterator, List, Optional

from .schemas import ChartAnalysis, ChartType
from .utils import is_number

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Data Visualization"
FALLBACK_SERIES = "Series 1"
FALLBACK_REASONING = "Fallback analysis due to LLM service unavailability"


def _numeric_leaves(node: Any) -> Iterator[float]:
    """Yield numeric leaves depth-first, in document order."""
    if is_number(node):
        yield float(node)
    elif isinstance(node, dict):
        for value in node.values():
            yield from _numeric_leaves(value)
    elif isinstance(node, list):
        for item in node:
            yield from _numeric_leaves(item)


def fallback(data: Any, title: Optional[str] = None, reason: Optional[str] = None) -> ChartAnalysis:
    """
    Build a BAR chart analysis straight from the data.
    - list: "Item 1".."Item N" categories, numeric leaves collected into one series
    - mapping: keys are categories, numeric values (0.0 otherwise) form the series
    Chart type is always BAR, whatever the request asked for.
    """
    categories: List[str] = []
    values: List[float] = []

    if isinstance(data, list):
        for index, item in enumerate(data, start=1):
            categories.append(f"Item {index}")
            values.extend(_numeric_leaves(item))
    elif isinstance(data, dict):
        for key, value in data.items():
            categories.append(str(key))
            values.append(float(value) if is_number(value) else 0.0)

    reasoning = FALLBACK_REASONING if not reason else f"{FALLBACK_REASONING} ({reason})"
    logger.warning(f"Using fallback chart analysis: {reason or 'no reason given'}")

    return ChartAnalysis(
        chart_type=ChartType.BAR,
        title=title or FALLBACK_TITLE,
        x_axis_label="Categories",
        y_axis_label="Values",
        categories=categories,
        series={FALLBACK_SERIES: values},
        reasoning=reasoning,
    )
