"""
Chart rendering with Matplotlib.

Rationale:
- Dispatch purely on analysis.chart_type; unknown kinds draw as BAR.
- Use the Figure/Agg object API rather than pyplot, so renders share no global state
  and can run in worker threads side by side.
- Fixed 800x600 canvas and PNG metadata without version strings: the same analysis
  always produces the same bytes.
"""

import io
import logging
import math
from typing import Callable, Dict, List

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
import pandas as pd

from .outcomes import RenderFailure
from .schemas import ChartAnalysis, ChartType

logger = logging.getLogger(__name__)

WIDTH_PX = 800
HEIGHT_PX = 600
DPI = 100
COLORS = ['#3498db', '#2ecc71', '#e74c3c', '#9b59b6', '#f39c12', '#1abc9c', '#34495e', '#e91e63']
NO_DATA_TEXT = "No data available"


def plain_text(text: str) -> str:
    """Escape "$" so Matplotlib draws caller text literally instead of parsing it as mathtext."""
    return text.replace("$", r"\$")


def _colors(count: int) -> List[str]:
    return [COLORS[i % len(COLORS)] for i in range(count)]


def category_frame(analysis: ChartAnalysis) -> pd.DataFrame:
    """
    Category-keyed dataset: one row per category position, one column per series.
    Values past min(len(series), len(categories)) are dropped; missing cells stay NaN
    and are simply not drawn.
    """
    categories = analysis.categories
    frame = pd.DataFrame(index=pd.RangeIndex(len(categories)))
    for name, values in analysis.series.items():
        overlap = min(len(values), len(categories))
        frame[plain_text(name)] = pd.Series(values[:overlap], dtype="float64")
    return frame


def _has_values(frame: pd.DataFrame) -> bool:
    return not frame.empty and bool(frame.notna().to_numpy().any())


def _draw_placeholder(ax: Axes) -> None:
    ax.text(0.5, 0.5, NO_DATA_TEXT, ha="center", va="center", fontsize=14, transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


def _label_categories(ax: Axes, analysis: ChartAnalysis) -> None:
    ax.set_xticks(range(len(analysis.categories)))
    ax.set_xticklabels([plain_text(c) for c in analysis.categories], rotation=45, ha="right")
    ax.set_xlabel(plain_text(analysis.x_axis_label))
    ax.set_ylabel(plain_text(analysis.y_axis_label))


def _draw_bar(ax: Axes, analysis: ChartAnalysis) -> None:
    frame = category_frame(analysis)
    if not _has_values(frame):
        _draw_placeholder(ax)
        return
    frame.plot.bar(ax=ax, color=_colors(len(frame.columns)), legend=True)
    _label_categories(ax, analysis)


def _draw_line(ax: Axes, analysis: ChartAnalysis) -> None:
    frame = category_frame(analysis)
    if not _has_values(frame):
        _draw_placeholder(ax)
        return
    frame.plot.line(ax=ax, color=_colors(len(frame.columns)), marker="o", linewidth=2, legend=True)
    _label_categories(ax, analysis)


def _draw_pie(ax: Axes, analysis: ChartAnalysis) -> None:
    # Only the first series is used, paired positionally with the categories
    first = next(iter(analysis.series.values()), [])
    slices = [
        (label, value)
        for label, value in zip(analysis.categories, first)
        if math.isfinite(value) and value > 0
    ]
    if not slices:
        _draw_placeholder(ax)
        return
    labels, sizes = zip(*((plain_text(label), size) for label, size in slices))
    ax.pie(sizes, labels=labels, colors=_colors(len(sizes)), autopct="%1.1f%%", startangle=90, counterclock=False)
    ax.axis("equal")


def _draw_scatter(ax: Axes, analysis: ChartAnalysis) -> None:
    if not any(analysis.series.values()):
        _draw_placeholder(ax)
        return
    for color, (name, values) in zip(_colors(len(analysis.series)), analysis.series.items()):
        ax.scatter(range(len(values)), values, label=plain_text(name), color=color)
    ax.set_xlabel(plain_text(analysis.x_axis_label))
    ax.set_ylabel(plain_text(analysis.y_axis_label))
    ax.legend()


_DRAWERS: Dict[ChartType, Callable[[Axes, ChartAnalysis], None]] = {
    ChartType.BAR: _draw_bar,
    ChartType.LINE: _draw_line,
    ChartType.PIE: _draw_pie,
    ChartType.SCATTER: _draw_scatter,
}


def _to_png(fig: Figure) -> bytes:
    """Serialize the figure to PNG bytes without run-dependent metadata."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=DPI, metadata={"Software": None})
    return buf.getvalue()


def render(analysis: ChartAnalysis) -> bytes:
    """Draw the analysis on an 800x600 canvas and return PNG bytes."""
    draw = _DRAWERS.get(ChartType.parse(analysis.chart_type), _draw_bar)
    try:
        fig = Figure(figsize=(WIDTH_PX / DPI, HEIGHT_PX / DPI), dpi=DPI)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(1, 1, 1)
        draw(ax, analysis)
        ax.set_title(plain_text(analysis.title), fontweight="bold", pad=20)
        fig.tight_layout()
        return _to_png(fig)
    except Exception as e:
        logger.error(f"Error converting chart to bytes: {e}")
        raise RenderFailure(f"Failed to generate chart image: {e}") from e
