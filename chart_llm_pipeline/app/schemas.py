"""
Pydantic request/response models.

Rationale:
- Define simple, explicit input/output contracts for the API.
- ChartAnalysis is the single canonical recommendation shape; both the model path
  and the fallback path produce it, and the renderer consumes only it.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_TITLE = "Chart"
DEFAULT_X_LABEL = "Category"
DEFAULT_Y_LABEL = "Value"


class ChartType(str, Enum):
    BAR = "BAR"
    LINE = "LINE"
    PIE = "PIE"
    SCATTER = "SCATTER"

    @classmethod
    def parse(cls, value: Any) -> "ChartType":
        """Resolve free text ("line", " Pie ") to a member; anything else is BAR."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        return cls.BAR


class ChartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chart_type: Optional[str] = Field(
        default=None, alias="chartType", description="Requested chart type (e.g. bar, pie, line)", examples=["bar"]
    )
    title: Optional[str] = Field(default=None, description="Title of the chart", examples=["Sales by Month"])
    description: Optional[str] = Field(default=None, description="Free-text description of the data")
    data: Optional[Any] = Field(default=None, description="Chart data: label->value mapping or arbitrary JSON")
    labels: Optional[List[str]] = Field(default=None, description="Labels for the chart data")
    values: Optional[List[float]] = Field(default=None, description="Values corresponding to the labels")

    @field_validator("labels", mode="before")
    @classmethod
    def labels_as_text(cls, value: Any) -> Any:
        # Years and other numeric labels are accepted as text
        if isinstance(value, list):
            return [item if isinstance(item, str) or item is None else str(item) for item in value]
        return value


class ChartAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chart_type: ChartType = Field(default=ChartType.BAR, alias="chartType")
    title: str = DEFAULT_TITLE
    x_axis_label: str = Field(default=DEFAULT_X_LABEL, alias="xAxisLabel")
    y_axis_label: str = Field(default=DEFAULT_Y_LABEL, alias="yAxisLabel")
    categories: List[str] = Field(default_factory=list)
    series: Dict[str, List[float]] = Field(default_factory=dict)
    reasoning: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"
