"""Tests for turning model output into a ChartAnalysis."""
import json

import pytest

from chart_llm_pipeline.app.interpreter import AnalysisFields, extract_json_candidate, interpret
from chart_llm_pipeline.app.outcomes import ParseFailure
from chart_llm_pipeline.app.schemas import ChartAnalysis, ChartType

FULL_ANSWER = {
    "chartType": "line",
    "title": "Monthly Sales",
    "xAxisLabel": "Month",
    "yAxisLabel": "Revenue",
    "categories": ["Jan", "Feb", "Mar"],
    "series": {"2024": [1, 2, 3], "2023": [3, 2.5, 1]},
    "reasoning": "Sales change over time",
}


class TestExtraction:
    """Tests for locating the JSON object in noisy text."""

    def test_plain_json(self):
        raw = json.dumps(FULL_ANSWER)
        assert extract_json_candidate(raw) == raw

    @pytest.mark.parametrize("raw", [
        "```json\n{\"a\": 1}\n```",
        "```\n{\"a\": 1}\n```",
        "```JSON {\"a\": 1}```",
        "  ```json\n{\"a\": 1}\n```  \n",
    ])
    def test_fenced(self, raw):
        assert json.loads(extract_json_candidate(raw)) == {"a": 1}

    def test_prose_around_object(self):
        raw = 'Sure! Here is my answer: {"a": {"b": 2}} Hope it helps.'
        assert extract_json_candidate(raw) == '{"a": {"b": 2}}'

    def test_no_braces_returns_trimmed_text(self):
        assert extract_json_candidate("  I think bar charts are nice \n") == "I think bar charts are nice"


class TestInterpret:
    """Tests for the full interpretation."""

    def test_full_answer(self):
        analysis = interpret(json.dumps(FULL_ANSWER))
        assert isinstance(analysis, ChartAnalysis)
        assert analysis.chart_type is ChartType.LINE
        assert analysis.title == "Monthly Sales"
        assert analysis.x_axis_label == "Month"
        assert analysis.y_axis_label == "Revenue"
        assert analysis.categories == ["Jan", "Feb", "Mar"]
        assert list(analysis.series) == ["2024", "2023"]
        assert analysis.series["2023"] == [3.0, 2.5, 1.0]
        assert analysis.reasoning == "Sales change over time"

    def test_fenced_equals_unwrapped(self):
        raw = json.dumps(FULL_ANSWER, indent=2)
        assert interpret(f"```json\n{raw}\n```") == interpret(raw)
        assert interpret(f"```\n{raw}\n```") == interpret(raw)

    def test_no_json_is_parse_failure(self):
        result = interpret("I think bar charts are nice")
        assert isinstance(result, ParseFailure)

    @pytest.mark.parametrize("raw", ["", "   ", "[1, 2, 3]", "42", "null"])
    def test_non_object_is_parse_failure(self, raw):
        assert isinstance(interpret(raw), ParseFailure)

    def test_broken_json_is_parse_failure(self):
        assert isinstance(interpret('{"chartType": "BAR", "title": }'), ParseFailure)

    def test_empty_object_gets_all_defaults(self):
        analysis = interpret("{}")
        assert analysis == ChartAnalysis()
        assert analysis.title == "Chart"
        assert analysis.x_axis_label == "Category"
        assert analysis.y_axis_label == "Value"
        assert analysis.chart_type is ChartType.BAR
        assert analysis.categories == []
        assert analysis.series == {}
        assert analysis.reasoning == ""

    def test_bad_field_does_not_discard_the_rest(self):
        answer = dict(FULL_ANSWER, title=123, categories="Jan,Feb", series=["oops"])
        analysis = interpret(json.dumps(answer))
        assert analysis.chart_type is ChartType.LINE
        assert analysis.title == "Chart"
        assert analysis.categories == []
        assert analysis.series == {}
        assert analysis.x_axis_label == "Month"

    @pytest.mark.parametrize("value,expected", [
        ("pie", ChartType.PIE),
        (" Scatter ", ChartType.SCATTER),
        ("DONUT", ChartType.BAR),
        (7, ChartType.BAR),
        (None, ChartType.BAR),
    ])
    def test_chart_type_normalization(self, value, expected):
        assert interpret(json.dumps({"chartType": value})).chart_type is expected

    def test_series_values_coerced_in_place(self):
        answer = {"categories": ["a", "b", "c", "d"], "series": {"s": [1, "2.5", "n/a", None], "bad": 5}}
        analysis = interpret(json.dumps(answer))
        assert analysis.series == {"s": [1.0, 2.5, 0.0, 0.0]}

    def test_non_finite_values_become_zero(self):
        analysis = interpret('{"series": {"s": [NaN, Infinity, 4]}}')
        assert analysis.series == {"s": [0.0, 0.0, 4.0]}

    def test_categories_stringified(self):
        analysis = interpret(json.dumps({"categories": [2020, None, "Q1", True]}))
        assert analysis.categories == ["2020", "", "Q1", "true"]

    def test_legacy_field_names(self):
        legacy = {
            "recommendedChartType": "pie",
            "suggestedTitle": "Market Share",
            "xAxisLabel": "Vendor",
            "yAxisLabel": "Share",
            "insights": "A dominates",
        }
        analysis = interpret(json.dumps(legacy))
        assert analysis.chart_type is ChartType.PIE
        assert analysis.title == "Market Share"
        assert analysis.reasoning == "A dominates"


def test_fields_record_keeps_absent_as_none():
    fields = AnalysisFields.decode({"title": "  ", "series": {"s": [1]}})
    assert fields.title is None
    assert fields.categories is None
    assert fields.series == {"s": [1.0]}
