"""
Unit tests for chart-type reshaping.
"""
import pytest
from app.core.chart_types import ChartType, Orientation, Stacking
from app.services.aggregator import AggregationResult, Series
from app.services.transformer import (
    WATERFALL_FALL_COLOR,
    WATERFALL_RISE_COLOR,
    decode_range,
    reshape,
)


def _single(labels, values, name="val"):
    return AggregationResult(labels=list(labels), series=[Series(name, list(values))])


@pytest.fixture
def two_groups():
    return AggregationResult(
        labels=["x", "y"],
        series=[Series("A", [1.0, 0.0]), Series("B", [3.0, 0.0])],
    )


@pytest.mark.unit
def test_percentage_stack_normalizes_each_label(two_groups):
    """Test percentage normalisation, including an all-zero label."""
    shaped = reshape(ChartType.PERCENTAGE_STACKED_BAR, two_groups)

    assert shaped.series[0].values == [25, 0]
    assert shaped.series[1].values == [75, 0]
    assert shaped.layout.stacking == Stacking.PERCENTAGE
    assert shaped.layout.orientation == Orientation.VERTICAL


@pytest.mark.unit
def test_horizontal_percentage_stack(two_groups):
    """Test that the horizontal variant flips orientation too."""
    shaped = reshape(ChartType.HORIZONTAL_PERCENTAGE_STACKED_BAR, two_groups)

    assert shaped.layout.orientation == Orientation.HORIZONTAL
    assert shaped.layout.stacking == Stacking.PERCENTAGE
    assert shaped.series[1].values == [75, 0]


@pytest.mark.unit
def test_stacked_keeps_values(two_groups):
    """Test that stacking only flags the layout."""
    shaped = reshape(ChartType.STACKED_BAR, two_groups)

    assert shaped.layout.stacking == Stacking.STACKED
    assert shaped.layout.label_anchor == "center"
    assert shaped.series[0].values == [1.0, 0.0]


@pytest.mark.unit
def test_horizontal_bar_changes_orientation_only():
    """Test the orientation flip."""
    shaped = reshape(ChartType.HORIZONTAL_BAR, _single(["a", "b"], [1, 2]))

    assert shaped.layout.orientation == Orientation.HORIZONTAL
    assert shaped.layout.label_align == "right"
    assert shaped.labels == ["a", "b"]
    assert shaped.series[0].values == [1, 2]


@pytest.mark.unit
def test_waterfall_deltas():
    """Test conversion of running values into step changes."""
    shaped = reshape(ChartType.WATERFALL, _single(["q1", "q2", "q3"], [10, 15, 12]))

    assert shaped.series[0].values == [10, 5, -3]
    assert shaped.series[0].colors == [
        WATERFALL_RISE_COLOR, WATERFALL_RISE_COLOR, WATERFALL_FALL_COLOR
    ]


@pytest.mark.unit
def test_waterfall_empty_series():
    """Test that an empty series stays empty."""
    shaped = reshape(ChartType.WATERFALL, _single([], []))
    assert shaped.series[0].values == []


@pytest.mark.unit
def test_sorted_ascending():
    """Test ascending sort of label/value pairs."""
    shaped = reshape(ChartType.SORTED_BAR_ASC, _single(["B", "A", "C"], [3, 1, 2]))

    assert shaped.labels == ["A", "C", "B"]
    assert shaped.series[0].values == [1, 2, 3]


@pytest.mark.unit
def test_sorting_is_stable_on_ties():
    """Test that ties keep their original order in both directions."""
    result = _single(["a", "b", "c"], [2, 1, 2])

    ascending = reshape(ChartType.SORTED_BAR_ASC, result)
    descending = reshape(ChartType.SORTED_BAR_DESC, result)

    assert ascending.labels == ["b", "a", "c"]
    assert descending.labels == ["a", "c", "b"]
    assert descending.series[0].values == [2, 2, 1]


@pytest.mark.unit
def test_sorting_puts_non_numeric_last():
    """Test sorting of pass-through values that are not numbers."""
    shaped = reshape(ChartType.SORTED_BAR_DESC, _single(["a", "b", "c"], ["x", 1, 5]))

    assert shaped.labels == ["c", "b", "a"]


@pytest.mark.unit
def test_sorting_skips_multi_series(two_groups):
    """Test that sorting a multi-series result leaves it unchanged."""
    shaped = reshape(ChartType.SORTED_BAR_ASC, two_groups)

    assert shaped.labels == ["x", "y"]
    assert shaped.series[1].values == [3.0, 0.0]


@pytest.mark.unit
def test_tornado_with_one_series_is_unchanged():
    """Test that tornado needs at least two series."""
    result = _single(["a", "b"], [4, 5])
    shaped = reshape(ChartType.TORNADO, result)

    assert shaped.labels == ["a", "b"]
    assert shaped.series[0].values == [4, 5]
    assert shaped.layout.orientation == Orientation.VERTICAL
    assert shaped.layout.absolute_values is False


@pytest.mark.unit
def test_tornado_negates_first_series(two_groups):
    """Test the tornado reshape."""
    shaped = reshape(ChartType.TORNADO, two_groups)

    assert shaped.series[0].values == [-1.0, -0.0]
    assert shaped.series[1].values == [3.0, 0.0]
    assert shaped.layout.orientation == Orientation.HORIZONTAL
    assert shaped.layout.stacking == Stacking.STACKED
    assert shaped.layout.absolute_values is True
    assert shaped.series[0].label_positions == ["left", "left"]
    assert shaped.series[1].label_positions == ["right", "right"]


@pytest.mark.unit
def test_reshape_does_not_mutate_input(two_groups):
    """Test that the aggregation result is left untouched."""
    reshape(ChartType.TORNADO, two_groups)
    reshape(ChartType.PERCENTAGE_STACKED_BAR, two_groups)

    assert two_groups.series[0].values == [1.0, 0.0]
    assert two_groups.series[1].values == [3.0, 0.0]


@pytest.mark.unit
def test_bar_with_line_appends_mean():
    """Test the flat average overlay."""
    shaped = reshape(ChartType.BAR_WITH_LINE, _single(["a", "b", "c"], [2, 4, 6]))

    assert len(shaped.series) == 2
    overlay = shaped.series[1]
    assert overlay.name == "Average val"
    assert overlay.kind == "line"
    assert overlay.values == [4, 4, 4]
    assert overlay.show_values is False


@pytest.mark.unit
def test_bar_with_negative_places_labels_by_sign():
    """Test per-point label placement."""
    shaped = reshape(ChartType.BAR_WITH_NEGATIVE, _single(["a", "b", "c"], [5, -2, 0]))

    assert shaped.series[0].label_positions == ["top", "bottom", "top"]
    assert shaped.series[0].values == [5, -2, 0]


@pytest.mark.unit
def test_logarithmic_scale():
    """Test that the log variant only changes the value scale."""
    shaped = reshape(ChartType.LOGARITHMIC_BAR, _single(["a"], [10]))

    assert shaped.layout.value_scale == "logarithmic"
    assert shaped.series[0].values == [10]


@pytest.mark.unit
def test_presentation_only_variants():
    """Test rounded, custom colour and dashed border metadata."""
    result = _single(["a"], [1])

    assert reshape(ChartType.ROUNDED_BAR, result).series[0].border_radius == 5
    assert reshape(ChartType.CUSTOM_COLOR_BAR, result).series[0].palette == "vibrant"

    dashed = reshape(ChartType.DASHED_BORDER_BAR, result).series[0]
    assert dashed.border_dash == [5, 5]
    assert dashed.border_width == 2
    assert dashed.values == [1]


@pytest.mark.unit
def test_decode_range():
    """Test decoding of low-high strings."""
    assert decode_range("3-8") == (3.0, 8.0)
    assert decode_range(" 1.5 - 2 ") == (1.5, 2.0)
    assert decode_range("abc") == (0.0, 0.0)
    assert decode_range(None) == (0.0, 0.0)
    assert decode_range("") == (0.0, 0.0)
    assert decode_range("7") is None
    assert decode_range("5-") is None
    assert decode_range("1-2-3") is None


@pytest.mark.unit
def test_floating_bar_keeps_labels_with_their_rows():
    """Test that dropped rows take their labels with them."""
    rows = [
        {"task": "a", "span": "1-5"},
        {"task": "b", "span": "7"},
        {"task": "c", "span": "2-4"},
        {"task": "d", "span": "abc"},
    ]
    shaped = reshape(
        ChartType.FLOATING_BAR, _single([], [], name="span"), rows=rows, x_col="task", y_col="span"
    )

    assert shaped.labels == ["a", "c", "d"]
    assert shaped.series[0].values == [[1, 5], [2, 4], [0, 0]]
    assert shaped.layout.label_anchor == "center"


@pytest.mark.unit
@pytest.mark.parametrize("chart_type", list(ChartType))
def test_every_chart_type_keeps_series_aligned(chart_type, two_groups):
    """Test that every series has one value per label for all chart types."""
    rows = [{"x": "x", "y": "1-2"}, {"x": "y", "y": "3-4"}]
    shaped = reshape(chart_type, two_groups, rows=rows, x_col="x", y_col="y")

    for series in shaped.series:
        assert len(series.values) == len(shaped.labels)
