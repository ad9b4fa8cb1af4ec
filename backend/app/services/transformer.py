"""
Chart-type specific reshaping of aggregated series.

Every chart type maps to one explicit composition of small steps
(orientation flip, stacking, percentage normalisation, sorting, range
decoding, overlays, delta conversion). Steps never mutate their input:
each returns a new ShapedChart.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from app.core.chart_types import ChartType, Orientation, Stacking
from app.core.performance import track_performance
from app.services.aggregator import AggregationResult, Series, parse_number
from app.services.classifier import is_number

logger = logging.getLogger(__name__)

OVERLAY_LINE_COLOR = "#ff6384"
WATERFALL_RISE_COLOR = "rgba(75, 192, 192, 0.8)"
WATERFALL_FALL_COLOR = "rgba(255, 99, 132, 0.8)"


@dataclass
class ShapedSeries(Series):
    kind: str = "bar"
    colors: Optional[List[str]] = None  # explicit per-point colours
    color: Optional[str] = None  # explicit single colour
    palette: Optional[str] = None  # named palette override
    label_positions: Optional[List[str]] = None
    show_values: bool = True
    border_width: int = 1
    border_dash: Optional[List[int]] = None
    border_radius: Optional[int] = None


@dataclass
class Layout:
    orientation: Orientation = Orientation.VERTICAL
    stacking: Stacking = Stacking.NONE
    value_scale: str = "linear"
    absolute_values: bool = False
    label_anchor: str = "end"
    label_align: str = "top"


@dataclass
class ShapedChart:
    labels: List[Any]
    series: List[ShapedSeries]
    layout: Layout = field(default_factory=Layout)


def _numeric_or_none(value: Any) -> Optional[float]:
    return float(value) if is_number(value) else None


def _negate(value: Any) -> Any:
    number = _numeric_or_none(value)
    return -number if number is not None else value


def is_missing_text(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def from_aggregation(result: AggregationResult) -> ShapedChart:
    return ShapedChart(
        labels=list(result.labels),
        series=[ShapedSeries(s.name, list(s.values)) for s in result.series],
    )


def flip_horizontal(chart: ShapedChart) -> ShapedChart:
    layout = replace(
        chart.layout, orientation=Orientation.HORIZONTAL, label_anchor="end", label_align="right"
    )
    return replace(chart, layout=layout)


def stack(chart: ShapedChart) -> ShapedChart:
    layout = replace(
        chart.layout, stacking=Stacking.STACKED, label_anchor="center", label_align="center"
    )
    return replace(chart, layout=layout)


def normalize_percentages(chart: ShapedChart) -> ShapedChart:
    """Scale the values at each label so that they sum to 100 across series."""
    totals = [
        sum(_numeric_or_none(s.values[i]) or 0.0 for s in chart.series)
        for i in range(len(chart.labels))
    ]
    series = [
        replace(
            s,
            values=[
                (_numeric_or_none(v) or 0.0) / totals[i] * 100 if totals[i] else 0.0
                for i, v in enumerate(s.values)
            ],
        )
        for s in chart.series
    ]
    return replace(chart, series=series, layout=replace(chart.layout, stacking=Stacking.PERCENTAGE))


def sort_by_value(chart: ShapedChart, descending: bool = False) -> ShapedChart:
    """Stable sort of (label, value) pairs; non-numeric values go last."""
    if len(chart.series) != 1:
        logger.debug(f"Sorting skipped: expected one series, got {len(chart.series)}")
        return chart

    primary = chart.series[0]

    def sort_key(pair: Tuple[Any, Any]) -> Tuple[int, float]:
        number = _numeric_or_none(pair[1])
        if number is None:
            return (1, 0.0)
        return (0, -number if descending else number)

    pairs = sorted(zip(chart.labels, primary.values), key=sort_key)
    return replace(
        chart,
        labels=[label for label, _ in pairs],
        series=[replace(primary, values=[value for _, value in pairs])],
    )


def mark_sign_placement(chart: ShapedChart) -> ShapedChart:
    series = [
        replace(
            s,
            label_positions=[
                "bottom" if (_numeric_or_none(v) or 0.0) < 0 else "top" for v in s.values
            ],
        )
        for s in chart.series
    ]
    return replace(chart, series=series)


def decode_range(value: Any) -> Optional[Tuple[float, float]]:
    """
    Decode a "low-high" cell into a value pair.

    Missing values and values with no numeric part at all decode to a
    zero-width (0, 0) range. Values with some numeric part that are not
    exactly two numbers separated by '-' are rejected with None.
    """
    if is_missing_text(value):
        return (0.0, 0.0)
    parts = str(value).split("-")
    numbers = [parse_number(part) for part in parts]
    if all(n is None for n in numbers):
        return (0.0, 0.0)
    if len(numbers) != 2 or None in numbers:
        return None
    return (numbers[0], numbers[1])


def decode_ranges(
    chart: ShapedChart, rows: Sequence[Mapping[str, Any]], x_col: str, y_col: str
) -> ShapedChart:
    """Rebuild the chart from raw rows, one [low, high] bar per surviving row."""
    labels: List[Any] = []
    pairs: List[List[float]] = []
    for row in rows:
        decoded = decode_range(row.get(y_col))
        if decoded is None:
            continue
        labels.append(row.get(x_col))
        pairs.append([decoded[0], decoded[1]])

    dropped = len(rows) - len(pairs)
    if dropped:
        logger.debug(f"Discarded {dropped} rows with malformed ranges in '{y_col}'")

    layout = replace(chart.layout, label_anchor="center", label_align="center")
    return ShapedChart(labels=labels, series=[ShapedSeries(y_col, pairs)], layout=layout)


def append_mean_line(chart: ShapedChart) -> ShapedChart:
    """Overlay a flat line at the mean of the primary series."""
    if not chart.series:
        return chart
    primary = chart.series[0]
    numbers = [n for n in (_numeric_or_none(v) for v in primary.values) if n is not None]
    mean = sum(numbers) / len(numbers) if numbers else 0.0
    overlay = ShapedSeries(
        name=f"Average {primary.name}",
        values=[mean] * len(chart.labels),
        kind="line",
        color=OVERLAY_LINE_COLOR,
        show_values=False,
    )
    return replace(chart, series=chart.series + [overlay])


def make_tornado(chart: ShapedChart) -> ShapedChart:
    """Negate the first series so two groups diverge from a centre axis."""
    if len(chart.series) < 2:
        logger.debug(f"Tornado skipped: needs two series, got {len(chart.series)}")
        return chart

    first, rest = chart.series[0], chart.series[1:]
    negated = replace(
        first,
        values=[_negate(v) for v in first.values],
        label_positions=["left"] * len(first.values),
    )
    others = [replace(s, label_positions=["right"] * len(s.values)) for s in rest]
    layout = replace(
        chart.layout,
        orientation=Orientation.HORIZONTAL,
        stacking=Stacking.STACKED,
        absolute_values=True,
    )
    return replace(chart, series=[negated] + others, layout=layout)


def to_deltas(chart: ShapedChart) -> ShapedChart:
    """Convert the primary series from running values to step changes."""
    if not chart.series:
        return chart
    primary = chart.series[0]
    numbers = [_numeric_or_none(v) or 0.0 for v in primary.values]
    deltas = [current - previous for previous, current in zip([0.0] + numbers, numbers)]
    colors = [WATERFALL_RISE_COLOR if d >= 0 else WATERFALL_FALL_COLOR for d in deltas]
    return replace(chart, series=[replace(primary, values=deltas, colors=colors)] + chart.series[1:])


def use_log_scale(chart: ShapedChart) -> ShapedChart:
    return replace(chart, layout=replace(chart.layout, value_scale="logarithmic"))


def round_corners(chart: ShapedChart) -> ShapedChart:
    return replace(chart, series=[replace(s, border_radius=5) for s in chart.series])


def use_vibrant_palette(chart: ShapedChart) -> ShapedChart:
    if not chart.series:
        return chart
    return replace(chart, series=[replace(chart.series[0], palette="vibrant")] + chart.series[1:])


def dash_borders(chart: ShapedChart) -> ShapedChart:
    if not chart.series:
        return chart
    dashed = replace(chart.series[0], border_dash=[5, 5], border_width=2)
    return replace(chart, series=[dashed] + chart.series[1:])


@track_performance("reshape")
def reshape(
    chart_type: ChartType,
    result: AggregationResult,
    rows: Sequence[Mapping[str, Any]] = (),
    x_col: Optional[str] = None,
    y_col: Optional[str] = None,
) -> ShapedChart:
    """
    Apply the reshape rule of a chart type to an aggregation result.

    Args:
        chart_type: One of the 19 chart-type keys
        result: Output of the aggregator
        rows: Raw rows, read only by the floating bar variant
        x_col: Category column, for the floating bar variant
        y_col: Value column, for the floating bar variant

    Returns:
        A new ShapedChart; the aggregation result is left untouched
    """
    chart_type = ChartType(chart_type)
    chart = from_aggregation(result)

    if chart_type in (ChartType.BAR, ChartType.GROUPED_BAR):
        return chart
    if chart_type in (ChartType.HORIZONTAL_BAR, ChartType.HORIZONTAL_GROUPED_BAR):
        return flip_horizontal(chart)
    if chart_type == ChartType.STACKED_BAR:
        return stack(chart)
    if chart_type == ChartType.HORIZONTAL_STACKED_BAR:
        return stack(flip_horizontal(chart))
    if chart_type == ChartType.PERCENTAGE_STACKED_BAR:
        return normalize_percentages(stack(chart))
    if chart_type == ChartType.HORIZONTAL_PERCENTAGE_STACKED_BAR:
        return normalize_percentages(stack(flip_horizontal(chart)))
    if chart_type == ChartType.BAR_WITH_LINE:
        return append_mean_line(chart)
    if chart_type == ChartType.SORTED_BAR_ASC:
        return sort_by_value(chart)
    if chart_type == ChartType.SORTED_BAR_DESC:
        return sort_by_value(chart, descending=True)
    if chart_type == ChartType.BAR_WITH_NEGATIVE:
        return mark_sign_placement(chart)
    if chart_type == ChartType.FLOATING_BAR:
        return decode_ranges(chart, rows, x_col, y_col)
    if chart_type == ChartType.ROUNDED_BAR:
        return round_corners(chart)
    if chart_type == ChartType.CUSTOM_COLOR_BAR:
        return use_vibrant_palette(chart)
    if chart_type == ChartType.DASHED_BORDER_BAR:
        return dash_borders(chart)
    if chart_type == ChartType.LOGARITHMIC_BAR:
        return use_log_scale(chart)
    if chart_type == ChartType.TORNADO:
        return make_tornado(chart)
    if chart_type == ChartType.WATERFALL:
        return to_deltas(chart)
    raise ValueError(f"No reshape rule for chart type '{chart_type.value}'")
