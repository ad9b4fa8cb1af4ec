"""
Chart-ready dataset assembly.

This module combines reshaped series with presentation metadata
(palette colours, axis options, value-label placement and title) into
the ChartData structure consumed by renderers.
"""
from typing import Any, Dict, List, Optional

from app.core.chart_types import ChartType, Orientation, Stacking, display_name, get_traits
from app.core.schemas import AxisOptions, ChartData, DataLabelOptions, SeriesData
from app.services.transformer import ShapedChart, ShapedSeries

COLOR_PALETTES: Dict[str, List[str]] = {
    'default': [
        '#3b82f6',  # Blue
        '#10b981',  # Emerald
        '#ef4444',  # Red
        '#f97316',  # Orange
        '#8b5cf6',  # Violet
        '#ec4899',  # Pink
        '#6b7280',  # Gray
    ],
    'vibrant': [
        '#ef4444',  # Red
        '#f97316',  # Orange
        '#eab308',  # Yellow
        '#84cc16',  # Lime
        '#22c55e',  # Green
        '#14b8a6',  # Teal
        '#06b6d4',  # Cyan
        '#3b82f6',  # Blue
        '#8b5cf6',  # Violet
        '#d946ef',  # Fuchsia
    ],
}


def get_palette(name: str) -> List[str]:
    """Return a named palette, falling back to the default one."""
    return COLOR_PALETTES.get(name, COLOR_PALETTES['default'])


def cycle_colors(palette: List[str], count: int) -> List[str]:
    """One colour per point, cycling through the palette."""
    return [palette[i % len(palette)] for i in range(count)]


def build_title(chart_type: ChartType, x_col: str, y_col: str) -> str:
    if ChartType(chart_type) == ChartType.WATERFALL:
        return f"Waterfall Chart (Change over {x_col})"
    return f"{display_name(chart_type)}: {y_col} by {x_col}"


def _series_colors(series: ShapedSeries, index: int, point_count: int,
                   palette: List[str], grouped: bool):
    if series.colors is not None:
        return list(series.colors)
    if series.color is not None:
        return series.color
    if series.palette is not None:
        return cycle_colors(get_palette(series.palette), point_count)
    if grouped:
        # One colour per series for multi-series charts
        return palette[index % len(palette)]
    return cycle_colors(palette, point_count)


def assemble(
    chart_type: ChartType,
    shaped: ShapedChart,
    x_col: str,
    y_col: str,
    palette_name: str = 'default',
    grouped: Optional[bool] = None,
) -> ChartData:
    """
    Build the chart-ready dataset for a reshaped chart.

    Args:
        chart_type: Chart-type key the chart was shaped for
        shaped: Output of the transformer
        x_col: Category column, used in the title
        y_col: Value column, used in the title
        palette_name: Active colour palette
        grouped: Whether series stand for groups; defaults to the chart type's grouping trait

    Returns:
        Frozen ChartData ready for a renderer
    """
    chart_type = ChartType(chart_type)
    if grouped is None:
        grouped = get_traits(chart_type).needs_group_by
    palette = get_palette(palette_name)
    point_count = len(shaped.labels)

    series_data = []
    for index, series in enumerate(shaped.series):
        colors: Any = _series_colors(series, index, point_count, palette, grouped)
        series_data.append(SeriesData(
            label=str(series.name),
            kind=series.kind,
            data=list(series.values),
            background_color=colors,
            border_color=colors,
            border_width=series.border_width,
            border_dash=series.border_dash,
            border_radius=series.border_radius,
            label_positions=series.label_positions,
            show_values=series.show_values,
        ))

    layout = shaped.layout
    axes = AxisOptions(
        index_axis='y' if layout.orientation == Orientation.HORIZONTAL else 'x',
        stacked=layout.stacking != Stacking.NONE,
        percentage=layout.stacking == Stacking.PERCENTAGE,
        value_scale=layout.value_scale,
        absolute_values=layout.absolute_values,
    )

    return ChartData(
        chart_type=chart_type,
        title=build_title(chart_type, x_col, y_col),
        labels=list(shaped.labels),
        series=series_data,
        axes=axes,
        data_labels=DataLabelOptions(anchor=layout.label_anchor, align=layout.label_align),
    )
