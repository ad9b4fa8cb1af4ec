"""
Chart-type catalogue.

The 19 bar-chart variants the engine understands, their display names
and the traits that drive aggregation and reshaping.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class ChartType(str, Enum):
    """Supported chart-type keys."""
    BAR = "bar"
    HORIZONTAL_BAR = "horizontalBar"
    GROUPED_BAR = "groupedBar"
    HORIZONTAL_GROUPED_BAR = "horizontalGroupedBar"
    STACKED_BAR = "stackedBar"
    HORIZONTAL_STACKED_BAR = "horizontalStackedBar"
    PERCENTAGE_STACKED_BAR = "percentageStackedBar"
    HORIZONTAL_PERCENTAGE_STACKED_BAR = "horizontalPercentageStackedBar"
    BAR_WITH_LINE = "barWithLine"
    SORTED_BAR_ASC = "sortedBarAsc"
    SORTED_BAR_DESC = "sortedBarDesc"
    BAR_WITH_NEGATIVE = "barWithNegative"
    FLOATING_BAR = "floatingBar"
    ROUNDED_BAR = "roundedBar"
    CUSTOM_COLOR_BAR = "customColorBar"
    DASHED_BORDER_BAR = "dashedBorderBar"
    LOGARITHMIC_BAR = "logarithmicBar"
    TORNADO = "tornado"
    WATERFALL = "waterfall"


class Orientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Stacking(str, Enum):
    NONE = "none"
    STACKED = "stacked"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class ChartTraits:
    """Static properties implied by a chart type."""
    display_name: str
    orientation: Orientation = Orientation.VERTICAL
    stacking: Stacking = Stacking.NONE
    needs_group_by: bool = False


# Insertion order is the catalogue order shown to users
CHART_TRAITS: Dict[ChartType, ChartTraits] = {
    ChartType.BAR: ChartTraits("Vertical Bar"),
    ChartType.HORIZONTAL_BAR: ChartTraits("Horizontal Bar", Orientation.HORIZONTAL),
    ChartType.GROUPED_BAR: ChartTraits("Grouped Vertical Bar", needs_group_by=True),
    ChartType.HORIZONTAL_GROUPED_BAR: ChartTraits(
        "Grouped Horizontal Bar", Orientation.HORIZONTAL, needs_group_by=True
    ),
    ChartType.STACKED_BAR: ChartTraits(
        "Stacked Vertical Bar", stacking=Stacking.STACKED, needs_group_by=True
    ),
    ChartType.HORIZONTAL_STACKED_BAR: ChartTraits(
        "Stacked Horizontal Bar", Orientation.HORIZONTAL, Stacking.STACKED, True
    ),
    ChartType.PERCENTAGE_STACKED_BAR: ChartTraits(
        "100% Stacked Vertical Bar", stacking=Stacking.PERCENTAGE, needs_group_by=True
    ),
    ChartType.HORIZONTAL_PERCENTAGE_STACKED_BAR: ChartTraits(
        "100% Stacked Horizontal Bar", Orientation.HORIZONTAL, Stacking.PERCENTAGE, True
    ),
    ChartType.BAR_WITH_LINE: ChartTraits("Bar with Line (Mixed)"),
    ChartType.SORTED_BAR_ASC: ChartTraits("Sorted Bar (Ascending)"),
    ChartType.SORTED_BAR_DESC: ChartTraits("Sorted Bar (Descending)"),
    ChartType.BAR_WITH_NEGATIVE: ChartTraits("Bar with Negative Values"),
    ChartType.FLOATING_BAR: ChartTraits("Floating Bar (Range)"),
    ChartType.ROUNDED_BAR: ChartTraits("Rounded Bar Chart"),
    ChartType.CUSTOM_COLOR_BAR: ChartTraits("Bar with Custom Colors"),
    ChartType.DASHED_BORDER_BAR: ChartTraits("Bar with Dashed Border"),
    ChartType.LOGARITHMIC_BAR: ChartTraits("Logarithmic Y-Axis Bar"),
    ChartType.TORNADO: ChartTraits(
        "Tornado Chart", Orientation.HORIZONTAL, Stacking.STACKED, True
    ),
    ChartType.WATERFALL: ChartTraits("Waterfall Chart"),
}


def get_traits(chart_type: ChartType) -> ChartTraits:
    return CHART_TRAITS[ChartType(chart_type)]


def display_name(chart_type: ChartType) -> str:
    """Human-readable label for a chart type, consumed verbatim by renderers."""
    return get_traits(chart_type).display_name


def list_chart_types() -> List[Dict[str, object]]:
    """Describe every chart type in catalogue order."""
    return [
        {
            "key": chart_type.value,
            "display_name": traits.display_name,
            "orientation": traits.orientation.value,
            "stacking": traits.stacking.value,
            "needs_group_by": traits.needs_group_by,
        }
        for chart_type, traits in CHART_TRAITS.items()
    ]
