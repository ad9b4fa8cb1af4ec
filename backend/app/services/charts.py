"""
Chart pipeline.

Runs the engine stages in order (aggregation, reshaping, assembly) for
one chart request against a loaded dataset, and collects the advisory
warnings raised along the way.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from app.core.chart_types import ChartType, get_traits
from app.core.errors import non_numeric_warning
from app.core.performance import track_performance
from app.core.sanitization import sanitize_for_logging
from app.core.schemas import SELECT_PLACEHOLDER, AggregationMethod, ChartData, ColumnRoles
from app.services.aggregator import AggregationResult, aggregate, aggregate_grouped
from app.services.assembler import assemble
from app.services.transformer import reshape

logger = logging.getLogger(__name__)


@dataclass
class ChartOutcome:
    chart: Optional[ChartData] = None
    warnings: List[str] = field(default_factory=list)
    reason: Optional[str] = None


def is_unset(column: Optional[str]) -> bool:
    return column is None or column == "" or column == SELECT_PLACEHOLDER


def check_roles(chart_type: ChartType, roles: ColumnRoles, headers: Sequence[str]) -> Optional[str]:
    """Return why the selection cannot produce a chart, or None when it can."""
    required = [("x_col", roles.x_col), ("y_col", roles.y_col)]
    if get_traits(chart_type).needs_group_by:
        required.append(("group_by_col", roles.group_by_col))

    for role, column in required:
        if is_unset(column):
            return f"{role} is not selected"
        if column not in headers:
            return f"{role} '{sanitize_for_logging(column, 50)}' is not a column of the dataset"
    return None


@track_performance("build_chart")
def build_chart(
    rows: Sequence[Mapping[str, Any]],
    headers: Sequence[str],
    chart_type: ChartType,
    roles: ColumnRoles,
    palette_name: str = "default",
) -> ChartOutcome:
    """
    Compute the chart-ready dataset for one chart.

    Args:
        rows: Dataset rows (read only)
        headers: Dataset column names
        chart_type: One of the 19 chart-type keys
        roles: Column roles and aggregation method
        palette_name: Active colour palette

    Returns:
        ChartOutcome with the chart, or no chart and a reason for an invalid selection
    """
    chart_type = ChartType(chart_type)
    reason = check_roles(chart_type, roles, headers)
    if reason is not None:
        logger.debug(f"No chart for {chart_type.value}: {reason}")
        return ChartOutcome(reason=reason)

    if chart_type == ChartType.FLOATING_BAR:
        # Ranges are decoded from the raw rows; "low-high" cells are not values to aggregate
        result = AggregationResult(labels=[], series=[])
    elif get_traits(chart_type).needs_group_by:
        result = aggregate_grouped(rows, roles.x_col, roles.y_col, roles.group_by_col)
    else:
        result = aggregate(rows, roles.x_col, roles.y_col, AggregationMethod(roles.aggregation))

    warnings: List[str] = []
    if result.has_invalid_data:
        message = non_numeric_warning(roles.y_col)
        warnings.append(message)
        logger.warning(
            f"{sanitize_for_logging(message)} ({result.invalid_rows} rows skipped)",
            extra={"invalid_rows": result.invalid_rows}
        )

    shaped = reshape(chart_type, result, rows=rows, x_col=roles.x_col, y_col=roles.y_col)
    chart = assemble(chart_type, shaped, roles.x_col, roles.y_col, palette_name=palette_name)
    return ChartOutcome(chart=chart, warnings=warnings)
