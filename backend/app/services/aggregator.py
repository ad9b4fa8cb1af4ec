"""
Row aggregation.

Reduces raw rows into per-category values (one series) or, for grouped
chart types, into a label x group matrix (one series per group).
Bad values never abort aggregation: offending rows are skipped and
counted so the caller can raise a single advisory warning.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from app.core.performance import track_performance
from app.core.schemas import AggregationMethod
from app.services.classifier import is_missing, is_number

logger = logging.getLogger(__name__)


@dataclass
class Series:
    name: str
    values: List[Any]


@dataclass
class AggregationResult:
    labels: List[Any]
    series: List[Series]
    invalid_rows: int = 0  # rows dropped for a non-numeric value

    @property
    def has_invalid_data(self) -> bool:
        return self.invalid_rows > 0


def parse_number(value: Any) -> Optional[float]:
    """Parse a cell as a finite float, or None when it is not numeric."""
    if is_number(value):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _label_sort_key(value: Any) -> Tuple[int, Any]:
    # Numbers order numerically ahead of everything else
    if is_number(value):
        return (0, value)
    return (1, str(value))


@track_performance("aggregate")
def aggregate(
    rows: Sequence[Mapping[str, Any]],
    x_col: str,
    y_col: str,
    method: AggregationMethod = AggregationMethod.SUM,
) -> AggregationResult:
    """
    Aggregate rows into one series keyed by the category column.

    Args:
        rows: Parsed dataset rows
        x_col: Category column
        y_col: Value column
        method: sum, average, count or none (one point per row)

    Returns:
        Labels in first-seen order and a single series named after y_col
    """
    method = AggregationMethod(method)

    if method == AggregationMethod.NONE:
        return AggregationResult(
            labels=[row.get(x_col) for row in rows],
            series=[Series(y_col, [row.get(y_col) for row in rows])],
        )

    totals: Dict[Any, float] = {}
    counts: Dict[Any, int] = {}
    invalid_rows = 0

    for row in rows:
        x_value = row.get(x_col)
        if is_missing(x_value):
            continue

        if method == AggregationMethod.COUNT:
            y_value = 1.0
        else:
            y_value = parse_number(row.get(y_col))
            if y_value is None:
                invalid_rows += 1
                continue

        if x_value not in totals:
            totals[x_value] = 0.0
            counts[x_value] = 0
        totals[x_value] += y_value
        counts[x_value] += 1

    if method == AggregationMethod.AVERAGE:
        values = [totals[k] / counts[k] if counts[k] > 0 else 0.0 for k in totals]
    else:
        values = list(totals.values())

    if invalid_rows:
        logger.debug(f"Skipped {invalid_rows} rows with non-numeric '{y_col}' values")

    return AggregationResult(
        labels=list(totals.keys()),
        series=[Series(y_col, values)],
        invalid_rows=invalid_rows,
    )


@track_performance("aggregate_grouped")
def aggregate_grouped(
    rows: Sequence[Mapping[str, Any]],
    x_col: str,
    y_col: str,
    group_by_col: str,
) -> AggregationResult:
    """
    Sum values into a label x group matrix.

    Labels and groups are both sorted ascending. Rows with a missing
    category, a missing group or a non-numeric value are skipped silently,
    and absent (group, label) cells are filled with 0.
    """
    grouped: Dict[Any, Dict[Any, float]] = {}
    labels = set()

    for row in rows:
        x_value = row.get(x_col)
        group = row.get(group_by_col)
        y_value = parse_number(row.get(y_col))
        if is_missing(x_value) or is_missing(group) or y_value is None:
            continue

        labels.add(x_value)
        cells = grouped.setdefault(group, {})
        cells[x_value] = cells.get(x_value, 0.0) + y_value

    sorted_labels = sorted(labels, key=_label_sort_key)
    sorted_groups = sorted(grouped, key=_label_sort_key)

    return AggregationResult(
        labels=sorted_labels,
        series=[
            Series(str(group), [grouped[group].get(label, 0.0) for label in sorted_labels])
            for group in sorted_groups
        ],
    )
