"""
Column type inference.

Classifies each column of a parsed dataset as numeric, date or
categorical. Classification is all-or-nothing: one stray value decides
the column's type for every row.
"""
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from app.core.performance import track_performance
from app.core.schemas import ColumnRoles, ColumnType

logger = logging.getLogger(__name__)


def is_number(value: Any) -> bool:
    """True for real numbers; booleans and NaN do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    return False


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def all_parse_as_dates(values: Sequence[Any]) -> bool:
    """True when every value is a date or a string pandas can parse as one."""
    if any(isinstance(v, bool) for v in values):
        return False
    texts = [v for v in values if not isinstance(v, (datetime, date, pd.Timestamp))]
    if not texts:
        return True
    # One vectorised parse; each cell may use its own format
    parsed = pd.to_datetime(
        pd.Series([str(v) for v in texts]), errors="coerce", format="mixed", utc=True
    )
    return bool(parsed.notna().all())


def parses_as_date(value: Any) -> bool:
    return all_parse_as_dates([value])


def column_values(rows: Sequence[Mapping[str, Any]], column: str) -> List[Any]:
    """Non-null values of a column, in row order."""
    return [row.get(column) for row in rows if not is_missing(row.get(column))]


def classify(rows: Sequence[Mapping[str, Any]], column: str) -> ColumnType:
    """Classify a single column from its non-null values."""
    values = column_values(rows, column)
    if not values:
        return ColumnType.CATEGORICAL
    if all(is_number(v) for v in values):
        return ColumnType.NUMERIC
    if all_parse_as_dates(values):
        return ColumnType.DATE
    return ColumnType.CATEGORICAL


@track_performance("classify_columns")
def classify_columns(
    rows: Sequence[Mapping[str, Any]], headers: Sequence[str]
) -> Dict[str, ColumnType]:
    """Classify every column of a dataset, preserving header order."""
    column_types = {header: classify(rows, header) for header in headers}
    logger.debug(
        f"Classified {len(headers)} columns: "
        f"{sum(t == ColumnType.NUMERIC for t in column_types.values())} numeric, "
        f"{sum(t == ColumnType.DATE for t in column_types.values())} date"
    )
    return column_types


def suggest_default_roles(
    headers: Sequence[str], column_types: Mapping[str, ColumnType]
) -> ColumnRoles:
    """
    Pick starting column roles for a new chart.

    The first categorical or date column becomes the category axis and the
    first numeric column the value axis. Roles with no suitable column stay unset.
    """
    x_col: Optional[str] = next(
        (h for h in headers if column_types.get(h) in (ColumnType.CATEGORICAL, ColumnType.DATE)),
        None,
    )
    y_col: Optional[str] = next(
        (h for h in headers if column_types.get(h) == ColumnType.NUMERIC), None
    )
    return ColumnRoles(x_col=x_col, y_col=y_col)
