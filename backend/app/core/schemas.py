from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Any, Dict, Union

from app.core.chart_types import ChartType

# Placeholder a UI sends while a column selector is still unset
SELECT_PLACEHOLDER = "(Select Column)"


class ColumnType(str, Enum):
    NUMERIC = "numeric"
    DATE = "date"
    CATEGORICAL = "categorical"


class AggregationMethod(str, Enum):
    SUM = "sum"
    AVERAGE = "average"
    COUNT = "count"
    NONE = "none"


class ColumnRoles(BaseModel):
    x_col: Optional[str] = None
    y_col: Optional[str] = None
    group_by_col: Optional[str] = None
    aggregation: AggregationMethod = AggregationMethod.SUM


class DatasetUpload(BaseModel):
    rows: List[Dict[str, Any]]


class DatasetSummary(BaseModel):
    dataset_id: str
    row_count: int
    headers: List[str]
    column_types: Dict[str, ColumnType]
    default_roles: ColumnRoles


class ChartRequest(ColumnRoles):
    chart_type: ChartType = ChartType.BAR


class SeriesData(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    kind: str = "bar"  # 'bar' or 'line'
    data: List[Any]  # scalars, or [low, high] pairs for range series
    background_color: Union[str, List[str]]
    border_color: Union[str, List[str]]
    border_width: int = 1
    border_dash: Optional[List[int]] = None
    border_radius: Optional[int] = None
    label_positions: Optional[List[str]] = None  # per-point value label placement
    show_values: bool = True


class AxisOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    index_axis: str = "x"  # 'y' puts categories on the vertical axis
    stacked: bool = False
    percentage: bool = False
    value_scale: str = "linear"  # 'linear' or 'logarithmic'
    absolute_values: bool = False  # render |value| in ticks, labels and tooltips


class DataLabelOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    anchor: str = "end"
    align: str = "top"


class ChartData(BaseModel):
    """Chart-ready dataset handed to the renderer."""
    model_config = ConfigDict(frozen=True)

    chart_type: ChartType
    title: str
    labels: List[Any]
    series: List[SeriesData]
    axes: AxisOptions = Field(default_factory=AxisOptions)
    data_labels: DataLabelOptions = Field(default_factory=DataLabelOptions)


class ChartResponse(BaseModel):
    chart: Optional[ChartData] = None
    warnings: List[str] = []
    reason: Optional[str] = None  # why no chart was produced
