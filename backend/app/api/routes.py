import logging
from fastapi import APIRouter, HTTPException, Request
from app.core.chart_types import list_chart_types
from app.core.config import get_settings
from app.core.errors import ErrorCodes, get_error_response
from app.core.sanitization import sanitize_for_logging
from app.core.schemas import ChartRequest, ChartResponse, DatasetSummary, DatasetUpload
from app.core.store import DatasetSession, get_dataset_store
from app.services.charts import build_chart
from app.services.classifier import suggest_default_roles
from app.services.datasets import load_dataset

logger = logging.getLogger(__name__)

router = APIRouter()


def _correlation_id(request: Request) -> str:
    return getattr(request.state, 'correlation_id', 'unknown')


def _summary(session: DatasetSession) -> DatasetSummary:
    return DatasetSummary(
        dataset_id=session.dataset_id,
        row_count=session.row_count,
        headers=list(session.headers),
        column_types=dict(session.column_types),
        default_roles=suggest_default_roles(session.headers, session.column_types),
    )


def _get_session(dataset_id: str, request: Request) -> DatasetSession:
    session = get_dataset_store().get(dataset_id)
    if session is None:
        error_info = get_error_response(ErrorCodes.DATASET_NOT_FOUND)
        error_info['correlation_id'] = _correlation_id(request)
        raise HTTPException(status_code=404, detail=error_info)
    return session


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/chart-types")
async def chart_types():
    """All supported chart types with display names and traits, in catalogue order."""
    return list_chart_types()


@router.post("/datasets", response_model=DatasetSummary)
async def create_dataset(request: Request, upload: DatasetUpload):
    """
    Load a parsed dataset.

    Columns are classified once here; the returned dataset id is then used
    for every chart computed against these rows.

    Rate limited per IP address (configurable).
    """
    limiter = request.app.state.limiter
    limit_decorator = limiter.limit(f"{get_settings().rate_limit_per_minute}/minute")

    @limit_decorator
    async def _rate_limited_handler(request: Request):
        return _summary(load_dataset(upload.rows))

    try:
        return await _rate_limited_handler(request)
    except HTTPException as e:
        if isinstance(e.detail, dict):
            e.detail['correlation_id'] = _correlation_id(request)
        raise


@router.get("/datasets/{dataset_id}", response_model=DatasetSummary)
async def get_dataset(dataset_id: str, request: Request):
    return _summary(_get_session(dataset_id, request))


@router.delete("/datasets/{dataset_id}")
async def delete_dataset(dataset_id: str, request: Request):
    _get_session(dataset_id, request)
    get_dataset_store().discard(dataset_id)
    logger.info(f"Discarded dataset {sanitize_for_logging(dataset_id)}")
    return {"status": "deleted", "dataset_id": dataset_id}


@router.post("/datasets/{dataset_id}/charts", response_model=ChartResponse)
async def create_chart(dataset_id: str, chart_request: ChartRequest, request: Request):
    """
    Compute the chart-ready dataset for one chart.

    An incomplete column selection is not an error: the response carries
    no chart and a reason, so the caller can clear its rendering.
    """
    session = _get_session(dataset_id, request)
    try:
        outcome = build_chart(
            session.rows,
            session.headers,
            chart_request.chart_type,
            chart_request,
            palette_name=get_settings().chart_palette,
        )
    except Exception as e:
        logger.error(
            f"Unexpected error building {chart_request.chart_type.value} chart: {e}",
            exc_info=True
        )
        error_info = get_error_response(ErrorCodes.PROCESSING_ERROR)
        error_info['correlation_id'] = _correlation_id(request)
        raise HTTPException(status_code=500, detail=error_info)

    return ChartResponse(chart=outcome.chart, warnings=outcome.warnings, reason=outcome.reason)
