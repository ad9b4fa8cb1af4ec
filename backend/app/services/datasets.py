import logging
from typing import Any, List, Mapping, Sequence

from fastapi import HTTPException

from app.core.config import get_settings
from app.core.errors import ErrorCodes, get_error_response
from app.core.performance import track_performance
from app.core.sanitization import sanitize_for_logging, validate_column_name
from app.core.store import DatasetSession, get_dataset_store
from app.services.classifier import classify_columns

logger = logging.getLogger(__name__)


def extract_headers(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Column names come from the first row and are assumed stable across rows."""
    return list(rows[0].keys()) if rows else []


def validate_dataset(rows: Sequence[Mapping[str, Any]]) -> None:
    """
    Validate that a dataset is non-empty and within the configured limits.

    Raises:
        HTTPException: If validation fails
    """
    settings = get_settings()

    if not rows:
        raise HTTPException(status_code=400, detail=get_error_response(ErrorCodes.DATASET_EMPTY))

    if len(rows) > settings.max_dataset_rows:
        raise HTTPException(
            status_code=413,
            detail=get_error_response(
                ErrorCodes.DATASET_TOO_LARGE,
                f"The dataset has {len(rows):,} rows; the limit is {settings.max_dataset_rows:,}."
            )
        )

    headers = extract_headers(rows)
    if not headers:
        raise HTTPException(
            status_code=400,
            detail=get_error_response(ErrorCodes.DATASET_EMPTY, "The first row has no columns.")
        )

    if len(headers) > settings.max_dataset_columns:
        raise HTTPException(
            status_code=413,
            detail=get_error_response(
                ErrorCodes.DATASET_TOO_LARGE,
                f"The dataset has {len(headers)} columns; the limit is {settings.max_dataset_columns}."
            )
        )

    for header in headers:
        if not validate_column_name(header):
            raise HTTPException(
                status_code=400,
                detail=get_error_response(
                    ErrorCodes.INVALID_COLUMN_NAME,
                    f"Offending column: '{sanitize_for_logging(header, 50)}'."
                )
            )


@track_performance("load_dataset")
def load_dataset(rows: Sequence[Mapping[str, Any]]) -> DatasetSession:
    """Validate, classify and store a dataset for the session."""
    validate_dataset(rows)
    headers = extract_headers(rows)
    column_types = classify_columns(rows, headers)
    session = get_dataset_store().add(rows, headers, column_types)
    logger.info(f"Loaded dataset {session.dataset_id}: {session.row_count} rows, {len(headers)} columns")
    return session
