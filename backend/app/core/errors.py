"""
Error and warning messages for user-facing responses.
"""
from typing import Dict, Optional

# Error codes
class ErrorCodes:
    DATASET_EMPTY = "DATASET_EMPTY"
    DATASET_TOO_LARGE = "DATASET_TOO_LARGE"
    INVALID_COLUMN_NAME = "INVALID_COLUMN_NAME"
    DATASET_NOT_FOUND = "DATASET_NOT_FOUND"
    INVALID_SELECTION = "INVALID_SELECTION"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    ErrorCodes.DATASET_EMPTY: {
        "message": "The dataset has no rows",
        "detail": "We couldn't find any rows to chart.",
        "suggestion": "Send at least one row, with the column names as keys."
    },
    ErrorCodes.DATASET_TOO_LARGE: {
        "message": "The dataset is too large",
        "detail": "The dataset exceeds the configured row or column limit.",
        "suggestion": "Send a sample of the rows, or only the columns you want to chart."
    },
    ErrorCodes.INVALID_COLUMN_NAME: {
        "message": "A column name is not allowed",
        "detail": "Column names must be non-empty and free of control characters.",
        "suggestion": "Rename the offending column and load the dataset again."
    },
    ErrorCodes.DATASET_NOT_FOUND: {
        "message": "We couldn't find that dataset",
        "detail": "The dataset was never loaded, was discarded, or has expired.",
        "suggestion": "Load the dataset again to get a fresh dataset id."
    },
    ErrorCodes.INVALID_SELECTION: {
        "message": "Pick the columns for this chart",
        "detail": "A required column is not selected or does not exist in the dataset.",
        "suggestion": "Choose a category column, a value column and, for grouped charts, a grouping column."
    },
    ErrorCodes.PROCESSING_ERROR: {
        "message": "Something went wrong while building the chart",
        "detail": "We hit a snag while shaping your data.",
        "suggestion": "Check the selected columns and try again."
    },
    ErrorCodes.RATE_LIMIT_EXCEEDED: {
        "message": "Too many requests",
        "detail": "You're sending requests faster than the configured limit.",
        "suggestion": "Wait about a minute and try again."
    },
    ErrorCodes.TIMEOUT: {
        "message": "This is taking longer than expected",
        "detail": "The request did not finish within the configured timeout.",
        "suggestion": "Try a smaller dataset."
    },
    ErrorCodes.UNKNOWN_ERROR: {
        "message": "Hmm, something unexpected happened",
        "detail": "We encountered an issue we weren't expecting.",
        "suggestion": "Give it another try in a moment."
    }
}


def non_numeric_warning(column: str) -> str:
    """Advisory message for a value column that held non-numeric cells."""
    return f'Warning: Column "{column}" contains non-numeric data. Aggregation may be incorrect.'


def get_error_response(error_code: str, additional_detail: Optional[str] = None) -> Dict[str, str]:
    """
    Get user-friendly error response for an error code.

    Args:
        error_code: One of the ErrorCodes constants
        additional_detail: Optional additional detail to append

    Returns:
        Dictionary with code, message, detail, and suggestion
    """
    error_info = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCodes.UNKNOWN_ERROR])

    response = {
        "code": error_code,
        "message": error_info["message"],
        "detail": error_info["detail"],
        "suggestion": error_info["suggestion"]
    }

    if additional_detail:
        response["detail"] = f"{response['detail']} {additional_detail}"

    return response
