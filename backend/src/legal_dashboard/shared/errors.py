"""Shared error types and utilities for consistent error handling across APIs"""

from enum import Enum
from typing import Any, Dict


class ErrorCode(str, Enum):
    """Standard error codes for API responses"""

    # Client errors (4xx)
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION_ERROR = "validation_error"

    # Server errors (5xx)
    INTERNAL_ERROR = "internal_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    TIMEOUT = "timeout"


class ExtractionError(Exception):
    """Text could not be extracted from a document."""


class UnsupportedDocumentError(ExtractionError):
    """The document's content type has no extraction strategy."""


class ExtractionTimeoutError(ExtractionError):
    """Textract did not finish within the allowed number of polls."""


class StorageConfigurationError(Exception):
    """A required S3 bucket is not configured."""


class AgentNotConfiguredError(Exception):
    """Bedrock agent id or alias id is missing."""


class AgentInvocationError(Exception):
    """The Bedrock agent call failed or returned no completion stream."""


def http_status_to_error_code(status_code: int) -> ErrorCode:
    """Map HTTP status codes to ErrorCode enum values"""

    mapping = {
        400: ErrorCode.BAD_REQUEST,
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.CONFLICT,
        422: ErrorCode.VALIDATION_ERROR,
        500: ErrorCode.INTERNAL_ERROR,
        503: ErrorCode.SERVICE_UNAVAILABLE,
        504: ErrorCode.TIMEOUT,
    }

    return mapping.get(status_code, ErrorCode.INTERNAL_ERROR)


def build_error_body(status_code: int, detail: Any) -> Dict[str, Any]:
    """
    Create a standardized error response body.

    String details become ``{"error": detail}``. Dict details (for example
    ``{"error": ..., "message": ...}``) are kept as they are. Every body
    carries the ``code`` for its status.

    Args:
        status_code: HTTP status code
        detail: HTTPException detail

    Returns:
        Dictionary suitable for a JSON response
    """
    if isinstance(detail, dict):
        body = dict(detail)
    else:
        body = {"error": detail}
    body.setdefault("code", http_status_to_error_code(status_code).value)
    return body
