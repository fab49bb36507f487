"""
ERROR_RESPONSES.PY - Standardized Error Response Utilities

Consistent error bodies for the HTTP surface. The data facade itself never
raises to callers (it returns `success: false` envelopes); these bodies are
for request-level failures such as an unknown sport id or a rejected API key.

Usage:
    from core.error_responses import error_response, ErrorCode

    return error_response(
        404,
        ErrorCode.SPORT_NOT_FOUND,
        "Sport 'cricket' is not registered",
        field="sport_id",
    )

Response Format:
    {
        "status": "error",
        "error": "Sport 'cricket' is not registered",
        "errors": [
            {
                "code": "SPORT_NOT_FOUND",
                "message": "Sport 'cricket' is not registered",
                "field": "sport_id"
            }
        ],
        "request_id": "req-3f2a9c0d1e4b",
        "timestamp": "2026-10-16T17:00:00.000000+00:00"
    }
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse

from core.structured_logging import get_request_id


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ErrorDetail:
    """Single error detail."""
    code: str
    message: str
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"code": self.code, "message": self.message}
        if self.field is not None:
            result["field"] = self.field
        return result


@dataclass
class ErrorResponse:
    """Standardized error response."""
    status: str = "error"
    error: Optional[str] = None  # First message, for clients reading a single string
    errors: List[ErrorDetail] = field(default_factory=list)
    request_id: Optional[str] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"status": self.status}

        if self.error is not None:
            result["error"] = self.error

        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]

        if self.request_id is not None:
            result["request_id"] = self.request_id

        if self.timestamp is not None:
            result["timestamp"] = self.timestamp

        return result


class ErrorCode:
    """Standard error codes for consistent API responses."""

    # Authentication
    API_KEY_MISSING = "API_KEY_MISSING"
    API_KEY_INVALID = "API_KEY_INVALID"

    # Validation
    INVALID_SPORT = "INVALID_SPORT"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    INVALID_PARAMETER = "INVALID_PARAMETER"

    # Resource
    SPORT_NOT_FOUND = "SPORT_NOT_FOUND"
    NO_DATA_AVAILABLE = "NO_DATA_AVAILABLE"

    # Upstream providers
    UPSTREAM_NOT_CONFIGURED = "UPSTREAM_NOT_CONFIGURED"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"


def make_error(
    code: str,
    message: str,
    field: Optional[str] = None,
    request_id: Optional[str] = None,
    include_timestamp: bool = True,
) -> Dict[str, Any]:
    """
    Create standardized error response dict.

    Args:
        code: Error code from ErrorCode class
        message: Human-readable error message
        field: Optional field name that caused the error
        request_id: Correlation ID; defaults to the current request's ID
        include_timestamp: Whether to include timestamp (default True)

    Example:
        >>> make_error(ErrorCode.INVALID_SPORT, "Unknown sport: cricket", field="sport")["errors"]
        [{'code': 'INVALID_SPORT', 'message': 'Unknown sport: cricket', 'field': 'sport'}]
    """
    return make_errors(
        [{"code": code, "message": message, "field": field}],
        request_id=request_id,
        include_timestamp=include_timestamp,
    )


def make_errors(
    errors: List[Dict[str, Optional[str]]],
    request_id: Optional[str] = None,
    include_timestamp: bool = True,
) -> Dict[str, Any]:
    """
    Create error response with multiple errors.

    Args:
        errors: List of error dicts with 'code', 'message', and optional 'field'
        request_id: Correlation ID; defaults to the current request's ID
        include_timestamp: Whether to include timestamp (default True)
    """
    error_details = [
        ErrorDetail(code=e["code"], message=e["message"], field=e.get("field"))
        for e in errors
    ]

    response = ErrorResponse(
        error=errors[0]["message"] if errors else None,
        errors=error_details,
        request_id=request_id or get_request_id(),
        timestamp=_utc_timestamp() if include_timestamp else None,
    )

    return response.to_dict()


def error_response(
    status_code: int,
    code: str,
    message: str,
    field: Optional[str] = None,
) -> JSONResponse:
    """JSONResponse wrapper around make_error for route handlers."""
    return JSONResponse(status_code=status_code, content=make_error(code, message, field=field))


__all__ = [
    'ErrorDetail',
    'ErrorResponse',
    'ErrorCode',
    'make_error',
    'make_errors',
    'error_response',
]
