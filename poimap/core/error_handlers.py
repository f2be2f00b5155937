"""
FastAPI error handlers.

All failures leave the API in the standard envelope with `status="error"`
and an `ErrorBody` carrying the error code and request id. Map-session
errors (unknown session or marker, no destination) are client errors and
log at WARNING; anything unhandled logs at ERROR with the traceback.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from typing import Dict, Any, Optional

from poimap.core.exceptions import PoiMapException, ErrorCode
from poimap.schemas.base import Envelope, ErrorBody

logger = logging.getLogger(__name__)

# Status codes without a dedicated ErrorCode
_HTTP_ERROR_CODES = {
    400: ErrorCode.VALIDATION_ERROR.value,
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}

RECENT_WINDOW_SECONDS = 3600


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    request_id: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    envelope = Envelope[Any](
        status="error",
        error=ErrorBody(error_code=error_code, message=message, details=details, request_id=request_id),
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json"),
        headers={"X-Request-ID": request_id},
    )


class ErrorHandler:
    """Turns exceptions into envelopes and counts them per error code."""

    def __init__(self):
        self.error_counts: Dict[str, int] = {}
        self.last_error_time: Dict[str, float] = {}

    async def on_poimap_error(self, request: Request, exc: PoiMapException) -> JSONResponse:
        request_id = _request_id(request)
        code = exc.error_code.value
        level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(
            level,
            f"{code} on {request.method} {request.url.path}: {exc.message}",
            extra={'request_id': request_id, 'error_code': code, 'details': exc.details},
        )
        self._count(code)
        return error_response(exc.status_code, code, exc.message, request_id, exc.details)

    async def on_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report each rejected field as `{field, message, type}`."""
        request_id = _request_id(request)
        fields = [
            {
                'field': '.'.join(str(loc) for loc in error['loc']),
                'message': error['msg'],
                'type': error['type'],
            }
            for error in exc.errors()
        ]
        logger.warning(
            f"Rejected {request.method} {request.url.path}: {len(fields)} invalid fields",
            extra={'request_id': request_id, 'validation_errors': fields},
        )
        self._count(ErrorCode.VALIDATION_ERROR.value)
        return error_response(
            422, ErrorCode.VALIDATION_ERROR.value, "Request validation failed", request_id,
            {'validation_errors': fields},
        )

    async def on_http_error(self, request: Request, exc: StarletteHTTPException) -> JSONResponse:
        request_id = _request_id(request)
        code = _HTTP_ERROR_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR.value)
        logger.warning(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}",
            extra={'request_id': request_id},
        )
        return error_response(exc.status_code, code, str(exc.detail), request_id)

    async def on_unhandled(self, request: Request, exc: Exception) -> JSONResponse:
        request_id = _request_id(request)
        logger.error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
            extra={'request_id': request_id},
        )
        self._count(ErrorCode.INTERNAL_SERVER_ERROR.value)
        return error_response(
            500, ErrorCode.INTERNAL_SERVER_ERROR.value, "An internal server error occurred", request_id,
        )

    def _count(self, error_code: str) -> None:
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1
        self.last_error_time[error_code] = time.time()
        if self.error_counts[error_code] % 10 == 0:
            logger.warning(f"{error_code} has occurred {self.error_counts[error_code]} times")

    def get_error_statistics(self) -> Dict[str, Any]:
        """Error totals, plus the codes seen within the last hour."""
        now = time.time()
        return {
            'error_counts': dict(self.error_counts),
            'recent_errors': {
                code: count for code, count in self.error_counts.items()
                if now - self.last_error_time.get(code, 0) < RECENT_WINDOW_SECONDS
            },
            'total_errors': sum(self.error_counts.values()),
        }


# Global error handler instance
error_handler = ErrorHandler()


def setup_error_handlers(app) -> None:
    """Register the envelope handlers on a FastAPI application."""
    app.add_exception_handler(PoiMapException, error_handler.on_poimap_error)
    app.add_exception_handler(RequestValidationError, error_handler.on_validation_error)
    app.add_exception_handler(StarletteHTTPException, error_handler.on_http_error)
    app.add_exception_handler(Exception, error_handler.on_unhandled)
