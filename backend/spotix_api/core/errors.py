"""Structured API errors.

Every non-2xx response is rendered as ``{"error": ..., "message": ..., **context}``.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str, error: Optional[str] = None, status_code: Optional[int] = None, **context: Any):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error, "message": self.message}
        body.update(self.context)
        return body


class BadRequest(ApiError):
    status_code = 400
    error = "Bad Request"


class Unauthorized(ApiError):
    status_code = 401
    error = "Unauthorized"


class NotFound(ApiError):
    status_code = 404
    error = "Not Found"


class PaymentRejected(ApiError):
    status_code = 400
    error = "Payment Failed"


class PaymentPending(ApiError):
    status_code = 400
    error = "Payment Pending"


class TransactionFailed(ApiError):
    status_code = 500
    error = "Transaction Failed"


class ConfigurationError(ApiError):
    status_code = 500
    error = "Server configuration error"


class UpstreamError(ApiError):
    """An external service failed or answered with an error."""
    status_code = 500
    error = "Upstream Error"


class ClientDisconnected(ApiError):
    status_code = 499
    error = "Client Closed Request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        # Local validation is a 400 in this API, never a 422
        problems = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "message": "; ".join(problems) or "Invalid request"},
        )
