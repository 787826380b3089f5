"""Translate domain errors into HTTP responses.

This is the only place that knows which status code a domain error gets.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..core.errors import (
    AccessDenied,
    Conflict,
    FederationError,
    LabNoteError,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)
from ..core.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (Unauthenticated, status.HTTP_401_UNAUTHORIZED),
    (AccessDenied, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_400_BAD_REQUEST),
    (ValidationFailed, status.HTTP_400_BAD_REQUEST),
    (FederationError, status.HTTP_502_BAD_GATEWAY),
)


def status_for(exc: LabNoteError, conceal_forbidden: bool = True) -> int:
    """Status code for a domain error.

    With ``conceal_forbidden`` a denial looks exactly like a missing
    resource, so callers cannot probe which ids exist.
    """
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            if code == status.HTTP_403_FORBIDDEN and conceal_forbidden:
                return status.HTTP_404_NOT_FOUND
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def labnote_error_handler(request: Request, exc: LabNoteError) -> JSONResponse:
    code = status_for(exc, get_settings().conceal_forbidden_resources)

    if code == status.HTTP_404_NOT_FOUND:
        # one body for every 404 so a concealed denial cannot be told apart
        body = ErrorResponse(error="NotFound", message=NotFound.default_message)
        logger.debug(
            "Not found",
            extra={"path": request.url.path, "error": type(exc).__name__, "detail": exc.message},
        )
    else:
        body = ErrorResponse(error=type(exc).__name__, message=exc.message, details=exc.details)

    if code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error": type(exc).__name__, "detail": exc.message},
        )

    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LabNoteError, labnote_error_handler)
