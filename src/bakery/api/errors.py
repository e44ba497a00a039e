"""HTTP mapping for workflow errors.

Protean's own exceptions (ValidationError, ObjectNotFoundError, ...) are
handled by ``protean.integrations.fastapi.register_exception_handlers``;
this module adds the bakery taxonomy on top.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from bakery.exceptions import (
    AlreadyDecided,
    AssignmentPrecondition,
    BakeryError,
    DuplicatePendingApplication,
    InvalidTransition,
    NotFound,
    PromotionNotEligible,
    StaleRoleSnapshot,
    TransitionFailed,
    Unauthorized,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    Unauthorized: 403,
    NotFound: 404,
    InvalidTransition: 409,
    DuplicatePendingApplication: 409,
    AlreadyDecided: 409,
    StaleRoleSnapshot: 409,
    AssignmentPrecondition: 422,
    PromotionNotEligible: 422,
    TransitionFailed: 503,
}


def status_code_for(exc: BakeryError) -> int:
    for error_cls in type(exc).__mro__:
        if error_cls in _STATUS_CODES:
            return _STATUS_CODES[error_cls]
    return 400


async def bakery_error_handler(request: Request, exc: BakeryError) -> JSONResponse:
    status_code = status_code_for(exc)
    content = exc.to_dict()
    if getattr(exc, "retryable", False):
        content["retry"] = True
    logger.info(
        "Request refused",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content=content)


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    """A stale write that surfaced at commit time: the whole request can be retried."""
    logger.warning("Concurrent write rejected at commit", path=request.url.path, reason=str(exc))
    return JSONResponse(
        status_code=503,
        content={"error": "TransitionFailed", "message": "The record changed concurrently", "retry": True},
    )


def register_bakery_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(BakeryError, bakery_error_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
