"""Exception handlers for the logistics API.

protean's handlers map ``ValidationError`` to 400 and ``ObjectNotFoundError``
to 404. On top of them:

    CompletionBlocked     → 422 (with the full list of blocking reasons)
    ExpectedVersionError  → 409
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from logistics.exceptions import CompletionBlocked

logger = structlog.get_logger(__name__)


async def _completion_blocked(request: Request, exc: CompletionBlocked) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": exc.messages,
            "blocking_reasons": [{"field": r.field, "message": r.message} for r in exc.reasons],
        },
    )


async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification rejected", path=request.url.path, reason=str(exc))
    return JSONResponse(status_code=409, content={"error": {"version": [str(exc)]}})


def register_exception_handlers(app: FastAPI) -> None:
    """Install protean's handlers plus the logistics-specific ones on ``app``."""
    register_protean_handlers(app)
    # Starlette resolves handlers along the MRO, so the subclass wins over ValidationError.
    app.add_exception_handler(CompletionBlocked, _completion_blocked)
    app.add_exception_handler(ExpectedVersionError, _version_conflict)
