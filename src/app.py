"""Logistics FastAPI application.

Shipment lifecycle and commission server that processes commands
synchronously via HTTP. Every request runs inside the logistics domain
context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from logistics.config import get_config
from logistics.domain import logistics
from logistics.utils.logging import add_context, clear_context, configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
logistics.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Logistics API",
    description="Courier shipment lifecycle, SLA tracking and commissions",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the logistics domain context and bind request details onto every log event."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        with logistics.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers["x-request-id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from logistics.api import commission_router, register_exception_handlers, shipment_router  # noqa: E402

app.include_router(shipment_router)
app.include_router(commission_router)
register_exception_handlers(app)

logger.info("Logistics API configured", domain=logistics.name)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    config = get_config()
    return JSONResponse(
        content={
            "status": "ok",
            "domain": {"name": logistics.name},
            "sla": {"warning_threshold_hours": config.sla.warning_threshold_hours},
            "commission": {"currency": config.commission.currency},
        }
    )
