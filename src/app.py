"""Crumb & Co. FastAPI application.

Processes commands synchronously via HTTP inside the bakery domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from bakery.domain import bakery  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

bakery.init()

_DOMAIN_PREFIXES = ("/users", "/orders", "/applications", "/messages", "/notifications")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Crumb & Co. API",
    description="Bakery storefront — order lifecycle, baker assignment and promotions",
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
    """Push the bakery domain context for API requests."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        with bakery.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from bakery.api.applications import application_router  # noqa: E402
from bakery.api.errors import register_bakery_exception_handlers  # noqa: E402
from bakery.api.messages import message_router  # noqa: E402
from bakery.api.notifications import notification_router  # noqa: E402
from bakery.api.orders import order_router  # noqa: E402
from bakery.api.users import user_router  # noqa: E402

app.include_router(user_router)
app.include_router(order_router)
app.include_router(application_router)
app.include_router(message_router)
app.include_router(notification_router)
register_bakery_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": bakery.name})
