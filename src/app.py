"""Shipping FastAPI application.

Web server for the shipment lifecycle and tracking engine. Commands are
processed synchronously; every request runs inside the shipping domain
context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shipping.domain import shipping
from shipping.utils.logging import add_context, clear_context

shipping.init()

# Paths served without a domain context
_PASSTHROUGH_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Shipping API",
    description="Shipment lifecycle, driver assignment and tracking",
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
    """Push the shipping domain context for each request."""
    if request.url.path.startswith(_PASSTHROUGH_PATHS):
        return await call_next(request)

    clear_context()
    add_context(caller_id=request.headers.get("x-user-id", ""), path=request.url.path, method=request.method)
    try:
        with shipping.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from shipping.api import (  # noqa: E402
    admin_router,
    dashboard_router,
    dev_router,
    profile_router,
    register_exception_handlers,
    shipment_router,
    tracking_router,
)

app.include_router(shipment_router)
app.include_router(tracking_router)
app.include_router(dashboard_router)
app.include_router(admin_router)
app.include_router(profile_router)
app.include_router(dev_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": shipping.name}})
