"""Storefront FastAPI application.

Serves the pricing engine over HTTP so the cart summary, checkout summary and
mini-cart all read their totals from the same code.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.api import pricing_router
from shared.config import get_settings
from shared.http import register_error_handlers
from shared.utils.logging import add_context, clear_context, configure_logging

configure_logging()

settings = get_settings()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Pet Storefront API",
    description="Checkout pricing, vouchers and delivery fees",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag every log event raised while serving a request with its id and path."""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    clear_context()
    add_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(pricing_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "environment": settings.environment})
