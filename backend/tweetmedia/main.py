from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from tweetmedia.api.routes import limiter, router
from tweetmedia.core.config import settings
from tweetmedia.core.logging import configure_logging, log


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the upload API."""
    configure_logging()
    log.info(f"MEDIA_UPLOAD_STARTUP upload_url={settings.twitter_upload_url}")
    yield
    log.info("MEDIA_UPLOAD_SHUTDOWN")


app = FastAPI(lifespan=lifespan)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def body_size_limit_middleware(request: Request, call_next):
    """Rejects request bodies larger than settings.max_request_bytes with 413."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > settings.max_request_bytes:
        log.warning(f"body_too_large client={get_remote_address(request)} size={content_length}")
        return JSONResponse(
            {"error": f"Payload too large (max {settings.max_request_bytes} bytes)"},
            status_code=413,
        )
    return await call_next(request)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    """Adds security headers to all responses."""
    response: Response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


# API routes
app.include_router(router, prefix="/api")


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {
        "name": "Twitter Media Upload API",
        "docs": "/docs",
        "health": "/api/healthz",
        "endpoints": {
            "upload": "/api/media/upload",
            "logs": "/api/logs/tail",
        },
    }
