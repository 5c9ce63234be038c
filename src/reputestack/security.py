"""
reputestack.security — Shared HTTP plumbing: logging, rate limiting, CORS, error handlers.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from limits import parse as parse_limit
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from slowapi.wrappers import Limit
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from .core import InvalidAttestation

# ─── Context var for request ID ────────────────────────────────────

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


# ─── Structured JSON logging ──────────────────────────────────────

class RequestIdFilter(logging.Filter):
    def filter(self, record):
        record.request_id = request_id_var.get("")
        return True


def setup_structured_logging(level: str = "INFO") -> logging.Logger:
    """Configure JSON structured logging with request IDs."""
    from pythonjsonlogger.json import JsonFormatter

    logger = logging.getLogger("reputestack")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
        handler.setFormatter(formatter)
        handler.addFilter(RequestIdFilter())
        logger.addHandler(handler)

    return logger


logger = setup_structured_logging()


# ─── Rate Limiter (slowapi) ───────────────────────────────────────

def build_limiter(settings) -> Limiter:
    """A limiter owned by one app; the env-driven default for `enabled` is overridden."""
    limiter = Limiter(key_func=get_remote_address)
    limiter.enabled = settings.rate_limit_enabled
    return limiter


def write_rate_limit(request: Request):
    """Dependency applying the app's write limit per client address."""
    limiter = request.app.state.limiter
    if not limiter.enabled:
        return
    item = parse_limit(request.app.state.settings.write_rate_limit)
    if not limiter.limiter.hit(item, "writes", get_remote_address(request)):
        raise RateLimitExceeded(
            Limit(item, get_remote_address, None, False, None, None, None, 1, False)
        )


def _retry_after(exc: RateLimitExceeded) -> str:
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return "60"
    return str(item.get_expiry())


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Custom 429 handler. Retry-After is the window length in seconds."""
    return Response(
        content='{"detail":"Rate limit exceeded. Try again later."}',
        status_code=429,
        media_type="application/json",
        headers={"Retry-After": _retry_after(exc)},
    )


# ─── Request ID + Logging Middleware ──────────────────────────────

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Inject request ID, log requests, add security headers."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request_id_var.set(rid)

        t0 = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error", extra={"path": request.url.path})
            raise

        elapsed_ms = round((time.time() - t0) * 1000, 1)
        logger.info(
            "request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "",
            },
        )

        response.headers["X-Request-ID"] = rid
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


# ─── Request body size limiter ───────────────────────────────────

class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_size: int = 1_048_576):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        cl = request.headers.get("content-length")
        if cl and cl.isdigit() and int(cl) > self.max_size:
            return JSONResponse(status_code=413, content={"detail": "Request body too large"})
        return await call_next(request)


# ─── CORS configuration ──────────────────────────────────────────

def configure_cors(app, allowed_origins: Optional[list[str]] = None):
    """Add CORS middleware with configurable origins."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


# ─── Error handlers (client errors are 400, never leak internals) ─

def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    detail = _describe_validation(exc)
    logger.warning("Rejected request on %s: %s", request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": detail})


async def invalid_attestation_handler(request: Request, exc: InvalidAttestation):
    logger.warning("Invalid attestation on %s: %s", request.url.path, exc,
                   extra={"event": "invalid_attestation", "field": exc.field})
    return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})


async def generic_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, type(exc).__name__)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ─── Apply all security to a FastAPI app ──────────────────────────

def apply_security(app, settings):
    """One-call setup: CORS, rate limiting, logging middleware, error handlers."""
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    configure_cors(app, settings.allowed_origins)
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidAttestation, invalid_attestation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_body_bytes)
    app.add_middleware(RequestLoggingMiddleware)
