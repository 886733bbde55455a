import logging
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.api import auth, members
from app.config import settings
from app.services.errors import ServiceError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Inkwell", version="0.1.0")


# =============================================================================
# CSRF Origin Validation Middleware
# =============================================================================


class CSRFOriginMiddleware(BaseHTTPMiddleware):
    """
    Validate Origin/Referer headers on state-changing requests to prevent CSRF.

    - POST, PUT, PATCH, DELETE must include an Origin or Referer header whose
      host is this API or the configured dashboard
    - GET, HEAD, OPTIONS are always allowed (safe methods)
    - Health check endpoints are exempt
    """

    SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}
    EXEMPT_PATHS = {"/health"}

    def _allowed_hosts(self, request: Request) -> set:
        hosts = {request.headers.get("host", "")}
        frontend_host = urlparse(settings.frontend_url).netloc
        if frontend_host:
            hosts.add(frontend_host)
        return hosts

    async def dispatch(self, request: Request, call_next):
        if request.method in self.SAFE_METHODS:
            return await call_next(request)

        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        allowed_hosts = self._allowed_hosts(request)

        # Check Origin header first, then fall back to Referer
        for header in ("origin", "referer"):
            value = request.headers.get(header)
            if not value:
                continue
            source_host = urlparse(value).netloc
            if source_host not in allowed_hosts:
                logger.warning(
                    "CSRF %s mismatch: %s=%s, allowed=%s, path=%s",
                    header,
                    header,
                    value,
                    sorted(allowed_hosts),
                    request.url.path,
                )
                return JSONResponse(
                    status_code=403,
                    content={"detail": "Origin validation failed"},
                )
            return await call_next(request)

        # No Origin or Referer
        logger.warning(
            "CSRF missing origin/referer: method=%s, path=%s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=403,
            content={"detail": "Origin validation failed"},
        )


app.add_middleware(CSRFOriginMiddleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map typed service errors to JSON error responses."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(auth.router)
app.include_router(members.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
