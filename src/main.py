"""OAuth Token Proxy — FastAPI application entry point.

Sits between a public client application and the upstream OAuth2
authorization server, injecting client credentials the caller never sees.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config.settings import get_settings
from src.logging.audit import get_audit_logger, setup_logging
from src.proxy.router import TokenProxyRouter, get_router
from src.proxy.upstream import close_upstream, get_upstream

VERSION = "1.0.0"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    get_audit_logger().info("Token proxy started")
    yield
    await close_upstream()
    get_audit_logger().info("Token proxy stopped")


app = FastAPI(
    title="OAuth Token Proxy",
    description="Credential-injecting proxy for OAuth2 token and user profile requests",
    version=VERSION,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


# Every method on every path goes through the router, which owns the
# 405 and preflight behaviour.
@app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def proxy(request: Request, router: TokenProxyRouter = Depends(get_router)) -> Response:
    return await router.dispatch(request)


@app.exception_handler(StarletteHTTPException)
async def unlisted_method(request: Request, exc: StarletteHTTPException) -> Response:
    """Methods outside ALL_METHODS (TRACE, PROPFIND, ...) never reach the route.

    Starlette rejects them with its own 405; hand them to the router instead
    so they get the same plain-text body and headers. Such requests never
    reach the upstream.
    """
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)
    return await get_router(get_settings(), get_upstream()).dispatch(request)
