"""Request router.

Dispatch order:
  OPTIONS *          -> CORS preflight (204, no upstream call)
  GET /api/user      -> profile forwarder (other methods: 405)
  POST /oauth/token  -> token forwarder
  anything else      -> 405
"""

from fastapi import Depends, Request
from fastapi.responses import Response

from src.config.settings import Settings, get_settings
from src.logging.audit import generate_request_id, get_audit_logger, request_id_var
from src.proxy.errors import MethodNotAllowed, ProxyError
from src.proxy.handler import forward_token_request, forward_user_profile
from src.proxy.upstream import UpstreamClient, UpstreamResponse, get_upstream
from src.security.cors import build_cors_headers, preflight_headers

USER_PATH = "/api/user"
TOKEN_PATH = "/oauth/token"

DEFAULT_CONTENT_TYPE = "application/json; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

NO_CACHE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


class TokenProxyRouter:
    """Routes one inbound request. Holds no per-request state."""

    def __init__(self, settings: Settings, upstream: UpstreamClient):
        self._settings = settings
        self._upstream = upstream

    async def dispatch(self, request: Request) -> Response:
        request_id_var.set(generate_request_id())
        cors = build_cors_headers(
            request.headers.get("origin"), self._settings.allowed_origins_list
        )

        if request.method == "OPTIONS":
            get_audit_logger().debug(
                "Preflight served",
                extra={"audit_data": {"path": request.url.path, "cors": bool(cors)}},
            )
            return Response(status_code=204, headers=preflight_headers(cors))

        try:
            result = await self._route(request)
        except ProxyError as e:
            get_audit_logger().warning(
                "Request rejected",
                extra={"audit_data": {
                    "method": request.method,
                    "path": request.url.path,
                    "status": e.status_code,
                    "reason": e.message,
                }},
            )
            return _error_response(e, cors)

        return _upstream_response(result, cors)

    async def _route(self, request: Request) -> UpstreamResponse:
        path = _raw_path(request)

        if path == USER_PATH:
            if request.method != "GET":
                raise MethodNotAllowed()
            return await forward_user_profile(
                request.headers.get("authorization", ""), self._upstream
            )

        if request.method != "POST" or path != TOKEN_PATH:
            raise MethodNotAllowed()

        return await forward_token_request(
            request.headers.get("content-type", ""),
            await request.body(),
            self._settings,
            self._upstream,
        )


def _raw_path(request: Request) -> str:
    """Request path as received, so /oauth%2Ftoken is not /oauth/token."""
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    # Some servers include the query string in raw_path
    return raw.split(b"?", 1)[0].decode("latin-1")


def _upstream_response(result: UpstreamResponse, cors: dict[str, str]) -> Response:
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers={
            **cors,
            "Content-Type": result.content_type or DEFAULT_CONTENT_TYPE,
            **NO_CACHE_HEADERS,
        },
    )


def _error_response(error: ProxyError, cors: dict[str, str]) -> Response:
    return Response(
        content=error.message,
        status_code=error.status_code,
        headers={**cors, "Content-Type": TEXT_CONTENT_TYPE, **NO_CACHE_HEADERS},
    )


def get_router(
    settings: Settings = Depends(get_settings),
    upstream: UpstreamClient = Depends(get_upstream),
) -> TokenProxyRouter:
    """FastAPI dependency building a router from current settings."""
    return TokenProxyRouter(settings, upstream)
