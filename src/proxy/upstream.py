"""Client for the upstream OAuth2 authorization server.

Endpoints are fixed. Non-2xx responses are returned as-is; transport
failures are logged and re-raised so the caller sees the real failure.
"""

from dataclasses import dataclass

import httpx

from src.logging.audit import get_audit_logger

TOKEN_ENDPOINT = "https://connect.linux.do/oauth2/token"
USER_ENDPOINT = "https://connect.linux.do/api/user"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass
class UpstreamResponse:
    status_code: int
    body: bytes
    content_type: str | None  # None when upstream sent no Content-Type


class UpstreamClient:
    """Forwards requests to the authorization server over a shared connection pool."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            # No explicit timeout: httpx defaults apply
            self._client = httpx.AsyncClient()
        return self._client

    async def _send(self, method: str, url: str, **kwargs) -> UpstreamResponse:
        client = await self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            get_audit_logger().error(
                "Upstream request failed",
                extra={"audit_data": {"upstream_url": url, "error": type(e).__name__}},
            )
            raise
        return UpstreamResponse(
            status_code=response.status_code,
            body=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def fetch_user(self, authorization: str) -> UpstreamResponse:
        """GET the user profile, passing the caller's Authorization header through."""
        return await self._send("GET", USER_ENDPOINT, headers={"Authorization": authorization})

    async def exchange_token(self, form_body: str) -> UpstreamResponse:
        """POST an already-resolved urlencoded form to the token endpoint."""
        return await self._send(
            "POST",
            TOKEN_ENDPOINT,
            content=form_body,
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


_upstream: UpstreamClient | None = None


def get_upstream() -> UpstreamClient:
    """Get or create the process-wide upstream client."""
    global _upstream
    if _upstream is None:
        _upstream = UpstreamClient()
    return _upstream


async def close_upstream() -> None:
    """Gracefully close the upstream connection pool on shutdown."""
    global _upstream
    if _upstream is not None:
        await _upstream.close()
        _upstream = None
