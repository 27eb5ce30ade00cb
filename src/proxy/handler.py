"""Profile and token forwarders."""

from src.clients.credentials import encode_form, parse_token_form, resolve_credentials
from src.config.settings import Settings
from src.logging.audit import RequestTimer, get_audit_logger
from src.proxy.errors import UnauthorizedClient, UnsupportedMediaType
from src.proxy.upstream import FORM_CONTENT_TYPE, UpstreamClient, UpstreamResponse


async def forward_user_profile(authorization: str, upstream: UpstreamClient) -> UpstreamResponse:
    """Pass the caller's Authorization header straight through to the user endpoint."""
    with RequestTimer() as timer:
        result = await upstream.fetch_user(authorization)

    get_audit_logger().info(
        "Profile request proxied",
        extra={"audit_data": {
            "upstream_status": result.status_code,
            "latency_ms": timer.elapsed_ms,
        }},
    )
    return result


async def forward_token_request(
    content_type: str, body: bytes, settings: Settings, upstream: UpstreamClient
) -> UpstreamResponse:
    """Resolve client credentials into the token form and forward it.

    Raises UnsupportedMediaType, InvalidClientMap or UnauthorizedClient
    before any upstream call is made.
    """
    if FORM_CONTENT_TYPE not in content_type.lower():
        raise UnsupportedMediaType()

    form = parse_token_form(body.decode("utf-8", errors="replace"))
    credentials = resolve_credentials(form, settings)
    if not credentials.complete:
        raise UnauthorizedClient()

    with RequestTimer() as timer:
        result = await upstream.exchange_token(encode_form(credentials.form))

    get_audit_logger().info(
        "Token request proxied",
        extra={"audit_data": {
            "client_id": credentials.client_id,
            "secret_source": credentials.secret_source,
            "grant_type": credentials.form.get("grant_type", ""),
            "upstream_status": result.status_code,
            "latency_ms": timer.elapsed_ms,
        }},
    )
    return result
