"""Per-origin CORS policy.

The allowlist is exact string matching on the Origin header. An empty
allowlist runs in permissive mode and mirrors whatever origin asked.
"""

ALLOW_METHODS = "POST, GET, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE_SECONDS = 86400


def build_cors_headers(origin: str | None, allowed_origins: list[str]) -> dict[str, str]:
    """Return the CORS headers to attach to a response for this origin."""
    if not origin:
        return {}
    if not allowed_origins or origin in allowed_origins:
        return {"Access-Control-Allow-Origin": origin}
    # Disallowed origin: still served, but the browser won't expose the response
    return {}


def preflight_headers(cors_headers: dict[str, str]) -> dict[str, str]:
    """Headers for an OPTIONS preflight response."""
    return {
        **cors_headers,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": str(MAX_AGE_SECONDS),
    }
