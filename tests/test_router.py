"""Tests for src/proxy/router.py — path matching without an ASGI server."""

from starlette.requests import Request

from src.proxy.router import _raw_path


def make_request(path: str, raw_path: bytes | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [],
    }
    if raw_path is not None:
        scope["raw_path"] = raw_path
    return Request(scope)


class TestRawPath:

    def test_prefers_undecoded_path(self):
        assert _raw_path(make_request("/oauth/token", b"/oauth%2Ftoken")) == "/oauth%2Ftoken"

    def test_strips_query_string(self):
        assert _raw_path(make_request("/oauth/token", b"/oauth/token?x=1")) == "/oauth/token"

    def test_falls_back_to_decoded_path(self):
        # e.g. adapters that don't populate raw_path
        assert _raw_path(make_request("/api/user")) == "/api/user"
        assert _raw_path(make_request("/api/user", None)) == "/api/user"
