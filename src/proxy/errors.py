"""Locally generated failures.

Each error carries the HTTP status and the plain-text body the caller sees.
None of them ever reach the upstream server.
"""


class ProxyError(Exception):
    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ClientError(ProxyError):
    """The caller sent something the proxy won't forward."""


class MethodNotAllowed(ClientError):
    status_code = 405
    message = "Method Not Allowed"


class UnsupportedMediaType(ClientError):
    status_code = 415
    message = "Unsupported Media Type"


class UnauthorizedClient(ClientError):
    status_code = 401
    message = "Unauthorized client"


class ConfigurationError(ProxyError):
    """Operator misconfiguration, not a transient fault."""


class InvalidClientMap(ConfigurationError):
    status_code = 500
    message = "Invalid CLIENT_MAP"
