"""Client credential resolution for the token endpoint.

Secrets come from one of two places: CLIENT_MAP (JSON object keyed by
client_id, for several app registrations behind one proxy) or the
CLIENT_ID / CLIENT_SECRET fallback pair. A map hit always beats the
fallback secret.
"""

import json
from urllib.parse import parse_qsl, urlencode

from src.clients.models import ResolvedCredentials
from src.config.settings import Settings
from src.proxy.errors import InvalidClientMap


def parse_token_form(body: str) -> dict[str, str]:
    """Decode a urlencoded body. Duplicate keys: last value wins."""
    form: dict[str, str] = {}
    for key, value in parse_qsl(body, keep_blank_values=True):
        form[key] = value
    return form


def encode_form(form: dict[str, str]) -> str:
    return urlencode(form)


def parse_client_map(raw: str) -> dict:
    """Parse CLIENT_MAP. Valid JSON that isn't an object maps nothing."""
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise InvalidClientMap() from e
    return data if isinstance(data, dict) else {}


def lookup_secret(client_map: dict, client_id: str) -> str:
    secret = client_map.get(client_id, "")
    return secret if isinstance(secret, str) else ""


def resolve_credentials(form: dict[str, str], settings: Settings) -> ResolvedCredentials:
    """Inject server-side credentials into a token request form.

    Order matters:
      1. client_id comes from the form (may be empty).
      2. CLIENT_MAP, when set, must parse or the whole request fails with
         InvalidClientMap, even if a fallback secret exists.
      3. A missing client_id is filled from CLIENT_ID.
      4. client_secret is the map secret if non-empty, else CLIENT_SECRET.

    Does not decide whether the result is usable; callers check
    ``ResolvedCredentials.complete``.
    """
    resolved = dict(form)
    client_id = resolved.get("client_id", "")

    map_secret = ""
    if settings.client_map:
        client_map = parse_client_map(settings.client_map)
        if client_id:
            map_secret = lookup_secret(client_map, client_id)

    if not client_id and settings.client_id:
        resolved["client_id"] = settings.client_id

    source = "request" if resolved.get("client_secret") else ""
    if map_secret:
        resolved["client_secret"] = map_secret
        source = "map"
    elif settings.client_secret:
        resolved["client_secret"] = settings.client_secret
        source = "fallback"

    return ResolvedCredentials(form=resolved, secret_source=source)
