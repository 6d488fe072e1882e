"""Session resolution from the Authorization header.

Tokens are "Bearer <base64(JSON {"address": ..., "publicKey": ...})>". This
development scheme carries no signature; production deployments replace
get_session with a verifying resolver of the same shape.

"No session" is a normal outcome: get_session returns None for a missing,
malformed or incomplete token and never raises.
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


@dataclass(frozen=True)
class Session:
    """Authenticated wallet session.

    Attributes:
        address: Account address of the session owner.
        public_key: Stellar public key of the session owner.
        authenticated: Whether the session was established by a valid token.
    """

    address: str
    public_key: str
    authenticated: bool = True


def _decode_token(token: str) -> dict[str, Any] | None:
    try:
        raw = base64.b64decode(token, validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


async def get_session(request: Any) -> Session | None:
    """Resolve the session carried by a request.

    Args:
        request: Any object exposing a ``headers`` mapping.

    Returns:
        The Session, or None when the request is not authenticated.
    """
    headers = getattr(request, "headers", None)
    if headers is None:
        return None

    auth_header = headers.get("authorization")
    if not auth_header:
        return None

    token = _BEARER_PREFIX.sub("", auth_header).strip()
    if not token:
        return None

    payload = _decode_token(token)
    if payload is None:
        return None

    address = payload.get("address")
    public_key = payload.get("publicKey")
    if not isinstance(address, str) or not isinstance(public_key, str):
        return None
    if not address or not public_key:
        return None

    return Session(address=address, public_key=public_key, authenticated=True)


def create_session_token(address: str, public_key: str) -> str:
    """Create a development session token for the given identity."""
    payload = json.dumps({"address": address, "publicKey": public_key})
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")
