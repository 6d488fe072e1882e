"""Request context extraction for audit events.

Functions:
    extract_ip: Client IP from proxy headers
    resolve_identity: Actor identity from the session or identity headers

Both only read request headers. The client IP is taken from
X-Forwarded-For / X-Real-IP as set by the upstream proxy and is only as
trustworthy as that proxy; no socket-level peer address is consulted.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from remitwise.auth.session import Session, get_session

logger = logging.getLogger(__name__)

FORWARDED_FOR_HEADER = "x-forwarded-for"
REAL_IP_HEADER = "x-real-ip"
USER_HEADER = "x-user"
PUBLIC_KEY_HEADER = "x-stellar-public-key"

SessionResolver = Callable[[Any], Awaitable[Session | None]]


def _header(request: Any, name: str) -> str | None:
    headers = getattr(request, "headers", None)
    if headers is None:
        return None
    value = headers.get(name)
    return value or None


def extract_ip(request: Any) -> str | None:
    """Extract the client IP address from proxy headers.

    Precedence: first entry of X-Forwarded-For, then X-Real-IP.

    Args:
        request: Any object exposing a ``headers`` mapping.

    Returns:
        The client IP, or None if neither header is present.
    """
    forwarded = _header(request, FORWARDED_FOR_HEADER)
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = _header(request, REAL_IP_HEADER)
    if real_ip:
        return real_ip.strip()

    return None


async def resolve_identity(
    request: Any,
    session_resolver: SessionResolver | None = get_session,
) -> str | None:
    """Resolve the identity of the actor behind a request.

    Precedence: authenticated session address, then the X-User header, then
    the X-Stellar-Public-Key header.

    Args:
        request: Any object exposing a ``headers`` mapping.
        session_resolver: Async callable returning the request's Session or
            None. Errors raised by it are logged and treated as no session.

    Returns:
        The identity string, or None for anonymous requests.
    """
    if session_resolver is not None:
        try:
            session = await session_resolver(request)
        except Exception as exc:
            logger.debug("Session lookup failed, continuing without it: %s", exc)
            session = None
        if session is not None and session.address:
            return session.address

    return _header(request, USER_HEADER) or _header(request, PUBLIC_KEY_HEADER)
