"""Automatic audit logging for async request handlers.

Functions:
    with_audit: Wrap a handler so every call emits a success or failure event
    audited: Decorator form of with_audit
    log_audit: Log a single event with identity and IP taken from a request

The wrapper is transparent: the handler's return value is passed through
unchanged and its exceptions are re-raised unchanged after the failure event
has been logged. Only audit failures are swallowed.

Example:
    >>> @router.post("/api/v1/goals")
    ... @audited(AuditAction.GOAL_CREATE, extract_resource=lambda req, res: res and res.get("id"))
    ... async def create_goal(request: Request) -> dict:
    ...     return {"id": "goal_123"}
"""

import functools
import inspect
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from starlette.requests import HTTPConnection

from remitwise.audit.context import SessionResolver, extract_ip, resolve_identity
from remitwise.audit.factory import create_audit_event
from remitwise.audit.logger import audit_log
from remitwise.audit.models import AuditAction, AuditResult
from remitwise.audit.sanitize import sanitize_error
from remitwise.auth.session import get_session

logger = logging.getLogger(__name__)

R = TypeVar("R")

Handler = Callable[..., Awaitable[R]]
ResourceExtractor = Callable[[Any, Any], str | None]
MetadataExtractor = Callable[[Any, Any], dict[str, Any] | None]

REQUEST_PARAMETER = "request"


def response_data(response: Any) -> Any:
    """Best-effort JSON-like representation of a handler's response.

    Mappings and lists are returned as-is, pydantic models are dumped and
    responses with a JSON ``body`` are decoded. Anything else yields None.
    """
    if isinstance(response, (Mapping, list)):
        return response
    if isinstance(response, BaseModel):
        return response.model_dump(mode="json")

    body = getattr(response, "body", None)
    if not isinstance(body, (bytes, bytearray, str)) or not body:
        return None
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError):
        return None


def find_request(signature: inspect.Signature, args: tuple, kwargs: dict) -> Any:
    """Locate the request among a handler's call arguments.

    FastAPI passes every endpoint argument by keyword, direct callers
    usually pass the request first. Lookup order: the argument bound to a
    parameter named ``request``, then any Starlette request or websocket,
    then the first positional argument.
    """
    try:
        arguments = signature.bind_partial(*args, **kwargs).arguments
    except TypeError:
        arguments = dict(kwargs)

    if REQUEST_PARAMETER in arguments:
        return arguments[REQUEST_PARAMETER]
    for value in arguments.values():
        if isinstance(value, HTTPConnection):
            return value
    return args[0] if args else None


def _extract(extractor: Callable[[Any, Any], R] | None, request: Any, data: Any) -> R | None:
    if extractor is None:
        return None
    try:
        return extractor(request, data)
    except Exception as exc:
        logger.warning(
            "Audit extractor %s failed: %s",
            getattr(extractor, "__name__", repr(extractor)),
            exc,
        )
        return None


def _extract_resource(extractor: ResourceExtractor | None, request: Any, data: Any) -> str | None:
    resource = _extract(extractor, request, data)
    if resource is None:
        return None
    return str(resource)


def _extract_metadata(
    extractor: MetadataExtractor | None, request: Any, data: Any
) -> dict[Any, Any] | None:
    metadata = _extract(extractor, request, data)
    if metadata is None or isinstance(metadata, dict):
        return metadata
    if isinstance(metadata, Mapping):
        return dict(metadata)
    logger.warning("Audit metadata is %s, not a mapping; wrapping it", type(metadata).__name__)
    return {"value": metadata}


async def _emit(action: AuditAction, result: AuditResult | str, **fields: Any) -> None:
    try:
        event = create_audit_event(action, result, **fields)
    except Exception as exc:
        if fields.get("metadata") is None:
            logger.error("[AUDIT] Failed to build %s event: %s", action, exc)
            return
        # Keep the event, lose the metadata
        logger.error("[AUDIT] Dropping metadata of %s event: %s", action, exc)
        fields["metadata"] = None
        try:
            event = create_audit_event(action, result, **fields)
        except Exception as retry_exc:
            logger.error("[AUDIT] Failed to build %s event: %s", action, retry_exc)
            return
    await audit_log(event)


async def _audit_failure(
    action: AuditAction,
    exc: BaseException,
    request: Any,
    address: str | None,
    extract_resource: ResourceExtractor | None,
) -> None:
    try:
        await _emit(
            action,
            AuditResult.FAILURE,
            address=address,
            ip=extract_ip(request),
            resource=_extract_resource(extract_resource, request, None),
            error=sanitize_error(exc),
        )
    except Exception as audit_exc:
        logger.error("[AUDIT] Failed to log %s failure: %s", action, audit_exc)


async def _audit_success(
    action: AuditAction,
    response: Any,
    request: Any,
    address: str | None,
    extract_resource: ResourceExtractor | None,
    extract_metadata: MetadataExtractor | None,
) -> None:
    try:
        data = response_data(response)
        await _emit(
            action,
            AuditResult.SUCCESS,
            address=address,
            ip=extract_ip(request),
            resource=_extract_resource(extract_resource, request, data),
            metadata=_extract_metadata(extract_metadata, request, data),
        )
    except Exception as audit_exc:
        logger.error("[AUDIT] Failed to log %s success: %s", action, audit_exc)


def with_audit(
    action: AuditAction,
    handler: Handler,
    extract_resource: ResourceExtractor | None = None,
    extract_metadata: MetadataExtractor | None = None,
    *,
    session_resolver: SessionResolver | None = get_session,
) -> Handler:
    """Wrap an async request handler with automatic audit logging.

    The identity is resolved before the handler runs. On success a
    ``success`` event is logged with resource and metadata computed by the
    extractors from the request and the parsed response, and the original
    response is returned. On failure a ``failure`` event is logged with the
    sanitized error, then the original exception is re-raised.

    Arguments are forwarded to the handler exactly as received. The request
    is found with find_request(), so it may sit at any position or be
    passed by keyword.

    Args:
        action: The audited action.
        handler: Async callable receiving the request among its arguments.
        extract_resource: Optional (request, response_data) -> resource ID.
        extract_metadata: Optional (request, response_data) -> metadata dict.
        session_resolver: Async session lookup used for the actor identity.

    Returns:
        The wrapped handler, with the original handler's signature.
    """
    signature = inspect.signature(handler)

    @functools.wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        request = find_request(signature, args, kwargs)
        address = await resolve_identity(request, session_resolver)

        try:
            response = await handler(*args, **kwargs)
        except Exception as exc:
            await _audit_failure(action, exc, request, address, extract_resource)
            raise

        await _audit_success(action, response, request, address, extract_resource, extract_metadata)

        return response

    return wrapper


def audited(
    action: AuditAction,
    extract_resource: ResourceExtractor | None = None,
    extract_metadata: MetadataExtractor | None = None,
    *,
    session_resolver: SessionResolver | None = get_session,
) -> Callable[[Handler], Handler]:
    """Decorator form of with_audit()."""

    def decorator(handler: Handler) -> Handler:
        return with_audit(
            action,
            handler,
            extract_resource,
            extract_metadata,
            session_resolver=session_resolver,
        )

    return decorator


async def log_audit(
    action: AuditAction,
    request: Any,
    result: AuditResult | str,
    *,
    resource: str | None = None,
    error: Any = None,
    metadata: dict[str, Any] | None = None,
    session_resolver: SessionResolver | None = get_session,
) -> None:
    """Log one audit event for a request, filling in identity and IP.

    Use this instead of with_audit() when the handler needs to decide itself
    when and what to log.

    Args:
        action: The audited action.
        request: The incoming request.
        result: "success" or "failure".
        resource: Identifier of the object acted upon.
        error: Error (exception, message, ...) for failure events.
        metadata: Additional context; sanitized by the audit logger.
        session_resolver: Async session lookup used for the actor identity.
    """
    address = await resolve_identity(request, session_resolver)

    await _emit(
        action,
        result,
        address=address,
        ip=extract_ip(request),
        resource=resource,
        error=sanitize_error(error) if error is not None else None,
        metadata=metadata,
    )
