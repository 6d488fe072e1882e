"""Audit event factory.

Functions:
    create_audit_event: Build an AuditEvent stamped with the current UTC time
    utc_timestamp: Current UTC time as an ISO-8601 string

Example:
    >>> event = create_audit_event(
    ...     AuditAction.GOAL_CREATE,
    ...     AuditResult.SUCCESS,
    ...     address="GDEMOX...",
    ...     resource="goal_123",
    ...     metadata={"name": "Education", "amount": 200},
    ... )
"""

from datetime import datetime, timezone
from typing import Any

from remitwise.audit.models import AuditAction, AuditEvent, AuditResult


def utc_timestamp() -> str:
    """Return the current UTC time as "YYYY-MM-DDTHH:MM:SS.mmmZ"."""
    now = datetime.now(tz=timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_audit_event(
    action: AuditAction | str,
    result: AuditResult | str,
    *,
    address: str | None = None,
    ip: str | None = None,
    resource: str | None = None,
    error: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditEvent:
    """Create an AuditEvent with the timestamp filled in.

    Args:
        action: The audited action (member or its string value).
        result: "success" or "failure".
        address: Identity of the actor.
        ip: Client IP address.
        resource: Identifier of the object acted upon.
        error: Error description (failure events).
        metadata: Additional context; sanitized later by the audit logger.

    Returns:
        A frozen AuditEvent. Options left as None stay absent.

    Raises:
        ValueError: If action is not an AuditAction or result is not success/failure.
    """
    return AuditEvent(
        timestamp=utc_timestamp(),
        action=AuditAction(action),
        result=AuditResult(result),
        address=address,
        ip=ip,
        resource=resource,
        error=error,
        metadata=metadata,
    )
