"""Audit logger: the entry point of the audit pipeline.

Classes:
    AuditLogger: Sanitize an event, apply the configuration and dispatch it to a sink

Functions:
    audit_log: Log an event through the process-wide AuditLogger

Audit logging is best-effort: AuditLogger.log() and audit_log() never raise,
so an audit failure cannot abort the business operation being observed.

Example:
    >>> await audit_log(
    ...     create_audit_event(
    ...         AuditAction.LOGIN_SUCCESS,
    ...         AuditResult.SUCCESS,
    ...         address="GDEMOX...",
    ...         ip="192.168.1.100",
    ...     )
    ... )
"""

import logging

from remitwise.audit.config import AuditConfig
from remitwise.audit.models import AuditEvent
from remitwise.audit.sanitize import limit_metadata_size, sanitize, sanitize_error
from remitwise.audit.sinks import AuditSink

logger = logging.getLogger(__name__)


class AuditLogger:
    """Sanitize audit events and hand them to the configured sink.

    Args:
        config: Audit configuration, resolved once by the caller.
        sink: Destination for sanitized events.
    """

    def __init__(self, config: AuditConfig, sink: AuditSink) -> None:
        self._config = config
        self._sink = sink

    @property
    def config(self) -> AuditConfig:
        return self._config

    @property
    def sink(self) -> AuditSink:
        return self._sink

    def prepare(self, event: AuditEvent) -> AuditEvent:
        """Return the event as it will be written: sanitized and filtered.

        Metadata is deep-sanitized and size-capped, the error is reduced to
        its message, and metadata is dropped entirely when include_metadata
        is disabled.
        """
        metadata = None
        if self._config.include_metadata and event.metadata is not None:
            metadata = limit_metadata_size(sanitize(event.metadata))

        error = sanitize_error(event.error) if event.error else None

        return event.model_copy(update={"metadata": metadata, "error": error})

    async def log(self, event: AuditEvent) -> None:
        """Log an audit event. Never raises.

        Args:
            event: The audit event to log.
        """
        if not self._config.enabled:
            return

        try:
            await self._sink.write(self.prepare(event))
        except Exception as exc:
            logger.error("[AUDIT] Failed to log event: %s", exc)


async def audit_log(event: AuditEvent) -> None:
    """Log an audit event through the process-wide AuditLogger. Never raises.

    Args:
        event: The audit event to log.
    """
    from remitwise.audit.setup import get_or_init_audit_logger

    try:
        audit_logger = get_or_init_audit_logger()
    except Exception as exc:
        logger.error("[AUDIT] Failed to initialize audit logger: %s", exc)
        return

    await audit_logger.log(event)
