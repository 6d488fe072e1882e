"""Audit sink implementations.

This module provides:
- AuditSink: Abstract base class for audit destinations
- StreamSink: Writes "[AUDIT] <json>" lines to stdout (the fallback sink)
- DatabaseSink: Inserts events into the audit_log table, falling back to a
  StreamSink when the insert fails
- build_sink: Select the sink for an AuditConfig

Sinks make a single attempt per event; failed inserts are never retried.
"""

import json
import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TextIO
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from remitwise.audit.config import AuditConfig, AuditDestination
from remitwise.audit.models import AuditEvent

logger = logging.getLogger(__name__)

AUDIT_PREFIX = "[AUDIT]"

SessionFactory = Callable[[], AsyncSession]

INSERT_AUDIT_LOG = text("""
    INSERT INTO audit_log (
        id, timestamp, action, address, ip, resource,
        result, error, metadata, created_at
    ) VALUES (
        :id, :timestamp, :action, :address, :ip, :resource,
        :result, :error, :metadata, CURRENT_TIMESTAMP
    )
""")


def generate_audit_id() -> str:
    """Generate a unique audit log row ID."""
    return f"audit_{uuid4().hex}"


class AuditSink(ABC):
    """Abstract base class for audit destinations."""

    @abstractmethod
    async def write(self, event: AuditEvent) -> None:
        """Write one audit event.

        Args:
            event: The sanitized audit event.
        """
        pass


class StreamSink(AuditSink):
    """Write audit events as single JSON lines to a text stream.

    Args:
        stream: Target stream. Defaults to whatever sys.stdout is at write time.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def format(self, event: AuditEvent) -> str:
        return f"{AUDIT_PREFIX} {event.to_json()}"

    async def write(self, event: AuditEvent) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(self.format(event) + "\n")
        stream.flush()


class DatabaseSink(AuditSink):
    """Insert audit events into the audit_log table.

    Any failure (missing table, unreachable database, ...) is reported on the
    diagnostic logger and the event is written to the fallback sink instead,
    so a write never fails because of the store.

    Args:
        session_factory: Callable returning an AsyncSession context manager.
        fallback: Sink used when the insert fails (default: StreamSink()).
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        fallback: AuditSink | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._fallback = fallback if fallback is not None else StreamSink()

    @staticmethod
    def to_params(event: AuditEvent, audit_id: str) -> dict:
        metadata = None
        if event.metadata is not None:
            try:
                metadata = json.dumps(event.metadata, ensure_ascii=False, default=str)
            except (TypeError, ValueError):
                metadata = json.dumps(str(event.metadata), ensure_ascii=False)
        return {
            "id": audit_id,
            "timestamp": event.timestamp,
            "action": event.action.value,
            "address": event.address,
            "ip": event.ip,
            "resource": event.resource,
            "result": event.result.value,
            "error": event.error,
            "metadata": metadata,
        }

    async def write(self, event: AuditEvent) -> None:
        try:
            params = self.to_params(event, generate_audit_id())
            async with self._session_factory() as session:
                await session.execute(INSERT_AUDIT_LOG, params)
                await session.commit()
        except Exception as exc:
            logger.error(
                "%s Failed to write to database, falling back to stdout: %s",
                AUDIT_PREFIX,
                exc,
            )
            await self._fallback.write(event)


def build_sink(
    config: AuditConfig,
    session_factory: SessionFactory | None = None,
) -> AuditSink:
    """Create the sink selected by config.destination.

    Args:
        config: Audit configuration.
        session_factory: Required for the persistent destination.

    Returns:
        DatabaseSink for PERSISTENT with a session factory, StreamSink otherwise.
    """
    if config.destination == AuditDestination.PERSISTENT:
        if session_factory is not None:
            return DatabaseSink(session_factory)
        logger.warning("Audit destination is database but no session factory given, using stdout")
    return StreamSink()
