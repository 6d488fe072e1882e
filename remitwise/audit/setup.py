"""Audit system initialization.

This module owns the process-wide AuditLogger used by audit_log() and the
handler wrappers.

Usage:
    from remitwise.audit.setup import init_audit_logger

    # During startup:
    init_audit_logger(AuditConfig.from_env(), session_factory=async_session)

    # Anywhere in the app:
    await audit_log(create_audit_event(AuditAction.BILL_PAY, AuditResult.SUCCESS))

If audit_log() runs before init_audit_logger(), a logger is built from the
environment and the default database session factory.
"""

import logging

from remitwise.audit.config import AuditConfig, AuditDestination, get_config, set_config
from remitwise.audit.logger import AuditLogger
from remitwise.audit.sinks import SessionFactory, build_sink

logger = logging.getLogger(__name__)

_audit_logger: AuditLogger | None = None


def init_audit_logger(
    config: AuditConfig | None = None,
    session_factory: SessionFactory | None = None,
) -> AuditLogger:
    """Initialize the process-wide audit logger.

    Args:
        config: Audit configuration (default: the process-wide config from get_config()).
        session_factory: Session factory for the persistent sink. When the
            destination is database and none is given, the application's
            default session factory is used.

    Returns:
        Configured AuditLogger instance
    """
    global _audit_logger

    if config is None:
        config = get_config()
    set_config(config)

    if config.destination == AuditDestination.PERSISTENT and session_factory is None:
        from remitwise.db.database import async_session

        session_factory = async_session

    _audit_logger = AuditLogger(config, build_sink(config, session_factory))
    logger.info(
        "AuditLogger initialized: enabled=%s destination=%s retention_days=%d include_metadata=%s",
        config.enabled,
        config.destination.value,
        config.retention_days,
        config.include_metadata,
    )

    return _audit_logger


def get_audit_logger() -> AuditLogger | None:
    """Get the process-wide audit logger.

    Returns:
        The initialized AuditLogger, or None if not yet initialized.
    """
    return _audit_logger


def get_or_init_audit_logger() -> AuditLogger:
    """Get the process-wide audit logger, initializing it from the environment if needed."""
    if _audit_logger is None:
        return init_audit_logger()
    return _audit_logger


def reset_audit_logger() -> None:
    """Drop the process-wide audit logger (used by tests)."""
    global _audit_logger
    _audit_logger = None
