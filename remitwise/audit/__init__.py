"""Audit logging module for RemitWise.

This module records every sensitive operation (authentication, fund
movement, policy changes) as a structured audit event:
- Closed set of auditable actions and an immutable event model
- Recursive redaction of secrets and size limits on event metadata
- Stream (stdout) and persistent (database) sinks with fallback on failure
- Request context extraction (client IP, actor identity)
- Handler wrapping for automatic success/failure events

Usage:
    from remitwise.audit import (
        AuditAction,
        AuditResult,
        audit_log,
        create_audit_event,
        with_audit,
    )

    await audit_log(
        create_audit_event(
            AuditAction.GOAL_CREATE,
            AuditResult.SUCCESS,
            address=address,
            ip=extract_ip(request),
            metadata={"name": "Education", "amount": 200},
        )
    )
"""

# Config - destination and switches
from remitwise.audit.config import (
    AuditConfig,
    AuditDestination,
    get_config,
    reset_config,
    set_config,
)

# Context - request enrichment
from remitwise.audit.context import extract_ip, resolve_identity

# Factory - event creation
from remitwise.audit.factory import create_audit_event

# Logger - entry point
from remitwise.audit.logger import AuditLogger, audit_log

# Middleware - handler wrapping
from remitwise.audit.middleware import audited, log_audit, with_audit

# Models - core data structures and enums
from remitwise.audit.models import AuditAction, AuditEvent, AuditResult

# Sanitize - redaction and masking
from remitwise.audit.sanitize import (
    extract_safe_metadata,
    mask_address,
    sanitize,
    sanitize_error,
)

# Setup - initialization
from remitwise.audit.setup import (
    get_audit_logger,
    init_audit_logger,
    reset_audit_logger,
)

# Sinks - destinations
from remitwise.audit.sinks import AuditSink, DatabaseSink, StreamSink, build_sink

__all__ = [
    # Models
    "AuditAction",
    "AuditResult",
    "AuditEvent",
    # Config
    "AuditConfig",
    "AuditDestination",
    "get_config",
    "set_config",
    "reset_config",
    # Sanitize
    "sanitize",
    "sanitize_error",
    "mask_address",
    "extract_safe_metadata",
    # Factory
    "create_audit_event",
    # Sinks
    "AuditSink",
    "StreamSink",
    "DatabaseSink",
    "build_sink",
    # Logger
    "AuditLogger",
    "audit_log",
    # Context
    "extract_ip",
    "resolve_identity",
    # Middleware
    "with_audit",
    "audited",
    "log_audit",
    # Setup
    "init_audit_logger",
    "get_audit_logger",
    "reset_audit_logger",
]
