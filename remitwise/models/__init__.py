from remitwise.models.audit_log import AuditLogRecord

__all__ = [
    "AuditLogRecord",
]
