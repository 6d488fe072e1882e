"""AuditLogRecord model for the persistent audit sink.

The sink writes with a raw parameterized INSERT and never loads rows, so
nothing at runtime imports this module. It declares the audit_log table on
Base.metadata, which Alembic autogenerate and the test fixtures build the
schema from, and it must stay in step with alembic/versions/001_audit_log.py
and the INSERT in remitwise.audit.sinks.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from remitwise.db.database import Base


class AuditLogRecord(Base):
    """One row per audit event written by the persistent sink.

    Rows are insert-only. The pipeline never updates or deletes them;
    retention is enforced outside the application.
    """

    __tablename__ = "audit_log"
    __table_args__ = (
        CheckConstraint("result IN ('success', 'failure')", name="ck_audit_log_result"),
        Index("idx_audit_log_timestamp", "timestamp"),
        Index("idx_audit_log_action", "action"),
        Index("idx_audit_log_address", "address"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    timestamp: Mapped[str] = mapped_column(String(40))
    action: Mapped[str] = mapped_column(String(50))
    address: Mapped[str | None] = mapped_column(String(128), nullable=True)
    ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    resource: Mapped[str | None] = mapped_column(String(128), nullable=True)
    result: Mapped[str] = mapped_column(String(10))
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    # JSON-encoded, already sanitized
    metadata_json: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
