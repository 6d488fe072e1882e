"""Create audit_log table.

Revision ID: 001_audit_log
Revises:
Create Date: 2026-02-10
"""

import sqlalchemy as sa
from alembic import op

revision = "001_audit_log"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "audit_log",
        sa.Column("id", sa.VARCHAR(64), primary_key=True),
        sa.Column("timestamp", sa.VARCHAR(40), nullable=False),
        sa.Column("action", sa.VARCHAR(50), nullable=False),
        sa.Column("address", sa.VARCHAR(128), nullable=True),
        sa.Column("ip", sa.VARCHAR(64), nullable=True),
        sa.Column("resource", sa.VARCHAR(128), nullable=True),
        sa.Column("result", sa.VARCHAR(10), nullable=False),
        sa.Column("error", sa.TEXT, nullable=True),
        sa.Column("metadata", sa.TEXT, nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP,
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint(
            "result IN ('success', 'failure')",
            name="ck_audit_log_result",
        ),
    )

    op.create_index("idx_audit_log_timestamp", "audit_log", ["timestamp"])
    op.create_index("idx_audit_log_action", "audit_log", ["action"])
    op.create_index("idx_audit_log_address", "audit_log", ["address"])


def downgrade() -> None:
    op.drop_index("idx_audit_log_address", table_name="audit_log")
    op.drop_index("idx_audit_log_action", table_name="audit_log")
    op.drop_index("idx_audit_log_timestamp", table_name="audit_log")
    op.drop_table("audit_log")
