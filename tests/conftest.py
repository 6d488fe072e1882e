import json

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from remitwise.audit.config import reset_config
from remitwise.audit.setup import reset_audit_logger
from remitwise.db.database import Base
from remitwise.main import app
from remitwise.models import AuditLogRecord  # noqa: F401 - registers the audit_log table

AUDIT_ENV_VARS = (
    "AUDIT_LOG_ENABLED",
    "AUDIT_LOG_DESTINATION",
    "AUDIT_RETENTION_DAYS",
    "AUDIT_INCLUDE_METADATA",
)


@pytest.fixture(autouse=True)
def clean_audit_state(monkeypatch):
    """Isolate every test from the process-wide audit logger and environment."""
    for name in AUDIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_audit_logger()
    reset_config()
    yield
    reset_audit_logger()
    reset_config()


@pytest_asyncio.fixture
async def audit_session_factory():
    """Session factory bound to an in-memory SQLite database with the audit_log table.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def client():
    """HTTP client for the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def audit_lines(output: str) -> list[dict]:
    """Parse the "[AUDIT] <json>" lines of captured stdout."""
    records = []
    for line in output.splitlines():
        if line.startswith("[AUDIT] "):
            records.append(json.loads(line[len("[AUDIT] ") :]))
    return records


@pytest.fixture
def read_audit(capsys):
    """Return a callable giving the audit records written to stdout so far."""

    def _read() -> list[dict]:
        return audit_lines(capsys.readouterr().out)

    return _read
