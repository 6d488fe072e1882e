# remitwise/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from remitwise.api.auth import router as auth_router
from remitwise.api.bills import router as bills_router
from remitwise.api.goals import router as goals_router
from remitwise.audit.setup import init_audit_logger
from remitwise.config import settings
from remitwise.db.database import async_session


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    init_audit_logger(session_factory=async_session)
    yield
    # Shutdown


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

# Include routers
app.include_router(auth_router)
app.include_router(bills_router)
app.include_router(goals_router)


@app.get("/health")
async def health():
    return {"status": "healthy"}
