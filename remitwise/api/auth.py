# remitwise/api/auth.py
"""Authentication API endpoints."""

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from remitwise.audit import AuditAction, AuditResult, audit_log, create_audit_event, extract_ip
from remitwise.auth.session import get_session

SESSION_COOKIE = "session"


class LogoutResponse(BaseModel):
    """Response for logout endpoint."""

    success: bool


# Router
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: Request, response: Response) -> LogoutResponse:
    """End the current session.

    The session owner is resolved before the cookie is cleared so the
    LOGOUT audit event carries the actor's address.
    """
    session = await get_session(request)
    address = session.address if session else None

    response.delete_cookie(SESSION_COOKIE)

    await audit_log(
        create_audit_event(
            AuditAction.LOGOUT,
            AuditResult.SUCCESS,
            address=address,
            ip=extract_ip(request),
        )
    )

    return LogoutResponse(success=True)
