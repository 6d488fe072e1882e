# remitwise/api/goals.py
"""Savings goal API endpoints."""

import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from remitwise.audit import AuditAction, extract_safe_metadata, resolve_identity, with_audit


# Request/Response schemas
class CreateGoalRequest(BaseModel):
    """Request body for create goal endpoint."""

    name: str = Field(min_length=1, max_length=100)
    target_amount: float = Field(gt=0, alias="targetAmount")
    target_date: date | None = Field(default=None, alias="targetDate")


class CreateGoalResponse(BaseModel):
    """Response for create goal endpoint."""

    id: str
    owner: str
    name: str
    targetAmount: float
    targetDate: date | None = None
    currentAmount: float = 0.0
    locked: bool = False


def _goal_id(request: Request, response: Any) -> str | None:
    if isinstance(response, dict):
        return response.get("id")
    return None


def _goal_metadata(request: Request, response: Any) -> dict[str, Any] | None:
    if not isinstance(response, dict):
        return None
    return extract_safe_metadata(
        {"name": response.get("name"), "targetAmount": response.get("targetAmount")}
    )


async def _create_goal(request: Request, body: CreateGoalRequest) -> CreateGoalResponse:
    """Create a savings goal for the authenticated caller.

    Raises:
        HTTPException: 401 if no identity can be resolved for the request
    """
    owner = await resolve_identity(request)
    if not owner:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return CreateGoalResponse(
        id=f"goal_{uuid.uuid4().hex[:12]}",
        owner=owner,
        name=body.name,
        targetAmount=body.target_amount,
        targetDate=body.target_date,
    )


create_goal = with_audit(
    AuditAction.GOAL_CREATE,
    _create_goal,
    extract_resource=_goal_id,
    extract_metadata=_goal_metadata,
)

# Router
router = APIRouter(prefix="/api/v1/goals", tags=["goals"])
router.add_api_route("", create_goal, methods=["POST"], response_model=CreateGoalResponse)
