# remitwise/api/bills.py
"""Bill API endpoints."""

import re
import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, model_validator

from remitwise.audit import AuditAction, audited

STELLAR_PUBLIC_KEY = re.compile(r"^G[A-Z2-7]{55}$")


# Request/Response schemas
class CreateBillRequest(BaseModel):
    """Request body for create bill endpoint."""

    name: str = Field(min_length=1)
    amount: float = Field(gt=0)
    due_date: date = Field(alias="dueDate")
    recurring: bool = False
    frequency_days: int | None = Field(default=None, alias="frequencyDays")

    @model_validator(mode="after")
    def validate_frequency(self) -> "CreateBillRequest":
        """Recurring bills need a positive frequency."""
        if self.recurring and not (self.frequency_days and self.frequency_days > 0):
            raise ValueError("frequencyDays must be > 0 for recurring bills")
        return self


class CreateBillResponse(BaseModel):
    """Response for create bill endpoint."""

    id: str
    owner: str
    name: str
    amount: float
    dueDate: date
    recurring: bool
    frequencyDays: int


def _bill_id(request: Request, response: Any) -> str | None:
    if isinstance(response, dict):
        return response.get("id")
    return None


def _bill_metadata(request: Request, response: Any) -> dict[str, Any] | None:
    if not isinstance(response, dict):
        return None
    return {
        "name": response.get("name"),
        "amount": response.get("amount"),
        "dueDate": response.get("dueDate"),
        "recurring": response.get("recurring"),
    }


# Router
router = APIRouter(prefix="/api/v1/bills", tags=["bills"])


@router.post("", response_model=CreateBillResponse)
@audited(AuditAction.BILL_CREATE, extract_resource=_bill_id, extract_metadata=_bill_metadata)
async def create_bill(request: Request, body: CreateBillRequest) -> CreateBillResponse:
    """Register a bill for the calling wallet.

    Building and submitting the on-chain transaction happens outside this
    service; the endpoint validates the request and returns the bill draft.

    Raises:
        HTTPException: 401 if the X-User header is missing or not a Stellar public key
    """
    caller = request.headers.get("x-user")
    if not caller or not STELLAR_PUBLIC_KEY.match(caller):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return CreateBillResponse(
        id=f"bill_{uuid.uuid4().hex[:12]}",
        owner=caller,
        name=body.name,
        amount=body.amount,
        dueDate=body.due_date,
        recurring=body.recurring,
        frequencyDays=body.frequency_days or 0,
    )
