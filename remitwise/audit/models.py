"""Audit event models.

This module defines the canonical audit record and the closed set of
auditable actions:

Classes:
    AuditAction: Every sensitive operation that produces an audit event
    AuditResult: Outcome of an audited operation (success or failure)
    AuditEvent: Immutable audit record handed to the sinks

Adding a new auditable operation means adding a new AuditAction member.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditAction(str, Enum):
    """Auditable actions, grouped by domain.

    Authentication:
        LOGIN_SUCCESS, LOGIN_FAIL, LOGOUT, NONCE_REQUESTED

    Remittance:
        REMITTANCE_BUILD, REMITTANCE_EMERGENCY, REMITTANCE_STATUS_CHECK

    Split configuration:
        SPLIT_INITIALIZE, SPLIT_UPDATE, SPLIT_GET

    Savings goals:
        GOAL_CREATE, GOAL_ADD_FUNDS, GOAL_WITHDRAW, GOAL_LOCK, GOAL_UNLOCK, GOAL_LIST

    Bills:
        BILL_CREATE, BILL_PAY, BILL_UPDATE, BILL_DELETE

    Insurance:
        POLICY_CREATE, PREMIUM_PAY, POLICY_UPDATE, POLICY_CANCEL

    Family wallet:
        FAMILY_MEMBER_ADD, FAMILY_MEMBER_UPDATE, FAMILY_MEMBER_REMOVE, FAMILY_LIMIT_CHANGE
    """

    # Authentication
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAIL = "LOGIN_FAIL"
    LOGOUT = "LOGOUT"
    NONCE_REQUESTED = "NONCE_REQUESTED"

    # Remittance
    REMITTANCE_BUILD = "REMITTANCE_BUILD"
    REMITTANCE_EMERGENCY = "REMITTANCE_EMERGENCY"
    REMITTANCE_STATUS_CHECK = "REMITTANCE_STATUS_CHECK"

    # Split configuration
    SPLIT_INITIALIZE = "SPLIT_INITIALIZE"
    SPLIT_UPDATE = "SPLIT_UPDATE"
    SPLIT_GET = "SPLIT_GET"

    # Savings goals
    GOAL_CREATE = "GOAL_CREATE"
    GOAL_ADD_FUNDS = "GOAL_ADD_FUNDS"
    GOAL_WITHDRAW = "GOAL_WITHDRAW"
    GOAL_LOCK = "GOAL_LOCK"
    GOAL_UNLOCK = "GOAL_UNLOCK"
    GOAL_LIST = "GOAL_LIST"

    # Bills
    BILL_CREATE = "BILL_CREATE"
    BILL_PAY = "BILL_PAY"
    BILL_UPDATE = "BILL_UPDATE"
    BILL_DELETE = "BILL_DELETE"

    # Insurance
    POLICY_CREATE = "POLICY_CREATE"
    PREMIUM_PAY = "PREMIUM_PAY"
    POLICY_UPDATE = "POLICY_UPDATE"
    POLICY_CANCEL = "POLICY_CANCEL"

    # Family wallet
    FAMILY_MEMBER_ADD = "FAMILY_MEMBER_ADD"
    FAMILY_MEMBER_UPDATE = "FAMILY_MEMBER_UPDATE"
    FAMILY_MEMBER_REMOVE = "FAMILY_MEMBER_REMOVE"
    FAMILY_LIMIT_CHANGE = "FAMILY_LIMIT_CHANGE"


class AuditResult(str, Enum):
    """Outcome of an audited operation."""

    SUCCESS = "success"
    FAILURE = "failure"


class AuditEvent(BaseModel):
    """Immutable record of one sensitive operation's outcome.

    Optional fields left as None are absent from the record: they are
    omitted from to_record() and to_json() instead of being emitted as null.

    Attributes:
        timestamp: ISO-8601 UTC timestamp taken when the event was built.
        action: The audited action.
        address: Identity (public key) of the actor, if known.
        ip: Client IP address, if known.
        resource: Identifier of the object acted upon (goal ID, bill ID, ...).
        result: success or failure.
        error: Sanitized error description, only set on failure.
        metadata: Additional context; sanitized before it reaches a sink.
            Keys need not be strings; writers stringify them.
            Keys are not restricted to strings, the JSON writers stringify them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timestamp: str
    action: AuditAction
    address: str | None = None
    ip: str | None = None
    resource: str | None = None
    result: AuditResult
    error: str | None = None
    metadata: dict[Any, Any] | None = None

    def to_record(self) -> dict[str, Any]:
        """Return the event as a plain dict with absent fields omitted."""
        record: dict[str, Any] = {
            "timestamp": self.timestamp,
            "action": self.action.value,
        }
        for name in ("address", "ip", "resource"):
            value = getattr(self, name)
            if value is not None:
                record[name] = value
        record["result"] = self.result.value
        if self.error is not None:
            record["error"] = self.error
        if self.metadata is not None:
            record["metadata"] = self.metadata
        return record

    def to_json(self) -> str:
        """Serialize to a compact single-line JSON object.

        Values that JSON cannot represent are stringified rather than
        failing the write.
        """
        record = self.to_record()
        try:
            return json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            # Non-string keys or circular references inside metadata
            record["metadata"] = str(record.get("metadata"))
            return json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str)
