"""Tests for bill API endpoints."""

import pytest
from remitwise.audit.config import AuditConfig
from remitwise.audit.setup import init_audit_logger

OWNER = "G" + "A" * 55


def bill_body(**overrides):
    body = {"name": "Electricity", "amount": 45.5, "dueDate": "2026-11-01"}
    body.update(overrides)
    return body


class TestCreateBill:
    """Tests for POST /api/v1/bills."""

    @pytest.mark.asyncio
    async def test_create_bill_success(self, client, read_audit):
        init_audit_logger(AuditConfig())

        response = await client.post(
            "/api/v1/bills",
            json=bill_body(recurring=True, frequencyDays=30),
            headers={"X-User": OWNER, "X-Real-IP": "198.51.100.7"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"].startswith("bill_")
        assert data["owner"] == OWNER
        assert data["frequencyDays"] == 30

        records = read_audit()
        assert len(records) == 1
        record = records[0]
        assert record["action"] == "BILL_CREATE"
        assert record["result"] == "success"
        assert record["resource"] == data["id"]
        assert record["address"] == OWNER
        assert record["ip"] == "198.51.100.7"
        assert record["metadata"] == {
            "name": "Electricity",
            "amount": 45.5,
            "dueDate": "2026-11-01",
            "recurring": True,
        }

    @pytest.mark.asyncio
    async def test_missing_caller_is_audited_as_failure(self, client, read_audit):
        init_audit_logger(AuditConfig())

        response = await client.post("/api/v1/bills", json=bill_body())

        assert response.status_code == 401

        records = read_audit()
        assert len(records) == 1
        record = records[0]
        assert record["action"] == "BILL_CREATE"
        assert record["result"] == "failure"
        assert "Unauthorized" in record["error"]
        assert "resource" not in record
        assert "metadata" not in record

    @pytest.mark.asyncio
    async def test_invalid_caller_is_rejected(self, client, read_audit):
        init_audit_logger(AuditConfig())

        response = await client.post(
            "/api/v1/bills",
            json=bill_body(),
            headers={"X-User": "not-a-key"},
        )

        assert response.status_code == 401
        records = read_audit()
        assert records[0]["result"] == "failure"
        assert records[0]["address"] == "not-a-key"

    @pytest.mark.asyncio
    async def test_recurring_bill_requires_frequency(self, client, read_audit):
        init_audit_logger(AuditConfig())

        response = await client.post(
            "/api/v1/bills",
            json=bill_body(recurring=True),
            headers={"X-User": OWNER},
        )

        assert response.status_code == 422
        # Request validation fails before the handler runs
        assert read_audit() == []

    @pytest.mark.asyncio
    async def test_non_positive_amount_is_rejected(self, client):
        init_audit_logger(AuditConfig())

        response = await client.post(
            "/api/v1/bills",
            json=bill_body(amount=0),
            headers={"X-User": OWNER},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_disabled_audit_writes_nothing(self, client, read_audit):
        init_audit_logger(AuditConfig(enabled=False))

        response = await client.post("/api/v1/bills", json=bill_body(), headers={"X-User": OWNER})

        assert response.status_code == 200
        assert read_audit() == []
