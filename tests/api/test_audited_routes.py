"""Tests for audited FastAPI endpoints with arbitrary parameter order."""

import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel
from remitwise.audit import AuditAction, audited
from remitwise.audit.config import AuditConfig
from remitwise.audit.setup import init_audit_logger


class GoalBody(BaseModel):
    name: str


def build_app() -> FastAPI:
    app = FastAPI()

    @app.post("/goals")
    @audited(AuditAction.GOAL_CREATE, extract_resource=lambda req, res: res["id"])
    async def create(body: GoalBody, request: Request) -> dict:
        return {"id": f"goal_{body.name}", "caller": request.headers.get("x-user")}

    @app.post("/goals/nameless")
    @audited(AuditAction.GOAL_CREATE)
    async def create_without_request(body: GoalBody) -> dict:
        return {"name": body.name}

    return app


@pytest_asyncio.fixture
async def route_client():
    transport = ASGITransport(app=build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestAuditedRouteParameters:
    """Endpoints declaring the request after the body."""

    @pytest.mark.asyncio
    async def test_body_before_request(self, route_client, read_audit):
        init_audit_logger(AuditConfig())

        response = await route_client.post(
            "/goals",
            json={"name": "trip"},
            headers={"X-User": "GCALLER", "X-Forwarded-For": "203.0.113.5"},
        )

        assert response.status_code == 200
        assert response.json() == {"id": "goal_trip", "caller": "GCALLER"}

        records = read_audit()
        assert len(records) == 1
        record = records[0]
        assert record["result"] == "success"
        assert record["resource"] == "goal_trip"
        assert record["address"] == "GCALLER"
        assert record["ip"] == "203.0.113.5"

    @pytest.mark.asyncio
    async def test_endpoint_without_request_parameter(self, route_client, read_audit):
        init_audit_logger(AuditConfig())

        response = await route_client.post("/goals/nameless", json={"name": "trip"})

        assert response.status_code == 200
        records = read_audit()
        assert len(records) == 1
        assert records[0]["result"] == "success"
        assert "address" not in records[0]
