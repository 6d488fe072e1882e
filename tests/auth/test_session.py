"""Tests for bearer token session resolution."""

import base64
import json

import pytest
from remitwise.auth.session import Session, create_session_token, get_session
from starlette.datastructures import Headers


class FakeRequest:
    def __init__(self, headers: dict | None = None):
        self.headers = Headers(headers or {})


def encode(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode()).decode()


class TestGetSession:
    """Tests for get_session()."""

    @pytest.mark.asyncio
    async def test_valid_token(self):
        token = create_session_token("GADDR", "GKEY")

        session = await get_session(FakeRequest({"Authorization": f"Bearer {token}"}))

        assert session == Session(address="GADDR", public_key="GKEY", authenticated=True)

    @pytest.mark.asyncio
    async def test_bearer_prefix_is_case_insensitive(self):
        token = create_session_token("GADDR", "GKEY")

        session = await get_session(FakeRequest({"authorization": f"bearer {token}"}))

        assert session is not None
        assert session.address == "GADDR"

    @pytest.mark.asyncio
    async def test_missing_header(self):
        assert await get_session(FakeRequest()) is None

    @pytest.mark.asyncio
    async def test_request_without_headers(self):
        assert await get_session(object()) is None

    @pytest.mark.parametrize(
        "header",
        [
            "Bearer ",
            "Bearer not-base64!!",
            f"Bearer {base64.b64encode(b'not json').decode()}",
            f"Bearer {encode(['GADDR', 'GKEY'])}",
            f"Bearer {encode({'address': 'GADDR'})}",
            f"Bearer {encode({'address': '', 'publicKey': 'GKEY'})}",
            f"Bearer {encode({'address': 123, 'publicKey': 'GKEY'})}",
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_tokens_give_no_session(self, header):
        assert await get_session(FakeRequest({"authorization": header})) is None


class TestCreateSessionToken:
    """Tests for create_session_token()."""

    def test_token_is_base64_json(self):
        token = create_session_token("GADDR", "GKEY")

        assert json.loads(base64.b64decode(token)) == {"address": "GADDR", "publicKey": "GKEY"}
