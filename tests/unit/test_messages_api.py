"""Webhook endpoint tests: routing + envelope, with engines and DB stubbed out."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.wl_account.application.service import LedgerApplicationService
from src.wl_account.domain.cache import EntryCache
from src.wl_bot.api.router import get_command_router
from src.wl_bot.application.router import CommandRouter
from src.wl_common.database import get_db_session
from src.wl_history.application.service import HistoryApplicationService


@pytest.fixture
def fake_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
def command_router(store, clock) -> CommandRouter:
    ledger = LedgerApplicationService(repo=store, cache=EntryCache(), clock=clock)
    return CommandRouter(ledger=ledger, history=AsyncMock(spec=HistoryApplicationService))


@pytest.fixture(autouse=True)
def overrides(command_router: CommandRouter, fake_db: MagicMock):
    async def _db() -> AsyncGenerator[MagicMock, None]:
        yield fake_db

    app.dependency_overrides[get_command_router] = lambda: command_router
    app.dependency_overrides[get_db_session] = _db
    yield
    app.dependency_overrides.clear()


async def _send(client: AsyncClient, text: str, chat_id: int | str = 42) -> dict:
    resp = await client.post(
        "/api/v1/messages", json={"chat_id": chat_id, "display_name": "Asha", "text": text}
    )
    assert resp.status_code == 200
    return resp.json()


class TestMessagesEndpoint:
    async def test_credit_then_balance(self, client: AsyncClient) -> None:
        body = await _send(client, "/c 100")
        assert body["code"] == 0
        assert body["request_id"].startswith("req_")
        assert body["data"]["success"] is True
        assert body["data"]["data"]["wallet_amount_cents"] == 10000

        body = await _send(client, "/bal")
        assert body["data"]["message"] == "💳 Current balance: ₹100.00"

    async def test_business_failure_still_200(self, client: AsyncClient) -> None:
        body = await _send(client, "/d 30 food")
        assert body["code"] == 0
        assert body["data"]["success"] is False
        assert body["data"]["error_code"] == 2001

    @pytest.mark.parametrize(
        "text", ["/c 1e999999", "/set 92233720368547758.08", "/d 1e999999 food"]
    )
    async def test_out_of_range_amount_is_validation_failure(
        self, client: AsyncClient, store, text: str
    ) -> None:
        body = await _send(client, text)
        assert body["data"]["success"] is False
        assert body["data"]["error_code"] == 1001
        assert store.rows_for("42") == []

    async def test_overlong_category_is_validation_failure(
        self, client: AsyncClient, store
    ) -> None:
        await _send(client, "/c 100")
        body = await _send(client, "/d 30 " + "x" * 101)
        assert body["data"]["success"] is False
        assert body["data"]["error_code"] == 1000
        assert "100 characters" in body["data"]["message"]
        assert store.category_creates == 0

    async def test_unknown_command(self, client: AsyncClient) -> None:
        body = await _send(client, "/withdraw")
        assert body["data"]["success"] is False
        assert body["data"]["error_code"] == 1003

    async def test_string_chat_ids_accepted(self, client: AsyncClient) -> None:
        body = await _send(client, "/c 5", chat_id="chat-abc")
        assert body["data"]["data"]["user_id"] == "chat-abc"

    async def test_missing_text_rejected(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/messages", json={"chat_id": 42})
        assert resp.status_code == 422


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
