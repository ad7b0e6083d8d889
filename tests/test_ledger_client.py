from datetime import date
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from voice_ledger.domain.default_categories import DEFAULT_CATEGORIES
from voice_ledger.errors import InvalidCategory, LedgerUnavailable
from voice_ledger.integration.ledger import LedgerClient
from voice_ledger.integration.memory import InMemoryLedger
from voice_ledger.models import CommitRequest


def _response(payload: Any, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "error", request=MagicMock(), response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


def _client(*responses: Any) -> tuple[LedgerClient, AsyncMock]:
    mock_client = AsyncMock()
    mock_client.is_closed = False
    mock_client.request = AsyncMock(side_effect=list(responses))
    client = LedgerClient(base_url="http://ledger/", token="token", client=mock_client)
    return client, mock_client


COMMIT = CommitRequest(
    type="expense",
    amount=500,
    description="market",
    category_id="c1",
    date=date(2024, 5, 17),
)


@pytest.mark.anyio
async def test_list_active_categories_keeps_backend_order() -> None:
    client, mock_client = _client(
        _response(
            {
                "data": [
                    {"id": "2", "name": "Market", "type": "expense", "isDefault": False},
                    {"id": "1", "name": "food", "type": "expense", "isDefault": True},
                    {"id": "3", "name": "Old", "type": "expense", "isActive": False},
                ]
            }
        )
    )

    categories = await client.list_active_categories("u1", "expense")

    assert [c.id for c in categories] == ["2", "1"]
    assert categories[1].is_default is True
    args, kwargs = mock_client.request.call_args
    assert args == ("GET", "http://ledger/api/users/u1/categories")
    assert kwargs["params"] == {"type": "expense", "active": "true"}
    assert kwargs["headers"]["Authorization"] == "Bearer token"


@pytest.mark.anyio
async def test_find_default_category_by_name() -> None:
    client, _ = _client(
        _response(
            {"data": [{"id": "9", "name": "other_expense", "type": "expense", "isDefault": True}]}
        ),
        _response({"data": []}),
    )

    found = await client.find_default_category_by_name("u1", "expense", "other_expense")
    missing = await client.find_default_category_by_name("u1", "expense", "other_expense")

    assert found is not None and found.id == "9"
    assert missing is None


@pytest.mark.anyio
async def test_create_entry() -> None:
    client, mock_client = _client(
        _response(
            {
                "data": {
                    "id": "e1",
                    "type": "expense",
                    "amount": 500,
                    "description": "market",
                    "category_id": "c1",
                    "date": "2024-05-17",
                }
            }
        )
    )

    entry = await client.create_entry(COMMIT, "u1")

    assert entry.id == "e1"
    assert entry.user_id == "u1"
    assert mock_client.request.call_args.kwargs["json"]["date"] == "2024-05-17"


@pytest.mark.anyio
async def test_invalid_category_is_reported() -> None:
    client, _ = _client(_response({"error": "INVALID_CATEGORY"}, status_code=400))
    with pytest.raises(InvalidCategory):
        await client.create_entry(COMMIT, "u1")


@pytest.mark.anyio
async def test_transport_and_status_errors_propagate() -> None:
    client, _ = _client(httpx.ConnectError("down"), _response({}, status_code=503))

    with pytest.raises(LedgerUnavailable):
        await client.list_active_categories("u1", "expense")
    with pytest.raises(LedgerUnavailable):
        await client.list_active_categories("u1", "expense")


@pytest.mark.anyio
async def test_in_memory_bootstrap_and_type_check() -> None:
    store = InMemoryLedger()
    seeded = store.bootstrap_user("u1")
    store.bootstrap_user("u1")

    assert len(store.categories["u1"]) == len(DEFAULT_CATEGORIES)
    food = next(c for c in seeded if c.name == "food")
    assert food.icon == "🍔" and food.is_default

    with pytest.raises(InvalidCategory):
        await store.create_entry(
            COMMIT.model_copy(update={"category_id": food.id, "type": "income"}), "u1"
        )


@pytest.mark.anyio
async def test_in_memory_auto_bootstrap() -> None:
    store = InMemoryLedger(auto_bootstrap=True)
    other = await store.find_default_category_by_name("new-user", "expense", "other_expense")
    assert other is not None
