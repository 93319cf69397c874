from unittest.mock import AsyncMock, MagicMock

import pytest

from itinerary_gen.config import settings
from itinerary_gen.db import mongo


def _client_with_ping(ping: AsyncMock) -> MagicMock:
    db = MagicMock()
    db.command = ping
    client = MagicMock()
    client.__getitem__.return_value = db
    return client


@pytest.fixture
def fresh_mongo(monkeypatch):
    monkeypatch.setattr(mongo, "_mongo_client", None)
    monkeypatch.setattr(mongo, "_mongo_db", None)


@pytest.mark.anyio
async def test_init_mongo_builds_one_client(monkeypatch, fresh_mongo):
    client = _client_with_ping(AsyncMock(return_value={"ok": 1}))
    new_client = MagicMock(return_value=client)
    monkeypatch.setattr(mongo, "_new_client", new_client)

    first = await mongo.init_mongo()
    second = await mongo.init_mongo()

    assert first is second
    assert mongo.get_mongo_client() is first
    new_client.assert_called_once()
    client.__getitem__.assert_called_once_with(settings.MONGO_DB)
    first.command.assert_awaited_once_with("ping")


@pytest.mark.anyio
async def test_init_mongo_closes_client_when_ping_fails(monkeypatch, fresh_mongo):
    client = _client_with_ping(AsyncMock(side_effect=ConnectionError("no route to host")))
    monkeypatch.setattr(mongo, "_new_client", MagicMock(return_value=client))

    with pytest.raises(ConnectionError):
        await mongo.init_mongo()

    client.close.assert_called_once()
    assert mongo._mongo_client is None
    assert mongo._mongo_db is None


def test_masked_host_hides_credentials():
    masked = mongo._masked_host("mongodb+srv://u:p@h.example/db")

    assert "u:p" not in masked
    assert masked == "h.example/db"
