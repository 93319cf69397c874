"""Shared fixtures: in-memory Mongo collection, fake chat model, HTTP client."""

import copy
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from itinerary_gen.db.job_store import JobStore, get_job_store
from itinerary_gen.langchain_pipeline import itinerary_chain
from itinerary_gen.main import app


class InMemoryCollection:
    """The subset of AsyncIOMotorCollection that JobStore uses."""

    def __init__(self) -> None:
        self.docs: Dict[str, Dict[str, Any]] = {}

    async def insert_one(self, doc: Dict[str, Any]) -> SimpleNamespace:
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one(self, flt: Dict[str, Any], projection: Optional[Dict[str, int]] = None):
        doc = self.docs.get(flt["_id"])
        if doc is None:
            return None
        found = copy.deepcopy(doc)
        if projection and projection.get("_id") == 0:
            found.pop("_id")
        return found

    async def update_one(self, flt: Dict[str, Any], update: Dict[str, Any]) -> SimpleNamespace:
        doc = self.docs.get(flt["_id"])
        matched = doc is not None and all(doc.get(k) == v for k, v in flt.items() if k != "_id")
        if matched:
            doc.update(copy.deepcopy(update["$set"]))
        return SimpleNamespace(matched_count=int(matched), modified_count=int(matched))


def make_itinerary(days: int) -> Dict[str, Any]:
    return {
        "itinerary": [
            {
                "day": n,
                "theme": f"Day {n} highlights",
                "activities": [
                    {"time": slot, "description": f"{slot} walk, day {n}", "location": f"Spot {n}-{i}"}
                    for i, slot in enumerate(("Morning", "Afternoon", "Evening"))
                ],
            }
            for n in range(1, days + 1)
        ]
    }


def itinerary_text(days: int) -> str:
    return json.dumps(make_itinerary(days))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def collection() -> InMemoryCollection:
    return InMemoryCollection()


@pytest.fixture
def store(collection) -> JobStore:
    return JobStore(collection)


@pytest.fixture
def fake_model(monkeypatch):
    """Install a FakeListChatModel answering with the given responses in order."""

    def _install(responses: List[str]) -> FakeListChatModel:
        model = FakeListChatModel(responses=responses)
        monkeypatch.setattr(itinerary_chain, "build_chat_model", lambda: model)
        return model

    return _install


@pytest.fixture
def backoff_delays(monkeypatch) -> List[float]:
    """Record backoff delays instead of sleeping."""
    delays: List[float] = []

    async def _record(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(itinerary_chain, "_backoff", _record)
    return delays


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_job_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
