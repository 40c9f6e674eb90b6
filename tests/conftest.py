import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.db import SalesStore
from app.main import app, get_gateway, get_store

class FakeGateway:
    """Returns scripted replies in order and records every prompt it receives."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def chat(self, messages):
        self.calls.append(messages)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


# Fresh, seeded SQLite file per test
@pytest.fixture
def store(tmp_path):
    with SalesStore(str(tmp_path / "sales.db")) as s:
        s.initialize()
        yield s


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest_asyncio.fixture
async def client(store, gateway):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_gateway] = lambda: gateway

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
