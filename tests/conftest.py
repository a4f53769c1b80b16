import os
import sys
import tempfile

# Throwaway SQLite database, configured before the app modules are imported
_db_dir = tempfile.mkdtemp(prefix="brainbytes-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["AI_TIMEOUT_SECONDS"] = "15"

# Add project root to sys.path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from httpx import AsyncClient, ASGITransport

from brainbytes.core.database import Base, engine, init_db
from brainbytes.main import app
from brainbytes.services.cache import redis_cache


@pytest.fixture(autouse=True)
async def fresh_db(monkeypatch):
    """Empty tables for every test, reply cache off."""
    monkeypatch.setattr(redis_cache, "enabled", False)
    await init_db()
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())
    yield
    await engine.dispose()


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def stub_gateway(monkeypatch):
    """Replace the LLM call with a canned reply and record the calls."""
    from brainbytes.services.chat.gateway import inference_gateway

    calls = []

    async def fake_generate(question, subject="General"):
        calls.append((question, subject))
        return {"category": "open-ended", "response": f"[{subject}] answer to: {question}"}

    monkeypatch.setattr(inference_gateway, "generate", fake_generate)
    return calls
