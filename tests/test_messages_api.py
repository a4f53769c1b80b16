import asyncio
import time

from sqlalchemy import insert

from brainbytes.core.database import AsyncSessionLocal
from brainbytes.models.chat import Message
from brainbytes.core.config import settings
from brainbytes.services.chat.gateway import inference_gateway
from brainbytes.services.chat.guard import FALLBACK_REPLY
from brainbytes.services.chat.memory import message_store


async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json() == {"message": "Welcome to the BrainBytes API"}


async def test_explicit_subject_round_trip(client, stub_gateway):
    res = await client.post("/api/messages", json={"text": "2+2", "subject": "Math"})
    assert res.status_code == 201
    data = res.json()

    assert data["userMessage"]["subject"] == "Math"
    assert data["aiMessage"]["subject"] == "Math"
    assert data["userMessage"]["isUser"] is True
    assert data["aiMessage"]["isUser"] is False
    assert data["userMessage"]["text"] == "2+2"
    assert data["aiMessage"]["text"] == "[Math] answer to: 2+2"
    assert data["category"] == "open-ended"
    assert stub_gateway == [("2+2", "Math")]


async def test_explicit_subject_is_not_reclassified(client, stub_gateway):
    res = await client.post("/api/messages", json={"text": "what is an atom?", "subject": "History"})
    data = res.json()
    assert data["userMessage"]["subject"] == "History"
    assert data["aiMessage"]["subject"] == "History"


async def test_subject_detected_when_missing(client, stub_gateway):
    res = await client.post("/api/messages", json={"text": "tell me about atoms"})
    assert res.status_code == 201
    data = res.json()
    assert data["userMessage"]["subject"] == "Science"
    assert data["aiMessage"]["subject"] == "Science"
    assert stub_gateway == [("tell me about atoms", "Science")]


async def test_empty_subject_falls_back_to_classifier(client, stub_gateway):
    res = await client.post("/api/messages", json={"text": "hello!", "subject": ""})
    assert res.json()["userMessage"]["subject"] == "General"


async def test_missing_text_is_rejected(client, stub_gateway):
    res = await client.post("/api/messages", json={"subject": "Math"})
    assert res.status_code == 400

    res = await client.post("/api/messages", json={"text": "   "})
    assert res.status_code == 400

    assert stub_gateway == []
    assert await message_store.list_messages() == []


async def test_gateway_that_never_answers(client, monkeypatch):
    async def never(question, subject="General"):
        await asyncio.Event().wait()

    monkeypatch.setattr(inference_gateway, "generate", never)
    monkeypatch.setattr(settings, "AI_TIMEOUT_SECONDS", 0.2)

    start = time.monotonic()
    res = await client.post("/api/messages", json={"text": "solve x + 1 = 2 equation"})
    assert time.monotonic() - start < 5

    assert res.status_code == 201
    data = res.json()
    assert data["aiMessage"]["text"] == FALLBACK_REPLY["response"]
    assert data["category"] == "error"
    assert data["userMessage"]["subject"] == data["aiMessage"]["subject"] == "Math"

    stored = await message_store.list_messages()
    assert [m.text for m in stored] == ["solve x + 1 = 2 equation", FALLBACK_REPLY["response"]]


async def test_gateway_error_still_stores_reply(client, monkeypatch):
    async def broken(question, subject="General"):
        raise RuntimeError("Simulated Connection Error")

    monkeypatch.setattr(inference_gateway, "generate", broken)

    res = await client.post("/api/messages", json={"text": "why?", "subject": "History"})
    assert res.status_code == 201
    assert res.json()["aiMessage"]["text"] == FALLBACK_REPLY["response"]
    assert len(await message_store.list_messages()) == 2


async def test_list_messages_oldest_first(client, stub_gateway):
    await client.post("/api/messages", json={"text": "first", "subject": "Math"})
    await client.post("/api/messages", json={"text": "second", "subject": "Science"})

    res = await client.get("/api/messages")
    assert res.status_code == 200
    texts = [m["text"] for m in res.json()]
    assert texts == ["first", "[Math] answer to: first", "second", "[Science] answer to: second"]
    assert all({"id", "text", "isUser", "subject", "createdAt"} <= set(m) for m in res.json())


async def _seed(*subjects):
    # Core insert so that None is stored as NULL instead of the column default
    async with AsyncSessionLocal() as db:
        for subject in subjects:
            await db.execute(insert(Message).values(text=f"question about {subject!r}", is_user=True, subject=subject))
        await db.commit()


async def test_delete_general_sweeps_drifted_records(client):
    await _seed("General", None, "", "Unknown", "Math")

    res = await client.delete("/api/messages/subject/General")
    assert res.status_code == 200
    assert res.json() == {"message": "Deleted 4 messages from subject: General", "deletedCount": 4}

    remaining = await message_store.list_messages()
    assert [m.subject for m in remaining] == ["Math"]


async def test_delete_subject_is_case_insensitive(client):
    await _seed("Math", "math", "MATH", "Science", "Mathematics")

    res = await client.delete("/api/messages/subject/math")
    assert res.json()["deletedCount"] == 3

    remaining = sorted(m.subject for m in await message_store.list_messages())
    assert remaining == ["Mathematics", "Science"]


async def test_delete_unknown_subject_deletes_nothing(client):
    await _seed("Math")
    res = await client.delete("/api/messages/subject/Geography")
    assert res.json()["deletedCount"] == 0
    assert len(await message_store.list_messages()) == 1
