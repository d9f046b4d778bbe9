"""Vote, feedback and report API tests."""
from __future__ import annotations

import asyncio

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


async def _conversation_with_answer(client: AsyncClient, headers: dict[str, str]) -> str:
    conversation_id = (await client.post("/api/conversations", json={}, headers=headers)).json()["id"]
    for role, content in [("user", "question"), ("assistant", "answer")]:
        response = await client.post(
            f"/api/conversations/{conversation_id}/messages",
            json={"role": role, "content": content},
            headers=headers,
        )
        assert response.status_code == 201
    return conversation_id


def test_votes_are_upserted_per_user(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                owner = await login(client, "nina@example.com")
                conversation_id = await _conversation_with_answer(client, owner)
                vote = {"conversation_id": conversation_id, "message_index": 1, "vote": "up"}

                first = (await client.post("/api/votes", json=vote, headers=owner)).json()
                assert first["vote"] == 1
                assert first["counts"] == {"up": 1, "down": 0}

                changed = (await client.post("/api/votes", json={**vote, "vote": "down"}, headers=owner)).json()
                assert changed["vote"] == -1
                assert changed["counts"] == {"up": 0, "down": 1}
                assert changed["message_id"] == first["message_id"]

                reader = await login(client, "oscar@example.com")
                other = (await client.post("/api/votes", json=vote, headers=reader)).json()
                assert other["counts"] == {"up": 1, "down": 1}

                response = await client.post("/api/votes", json={**vote, "message_index": 5}, headers=owner)
                assert response.status_code == 400
                response = await client.post(
                    "/api/votes", json={**vote, "conversation_id": "missing"}, headers=owner
                )
                assert response.status_code == 404
                assert (await client.post("/api/votes", json=vote)).status_code == 401

    asyncio.run(_run())


def test_feedback_accepts_anonymous_and_validates_length(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                anonymous = await client.post("/api/feedback", json={"content": "Love the search mode!"})
                assert anonymous.status_code == 201
                assert anonymous.json()["user_id"] is None
                assert anonymous.json()["status"] == "new"

                headers = await login(client, "pat@example.com")
                signed = await client.post("/api/feedback", json={"content": "Dark mode please"}, headers=headers)
                assert signed.json()["user_id"]

                short = await client.post("/api/feedback", json={"content": "  meh  "})
                assert short.status_code == 400
                assert short.json()["detail"] == "Feedback must be at least 10 characters long"

                long = await client.post("/api/feedback", json={"content": "x" * 3501})
                assert long.status_code == 400
                assert long.json()["detail"] == "Feedback must be no more than 3500 characters long"

    asyncio.run(_run())


def test_reports_require_known_conversation(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                headers = await login(client, "quinn@example.com")
                conversation_id = await _conversation_with_answer(client, headers)

                response = await client.post(
                    "/api/reports",
                    json={"conversation_id": conversation_id, "category": "harmful", "details": "see answer"},
                    headers=headers,
                )
                assert response.status_code == 201
                report = response.json()
                assert report["category"] == "harmful"
                assert report["status"] == "pending"

                response = await client.post("/api/reports", json={"conversation_id": conversation_id}, headers=headers)
                assert response.status_code == 400

                response = await client.post(
                    "/api/reports", json={"conversation_id": "missing", "category": "spam"}, headers=headers
                )
                assert response.status_code == 404

    asyncio.run(_run())
