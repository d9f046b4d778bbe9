"""Message share API tests."""
from __future__ import annotations

import asyncio

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


def test_share_copies_answer_with_its_question(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                headers = await login(client, "rita@example.com")
                conversation_id = (await client.post("/api/conversations", json={}, headers=headers)).json()["id"]
                turns = [
                    ("user", "warm up"),
                    ("assistant", "ready"),
                    ("user", "What is a share link?"),
                    ("assistant", "A public copy of an answer."),
                ]
                for role, content in turns:
                    await client.post(
                        f"/api/conversations/{conversation_id}/messages",
                        json={"role": role, "content": content},
                        headers=headers,
                    )

                response = await client.post(
                    "/api/message-shares",
                    json={"conversation_id": conversation_id, "message_index": 3},
                    headers=headers,
                )
                assert response.status_code == 200
                share = response.json()
                assert share["share_id"] == "t_" + share["conversation_id"].replace("-", "")

                public = await client.get(f"/api/message-shares/{share['share_id']}/public")
                assert public.status_code == 200
                conversation = public.json()["conversation"]
                assert conversation["title"] == "Shared: What is a share link?"
                assert [message["content"] for message in conversation["messages"]] == [
                    "What is a share link?",
                    "A public copy of an answer.",
                ]

                listed = (await client.get("/api/conversations", headers=headers)).json()
                assert [item["id"] for item in listed] == [conversation_id]

    asyncio.run(_run())


def test_share_rejects_user_messages_and_unknown_ids(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                headers = await login(client, "sam@example.com")
                conversation_id = (await client.post("/api/conversations", json={}, headers=headers)).json()["id"]
                await client.post(
                    f"/api/conversations/{conversation_id}/messages",
                    json={"role": "user", "content": "only a question"},
                    headers=headers,
                )

                response = await client.post(
                    "/api/message-shares",
                    json={"conversation_id": conversation_id, "message_index": 0},
                    headers=headers,
                )
                assert response.status_code == 400
                assert response.json()["detail"] == "Can only share AI messages"

                response = await client.post(
                    "/api/message-shares",
                    json={"conversation_id": conversation_id, "message_index": 4},
                    headers=headers,
                )
                assert response.status_code == 400

                response = await client.get("/api/message-shares/t_unknown/public")
                assert response.status_code == 404

    asyncio.run(_run())
