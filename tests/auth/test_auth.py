"""Authentication API tests."""
from __future__ import annotations

import asyncio

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient


def test_register_login_and_me_flow(app: FastAPI) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                payload = {"email": "alice@example.com", "password": "SuperSecret1!", "full_name": "Alice"}

                register_response = await client.post("/auth/register", json=payload)
                assert register_response.status_code == 201
                registered = register_response.json()
                assert registered["email"] == payload["email"]
                assert "user" in registered["roles"]

                login_response = await client.post(
                    "/auth/jwt/login",
                    data={"username": payload["email"], "password": payload["password"]},
                )
                assert login_response.status_code == 200
                tokens = login_response.json()
                assert tokens["access_token"]
                assert tokens["token_type"] == "bearer"

                headers = {"Authorization": f"Bearer {tokens['access_token']}"}
                me_response = await client.get("/auth/me", headers=headers)
                assert me_response.status_code == 200
                current_user = me_response.json()
                assert current_user["email"] == payload["email"]
                assert current_user["full_name"] == "Alice"
                assert current_user["roles"] == ["user"]

    asyncio.run(_run())


def test_login_rejects_wrong_password(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                await login(client, "carol@example.com")

                response = await client.post(
                    "/auth/jwt/login", data={"username": "carol@example.com", "password": "wrong-password"}
                )
                assert response.status_code == 400

    asyncio.run(_run())


def test_logout_revokes_token(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                headers = await login(client, "dave@example.com")
                assert (await client.get("/auth/me", headers=headers)).status_code == 200

                logout_response = await client.post("/auth/jwt/logout", headers=headers)
                assert logout_response.status_code == 204

                assert (await client.get("/auth/me", headers=headers)).status_code == 401

    asyncio.run(_run())


def test_protected_routes_require_token(app: FastAPI) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                assert (await client.get("/auth/me")).status_code == 401
                assert (await client.get("/api/conversations")).status_code == 401
                assert (await client.get("/api/folders")).status_code == 401

    asyncio.run(_run())


def test_bootstrap_admin_can_log_in(app: FastAPI, login) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                headers = await login(client, "admin@example.com", "ChangeMe123!", register=False)
                me_response = await client.get("/auth/me", headers=headers)
                assert me_response.status_code == 200
                assert me_response.json()["roles"] == ["admin", "user"]

    asyncio.run(_run())


def test_registration_enforces_password_policy(app: FastAPI) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                short = await client.post("/auth/register", json={"email": "dan@example.com", "password": "short"})
                assert short.status_code == 400
                assert short.json()["detail"]["code"] == "REGISTER_INVALID_PASSWORD"

                echoed = await client.post(
                    "/auth/register", json={"email": "dan@example.com", "password": "xx-dan@example.com"}
                )
                assert echoed.status_code == 400
                assert echoed.json()["detail"]["reason"] == "Password should not contain e-mail"

    asyncio.run(_run())
