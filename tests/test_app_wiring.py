"""Application import and per-test database wiring."""
from __future__ import annotations

import asyncio
import importlib

import pytest
from fastapi import APIRouter, FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from humbl.infrastructure.database import Folder


def test_auth_package_resolves_router_and_submodules() -> None:
    auth = importlib.import_module("humbl.auth")
    registry = importlib.import_module("humbl.auth.token_registry")

    assert isinstance(auth.router, APIRouter)
    assert auth.token_registry is registry
    with pytest.raises(AttributeError):
        getattr(auth, "missing")


@pytest.mark.parametrize("name", ["first", "second"])
def test_requests_use_the_database_of_the_current_app(app: FastAPI, session_factory, login, name: str) -> None:
    async def _run() -> None:
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                headers = await login(client, f"{name}@example.com")
                response = await client.post("/api/folders", json={"name": name}, headers=headers)
                assert response.status_code == 201

        async with session_factory() as session:
            result = await session.execute(select(Folder.name))
            assert list(result.scalars()) == [name]

    asyncio.run(_run())
