"""FastAPI application factory."""
from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from . import dependencies
from .admin.router import router as admin_router
from .auth.bootstrap import ensure_bootstrap_admin
from .auth.dependencies import configure_auth, get_auth_backend_instance
from .auth.models import UserCreate, UserRead, UserUpdate
from .auth.router import router as auth_router
from .chat.router import router as chat_router
from .conversations.router import router as conversations_router
from .engagement.router import router as engagement_router
from .folders.router import router as folders_router
from .logging import setup_logging
from .media.router import router as media_router
from .shares.router import router as shares_router

LOGGER = logging.getLogger(__name__)

API_PREFIX = "/api"

# (router, prefix, tag) for the application's own routers.
ROUTERS: list[tuple[APIRouter, str, str]] = [
    (auth_router, "/auth", "auth"),
    (chat_router, API_PREFIX, "chat"),
    (conversations_router, f"{API_PREFIX}/conversations", "conversations"),
    (folders_router, f"{API_PREFIX}/folders", "folders"),
    (engagement_router, API_PREFIX, "engagement"),
    (shares_router, f"{API_PREFIX}/message-shares", "shares"),
    (media_router, API_PREFIX, "media"),
    (admin_router, "/admin", "admin"),
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = dependencies.get_settings()
    setup_logging(settings)
    session_factory = dependencies.get_session_factory()
    api = settings.fastapi

    app = FastAPI(
        title=api.title,
        description=api.description,
        version=api.version,
        docs_url=api.docs_url,
        redoc_url=api.redoc_url,
        openapi_url=api.openapi_url,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api.cors_allow_origins,
        allow_credentials=api.cors_allow_credentials,
        allow_methods=api.cors_allow_methods,
        allow_headers=api.cors_allow_headers,
    )
    app.add_middleware(GZipMiddleware, minimum_size=api.gzip_minimum_size)

    users = configure_auth(settings)
    app.include_router(users.get_auth_router(get_auth_backend_instance()), prefix="/auth/jwt", tags=["auth"])
    app.include_router(users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
    app.include_router(users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])
    for router, prefix, tag in ROUTERS:
        app.include_router(router, prefix=prefix, tags=[tag])

    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.add_api_route("/health", health, include_in_schema=False)

    @app.on_event("startup")
    async def _bootstrap_admin_user() -> None:
        await ensure_bootstrap_admin(session_factory, settings)

    LOGGER.info("Application configured | routers=%d", len(ROUTERS) + 3)
    return app


app = create_app()
