#!/usr/bin/env python
"""Drop and recreate the schema, then seed the roles and the admin account."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from humbl.auth.bootstrap import ensure_bootstrap_admin
from humbl.config import load_settings
from humbl.infrastructure.database import Base, configure_engine, get_engine


async def main() -> None:
    settings = load_settings()
    session_factory = configure_engine(settings)

    async with get_engine().begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)

    if await ensure_bootstrap_admin(session_factory, settings):
        print(f"Seeded admin user '{settings.bootstrap.admin_email}'.")
    else:
        print(f"Admin user '{settings.bootstrap.admin_email}' already exists.")


if __name__ == "__main__":
    asyncio.run(main())
