"""
Backfill built-in roles for every workspace.

Safe to rerun: provisioning only adds missing roles and grants.

    python -m workspace_access.scripts.backfill_roles
"""

import asyncio

import structlog

from workspace_access.core.config import settings
from workspace_access.core.logging import configure_logging
from workspace_access.models.database import close_db, session_scope
from workspace_access.rbac import ensure_roles_for_all_workspaces

logger = structlog.get_logger()


async def main() -> int:
    try:
        async with session_scope() as session:
            count = await ensure_roles_for_all_workspaces(session)
    finally:
        await close_db()
    logger.info("workspace_roles_backfilled", workspaces=count)
    return count


if __name__ == "__main__":
    configure_logging(settings)
    asyncio.run(main())
