"""Health check API endpoint for StreamGuide"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from streamguide import __version__
from streamguide.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Check that the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return {"status": "error", "error": str(e)}


@router.get("")
async def health_check(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Liveness probe with a database check."""
    database = await check_database(db)
    return {
        "status": "healthy" if database["status"] == "ok" else "degraded",
        "version": __version__,
        "timestamp": datetime.now().isoformat(),
        "checks": {"database": database},
    }
