"""
Health check endpoint with database and import status summary
"""

from collections import Counter
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from api.dependencies import get_db, get_status_manager
from core.exceptions import ImportStatusException
from imports.status_manager import ImportStatusManager
from schemas.api import HealthCheckResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    manager: ImportStatusManager = Depends(get_status_manager)
):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Number of imports per state (without liveness probing)
    """
    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    by_state = Counter()
    if db_connected:
        try:
            for status in await manager.get_all_statuses():
                by_state[status.state.value] += 1
        except ImportStatusException as e:
            logger.error(f"Failed to read import statuses: {e}")

    total = sum(by_state.values())
    if not db_connected:
        overall = "unhealthy"
    elif by_state.get("errored"):
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthCheckResponse(
        status=overall,
        database_connected=db_connected,
        total_imports=total,
        imports_by_state=dict(by_state)
    )
