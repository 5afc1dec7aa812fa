"""
Health check endpoints for system status and store connectivity.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from organizer.core.config import settings
from organizer.core.deps import get_db
from organizer.services.broadcast import Broadcaster, get_broadcaster

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Simple status message indicating the API is running
    """
    return {
        "status": "ok",
        "service": settings.PROJECT_NAME,
    }


@router.get("/store")
def store_health_check(
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Check entity store connectivity.

    Returns:
        Store status plus the number of open broadcast connections
    """
    try:
        db.execute(text("SELECT 1"))
        store_status = {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.error(f"Store health check failed: {e}")
        store_status = {"status": "unhealthy", "error": str(e)}

    return {
        **store_status,
        "connections": broadcaster.connection_count,
    }
