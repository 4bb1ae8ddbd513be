from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from zenith.db.session import get_db
from zenith.services.scheduler import get_cleanup_scheduler

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
def health_check(db: Session = Depends(get_db)) -> Any:
    """
    Basic health check endpoint.

    Returns:
        dict: Service, database and cleanup scheduler status
    """
    db.execute(text("SELECT 1"))
    return {
        "status": "ok",
        "database": "connected",
        "service": "zenith-backend",
        "cleanup_scheduler": get_cleanup_scheduler().get_status(),
    }
