from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from cleanlab.config import settings
from cleanlab.database import get_db
from cleanlab.logger import logger
from cleanlab.services.catalog_service import list_services

router = APIRouter()


@router.get("/api/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint"""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        database = "disconnected"

    return {
        "status": "ok" if database == "connected" else "degraded",
        "app": settings.app_name,
        "database": database,
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/api/services")
def get_services(category: str | None = None, db: Session = Depends(get_db)):
    """Active services, grouped by category"""
    services = list_services(db, category)
    return {"success": True, "data": [s.to_dict() for s in services]}
