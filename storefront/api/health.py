"""
Liveness and service info endpoints
"""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", summary="Database reachability")
def health_check(db: Session = Depends(get_db)):
    """200 while the database answers a trivial query, 503 otherwise"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"service": settings.SERVICE_NAME, "status": "unhealthy", "database": "unreachable"}
        )
    return {"service": settings.SERVICE_NAME, "status": "healthy", "database": "reachable"}


@router.get("/", summary="Service info")
def root():
    return {
        "service": settings.SERVICE_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
