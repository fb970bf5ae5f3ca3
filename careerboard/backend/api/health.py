"""
Health check and system status API endpoints.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..config.settings import get_settings
from ..models.db.database import engine

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.get("/health", summary="Health Check")
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    """
    return {
        "status": "healthy",
        "message": f"Welcome to {settings.app_name} v{settings.app_version}",
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/detailed", summary="Detailed Health Check")
def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with database reachability and configuration status.
    """
    database_ok = True
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        database_ok = False

    health_status = {
        "status": "healthy" if database_ok else "unhealthy",
        "app_info": {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
        },
        "database": {
            "reachable": database_ok,
            "type": "sqlite" if settings.get_database_url().startswith("sqlite") else "other",
        },
        "uploads": {
            "directory": settings.upload_directory,
            "directory_exists": os.path.isdir(settings.upload_directory),
            "max_file_size": settings.max_file_size,
        },
        "security": {
            "token_expiry_minutes": settings.access_token_expire_minutes,
        },
    }

    config_issues = settings.validate_required_settings()
    if config_issues:
        if database_ok:
            health_status["status"] = "degraded"
        health_status["configuration_issues"] = config_issues
        logger.warning("Configuration issues found: %s", config_issues)

    return health_status
