"""
Health check and system status API endpoints.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import APIRouter
from ..config.settings import get_settings

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
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/health/detailed", summary="Detailed Health Check")
def detailed_health_check() -> Dict[str, Any]:
    """
    Detailed health check with a safe configuration overview.
    """
    health_status = {
        "status": "healthy",
        "app_info": {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
            "testing": settings.testing
        },
        "configuration": {
            "log_level": settings.log_level,
            "database_type": "sqlite" if settings.get_database_url().startswith("sqlite") else "other",
            "cors_enabled": settings.cors_enabled,
            "api_docs_enabled": settings.api_docs_enabled
        },
        "extraction": {
            "fetch_timeout_seconds": settings.fetch_timeout_seconds,
            "description_max_length": settings.description_max_length
        },
        "security": {
            "secret_key_configured": bool(settings.secret_key),
            "token_expiry_minutes": settings.access_token_expire_minutes
        }
    }

    config_issues = settings.validate_required_settings()
    if config_issues:
        health_status["status"] = "degraded"
        health_status["configuration_issues"] = config_issues
        logger.warning("Configuration issues found: %s", config_issues)

    return health_status
