"""Health check endpoints"""
import time
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cafe_api.api.deps import require_role
from cafe_api.config import settings
from cafe_api.database import get_db
from cafe_api.models.admin_account import ROLE_OWNER, AdminAccount

router = APIRouter(prefix="/health", tags=["health"])

# Track startup time
STARTUP_TIME = time.time()


@router.get("")
def health_check():
    """
    Basic health check endpoint

    Returns 200 if service is running
    """
    return {
        "status": "healthy",
        "service": "Cafe Console API",
        "version": "0.1.0",
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/ready")
def readiness_check(db: Session = Depends(get_db)):
    """
    Readiness check - verifies the database is reachable

    Returns 200 if ready to serve traffic, 503 if not ready
    """
    checks: Dict[str, Any] = {
        "database": False,
        "database_latency_ms": None
    }

    try:
        start = time.time()
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000
        checks["database"] = True
        checks["database_latency_ms"] = round(latency_ms, 2)
    except SQLAlchemyError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "checks": checks,
                "message": f"Database check failed: {str(e)}"
            },
        )

    if latency_ms > 1000:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "degraded",
                "checks": checks,
                "message": "Database latency is high"
            },
        )

    return {
        "status": "ready",
        "checks": checks,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/live")
def liveness_check():
    """Liveness check - returns 200 while the process is alive"""
    return {
        "status": "alive",
        "uptime_seconds": round(time.time() - STARTUP_TIME, 2),
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/stats")
def health_stats(
    db: Session = Depends(get_db),
    _: AdminAccount = Depends(require_role(ROLE_OWNER)),
) -> Dict[str, Any]:
    """
    Console statistics (owner only)

    Returns admin counts by role and how many are present right now.
    """
    accounts = db.query(AdminAccount).all()
    timeout = settings.PRESENCE_TIMEOUT_SECONDS

    by_role: Dict[str, int] = {}
    for account in accounts:
        by_role[account.role] = by_role.get(account.role, 0) + 1

    return {
        "status": "healthy",
        "admins": {
            "total": len(accounts),
            "active": sum(1 for a in accounts if a.effective_status(timeout) == "active"),
            "by_role": by_role
        },
        "system": {
            "uptime_seconds": round(time.time() - STARTUP_TIME, 2),
            "environment": settings.HOST
        },
        "timestamp": datetime.utcnow().isoformat()
    }
