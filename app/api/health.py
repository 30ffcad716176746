#app/api/health.py
import logging
import time
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.settings import settings
from app.dependencies import get_db

logger = logging.getLogger("TaskTracker.Health")

router = APIRouter(prefix="/health", tags=["Health"])

STARTED_AT = time.monotonic()

def _now_ms() -> int:
    return int(time.time() * 1000)

def _database_connected(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return False

@router.get("")
def health(db: Session = Depends(get_db)):
    """
    Общая информация о состоянии сервиса.
    """
    return {
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "message": "OK",
        "timestamp": _now_ms(),
        "environment": settings.ENV,
        "database": "connected" if _database_connected(db) else "disconnected",
    }

@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    """
    Readiness check для балансировщика: 503, пока база недоступна.
    """
    if _database_connected(db):
        return {"status": "ready", "database": "connected"}
    return JSONResponse(status_code=503, content={"status": "not ready", "database": "disconnected"})

@router.get("/live")
def liveness():
    """
    Liveness check: процесс жив.
    """
    return {"status": "alive", "timestamp": _now_ms()}
