from datetime import datetime, timezone

import redis
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from form_builder.config import config
from form_builder.models.database import get_db, get_redis

health = APIRouter()


def _status(**extra) -> dict:
    return {
        "status": "healthy",
        "service": "form-builder",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
        **extra,
    }


def _check_database(db: Session) -> str:
    """Form definitions and submissions live here"""
    try:
        result = db.exec(text("SELECT 1")).first()
    except SQLAlchemyError as e:
        return f"unhealthy: {str(e)}"
    return "healthy" if result else "unhealthy"


def _check_redis(redis_client) -> str:
    """Designer sessions live here"""
    try:
        redis_client.ping()
    except redis.RedisError as e:
        return f"unhealthy: {str(e)}"
    return "healthy"


@health.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return _status()


@health.get("/health/detailed")
async def detailed_health_check(
    db: Session = Depends(get_db), redis_client=Depends(get_redis)
):
    """Detailed health check covering the database and the designer session store"""
    checks = {
        "database": _check_database(db),
        "redis": _check_redis(redis_client),
    }
    health_status = _status(
        checks=checks, designer_session_ttl=config["designer_session_ttl"]
    )

    if any(value != "healthy" for value in checks.values()):
        health_status["status"] = "unhealthy"
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
