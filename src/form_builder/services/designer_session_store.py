import logging
import uuid
from typing import Optional

import redis
from fastapi import Depends
from pydantic import BaseModel, Field, ValidationError

from form_builder.config import config
from form_builder.exceptions import TransportFailure
from form_builder.models.database import get_redis
from form_builder.services.designer_state import DesignerSnapshot

logger = logging.getLogger(__name__)


class DesignerSession(BaseModel):
    """What a designer session keeps between requests"""

    designer: DesignerSnapshot = Field(default_factory=DesignerSnapshot)
    # Field the configuration editor is open on, if any
    editing_field_id: Optional[str] = None


class DesignerSessionStore:
    """
    Keeps designer sessions in Redis with automatic TTL.

    Every read-modify-write goes through ``save``, which refreshes the
    expiry (sliding window), so an active designer never loses its work
    while an abandoned one is cleaned up by Redis.
    """

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 1800):
        """
        Initialize the store with a Redis backend.

        Args:
            redis_client: Redis client instance (from dependency injection)
            ttl_seconds: Time-to-live in seconds (default: 1800 = 30 minutes)
        """
        self.redis_client = redis_client
        self.ttl_seconds = ttl_seconds

    def _session_key(self, session_id: str) -> str:
        """Redis key for a session (format: "designer_session:{session_id}")"""
        return f"designer_session:{session_id}"

    def create(self, session: DesignerSession) -> str:
        """
        Store a new session and return its id.

        Raises:
            TransportFailure: If Redis cannot be reached
        """
        session_id = uuid.uuid4().hex
        self.save(session_id, session)
        logger.info(f"Opened designer session {session_id}")
        return session_id

    def get(self, session_id: str) -> Optional[DesignerSession]:
        """
        Retrieve a session.

        Returns:
            The session, or None if it expired, never existed or is corrupted

        Raises:
            TransportFailure: If Redis cannot be reached
        """
        key = self._session_key(session_id)
        try:
            raw = self.redis_client.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis error getting designer session {session_id}: {e}")
            raise TransportFailure("Designer session storage is unavailable") from e

        if not raw:
            return None

        try:
            return DesignerSession.model_validate_json(raw)
        except ValidationError:
            logger.error(f"Corrupted designer session {session_id}, discarding")
            return None

    def save(self, session_id: str, session: DesignerSession) -> None:
        """Write the session and refresh its TTL"""
        key = self._session_key(session_id)
        try:
            self.redis_client.setex(key, self.ttl_seconds, session.model_dump_json())
        except redis.RedisError as e:
            logger.error(f"Redis error saving designer session {session_id}: {e}")
            raise TransportFailure("Designer session storage is unavailable") from e

    def delete(self, session_id: str) -> None:
        key = self._session_key(session_id)
        try:
            self.redis_client.delete(key)
            logger.info(f"Closed designer session {session_id}")
        except redis.RedisError as e:
            logger.error(f"Redis error deleting designer session {session_id}: {e}")
            raise TransportFailure("Designer session storage is unavailable") from e


def get_session_store(redis_client=Depends(get_redis)) -> DesignerSessionStore:
    """FastAPI dependency providing the designer session store"""
    return DesignerSessionStore(redis_client, ttl_seconds=config["designer_session_ttl"])
