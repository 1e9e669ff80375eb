"""Server-side session storage.

A session maps an opaque random id (sent to the browser as a cookie) to a
user id. Only the id is stored; the user row is fetched again on every
request. Expiry is fixed at issuance and never extended.
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from core.clock import utc_now
from core.config import settings
from core.logger import get_logger
from core.security import generate_token
from database import models

logger = get_logger("services.session_store")


class SessionStore:
    """Session persistence backed by the `sessions` table."""

    def __init__(self, db: Session, ttl: Optional[timedelta] = None):
        self.db = db
        self.ttl = ttl or timedelta(days=settings.session_ttl_days)

    def create(self, user_id: int, now: Optional[datetime] = None) -> models.AuthSession:
        now = now or utc_now()
        record = models.AuthSession(
            id=generate_token(),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.info("Session issued for user=%s", user_id)
        return record

    def resolve(self, session_id: Optional[str], now: Optional[datetime] = None) -> Optional[int]:
        """Return the user id bound to `session_id`, or None.

        Expired sessions are deleted on sight.
        """
        if not session_id:
            return None
        record = self.db.get(models.AuthSession, session_id)
        if record is None:
            return None
        now = now or utc_now()
        if record.expires_at <= now:
            self.db.delete(record)
            self.db.commit()
            return None
        return record.user_id

    def destroy(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        deleted = (
            self.db.query(models.AuthSession)
            .filter(models.AuthSession.id == session_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        now = now or utc_now()
        deleted = (
            self.db.query(models.AuthSession)
            .filter(models.AuthSession.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info("Purged %s expired sessions", deleted)
        return deleted
