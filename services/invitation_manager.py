"""Client invitations: issuing, checking and redeeming invite tokens.

An invitation is an inactive client row carrying a random token and an
expiry. Redeeming it sets a real password, activates the row and clears
the token in one conditional UPDATE, so a token can be spent only once
even when two activation requests race.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.clock import utc_now
from core.config import settings
from core.exceptions import EmailAlreadyRegisteredError, NotFoundError
from core.logger import get_logger
from core.security import generate_token, hash_password, unusable_password
from database import models
from database.models import Role
from services.auth_service import get_user_by_email, normalize_email

logger = get_logger("services.invitation_manager")

INVALID_INVITATION = "Invitation is invalid or has expired"


@dataclass
class Invitation:
    token: str
    invite_link: str
    user: models.User


def invite_link_for(token: str) -> str:
    return f"/invite/{token}"


class InvitationManager:
    """Create, verify and activate client invitations."""

    def __init__(self, db: Session, ttl: Optional[timedelta] = None):
        self.db = db
        self.ttl = ttl or timedelta(days=settings.invite_ttl_days)

    def create_invitation(
        self,
        name: str,
        email: str,
        nutritionist_id: int,
        now: Optional[datetime] = None,
    ) -> Invitation:
        """Issue an invitation for `email` on behalf of a nutritionist.

        An inactive row for the same email is reused only when it is a
        client of the same nutritionist, which makes re-inviting (an expired
        invite or a removed client) possible without handing a client's
        history to someone else.

        Raises:
            EmailAlreadyRegisteredError: An active user owns the email, or the
                inactive row belongs to another nutritionist.
        """
        now = now or utc_now()
        email = normalize_email(email)
        existing = get_user_by_email(self.db, email, include_inactive=True)
        if existing is not None and (
            existing.active
            or existing.role != Role.CLIENT.value
            or existing.nutritionist_id != nutritionist_id
        ):
            raise EmailAlreadyRegisteredError()

        token = generate_token()
        fields = dict(
            name=name,
            password=unusable_password(),
            role=Role.CLIENT.value,
            nutritionist_id=nutritionist_id,
            active=False,
            invite_token=token,
            invite_expires=now + self.ttl,
        )
        if existing is not None:
            for key, value in fields.items():
                setattr(existing, key, value)
            user = existing
        else:
            user = models.User(email=email, **fields)
            self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(
            "Invitation issued for user id=%s by nutritionist id=%s (reused=%s)",
            user.id, nutritionist_id, existing is not None,
        )
        return Invitation(token=token, invite_link=invite_link_for(token), user=user)

    def verify_token(self, token: str, now: Optional[datetime] = None) -> models.User:
        """Return the invited user for a live token. Read-only.

        Raises:
            NotFoundError: Unknown token, or its expiry has passed.
        """
        now = now or utc_now()
        if not token:
            raise NotFoundError("Invitation", message=INVALID_INVITATION)
        user = (
            self.db.query(models.User)
            .filter(models.User.invite_token == token, models.User.active.is_(False))
            .first()
        )
        if user is None or user.invite_expires is None or user.invite_expires < now:
            raise NotFoundError("Invitation", message=INVALID_INVITATION)
        return user

    def activate(self, token: str, password: str, now: Optional[datetime] = None) -> models.User:
        """Redeem `token`, setting `password` and activating the account.

        Expiry is checked again here; the final write only applies while the
        row still holds this unexpired token, so of two concurrent requests
        at most one succeeds.

        Raises:
            NotFoundError: The token is unknown, expired or already used.
        """
        now = now or utc_now()
        user = self.verify_token(token, now)
        credential = hash_password(password)

        result = self.db.execute(
            update(models.User)
            .where(
                models.User.id == user.id,
                models.User.invite_token == token,
                models.User.invite_expires >= now,
                models.User.active.is_(False),
            )
            .values(
                password=credential,
                active=True,
                invite_token=None,
                invite_expires=None,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.db.rollback()
            logger.warning("Invitation for user id=%s was consumed concurrently", user.id)
            raise NotFoundError("Invitation", message=INVALID_INVITATION)

        self.db.commit()
        self.db.refresh(user)
        logger.info("Invitation redeemed, user id=%s is now active", user.id)
        return user
