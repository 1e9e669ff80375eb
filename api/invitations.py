"""Invitation API router.

Nutritionists invite clients by email; the invitee checks the link and
redeems it by choosing a password, which also logs them in.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.auth import start_session
from core.access import Actor, require_nutritionist
from core.exceptions import NotFoundError
from core.logger import get_logger
from database.deps import get_db_write
from schemas import (
    ActivateInvitationRequest,
    ActivationResponse,
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationVerifyResponse,
    UserResponse,
)
from schemas.invitation_schema import InvitedUser
from services.invitation_manager import InvitationManager

logger = get_logger("api.invitations")
router = APIRouter(prefix="/api/invitations", tags=["invitations"])


@router.post("", response_model=InvitationCreateResponse, status_code=201)
def create_invitation(
    payload: InvitationCreateRequest,
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_write),
):
    """Invite a new client and return the activation link.

    Raises:
        EmailAlreadyRegisteredError: The email belongs to an active user or to
            a client of another nutritionist.
    """
    invitation = InvitationManager(db).create_invitation(payload.name, payload.email, actor.id)
    return InvitationCreateResponse(
        message="Invitation created",
        invite_link=invitation.invite_link,
    )


@router.get("/verify/{token}", response_model=InvitationVerifyResponse)
def verify_invitation(token: str, db: Session = Depends(get_db_write)):
    """Tell the activation page whether `token` is still usable."""
    try:
        user = InvitationManager(db).verify_token(token)
    except NotFoundError as exc:
        return JSONResponse(status_code=404, content={"valid": False, "message": exc.message})
    return InvitationVerifyResponse(valid=True, user=InvitedUser(name=user.name, email=user.email))


@router.post("/activate/{token}", response_model=ActivationResponse)
def activate_invitation(
    token: str,
    payload: ActivateInvitationRequest,
    response: Response,
    db: Session = Depends(get_db_write),
):
    """Redeem an invitation and log the new client in.

    Raises:
        NotFoundError: The token is unknown, expired or already used.
    """
    user = InvitationManager(db).activate(token, payload.password)
    start_session(response, db, user)
    return ActivationResponse(message="Account activated", user=UserResponse.model_validate(user))
