"""Authentication API router.

Registration, login, logout and the current-user endpoint. A successful
registration, login or invitation activation issues a server-side session
whose id travels in an HttpOnly cookie.
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from core.access import get_current_user
from core.config import settings
from core.logger import get_logger
from database import models
from database.deps import get_db_write
from database.models import Role
from schemas import LoginRequest, MessageResponse, NutritionistRegisterRequest, RegisterRequest, UserResponse
from services import auth_service
from services.session_store import SessionStore

logger = get_logger("api.auth")
router = APIRouter(prefix="/api", tags=["auth"])


def start_session(response: Response, db: Session, user: models.User) -> None:
    """Issue a session for `user` and attach its cookie to `response`."""
    store = SessionStore(db)
    record = store.create(user.id)
    response.set_cookie(
        settings.session_cookie_name,
        record.id,
        max_age=int(store.ttl.total_seconds()),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=UserResponse, status_code=201)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db_write)):
    """Register a client or nutritionist and log them in.

    Raises:
        EmailAlreadyRegisteredError: The email belongs to an account that is
            active or was removed by its nutritionist.
        ValidationError: `nutritionist_id` is not an active nutritionist.
    """
    user = auth_service.register_user(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=Role(payload.role),
        nutritionist_id=payload.nutritionist_id,
    )
    start_session(response, db, user)
    return UserResponse.model_validate(user)


@router.post("/register/nutritionist", response_model=UserResponse, status_code=201)
def register_nutritionist(payload: NutritionistRegisterRequest, response: Response, db: Session = Depends(get_db_write)):
    user = auth_service.register_user(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=Role.NUTRITIONIST,
    )
    start_session(response, db, user)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db_write)):
    """Check credentials and start a session.

    Raises:
        AuthenticationError: Generic 401 for any failure.
    """
    user = auth_service.login(db, payload.email, payload.password)
    start_session(response, db, user)
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, response: Response, db: Session = Depends(get_db_write)):
    SessionStore(db).destroy(request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(settings.session_cookie_name, path="/")
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
def current_user(user: models.User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
