"""Pydantic schema package for request and response models."""

from .user_schema import (
    RegisterRequest,
    NutritionistRegisterRequest,
    LoginRequest,
    UserResponse,
    MessageResponse,
)
from .invitation_schema import (
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationVerifyResponse,
    ActivateInvitationRequest,
    ActivationResponse,
)
from .meal_schema import (
    MealCreateRequest,
    MealUpdateRequest,
    MealResponse,
    MealWithComments,
    CommentCreateRequest,
    CommentResponse,
    WeeklyMealsResponse,
)
from .client_schema import ClientSummary, ClientActionResponse

__all__ = [
    "RegisterRequest",
    "NutritionistRegisterRequest",
    "LoginRequest",
    "UserResponse",
    "MessageResponse",
    "InvitationCreateRequest",
    "InvitationCreateResponse",
    "InvitationVerifyResponse",
    "ActivateInvitationRequest",
    "ActivationResponse",
    "MealCreateRequest",
    "MealUpdateRequest",
    "MealResponse",
    "MealWithComments",
    "CommentCreateRequest",
    "CommentResponse",
    "WeeklyMealsResponse",
    "ClientSummary",
    "ClientActionResponse",
]
