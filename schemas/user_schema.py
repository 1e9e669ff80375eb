"""Schemas for user, registration and login requests and responses."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request payload for self-registration."""

    email: EmailStr = Field(..., examples=["ana@example.com"])
    password: str = Field(..., min_length=6, examples=["secret123"])
    name: str = Field(..., min_length=1, examples=["Ana López"])
    role: Literal["client", "nutritionist"] = Field("client", description="Account role")
    nutritionist_id: Optional[int] = Field(None, examples=[1], description="Nutritionist following this client (clients only)")


class NutritionistRegisterRequest(BaseModel):
    """Request payload for the nutritionist sign-up route."""

    email: EmailStr = Field(..., examples=["cristina@example.com"])
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, examples=["Cristina Sánchez"])


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, examples=["ana@example.com"])
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public view of a user. Credentials and invite tokens are never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    nutritionist_id: Optional[int] = None
    active: bool
    created_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str
