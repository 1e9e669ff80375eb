"""Schemas for the client invitation workflow."""

from pydantic import BaseModel, EmailStr, Field

from .user_schema import UserResponse


class InvitationCreateRequest(BaseModel):
    """Payload a nutritionist sends to invite a new client."""

    name: str = Field(..., min_length=1, examples=["Ana"])
    email: EmailStr = Field(..., examples=["ana@x.com"])


class InvitationCreateResponse(BaseModel):
    message: str
    invite_link: str = Field(..., serialization_alias="inviteLink")


class InvitedUser(BaseModel):
    name: str
    email: str


class InvitationVerifyResponse(BaseModel):
    valid: bool
    user: InvitedUser


class ActivateInvitationRequest(BaseModel):
    password: str = Field(..., min_length=6, examples=["secret123"])


class ActivationResponse(BaseModel):
    message: str
    user: UserResponse
