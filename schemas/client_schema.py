"""Schemas for the nutritionist dashboard and client management."""

from typing import Literal, Optional

from pydantic import BaseModel

from .meal_schema import MealResponse
from .user_schema import UserResponse

WeekStatus = Literal["Bien", "Regular", "Insuficiente"]


class ClientSummary(UserResponse):
    """A client card: the user plus figures derived from the trailing week."""

    latest_meal: Optional[MealResponse] = None
    progress: int
    pending_comments: int
    last_week_status: WeekStatus


class ClientActionResponse(BaseModel):
    message: str
    client: UserResponse
