"""Schemas for logged meals, nutritionist comments and daily summaries."""

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from database.models import MealType

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class MealCreateRequest(BaseModel):
    """Payload for logging a meal. Several meals may share a day and type."""

    date: dt.date = Field(..., examples=["2024-05-06"])
    time: Optional[str] = Field(None, pattern=TIME_PATTERN, examples=["08:30"])
    type: MealType = Field(..., examples=["Desayuno"])
    name: str = Field(..., min_length=1, examples=["Avena con frutas"])
    description: Optional[str] = None
    calories: Optional[int] = Field(None, ge=0, examples=[350])
    duration: Optional[int] = Field(None, ge=0, description="Minutes spent eating")
    water_intake: Optional[float] = Field(None, ge=0, description="Litres of water")
    notes: Optional[str] = None


class MealUpdateRequest(BaseModel):
    """Partial update; only the fields that are sent are changed."""

    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    type: Optional[MealType] = None
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    calories: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    water_intake: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class MealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: dt.date
    time: Optional[str] = None
    type: str
    name: str
    description: Optional[str] = None
    calories: Optional[int] = None
    duration: Optional[int] = None
    water_intake: Optional[float] = None
    notes: Optional[str] = None


class CommentCreateRequest(BaseModel):
    meal_id: int = Field(..., examples=[1])
    content: str = Field(..., min_length=1, examples=["Buena elección para el desayuno."])


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meal_id: int
    nutritionist_id: int
    content: str
    read: bool
    created_at: dt.datetime


class MealWithComments(MealResponse):
    comments: List[CommentResponse] = []


class NutritionSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: dt.date
    calories_total: Optional[int] = None


# meal type value -> meals logged in that slot
DailyMeals = Dict[str, List[MealWithComments]]


class WeeklyMealsResponse(BaseModel):
    """Meals of a Monday-to-Sunday week keyed by ISO day, plus calorie totals."""

    week_start: dt.date
    week_end: dt.date
    meals: Dict[str, DailyMeals]
    summaries: List[NutritionSummaryResponse]
