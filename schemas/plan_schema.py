"""Schemas for nutritionist-authored weekly meal plans."""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from database.models import MealType


class MealPlanCreateRequest(BaseModel):
    user_id: int = Field(..., examples=[2], description="Client the plan is written for")
    week_start: dt.date = Field(..., examples=["2024-05-06"])
    week_end: dt.date = Field(..., examples=["2024-05-12"])
    description: Optional[str] = None
    published: bool = False

    @model_validator(mode="after")
    def check_week_bounds(self):
        if self.week_end < self.week_start:
            raise ValueError("week_end must not be before week_start")
        return self


class MealPlanDetailCreateRequest(BaseModel):
    day: dt.date = Field(..., examples=["2024-05-06"])
    meal_type: MealType
    description: str = Field(..., min_length=1)
    image: Optional[str] = Field(None, description="Image URL or storage key")


class PublishRequest(BaseModel):
    published: bool


class MealPlanDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meal_plan_id: int
    day: dt.date
    meal_type: str
    description: str
    image: Optional[str] = None


class MealPlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nutritionist_id: int
    user_id: int
    week_start: dt.date
    week_end: dt.date
    description: Optional[str] = None
    active: bool
    published: bool
    created_at: Optional[dt.datetime] = None


class MealPlanWithDetails(MealPlanResponse):
    details: List[MealPlanDetailResponse] = []


class MealPlanPublishResponse(BaseModel):
    message: str
    meal_plan: MealPlanResponse
