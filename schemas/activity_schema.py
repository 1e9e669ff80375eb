"""Schemas for physical activity, exercise entries and health app links."""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from database.models import HealthProvider


class ExerciseTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    calories_per_minute: Optional[float] = None
    icon_name: Optional[str] = None
    active: bool


class PhysicalActivityUpsertRequest(BaseModel):
    """Create or replace the activity record of one day."""

    date: dt.date = Field(..., examples=["2024-05-06"])
    steps: Optional[int] = Field(None, ge=0, examples=[8500])
    notes: Optional[str] = None


class ExerciseEntryCreateRequest(BaseModel):
    activity_id: int
    exercise_type_id: int
    duration: int = Field(..., gt=0, description="Minutes")
    calories_burned: Optional[float] = Field(None, ge=0, description="Derived from the exercise type when omitted")
    start_time: Optional[dt.datetime] = None
    notes: Optional[str] = None


class ExerciseEntryUpdateRequest(BaseModel):
    exercise_type_id: Optional[int] = None
    duration: Optional[int] = Field(None, gt=0)
    calories_burned: Optional[float] = Field(None, ge=0)
    start_time: Optional[dt.datetime] = None
    notes: Optional[str] = None


class ExerciseEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_id: int
    exercise_type_id: int
    duration: int
    calories_burned: Optional[float] = None
    start_time: Optional[dt.datetime] = None
    notes: Optional[str] = None
    exercise_type: Optional[ExerciseTypeResponse] = None


class PhysicalActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: dt.date
    steps: Optional[int] = None
    notes: Optional[str] = None
    fit_sync_date: Optional[dt.datetime] = None
    exercises: List[ExerciseEntryResponse] = []


class HealthAppIntegrationCreateRequest(BaseModel):
    provider: HealthProvider
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expiry: Optional[dt.datetime] = None


class HealthAppIntegrationResponse(BaseModel):
    """Integration status. Tokens stay server side."""

    id: int
    user_id: int
    provider: str
    active: bool
    connected: bool
    token_expiry: Optional[dt.datetime] = None
    last_synced: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
