"""SQLAlchemy ORM models for the NutriTrack service.

This module defines the database schema: users (clients and
nutritionists), logged meals and the nutritionist comments on them, daily
nutrition summaries, weekly meal plans, physical activity tracking, health
app integrations and login sessions. Models stay behavior-free; the
domain rules live in `services/`.
"""

import enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

from core.clock import utc_now

Base = declarative_base()


class Role(str, enum.Enum):
    CLIENT = "client"
    NUTRITIONIST = "nutritionist"


class MealType(str, enum.Enum):
    """The five daily meal slots, in the order they happen during the day."""

    BREAKFAST = "Desayuno"
    MORNING_SNACK = "Media Mañana"
    LUNCH = "Comida"
    AFTERNOON_SNACK = "Media Tarde"
    DINNER = "Cena"


class HealthProvider(str, enum.Enum):
    GOOGLE_FIT = "google_fit"
    APPLE_HEALTH = "apple_health"


class User(Base):
    """ORM model for both clients and nutritionists.

    A client row created by an invitation stays inactive, with an unusable
    placeholder password, until the invite token is redeemed.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('client', 'nutritionist')", name="ck_users_role"),
        CheckConstraint(
            "role = 'client' OR nutritionist_id IS NULL",
            name="ck_users_nutritionist_has_no_owner",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=Role.CLIENT.value)
    nutritionist_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    active = Column(Boolean, nullable=False, default=True)
    invite_token = Column(String(64), nullable=True, unique=True, index=True)
    invite_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)


class AuthSession(Base):
    """Server-side login session, looked up by the id stored in the cookie."""

    __tablename__ = "sessions"
    id = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utc_now)


class Meal(Base):
    """A meal logged by a client. Several meals may share the same slot."""

    __tablename__ = "meals"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=True)  # HH:MM
    type = Column(String(20), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    calories = Column(Integer, nullable=True)
    duration = Column(Integer, nullable=True)  # minutes
    water_intake = Column(Float, nullable=True)  # litres
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utc_now)


class Comment(Base):
    __tablename__ = "comments"
    id = Column(Integer, primary_key=True, index=True)
    meal_id = Column(Integer, ForeignKey("meals.id"), nullable=False, index=True)
    nutritionist_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)


class NutritionSummary(Base):
    """Calories logged by a user on one day, kept in sync with their meals."""

    __tablename__ = "nutrition_summaries"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_nutrition_summary_day"),)
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    calories_total = Column(Integer, nullable=True)


class MealPlan(Base):
    """Weekly recommendation written by a nutritionist for one client.

    At most one plan per client is active; `published` gates whether the
    client can see it.
    """

    __tablename__ = "meal_plans"
    id = Column(Integer, primary_key=True, index=True)
    nutritionist_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    published = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utc_now)


class MealPlanDetail(Base):
    __tablename__ = "meal_plan_details"
    id = Column(Integer, primary_key=True, index=True)
    meal_plan_id = Column(Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Date, nullable=False)
    meal_type = Column(String(20), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)


class ExerciseType(Base):
    __tablename__ = "exercise_types"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    calories_per_minute = Column(Float, nullable=True)
    icon_name = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class PhysicalActivity(Base):
    """Steps and exercises for one user on one day."""

    __tablename__ = "physical_activities"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_physical_activity_day"),)
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    steps = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    fit_sync_date = Column(DateTime, nullable=True)


class ExerciseEntry(Base):
    __tablename__ = "exercise_entries"
    id = Column(Integer, primary_key=True, index=True)
    activity_id = Column(Integer, ForeignKey("physical_activities.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_type_id = Column(Integer, ForeignKey("exercise_types.id"), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    calories_burned = Column(Float, nullable=True)
    start_time = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)


class HealthAppIntegration(Base):
    """OAuth tokens for a third-party health app; one active row per user."""

    __tablename__ = "health_app_integrations"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider = Column(String(20), nullable=False)
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)
    token_expiry = Column(DateTime, nullable=True)
    last_synced = Column(DateTime, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utc_now)
