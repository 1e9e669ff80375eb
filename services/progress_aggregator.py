"""Per-client progress figures for the nutritionist dashboard.

Everything is derived from the client's meals and comments on each call;
nothing is cached or written.

The trailing week is the seven UTC calendar days ending today (today included).
Within it:

* ``last_week_status`` buckets the number of logged meals:
  more than 15 is "Bien", more than 7 is "Regular", anything else
  "Insuficiente".
* ``progress`` is the share of the 35 (day, meal type) slots that hold at
  least one meal, as a whole percentage.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.clock import utc_now
from core.logger import get_logger
from database import models
from database.models import MealType, Role
from schemas.client_schema import ClientSummary
from schemas.meal_schema import MealResponse
from schemas.user_schema import UserResponse

logger = get_logger("services.progress_aggregator")

WINDOW_DAYS = 7
STATUS_GOOD = "Bien"
STATUS_FAIR = "Regular"
STATUS_LOW = "Insuficiente"
GOOD_THRESHOLD = 15
FAIR_THRESHOLD = 7


def trailing_window(now: datetime) -> Tuple[date, date]:
    """Return the first and last day of the trailing week ending on `now`."""
    end = now.date()
    return end - timedelta(days=WINDOW_DAYS - 1), end


def classify_week(meal_count: int) -> str:
    if meal_count > GOOD_THRESHOLD:
        return STATUS_GOOD
    if meal_count > FAIR_THRESHOLD:
        return STATUS_FAIR
    return STATUS_LOW


def progress_percentage(meals: Iterable[models.Meal]) -> int:
    """Percentage of trailing-week meal slots with at least one meal logged.

    `meals` must already be restricted to the window.
    """
    filled = {(m.date, m.type) for m in meals}
    total = WINDOW_DAYS * len(MealType)
    return min(100, round(100 * len(filled) / total))


def _meal_sort_key(meal: models.Meal):
    return (meal.date, meal.time or "", meal.id)


def latest_meal(meals: Iterable[models.Meal]) -> Optional[models.Meal]:
    meals = list(meals)
    if not meals:
        return None
    return max(meals, key=_meal_sort_key)


class ProgressAggregator:
    """Compute `ClientSummary` cards from raw meal and comment rows."""

    def __init__(self, db: Session):
        self.db = db

    def meals_in_window(self, client_id: int, now: datetime) -> List[models.Meal]:
        start, end = trailing_window(now)
        return (
            self.db.query(models.Meal)
            .filter(
                models.Meal.user_id == client_id,
                models.Meal.date >= start,
                models.Meal.date <= end,
            )
            .all()
        )

    def pending_comment_count(self, client_id: int) -> int:
        count = (
            self.db.query(func.count(models.Comment.id))
            .join(models.Meal, models.Meal.id == models.Comment.meal_id)
            .filter(models.Meal.user_id == client_id, models.Comment.read.is_(False))
            .scalar()
        )
        return count or 0

    def summarize(self, client: models.User, now: Optional[datetime] = None) -> ClientSummary:
        now = now or utc_now()
        meals = self.meals_in_window(client.id, now)
        latest = latest_meal(meals)
        user_fields = UserResponse.model_validate(client).model_dump()
        return ClientSummary(
            **user_fields,
            latest_meal=MealResponse.model_validate(latest) if latest is not None else None,
            progress=progress_percentage(meals),
            pending_comments=self.pending_comment_count(client.id),
            last_week_status=classify_week(len(meals)),
        )

    def summarize_clients(
        self,
        nutritionist_id: int,
        include_inactive: bool = False,
        now: Optional[datetime] = None,
    ) -> List[ClientSummary]:
        """Summaries for every client of a nutritionist, ordered by name."""
        query = self.db.query(models.User).filter(
            models.User.role == Role.CLIENT.value,
            models.User.nutritionist_id == nutritionist_id,
        )
        if not include_inactive:
            query = query.filter(models.User.active.is_(True))
        clients = query.order_by(models.User.name, models.User.id).all()
        logger.debug("Summarizing %s clients for nutritionist id=%s", len(clients), nutritionist_id)
        return [self.summarize(client, now) for client in clients]
