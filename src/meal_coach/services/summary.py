"""Food and health summary service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from meal_coach.domain.tracking import (
    FoodTrackEntry,
    HealthDataRow,
    HealthSummary,
    HealthTrends,
    MealScore,
)
from meal_coach.services.food_track import FoodTrackRepository

TALKING_PHOTO_IDS = {
    "high": "1716f79923fe417e80dfd3cb07be01fb",
    "medium": "7e6fda74ad8740babb472763a3aaa5a2",
    "low": "3f1f324fa7314983bb9244c55b997189",
}
HIGH_SCORE = 80
MEDIUM_SCORE = 70
RECENT_MEALS = 3


class HealthDataRepository(Protocol):
    """Persistence interface for daily health data."""

    def list_health_data(
        self, user_email: str, start: date, end: date
    ) -> list[HealthDataRow]:
        """Return daily rows in the date range, newest first."""


def select_talking_photo(score: float) -> str:
    """Pick the avatar photo matching a 0-100 score."""
    if score >= HIGH_SCORE:
        return TALKING_PHOTO_IDS["high"]
    if score >= MEDIUM_SCORE:
        return TALKING_PHOTO_IDS["medium"]
    return TALKING_PHOTO_IDS["low"]


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class SummaryService:
    """Aggregates logged meals and health data for a period."""

    food_repository: FoodTrackRepository
    health_repository: HealthDataRepository
    today: Callable[[], date] = field(default=_utc_today)

    def build_summary(self, user_email: str, start: date, end: date) -> HealthSummary:
        """Return averages, trends and highlights for the period."""
        entries = self.food_repository.list_entries(user_email, start, end)
        rows = sorted(
            self.health_repository.list_health_data(user_email, start, end),
            key=lambda row: row.day,
            reverse=True,
        )

        food_score = _average([entry.health_score for entry in entries])
        wellbeing = _average_percent([row.wellbeing for row in rows])
        activity = _average_percent([row.activity for row in rows])
        sleep = _average_percent([row.sleep for row in rows])
        if rows:
            latest = rows[0]
            trends = HealthTrends(
                wellbeing=round(latest.wellbeing * 100) - wellbeing,
                activity=round(latest.activity * 100) - activity,
                sleep=round(latest.sleep * 100) - sleep,
            )
        else:
            trends = HealthTrends(wellbeing=0, activity=0, sleep=0)
        combined = round((wellbeing + activity + sleep + food_score) / 4)

        return HealthSummary(
            day=self.today(),
            combined_health_score=combined,
            wellbeing=wellbeing,
            activity=activity,
            sleep=sleep,
            food_score=food_score,
            recent_meals=[_meal_score(entry) for entry in entries[:RECENT_MEALS]],
            trends=trends,
            total_meals=len(entries),
            days_tracked=len(rows),
            best_meal=_best_meal(entries),
            talking_photo_id=select_talking_photo(combined),
        )


def _average(values: list[float]) -> int:
    if not values:
        return 0
    return round(sum(values) / len(values))


def _average_percent(values: list[float]) -> int:
    """Average fractional scores and express them out of 100."""
    if not values:
        return 0
    return round(sum(values) / len(values) * 100)


def _meal_score(entry: FoodTrackEntry) -> MealScore:
    return MealScore(dish=entry.dish, health_score=entry.health_score)


def _best_meal(entries: list[FoodTrackEntry]) -> MealScore | None:
    if not entries:
        return None
    best = max(entries, key=lambda entry: entry.health_score)
    return _meal_score(best)
