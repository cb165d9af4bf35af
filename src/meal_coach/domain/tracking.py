"""Domain models for tracked meals and health summaries."""

from dataclasses import dataclass
from datetime import date, datetime

from meal_coach.domain.nutrition import NutritionAnalysis
from meal_coach.domain.scoring import HealthScores


@dataclass(frozen=True)
class FoodTrackEntry:
    """Persisted summary of an analyzed meal."""

    id: int | None
    created_at: datetime | None
    user_email: str
    dish: str
    macro_nutrients: dict[str, object]
    health_score: float


@dataclass(frozen=True)
class MealAnalysis:
    """Result of analyzing and logging a meal photo."""

    nutrition: NutritionAnalysis
    scores: HealthScores
    entry: FoodTrackEntry


@dataclass(frozen=True)
class HealthDataRow:
    """Daily wellbeing, activity and sleep scores as fractions of one."""

    day: date
    wellbeing: float
    activity: float
    sleep: float


@dataclass(frozen=True)
class MealScore:
    """Dish name with its health score."""

    dish: str
    health_score: float


@dataclass(frozen=True)
class HealthTrends:
    """Latest daily value minus the period average, per metric."""

    wellbeing: int
    activity: int
    sleep: int


@dataclass(frozen=True)
class HealthSummary:
    """Combined food and health overview for a period."""

    day: date
    combined_health_score: int
    wellbeing: int
    activity: int
    sleep: int
    food_score: int
    recent_meals: list[MealScore]
    trends: HealthTrends
    total_meals: int
    days_tracked: int
    best_meal: MealScore | None
    talking_photo_id: str
