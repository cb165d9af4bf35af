"""Meal analysis and food log service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from meal_coach.domain.tracking import FoodTrackEntry, MealAnalysis
from meal_coach.services.scoring import calculate_health_scores
from meal_coach.services.vision import VisionService

_logger = logging.getLogger(__name__)


class FoodTrackRepository(Protocol):
    """Persistence interface for analyzed meals."""

    def insert_entry(
        self,
        user_email: str,
        dish: str,
        macro_nutrients: dict[str, object],
        health_score: float,
    ) -> FoodTrackEntry:
        """Store a meal summary and return the saved row."""

    def list_entries(
        self, user_email: str, start: date, end: date
    ) -> list[FoodTrackEntry]:
        """Return entries in the date range, newest first."""


@dataclass
class FoodTrackService:
    """Service that analyzes meal photos and logs their scores."""

    vision_service: VisionService
    repository: FoodTrackRepository

    async def analyze_meal(self, user_email: str, image_bytes: bytes) -> MealAnalysis:
        """Analyze a meal photo, score it and store a summary row."""
        nutrition = await self.vision_service.extract(image_bytes)
        scores = calculate_health_scores(
            nutrition.macronutrients,
            nutrition.ingredients,
            nutrition.micronutrients,
        )
        entry = self.repository.insert_entry(
            user_email=user_email,
            dish=nutrition.dish_name,
            macro_nutrients=nutrition.macronutrients.model_dump(),
            health_score=scores.overall_score,
        )
        _logger.info(
            "Logged meal: dish=%s score=%.1f", nutrition.dish_name, scores.overall_score
        )
        return MealAnalysis(nutrition=nutrition, scores=scores, entry=entry)

    def list_entries(
        self, user_email: str, start: date, end: date
    ) -> list[FoodTrackEntry]:
        """Return logged meals for a user in the date range."""
        return self.repository.list_entries(user_email, start, end)
