"""Tests for meal analysis and logging."""

import asyncio
from datetime import UTC, date, datetime, timedelta

import pytest

from meal_coach.services.food_track import FoodTrackService
from meal_coach.services.vision import VisionService
from tests.conftest import FakeVisionClient, InMemoryFoodTrackRepository


def _service(
    repository: InMemoryFoodTrackRepository, client: FakeVisionClient | None = None
) -> FoodTrackService:
    vision_service = VisionService(
        client=client or FakeVisionClient(),
        model="gpt-5.2",
        reasoning_effort=None,
        store=False,
    )
    return FoodTrackService(vision_service=vision_service, repository=repository)


def test_analyze_meal_scores_and_logs_entry(
    food_repository: InMemoryFoodTrackRepository,
) -> None:
    service = _service(food_repository)

    analysis = asyncio.run(service.analyze_meal("user@example.com", b"image"))

    assert analysis.scores.calorie_score == 100
    assert analysis.scores.ingredients_score == 70
    assert analysis.entry.dish == "Grilled chicken bowl"
    assert analysis.entry.health_score == pytest.approx(analysis.scores.overall_score)
    assert analysis.entry.macro_nutrients["calories"] == 450
    assert len(food_repository.entries) == 1


def test_analyze_meal_uses_micronutrients(
    food_repository: InMemoryFoodTrackRepository,
) -> None:
    client = FakeVisionClient()
    client.payload["micronutrients"] = {"vitamins": {"c": 90}, "minerals": None}
    service = _service(food_repository, client)

    analysis = asyncio.run(service.analyze_meal("user@example.com", b"image"))

    assert analysis.scores.vitamin_mineral_score == 100
    assert "Vitamin C" in analysis.scores.score_explanation


def test_list_entries_filters_by_user(
    food_repository: InMemoryFoodTrackRepository,
) -> None:
    service = _service(food_repository)
    asyncio.run(service.analyze_meal("user@example.com", b"image"))
    asyncio.run(service.analyze_meal("other@example.com", b"image"))
    today = datetime.now(tz=UTC).date()

    entries = service.list_entries(
        "user@example.com", today - timedelta(days=1), today + timedelta(days=1)
    )

    assert [entry.user_email for entry in entries] == ["user@example.com"]
    old = service.list_entries("user@example.com", date(2000, 1, 1), date(2000, 1, 2))
    assert old == []
