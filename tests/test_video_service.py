"""Tests for the motivational video service."""

import asyncio
from datetime import date

import pytest

from meal_coach.domain.media import VideoStatus
from meal_coach.domain.tracking import HealthDataRow
from meal_coach.services.summary import TALKING_PHOTO_IDS, SummaryService
from meal_coach.services.video import (
    VideoGenerationError,
    VideoService,
    VideoTimeoutError,
)
from tests.conftest import (
    FakeScriptClient,
    FakeVideoClient,
    InMemoryFileStorage,
    InMemoryFoodTrackRepository,
    InMemoryHealthDataRepository,
)

USER = "user@example.com"


def _service(
    video_client: FakeVideoClient,
    storage: InMemoryFileStorage,
    script_client: FakeScriptClient | None = None,
    health_repository: InMemoryHealthDataRepository | None = None,
) -> VideoService:
    summary_service = SummaryService(
        food_repository=InMemoryFoodTrackRepository(),
        health_repository=health_repository or InMemoryHealthDataRepository(),
        today=lambda: date(2024, 3, 12),
    )
    return VideoService(
        summary_service=summary_service,
        script_client=script_client or FakeScriptClient(),
        video_client=video_client,
        storage=storage,
        bucket="course_audio",
        poll_interval_seconds=0,
        max_attempts=3,
    )


def test_generate_renders_and_uploads_video(
    video_client: FakeVideoClient, storage: InMemoryFileStorage
) -> None:
    script_client = FakeScriptClient()
    health_repository = InMemoryHealthDataRepository(
        rows={
            USER: [
                HealthDataRow(
                    day=date(2024, 3, 1), wellbeing=0.9, activity=0.85, sleep=0.8
                )
            ]
        }
    )
    service = _service(video_client, storage, script_client, health_repository)

    result = asyncio.run(service.generate(USER, date(2024, 3, 1), date(2024, 3, 7)))

    assert result.script == script_client.script
    assert video_client.generated == [(TALKING_PHOTO_IDS["high"], script_client.script)]
    assert video_client.status_calls == 2
    [(bucket, path)] = storage.files
    assert bucket == "course_audio"
    assert path.startswith("video_")
    assert path.endswith(".mp4")
    assert storage.files[(bucket, path)] == (b"mp4-bytes", "video/mp4")
    assert result.video_url == f"https://storage.example/course_audio/{path}"
    assert "Wellbeing score: 90/100" in script_client.instructions[0]
    assert "Sleep score: 80/100" in script_client.instructions[0]


def test_generate_uses_low_photo_without_health_data(
    video_client: FakeVideoClient, storage: InMemoryFileStorage
) -> None:
    service = _service(video_client, storage)

    asyncio.run(service.generate(USER, date(2024, 3, 1), date(2024, 3, 7)))

    assert video_client.generated[0][0] == TALKING_PHOTO_IDS["low"]


def test_generate_raises_when_render_fails(storage: InMemoryFileStorage) -> None:
    video_client = FakeVideoClient(
        statuses=[VideoStatus(status="failed", error="bad photo")]
    )
    service = _service(video_client, storage)

    with pytest.raises(VideoGenerationError, match="bad photo"):
        asyncio.run(service.generate(USER, date(2024, 3, 1), date(2024, 3, 7)))

    assert storage.files == {}


def test_wait_for_video_times_out(storage: InMemoryFileStorage) -> None:
    video_client = FakeVideoClient(statuses=[VideoStatus(status="processing")])
    service = _service(video_client, storage)

    with pytest.raises(VideoTimeoutError):
        asyncio.run(service.wait_for_video("video-1"))

    assert video_client.status_calls == 3
