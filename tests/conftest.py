"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime

import pytest

from meal_coach.config import Settings
from meal_coach.containers import AppContainer
from meal_coach.domain.media import TryOnTask, VideoStatus
from meal_coach.domain.tracking import FoodTrackEntry, HealthDataRow
from meal_coach.services.food_track import FoodTrackRepository, FoodTrackService
from meal_coach.services.summary import HealthDataRepository, SummaryService
from meal_coach.services.try_on import TryOnClient, TryOnService
from meal_coach.services.uploads import FileStorage, UploadService
from meal_coach.services.video import AvatarVideoClient, ScriptClient, VideoService
from meal_coach.services.vision import VisionClient, VisionService


def nutrition_payload() -> dict[str, object]:
    return {
        "dish_name": "Grilled chicken bowl",
        "ingredients": [
            {"name": "grilled chicken", "estimated_amount": "150g", "allergen": False},
            {"name": "steamed broccoli", "estimated_amount": "80g", "allergen": False},
        ],
        "serving_info": None,
        "macronutrients": {
            "calories": 450,
            "protein": {"grams": 30, "daily_value_percentage": None},
            "carbohydrates": {"total": 50, "fiber": None, "sugars": None},
            "fats": {"total": 15, "saturated": None, "unsaturated": None},
        },
        "micronutrients": None,
    }


@dataclass
class FakeVisionClient(VisionClient):
    """Fake vision client returning a fixed payload."""

    payload: dict[str, object] = field(default_factory=nutrition_payload)
    prompts: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryFoodTrackRepository(FoodTrackRepository):
    """In-memory food log for tests."""

    entries: list[FoodTrackEntry] = field(default_factory=list)

    def insert_entry(
        self,
        user_email: str,
        dish: str,
        macro_nutrients: dict[str, object],
        health_score: float,
    ) -> FoodTrackEntry:
        entry = FoodTrackEntry(
            id=len(self.entries) + 1,
            created_at=datetime.now(tz=UTC),
            user_email=user_email,
            dish=dish,
            macro_nutrients=macro_nutrients,
            health_score=health_score,
        )
        self.entries.append(entry)
        return entry

    def list_entries(
        self, user_email: str, start: date, end: date
    ) -> list[FoodTrackEntry]:
        matches = [
            entry
            for entry in self.entries
            if entry.user_email == user_email
            and entry.created_at is not None
            and start <= entry.created_at.date() <= end
        ]
        return sorted(matches, key=lambda entry: entry.created_at, reverse=True)


@dataclass
class InMemoryHealthDataRepository(HealthDataRepository):
    """In-memory health data for tests."""

    rows: dict[str, list[HealthDataRow]] = field(default_factory=dict)

    def list_health_data(
        self, user_email: str, start: date, end: date
    ) -> list[HealthDataRow]:
        rows = [row for row in self.rows.get(user_email, []) if start <= row.day <= end]
        return sorted(rows, key=lambda row: row.day, reverse=True)


@dataclass
class FakeScriptClient(ScriptClient):
    """Fake script writer recording prompts."""

    script: str = "Keep going, future you is proud."
    instructions: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def write(self, instructions: str, prompt: str) -> str:
        self.instructions.append(instructions)
        if self.error is not None:
            raise self.error
        return self.script


@dataclass
class FakeVideoClient(AvatarVideoClient):
    """Fake avatar video client replaying queued statuses."""

    statuses: list[VideoStatus] = field(
        default_factory=lambda: [
            VideoStatus(status="processing"),
            VideoStatus(status="completed", video_url="https://cdn.example/v.mp4"),
        ]
    )
    content: bytes = b"mp4-bytes"
    generated: list[tuple[str, str]] = field(default_factory=list)
    status_calls: int = 0

    async def generate_video(self, talking_photo_id: str, script: str) -> str:
        self.generated.append((talking_photo_id, script))
        return "video-1"

    async def get_video_status(self, video_id: str) -> VideoStatus:
        index = min(self.status_calls, len(self.statuses) - 1)
        self.status_calls += 1
        return self.statuses[index]

    async def download(self, url: str) -> bytes:
        return self.content


@dataclass
class InMemoryFileStorage(FileStorage):
    """In-memory object storage for tests."""

    files: dict[tuple[str, str], tuple[bytes, str | None]] = field(
        default_factory=dict
    )

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        self.files[(bucket, path)] = (content, content_type)
        return f"https://storage.example/{bucket}/{path}"


@dataclass
class FakeTryOnClient(TryOnClient):
    """Fake try-on client replaying queued task states."""

    states: list[TryOnTask] = field(
        default_factory=lambda: [
            TryOnTask(task_id="task-1", status="processing"),
            TryOnTask(
                task_id="task-1",
                status="succeed",
                image_urls=["https://cdn.example/tryon.png"],
            ),
        ]
    )
    created: list[tuple[str, str, str | None]] = field(default_factory=list)
    queries: int = 0

    async def create_task(
        self,
        human_image_url: str,
        cloth_image_url: str,
        callback_url: str | None = None,
    ) -> TryOnTask:
        self.created.append((human_image_url, cloth_image_url, callback_url))
        return TryOnTask(task_id="task-1", status="submitted")

    async def query_task(self, task_id: str) -> TryOnTask:
        index = min(self.queries, len(self.states) - 1)
        self.queries += 1
        return self.states[index]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        openai_api_key="openai-key",
        heygen_api_key="heygen-key",
        kling_access_key="kling-access",
        kling_secret_key="kling-secret",
    )


@pytest.fixture
def food_repository() -> InMemoryFoodTrackRepository:
    return InMemoryFoodTrackRepository()


@pytest.fixture
def health_repository() -> InMemoryHealthDataRepository:
    return InMemoryHealthDataRepository()


@pytest.fixture
def storage() -> InMemoryFileStorage:
    return InMemoryFileStorage()


@pytest.fixture
def video_client() -> FakeVideoClient:
    return FakeVideoClient()


@pytest.fixture
def try_on_client() -> FakeTryOnClient:
    return FakeTryOnClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    food_repository: InMemoryFoodTrackRepository,
    health_repository: InMemoryHealthDataRepository,
    storage: InMemoryFileStorage,
    video_client: FakeVideoClient,
    try_on_client: FakeTryOnClient,
) -> AppContainer:
    vision_service = VisionService(
        client=FakeVisionClient(),
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
    )
    summary_service = SummaryService(
        food_repository=food_repository,
        health_repository=health_repository,
        today=lambda: date(2024, 3, 12),
    )
    video_service = VideoService(
        summary_service=summary_service,
        script_client=FakeScriptClient(),
        video_client=video_client,
        storage=storage,
        bucket=settings.video_bucket,
        poll_interval_seconds=0,
        max_attempts=3,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        food_track_service=FoodTrackService(
            vision_service=vision_service, repository=food_repository
        ),
        summary_service=summary_service,
        video_service=video_service,
        try_on_service=TryOnService(
            client=try_on_client, poll_interval_seconds=0, timeout_seconds=5
        ),
        upload_service=UploadService(storage=storage, bucket=settings.upload_bucket),
        close_resources=close_resources,
    )
