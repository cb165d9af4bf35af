"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI
from supabase import create_client

from meal_coach.adapters.heygen_client import HttpxHeyGenClient
from meal_coach.adapters.kling_client import HttpxKlingClient
from meal_coach.adapters.openai_script_client import OpenAIScriptClient
from meal_coach.adapters.openai_vision_client import OpenAIVisionClient
from meal_coach.adapters.supabase_food_track_repository import (
    SupabaseFoodTrackRepository,
)
from meal_coach.adapters.supabase_health_data_repository import (
    SupabaseHealthDataRepository,
)
from meal_coach.adapters.supabase_storage import SupabaseFileStorage
from meal_coach.config import Settings
from meal_coach.services.food_track import FoodTrackService
from meal_coach.services.summary import SummaryService
from meal_coach.services.try_on import TryOnService
from meal_coach.services.uploads import UploadService
from meal_coach.services.video import VideoService
from meal_coach.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_track_service: FoodTrackService
    summary_service: SummaryService
    video_service: VideoService
    try_on_service: TryOnService
    upload_service: UploadService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodTrackRepository(supabase_client)
    health_repository = SupabaseHealthDataRepository(supabase_client)
    storage = SupabaseFileStorage(supabase_client)

    openai_client = AsyncOpenAI(
        api_key=resolved_settings.openai_api_key,
        base_url=resolved_settings.openai_base_url,
    )
    vision_service = VisionService(
        client=OpenAIVisionClient.create(openai_client),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    food_track_service = FoodTrackService(
        vision_service=vision_service,
        repository=food_repository,
    )
    summary_service = SummaryService(
        food_repository=food_repository,
        health_repository=health_repository,
    )
    heygen_client = HttpxHeyGenClient.create(
        api_key=resolved_settings.heygen_api_key,
        voice_id=resolved_settings.heygen_voice_id,
        base_url=resolved_settings.heygen_base_url,
    )
    video_service = VideoService(
        summary_service=summary_service,
        script_client=OpenAIScriptClient(
            client=openai_client, model=resolved_settings.openai_script_model
        ),
        video_client=heygen_client,
        storage=storage,
        bucket=resolved_settings.video_bucket,
        poll_interval_seconds=resolved_settings.video_poll_interval_seconds,
        max_attempts=resolved_settings.video_poll_max_attempts,
    )
    kling_client = HttpxKlingClient.create(
        access_key=resolved_settings.kling_access_key,
        secret_key=resolved_settings.kling_secret_key,
        base_url=resolved_settings.kling_base_url,
    )
    try_on_service = TryOnService(
        client=kling_client,
        poll_interval_seconds=resolved_settings.try_on_poll_interval_seconds,
        timeout_seconds=resolved_settings.try_on_timeout_seconds,
    )
    upload_service = UploadService(
        storage=storage, bucket=resolved_settings.upload_bucket
    )

    async def close_resources() -> None:
        await heygen_client.close()
        await kling_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_track_service=food_track_service,
        summary_service=summary_service,
        video_service=video_service,
        try_on_service=try_on_service,
        upload_service=upload_service,
        close_resources=close_resources,
    )
