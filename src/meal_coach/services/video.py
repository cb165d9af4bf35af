"""Motivational avatar video generation."""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from meal_coach.domain.media import VideoResult, VideoStatus
from meal_coach.domain.tracking import HealthSummary
from meal_coach.services.summary import SummaryService, select_talking_photo
from meal_coach.services.uploads import FileStorage

_logger = logging.getLogger(__name__)

SCRIPT_REQUEST = "Write the script I will read to my present self."


class VideoGenerationError(RuntimeError):
    """Raised when the avatar video render fails."""


class VideoTimeoutError(VideoGenerationError):
    """Raised when the avatar video is not ready in time."""


class ScriptClient(Protocol):
    """Interface for LLM script writing."""

    async def write(self, instructions: str, prompt: str) -> str:
        """Return generated text for the instructions."""


class AvatarVideoClient(Protocol):
    """Interface for talking-avatar video rendering."""

    async def generate_video(self, talking_photo_id: str, script: str) -> str:
        """Submit a render and return the video id."""

    async def get_video_status(self, video_id: str) -> VideoStatus:
        """Return the render status."""

    async def download(self, url: str) -> bytes:
        """Download a rendered video."""


def build_script_instructions(summary: HealthSummary) -> str:
    """Compose the future-self coaching prompt from a health summary."""
    meals = "\n".join(
        f"- {meal.dish} (Health Score: {meal.health_score:.0f}/100)"
        for meal in summary.recent_meals
    )
    return f"""You are the future self of the user, and you are talking to them \
based on their health data to motivate better habits. Focus on:
- Wellbeing score: {summary.wellbeing}/100
- Activity score: {summary.activity}/100
- Sleep score: {summary.sleep}/100
- Food score: {summary.food_score}/100

Recent meals:
{meals or "- No meals logged"}

Emphasize how their current choices are impacting their future self's health \
and happiness. If scores are low (below 70), express concern and urgency for \
change. If scores are medium (70-80), acknowledge progress but encourage \
improvement. If scores are high (above 80), express pride and encourage \
maintaining these excellent habits.

When discussing food choices:
- For healthy meals (score > 80): Express satisfaction and encourage \
maintaining these choices
- For moderate meals (score 60-80): Acknowledge the balance but suggest small \
improvements
- For less healthy meals (score < 60): Gently suggest healthier alternatives

Keep the response between 30-45 seconds when spoken."""


@dataclass
class VideoService:
    """Turns a health summary into a published avatar video."""

    summary_service: SummaryService
    script_client: ScriptClient
    video_client: AvatarVideoClient
    storage: FileStorage
    bucket: str
    poll_interval_seconds: float = 5.0
    max_attempts: int = 180

    async def generate(self, user_email: str, start: date, end: date) -> VideoResult:
        """Write a script, render it and upload the video."""
        summary = self.summary_service.build_summary(user_email, start, end)
        health_average = (summary.wellbeing + summary.activity + summary.sleep) / 3
        talking_photo_id = select_talking_photo(health_average)

        script = await self.script_client.write(
            build_script_instructions(summary), SCRIPT_REQUEST
        )
        video_id = await self.video_client.generate_video(talking_photo_id, script)
        video_url = await self.wait_for_video(video_id)
        content = await self.video_client.download(video_url)

        filename = f"video_{int(time.time() * 1000)}.mp4"
        public_url = self.storage.upload(self.bucket, filename, content, "video/mp4")
        return VideoResult(video_url=public_url, script=script)

    async def wait_for_video(self, video_id: str) -> str:
        """Poll the render until it completes and return its URL."""
        for attempt in range(1, self.max_attempts + 1):
            status = await self.video_client.get_video_status(video_id)
            _logger.info(
                "Video status: id=%s status=%s (attempt %s/%s)",
                video_id,
                status.status,
                attempt,
                self.max_attempts,
            )
            if status.status == "completed" and status.video_url:
                return status.video_url
            if status.status == "failed":
                raise VideoGenerationError(status.error or "Video generation failed")
            await asyncio.sleep(self.poll_interval_seconds)
        raise VideoTimeoutError(f"Video {video_id} was not ready in time")
