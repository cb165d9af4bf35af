"""Virtual garment try-on service."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Protocol

import httpx

from meal_coach.domain.media import TryOnTask

_logger = logging.getLogger(__name__)


class TryOnError(RuntimeError):
    """Raised when a try-on task cannot be created or fails."""


class TryOnTimeoutError(TryOnError):
    """Raised when a try-on task does not finish in time."""


class TryOnClient(Protocol):
    """Interface for a virtual try-on image API."""

    async def create_task(
        self,
        human_image_url: str,
        cloth_image_url: str,
        callback_url: str | None = None,
    ) -> TryOnTask:
        """Submit a try-on task."""

    async def query_task(self, task_id: str) -> TryOnTask:
        """Return the current task state."""


@dataclass
class TryOnService:
    """Creates try-on tasks and waits for their results."""

    client: TryOnClient
    poll_interval_seconds: float = 3.0
    timeout_seconds: float = 120.0

    async def try_on(
        self,
        human_image_url: str,
        cloth_image_url: str,
        callback_url: str | None = None,
    ) -> TryOnTask:
        """Create a task and wait until the generated image is ready."""
        task = await self.client.create_task(
            human_image_url, cloth_image_url, callback_url
        )
        _logger.info("Try-on task created: id=%s", task.task_id)
        return await self.wait_for_completion(task.task_id)

    async def get_status(self, task_id: str) -> TryOnTask:
        """Return the current state of a task."""
        return await self.client.query_task(task_id)

    async def wait_for_completion(self, task_id: str) -> TryOnTask:
        """Poll a task until it succeeds, fails or times out."""
        deadline = time.monotonic() + self.timeout_seconds
        while time.monotonic() < deadline:
            try:
                task = await self.client.query_task(task_id)
            except httpx.TimeoutException:
                _logger.warning("Try-on status query timed out: id=%s", task_id)
                continue
            if task.status == "succeed":
                return task
            if task.status == "failed":
                raise TryOnError(f"Task failed: {task.status_message or 'unknown error'}")
            await asyncio.sleep(self.poll_interval_seconds)
        raise TryOnTimeoutError(
            f"Task {task_id} timed out after {self.timeout_seconds:.0f} seconds"
        )
