"""Tests for the virtual try-on service."""

import asyncio

import pytest

from meal_coach.domain.media import TryOnTask
from meal_coach.services.try_on import TryOnError, TryOnService, TryOnTimeoutError
from tests.conftest import FakeTryOnClient

HUMAN = "https://images.example/person.jpg"
CLOTH = "https://images.example/shirt.jpg"


def test_try_on_waits_for_generated_image(try_on_client: FakeTryOnClient) -> None:
    service = TryOnService(client=try_on_client, poll_interval_seconds=0)

    task = asyncio.run(service.try_on(HUMAN, CLOTH, "https://hooks.example/done"))

    assert task.status == "succeed"
    assert task.image_url == "https://cdn.example/tryon.png"
    assert try_on_client.created == [(HUMAN, CLOTH, "https://hooks.example/done")]
    assert try_on_client.queries == 2


def test_try_on_raises_when_task_fails() -> None:
    client = FakeTryOnClient(
        states=[TryOnTask(task_id="task-1", status="failed", status_message="no face")]
    )
    service = TryOnService(client=client, poll_interval_seconds=0)

    with pytest.raises(TryOnError, match="Task failed: no face"):
        asyncio.run(service.try_on(HUMAN, CLOTH))


def test_wait_for_completion_times_out(try_on_client: FakeTryOnClient) -> None:
    service = TryOnService(
        client=try_on_client, poll_interval_seconds=0, timeout_seconds=0
    )

    with pytest.raises(TryOnTimeoutError):
        asyncio.run(service.wait_for_completion("task-1"))

    assert try_on_client.queries == 0


def test_get_status_returns_current_state(try_on_client: FakeTryOnClient) -> None:
    service = TryOnService(client=try_on_client)

    task = asyncio.run(service.get_status("task-1"))

    assert task.status == "processing"
    assert task.image_url is None
