"""Kling virtual try-on API client."""

import time
from dataclasses import dataclass

import httpx
import jwt

from meal_coach.domain.media import TryOnTask
from meal_coach.services.try_on import TryOnClient, TryOnError

MODEL_NAME = "kolors-virtual-try-on-v1"
TOKEN_TTL_SECONDS = 1800
TOKEN_LEEWAY_SECONDS = 5


@dataclass
class HttpxKlingClient(TryOnClient):
    """HTTPX-backed Kling client with short-lived JWT auth."""

    access_key: str
    secret_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, access_key: str, secret_key: str, base_url: str
    ) -> "HttpxKlingClient":
        """Create a Kling client with a managed httpx session."""
        return cls(
            access_key=access_key,
            secret_key=secret_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def create_task(
        self,
        human_image_url: str,
        cloth_image_url: str,
        callback_url: str | None = None,
    ) -> TryOnTask:
        """Validate the input images and submit a try-on task."""
        await self.validate_image_url(human_image_url)
        await self.validate_image_url(cloth_image_url)
        payload: dict[str, object] = {
            "model_name": MODEL_NAME,
            "human_image": human_image_url,
            "cloth_image": cloth_image_url,
        }
        if callback_url:
            payload["callback_url"] = callback_url
        response = await self.http_client.post(
            f"{self.base_url}/v1/images/kolors-virtual-try-on",
            headers=self._headers(),
            json=payload,
            timeout=30,
        )
        response.raise_for_status()
        return _parse_task(response.json())

    async def query_task(self, task_id: str) -> TryOnTask:
        """Fetch the current state of a task."""
        response = await self.http_client.get(
            f"{self.base_url}/v1/images/kolors-virtual-try-on/{task_id}",
            headers=self._headers(),
            timeout=10,
        )
        response.raise_for_status()
        return _parse_task(response.json())

    async def validate_image_url(self, url: str) -> None:
        """Ensure a URL is reachable and serves an image."""
        try:
            response = await self.http_client.head(url, timeout=10)
        except httpx.HTTPError as exc:
            raise TryOnError(f"Error accessing URL {url}: {exc}") from exc
        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise TryOnError(
                f"URL does not point to an image (content-type: {content_type})"
            )
        if not response.is_success:
            raise TryOnError(f"URL is not accessible (status code: {response.status_code})")

    def generate_token(self) -> str:
        """Sign a short-lived HS256 token for the API."""
        now = int(time.time())
        claims = {
            "iss": self.access_key,
            "exp": now + TOKEN_TTL_SECONDS,
            "nbf": now - TOKEN_LEEWAY_SECONDS,
        }
        return jwt.encode(
            claims, self.secret_key, algorithm="HS256", headers={"typ": "JWT"}
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.generate_token()}",
        }


def _parse_task(payload: dict[str, object]) -> TryOnTask:
    """Convert an API envelope into a task, raising on API errors."""
    if payload.get("code") != 0:
        raise TryOnError(f"API Error: {payload.get('message', 'unknown error')}")
    data = payload.get("data") or {}
    result = data.get("task_result") or {}
    images = result.get("images") or []
    return TryOnTask(
        task_id=str(data.get("task_id", "")),
        status=str(data.get("task_status", "")),
        status_message=data.get("task_status_msg"),
        image_urls=[str(image["url"]) for image in images if image.get("url")],
    )
