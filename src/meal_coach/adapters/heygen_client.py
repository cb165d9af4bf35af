"""HeyGen talking-photo video client."""

from dataclasses import dataclass

import httpx

from meal_coach.domain.media import VideoStatus
from meal_coach.services.video import AvatarVideoClient, VideoGenerationError


@dataclass
class HttpxHeyGenClient(AvatarVideoClient):
    """HTTPX-backed HeyGen client."""

    api_key: str
    voice_id: str
    base_url: str
    http_client: httpx.AsyncClient
    emotion: str = "Serious"
    background_color: str = "#FAFAFA"

    @classmethod
    def create(cls, api_key: str, voice_id: str, base_url: str) -> "HttpxHeyGenClient":
        """Create a HeyGen client with a managed httpx session."""
        return cls(
            api_key=api_key,
            voice_id=voice_id,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def generate_video(self, talking_photo_id: str, script: str) -> str:
        """Submit a talking-photo render and return the video id."""
        payload = {
            "video_inputs": [
                {
                    "character": {
                        "type": "talking_photo",
                        "talking_photo_id": talking_photo_id,
                    },
                    "voice": {
                        "type": "text",
                        "input_text": script,
                        "voice_id": self.voice_id,
                        "emotion": self.emotion,
                    },
                    "background": {"type": "color", "value": self.background_color},
                }
            ]
        }
        response = await self.http_client.post(
            f"{self.base_url}/v2/video/generate",
            headers=self._headers(),
            json=payload,
            timeout=30,
        )
        response.raise_for_status()
        data = response.json().get("data") or {}
        video_id = data.get("video_id")
        if not video_id:
            raise VideoGenerationError("HeyGen did not return a video id")
        return str(video_id)

    async def get_video_status(self, video_id: str) -> VideoStatus:
        """Fetch the render status for a video."""
        response = await self.http_client.get(
            f"{self.base_url}/v1/video_status.get",
            headers=self._headers(),
            params={"video_id": video_id},
            timeout=15,
        )
        response.raise_for_status()
        data = response.json().get("data") or {}
        error = data.get("error")
        return VideoStatus(
            status=str(data.get("status", "unknown")),
            video_url=data.get("video_url"),
            error=str(error) if error else None,
        )

    async def download(self, url: str) -> bytes:
        """Download the rendered video bytes."""
        response = await self.http_client.get(url, timeout=120)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _headers(self) -> dict[str, str]:
        return {"X-Api-Key": self.api_key, "accept": "application/json"}
