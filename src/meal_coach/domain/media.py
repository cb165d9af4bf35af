"""Models for generated videos and try-on images."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class VideoStatus:
    """Status of an avatar video render."""

    status: str
    video_url: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class VideoResult:
    """Published motivational video."""

    video_url: str
    script: str


@dataclass(frozen=True)
class TryOnTask:
    """Virtual try-on task state."""

    task_id: str
    status: str
    status_message: str | None = None
    image_urls: list[str] = field(default_factory=list)

    @property
    def image_url(self) -> str | None:
        """Return the first generated image, if any."""
        return self.image_urls[0] if self.image_urls else None
