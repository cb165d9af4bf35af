"""Supabase Storage adapter."""

from dataclasses import dataclass

from supabase import Client

from meal_coach.services.uploads import FileStorage


@dataclass
class SupabaseFileStorage(FileStorage):
    """Stores files in public Supabase Storage buckets."""

    client: Client
    cache_control: str = "3600"

    def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """Upload bytes and return the public URL."""
        file_options = {"cache-control": self.cache_control, "upsert": "false"}
        if content_type:
            file_options["content-type"] = content_type
        storage = self.client.storage.from_(bucket)
        storage.upload(path, content, file_options)
        return storage.get_public_url(path)
