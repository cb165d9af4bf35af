"""Supabase repository for analyzed meals."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from supabase import Client

from meal_coach.domain.tracking import FoodTrackEntry
from meal_coach.services.food_track import FoodTrackRepository

_TABLE = "food_track"


@dataclass
class SupabaseFoodTrackRepository(FoodTrackRepository):
    """Supabase implementation for the food log."""

    client: Client

    def insert_entry(
        self,
        user_email: str,
        dish: str,
        macro_nutrients: dict[str, object],
        health_score: float,
    ) -> FoodTrackEntry:
        """Insert a meal summary row and return it."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "user_email": user_email,
                    "dish": dish,
                    "macro_nutrients": macro_nutrients,
                    "health_score": health_score,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to insert food entry")
        return _parse_row(response.data[0])

    def list_entries(
        self, user_email: str, start: date, end: date
    ) -> list[FoodTrackEntry]:
        """Return entries created between start and end (inclusive days)."""
        response = (
            self.client.table(_TABLE)
            .select("id, created_at, user_email, dish, macro_nutrients, health_score")
            .eq("user_email", user_email)
            .gte("created_at", start.isoformat())
            .lt("created_at", (end + timedelta(days=1)).isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> FoodTrackEntry:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else None
    )
    row_id = row.get("id")
    macro_nutrients = row.get("macro_nutrients")
    return FoodTrackEntry(
        id=int(row_id) if row_id is not None else None,
        created_at=created_at,
        user_email=str(row.get("user_email", "")),
        dish=str(row.get("dish", "")),
        macro_nutrients=macro_nutrients if isinstance(macro_nutrients, dict) else {},
        health_score=float(row.get("health_score") or 0.0),
    )
