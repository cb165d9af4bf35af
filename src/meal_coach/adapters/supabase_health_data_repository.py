"""Supabase repository for daily health data."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from meal_coach.domain.tracking import HealthDataRow
from meal_coach.services.summary import HealthDataRepository


@dataclass
class SupabaseHealthDataRepository(HealthDataRepository):
    """Supabase implementation reading Sahha health scores."""

    client: Client

    def list_health_data(
        self, user_email: str, start: date, end: date
    ) -> list[HealthDataRow]:
        """Return daily rows between start and end, newest first."""
        response = (
            self.client.table("sahha_data")
            .select("date, wellbeing, activity, sleep")
            .eq("user_email", user_email)
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("date", desc=True)
            .execute()
        )
        return [
            HealthDataRow(
                day=date.fromisoformat(str(row["date"])[:10]),
                wellbeing=float(row.get("wellbeing") or 0.0),
                activity=float(row.get("activity") or 0.0),
                sleep=float(row.get("sleep") or 0.0),
            )
            for row in response.data or []
        ]
