"""Health score result models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthScores:
    """Component and overall health scores for a meal."""

    macro_score: float
    vitamin_mineral_score: float
    calorie_score: float
    ingredients_score: float
    overall_score: float
    score_explanation: str

    def to_payload(self) -> dict[str, object]:
        """Return the scores keyed by their public wire names."""
        return {
            "macroScore": self.macro_score,
            "vitaminMineralScore": self.vitamin_mineral_score,
            "calorieScore": self.calorie_score,
            "ingredientsScore": self.ingredients_score,
            "overallScore": self.overall_score,
            "scoreExplanation": self.score_explanation,
        }
