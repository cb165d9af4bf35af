"""Request and response payloads for the HTTP API."""

from dataclasses import asdict
from datetime import date

from pydantic import BaseModel, HttpUrl

from meal_coach.domain.tracking import HealthSummary, MealAnalysis, MealScore


class VideoScriptRequest(BaseModel):
    """Period and user for a motivational video."""

    start_date: date
    end_date: date
    user_email: str


class TryOnRequest(BaseModel):
    """Images for a virtual try-on."""

    human_image_url: HttpUrl
    cloth_image_url: HttpUrl
    callback_url: HttpUrl | None = None


def analysis_payload(analysis: MealAnalysis) -> dict[str, object]:
    """Render a meal analysis as the analyze endpoint response body."""
    nutrition = analysis.nutrition
    scores = analysis.scores
    return {
        "message": "Analysis completed successfully",
        "nutritionData": {
            "dish_name": nutrition.dish_name,
            "ingredients": [item.model_dump() for item in nutrition.ingredients],
            "serving_info": (
                nutrition.serving_info.model_dump() if nutrition.serving_info else None
            ),
            "macronutrients": nutrition.macronutrients.model_dump(),
            "micronutrients": (
                nutrition.micronutrients.model_dump()
                if nutrition.micronutrients
                else {}
            ),
            "health_metrics": {
                "health_score": scores.overall_score,
                "detailed_reasoning": scores.score_explanation,
                "calculated_health_scores": {
                    "overall_score": scores.overall_score,
                    "component_scores": {
                        "macronutrient_score": scores.macro_score,
                        "vitamin_mineral_score": scores.vitamin_mineral_score,
                        "calorie_score": scores.calorie_score,
                        "ingredient_score": scores.ingredients_score,
                    },
                    "score_explanation": scores.score_explanation,
                },
            },
        },
        "healthScores": scores.to_payload(),
        "savedEntry": asdict(analysis.entry),
    }


def summary_payload(summary: HealthSummary) -> dict[str, object]:
    """Render a health summary as the food-data response body."""
    return {
        "date": summary.day.isoformat(),
        "combined_health_score": summary.combined_health_score,
        "wellbeing": summary.wellbeing,
        "activity": summary.activity,
        "sleep": summary.sleep,
        "food_score": summary.food_score,
        "recent_meals": [_meal_payload(meal) for meal in summary.recent_meals],
        "trends": {
            "wellbeing_trend": summary.trends.wellbeing,
            "activity_trend": summary.trends.activity,
            "sleep_trend": summary.trends.sleep,
        },
        "stats": {
            "total_meals": summary.total_meals,
            "days_tracked": summary.days_tracked,
            "best_meal": _meal_payload(summary.best_meal) if summary.best_meal else None,
        },
        "talking_photo_id": summary.talking_photo_id,
    }


def _meal_payload(meal: MealScore) -> dict[str, object]:
    return {"dish": meal.dish, "health_score": meal.health_score}
