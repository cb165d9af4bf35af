"""Nutrition extraction service using vision LLMs."""

import base64
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from meal_coach.domain.nutrition import NutritionAnalysis

NUTRITION_PROMPT = (
    "Analyze this food image and provide detailed nutritional information: "
    "identify the dish name, list the main ingredients with estimated amounts "
    "and whether each is a common allergen, calculate calories, estimate "
    "protein, carbohydrates and fats, and include vitamin and mineral content "
    "if it can be estimated. Be specific with measurements and quantities. "
    "Use null for any value you cannot estimate."
)


def _nullable(type_name: str) -> dict[str, object]:
    return {"type": [type_name, "null"]}


def _strict_object(properties: dict[str, object]) -> dict[str, object]:
    """Build a structured-output object schema requiring every property."""
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def _nullable_object(properties: dict[str, object]) -> dict[str, object]:
    return {"anyOf": [_strict_object(properties), {"type": "null"}]}


NUTRITION_SCHEMA: dict[str, object] = _strict_object(
    {
        "dish_name": {"type": "string"},
        "ingredients": {
            "type": "array",
            "items": _strict_object(
                {
                    "name": {"type": "string"},
                    "estimated_amount": _nullable("string"),
                    "allergen": _nullable("boolean"),
                }
            ),
        },
        "serving_info": _nullable_object(
            {
                "serving_size": _nullable("string"),
                "servings_per_container": _nullable("number"),
            }
        ),
        "macronutrients": _strict_object(
            {
                "calories": _nullable("number"),
                "protein": _nullable_object(
                    {
                        "grams": _nullable("number"),
                        "daily_value_percentage": _nullable("number"),
                    }
                ),
                "carbohydrates": _nullable_object(
                    {
                        "total": _nullable("number"),
                        "fiber": _nullable("number"),
                        "sugars": _nullable("number"),
                    }
                ),
                "fats": _nullable_object(
                    {
                        "total": _nullable("number"),
                        "saturated": _nullable("number"),
                        "unsaturated": _nullable("number"),
                    }
                ),
            }
        ),
        "micronutrients": _nullable_object(
            {
                "vitamins": _nullable_object(
                    {key: _nullable("number") for key in ("a", "c", "d", "b12")}
                ),
                "minerals": _nullable_object(
                    {
                        key: _nullable("number")
                        for key in ("calcium", "iron", "potassium", "sodium")
                    }
                ),
            }
        ),
    }
)


class VisionExtractionError(RuntimeError):
    """Raised when the vision model returns unusable nutrition data."""


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class VisionService:
    """Service that prepares the nutrition prompt and validates results."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def extract(self, image_bytes: bytes) -> NutritionAnalysis:
        """Extract a nutrition breakdown from a meal photo."""
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            image_data_url=_to_data_url(image_bytes),
            schema=NUTRITION_SCHEMA,
            prompt=NUTRITION_PROMPT,
        )
        try:
            return NutritionAnalysis.model_validate(raw)
        except ValidationError as exc:
            raise VisionExtractionError("Incomplete nutrition data from model") from exc


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
