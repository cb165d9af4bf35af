"""Nutrition models produced by the vision model."""

from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
)


def _none_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Degrade a malformed value to ``None`` instead of rejecting the model."""
    try:
        return handler(value)
    except ValidationError:
        return None


LenientText = Annotated[str | None, WrapValidator(_none_on_error)]
LenientFlag = Annotated[bool | None, WrapValidator(_none_on_error)]
LenientAmount = Annotated[float | None, WrapValidator(_none_on_error)]


class Ingredient(BaseModel):
    """Single ingredient detected in a dish."""

    name: LenientText = None
    estimated_amount: LenientText = None
    allergen: LenientFlag = None


class Protein(BaseModel):
    """Protein content."""

    grams: float | None = None
    daily_value_percentage: LenientAmount = None


class Carbohydrates(BaseModel):
    """Carbohydrate content in grams."""

    total: float | None = None
    fiber: LenientAmount = None
    sugars: LenientAmount = None


class Fats(BaseModel):
    """Fat content in grams."""

    total: float | None = None
    saturated: LenientAmount = None
    unsaturated: LenientAmount = None


class Macronutrients(BaseModel):
    """Macronutrient breakdown; ``None`` means the value was not reported."""

    calories: float | None = None
    protein: Protein | None = None
    carbohydrates: Carbohydrates | None = None
    fats: Fats | None = None


class Vitamins(BaseModel):
    """Vitamin amounts keyed by vitamin."""

    a: float | None = None
    c: float | None = None
    d: float | None = None
    b12: float | None = None


class Minerals(BaseModel):
    """Mineral amounts in milligrams."""

    calcium: float | None = None
    iron: float | None = None
    potassium: float | None = None
    sodium: float | None = None


class Micronutrients(BaseModel):
    """Vitamin and mineral content."""

    vitamins: Vitamins | None = None
    minerals: Minerals | None = None


class ServingInfo(BaseModel):
    """Serving size details."""

    serving_size: LenientText = None
    servings_per_container: LenientAmount = None


class NutritionAnalysis(BaseModel):
    """Structured nutrition breakdown of a photographed dish."""

    dish_name: str
    ingredients: list[Ingredient]
    macronutrients: Macronutrients
    micronutrients: Micronutrients | None = None
    serving_info: Annotated[ServingInfo | None, WrapValidator(_none_on_error)] = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def _drop_malformed_ingredients(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict | Ingredient)]
        return value
