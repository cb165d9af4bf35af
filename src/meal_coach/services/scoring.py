"""Deterministic meal health scoring."""

import logging
from collections.abc import Callable, Mapping, Sequence

from pydantic import ValidationError

from meal_coach.domain.nutrition import Ingredient, Macronutrients, Micronutrients
from meal_coach.domain.scoring import HealthScores

_logger = logging.getLogger(__name__)

BASE_WEIGHTS: dict[str, float] = {
    "macros": 0.35,
    "vitamins_minerals": 0.25,
    "calories": 0.20,
    "ingredients": 0.20,
}

_LABELS = {
    "macros": "Macronutrients",
    "vitamins_minerals": "Vitamins/Minerals",
    "calories": "Calories",
    "ingredients": "Ingredients",
}

PROTEIN_BAND = (10.0, 35.0)
CARB_BAND = (45.0, 65.0)
FAT_BAND = (20.0, 35.0)

CALORIE_BANDS: tuple[tuple[float, float, str], ...] = (
    (200, 90.0, "Low calorie meal"),
    (500, 100.0, "Moderate calorie meal"),
    (800, 80.0, "Moderately high calorie meal"),
)

VITAMIN_DAILY_VALUES: dict[str, float] = {
    "a": 900,
    "c": 90,
    "d": 20,
    "b12": 2.4,
}
MINERAL_DAILY_VALUES: dict[str, float] = {
    "calcium": 1000,
    "iron": 18,
    "potassium": 3500,
    "sodium": 2300,
}

BENEFICIAL_KEYWORDS = ("fresh", "whole", "organic", "lean", "raw", "natural")
PROBLEMATIC_KEYWORDS = ("processed", "artificial", "fried", "refined", "sweetened")

_IN_BAND_SCORE = 100.0
_OUT_OF_BAND_SCORE = 50.0
_GOOD_SOURCE_THRESHOLD = 50.0
_BASE_INGREDIENT_SCORE = 70
_KEYWORD_POINTS = 10

_NO_CALORIES = "No calorie information available"
_NO_MICRONUTRIENTS = "No vitamin/mineral data available"

SubScore = tuple[float, str]

MacroInput = Macronutrients | Mapping[str, object] | None
IngredientInput = Sequence[Ingredient | Mapping[str, object]] | None
MicronutrientInput = Micronutrients | Mapping[str, object] | None


def calculate_health_scores(
    macros: MacroInput,
    ingredients: IngredientInput,
    micronutrients: MicronutrientInput = None,
) -> HealthScores:
    """Score a meal from its nutrition facts.

    Each component score is computed independently and any failure inside a
    component collapses to a zero score with a diagnostic explanation, so this
    function always returns a complete result. Components scoring exactly zero
    are treated as missing data: their weight is dropped and the remaining
    weights are rescaled to sum to one.
    """
    scores = {
        "macros": _guarded("macro", lambda: macro_score(_as_macros(macros))),
        "vitamins_minerals": _guarded(
            "vitamin/mineral",
            lambda: vitamin_mineral_score(_as_micronutrients(micronutrients)),
        ),
        "calories": _guarded("calorie", lambda: calorie_score(_as_macros(macros))),
        "ingredients": _guarded(
            "ingredients", lambda: ingredients_score(_as_ingredients(ingredients))
        ),
    }

    weights = _effective_weights({key: value for key, (value, _) in scores.items()})
    overall = _clamp(sum(scores[key][0] * weights[key] for key in scores))
    explanation = "\n".join(
        f"• {_LABELS[key]} ({_display(value)}/100): {text}"
        for key, (value, text) in scores.items()
        if value > 0
    )
    return HealthScores(
        macro_score=scores["macros"][0],
        vitamin_mineral_score=scores["vitamins_minerals"][0],
        calorie_score=scores["calories"][0],
        ingredients_score=scores["ingredients"][0],
        overall_score=overall,
        score_explanation=explanation,
    )


def macro_score(macros: Macronutrients | None) -> SubScore:
    """Score how close macro proportions are to dietary guideline bands."""
    if macros is None:
        return 0.0, _NO_CALORIES
    protein_g = macros.protein.grams if macros.protein else None
    carbs_g = macros.carbohydrates.total if macros.carbohydrates else None
    fat_g = macros.fats.total if macros.fats else None

    protein_cals = (protein_g or 0.0) * 4
    carb_cals = (carbs_g or 0.0) * 4
    fat_cals = (fat_g or 0.0) * 9
    total_cals = macros.calories or (protein_cals + carb_cals + fat_cals)
    if total_cals == 0:
        return 0.0, _NO_CALORIES

    scores: list[float] = []
    parts: list[str] = []
    for label, grams, cals, band in (
        ("Protein", protein_g, protein_cals, PROTEIN_BAND),
        ("Carbs", carbs_g, carb_cals, CARB_BAND),
        ("Fats", fat_g, fat_cals, FAT_BAND),
    ):
        if grams is None:
            continue
        pct = cals / total_cals * 100
        low, high = band
        scores.append(_IN_BAND_SCORE if low <= pct <= high else _OUT_OF_BAND_SCORE)
        parts.append(f"{label}: {pct:.1f}%")

    if not scores:
        return 0.0, "No macronutrient data available"
    return _clamp(sum(scores) / len(scores)), (
        f"Macro distribution - {', '.join(parts)}"
    )


def vitamin_mineral_score(micronutrients: Micronutrients | None) -> SubScore:
    """Score micronutrients against reference daily values."""
    if micronutrients is None:
        return 0.0, _NO_MICRONUTRIENTS

    scores: list[float] = []
    good_sources: list[str] = []
    if micronutrients.vitamins:
        for key, daily_value in VITAMIN_DAILY_VALUES.items():
            amount = getattr(micronutrients.vitamins, key)
            if amount is None or amount <= 0:
                continue
            score = min(100.0, amount / daily_value * 100)
            scores.append(score)
            if score >= _GOOD_SOURCE_THRESHOLD:
                good_sources.append(f"Vitamin {key.upper()}")
    if micronutrients.minerals:
        for key, daily_value in MINERAL_DAILY_VALUES.items():
            amount = getattr(micronutrients.minerals, key)
            if amount is None or amount <= 0:
                continue
            if key == "sodium":
                score = max(0.0, 100 - amount / daily_value * 100)
            else:
                score = min(100.0, amount / daily_value * 100)
            scores.append(score)
            if score >= _GOOD_SOURCE_THRESHOLD:
                good_sources.append(key.capitalize())

    if not scores:
        return 0.0, _NO_MICRONUTRIENTS
    explanation = (
        f"Good sources of: {', '.join(good_sources)}"
        if good_sources
        else "Limited vitamin/mineral content"
    )
    return _clamp(sum(scores) / len(scores)), explanation


def calorie_score(macros: Macronutrients | None) -> SubScore:
    """Score the calorie level of a meal."""
    calories = macros.calories if macros else None
    if calories is None or calories <= 0:
        return 0.0, _NO_CALORIES
    for limit, score, explanation in CALORIE_BANDS:
        if calories <= limit:
            return score, explanation
    excess = calories - CALORIE_BANDS[-1][0]
    return max(0.0, 100 - excess / 100), "High calorie meal"


def ingredients_score(ingredients: list[Ingredient]) -> SubScore:
    """Score ingredient descriptions using keyword heuristics."""
    named = [item.name for item in ingredients if item.name and item.name.strip()]
    if not named:
        return 0.0, "No ingredient information available"

    total = 0
    good: list[str] = []
    bad: list[str] = []
    for name in named:
        lowered = name.lower()
        good_points = _KEYWORD_POINTS * sum(kw in lowered for kw in BENEFICIAL_KEYWORDS)
        bad_points = _KEYWORD_POINTS * sum(kw in lowered for kw in PROBLEMATIC_KEYWORDS)
        total += _BASE_INGREDIENT_SCORE + good_points - bad_points
        if good_points > bad_points:
            good.append(name)
        elif bad_points > 0:
            bad.append(name)

    score = _clamp(min(100.0, total / len(named)))
    if not good:
        return score, "Limited ingredient quality information"
    explanation = f"Healthy ingredients: {', '.join(good[:3])}"
    if bad:
        explanation += f". Consider: {', '.join(bad[:2])}"
    return score, explanation


def _effective_weights(scores: dict[str, float]) -> dict[str, float]:
    """Drop weights of empty components and rescale the rest."""
    weights = {
        key: weight if scores[key] > 0 else 0.0 for key, weight in BASE_WEIGHTS.items()
    }
    total = sum(weights.values())
    if total == 0:
        return weights
    return {key: weight / total for key, weight in weights.items()}


def _guarded(label: str, func: Callable[[], SubScore]) -> SubScore:
    """Run a component scorer, turning any failure into a zero score."""
    try:
        return func()
    except Exception:
        _logger.warning("Failed to calculate %s score", label, exc_info=True)
        return 0.0, f"Error calculating {label} score"


def _as_macros(value: MacroInput) -> Macronutrients | None:
    if value is None or isinstance(value, Macronutrients):
        return value
    return Macronutrients.model_validate(value)


def _as_micronutrients(value: MicronutrientInput) -> Micronutrients | None:
    if value is None or isinstance(value, Micronutrients):
        return value
    return Micronutrients.model_validate(value)


def _as_ingredients(value: IngredientInput) -> list[Ingredient]:
    """Validate ingredients one by one, skipping malformed entries."""
    parsed: list[Ingredient] = []
    for item in value or []:
        if isinstance(item, Ingredient):
            parsed.append(item)
            continue
        try:
            parsed.append(Ingredient.model_validate(item))
        except ValidationError:
            _logger.debug("Skipping malformed ingredient: %r", item)
    return parsed


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _display(value: float) -> int:
    """Round a non-negative score half up for display."""
    return int(value + 0.5)
