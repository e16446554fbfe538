"""Serving size parsing and unit normalization."""

import re

from food_suggest.domain.suggestions import ServingSize

_NUMBER = r"(\d[\d.,]*)"
_GRAM_PATTERN = re.compile(_NUMBER + r"\s*(?:g|gr|grams?)\b")
_KILOGRAM_PATTERN = re.compile(_NUMBER + r"\s*(?:kg|kilograms?)\b")
_MILLILITRE_PATTERN = re.compile(_NUMBER + r"\s*(?:ml|millilit(?:er|re)s?)\b")
_LITRE_PATTERN = re.compile(_NUMBER + r"\s*(?:l|lit(?:er|re)s?)\b")
_PORTION_PATTERN = re.compile(_NUMBER + r"?\s*(serving|portion)")


def parse_number(raw: str | None) -> float | None:
    """Parse a number that may use a decimal comma."""
    if not raw:
        return None
    cleaned = raw.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        head = re.match(r"\d+(\.\d+)?", cleaned)
        return float(head.group(0)) if head else None


def _round_tenth(value: float | None) -> float | None:
    if value is None:
        return None
    return round(value * 10) / 10


def _grams(text: str) -> float | None:
    match = _GRAM_PATTERN.search(text)
    if match:
        return _round_tenth(parse_number(match.group(1)))
    match = _KILOGRAM_PATTERN.search(text)
    if match:
        value = parse_number(match.group(1))
        return _round_tenth(value * 1000) if value is not None else None
    return None


def _millilitres(text: str) -> float | None:
    match = _MILLILITRE_PATTERN.search(text)
    if match:
        return _round_tenth(parse_number(match.group(1)))
    match = _LITRE_PATTERN.search(text)
    if match:
        value = parse_number(match.group(1))
        return _round_tenth(value * 1000) if value is not None else None
    return None


def parse_serving_size(
    value: object, fallback_unit: str | None = "g"
) -> ServingSize | None:
    """Parse free-text serving descriptions such as "100g" or "1 serving (30 g)"."""
    if value is None or value == "":
        return None
    normalized = str(value).strip().lower()
    if not normalized:
        return None

    grams = _grams(normalized)
    millilitres = _millilitres(normalized)

    portion = _PORTION_PATTERN.search(normalized)
    if portion:
        amount = parse_number(portion.group(1)) if portion.group(1) else 1.0
        if amount is None or amount <= 0:
            amount = 1.0
        return ServingSize(
            amount=amount,
            unit="portion",
            grams_equivalent=grams,
            ml_equivalent=millilitres,
        )

    if grams is not None and grams > 0:
        return ServingSize(amount=grams, unit="g", grams_equivalent=grams)

    if millilitres is not None and millilitres > 0:
        return ServingSize(amount=millilitres, unit="ml", ml_equivalent=millilitres)

    if "portion" in normalized or "serving" in normalized:
        return ServingSize(
            amount=1.0,
            unit="portion",
            grams_equivalent=grams,
            ml_equivalent=millilitres,
        )

    if fallback_unit:
        return ServingSize(amount=1.0, unit=fallback_unit)
    return None


def guess_unit(nutrition_data_per: object) -> str:
    """Guess the macro basis unit from a "nutrition data per" label."""
    if "ml" in str(nutrition_data_per or "").strip().lower():
        return "ml"
    return "g"


def format_weight_label(amount: object, unit: str | None) -> str | None:
    """Format a weight for display, e.g. "170 g"."""
    if not unit or amount is None or isinstance(amount, bool):
        return None
    try:
        numeric = float(amount)
    except (TypeError, ValueError):
        return None
    if numeric <= 0:
        return None
    rounded = round(numeric * 10) / 10
    text = str(int(rounded)) if rounded.is_integer() else str(rounded)
    return f"{text} {unit}"
