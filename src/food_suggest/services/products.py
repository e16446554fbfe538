"""Remote product search and barcode lookup via Open Food Facts."""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from food_suggest.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_suggest.domain.suggestions import (
    SOURCE_REMOTE_DEFAULT,
    Product,
    RemoteSuggestion,
    ServingSize,
    SuggestionPrefill,
)
from food_suggest.services.servings import guess_unit, parse_serving_size
from food_suggest.services.similarity import is_likely_food_name, is_relevant_match

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

REMOTE_RELEVANCE_MAX_SCORE = 0.55
REMOTE_SEARCH_PAGE_SIZE = 8
REMOTE_RESULT_LIMIT = 5

_SERVING_FIELDS = (
    "serving_size",
    "serving_quantity",
    "quantity",
    "portion_display_name",
)
_MACRO_FIELDS = {"protein": "proteins", "carbs": "carbohydrates", "fats": "fat"}
_BASIS_SUFFIX = {"serving": "_serving", "100g": "_100g", "100ml": "_100ml"}

_logger = logging.getLogger(__name__)


def _number(value: object) -> float | None:
    """Parse a finite number from API data that may be a string."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(str(value).strip().replace(",", "."))
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def _round_tenth(value: float) -> float:
    return round(value * 10) / 10


def _derive_equivalent(
    calories_serving: float | None, calories_per_100: float | None
) -> float | None:
    """Estimate one serving's weight from serving and per-100 calorie figures."""
    if calories_serving is None or calories_per_100 is None or calories_per_100 <= 0:
        return None
    derived = calories_serving / calories_per_100 * 100
    if derived <= 0:
        return None
    return _round_tenth(derived)


def _select_calories(
    nutriments: dict[str, object], has_serving: bool
) -> tuple[float | None, str | None]:
    serving = _number(nutriments.get("energy-kcal_serving"))
    per_100g = _number(nutriments.get("energy-kcal_100g"))
    per_100ml = _number(nutriments.get("energy-kcal_100ml"))
    generic = _number(nutriments.get("energy-kcal"))
    if serving is not None and has_serving:
        return serving, "serving"
    if per_100g is not None:
        return per_100g, "100g"
    if per_100ml is not None:
        return per_100ml, "100ml"
    if serving is not None:
        return serving, "serving"
    if generic is not None:
        return generic, "generic"
    return None, None


def _select_macro(
    nutriments: dict[str, object], field_name: str, basis: str | None
) -> float | None:
    suffixes = ["_serving", "_100g"]
    preferred = _BASIS_SUFFIX.get(basis or "")
    if preferred:
        suffixes.insert(0, preferred)
    for suffix in suffixes:
        value = _number(nutriments.get(f"{field_name}{suffix}"))
        if value is not None:
            return value
    return None


def _fallback_serving(basis: str | None, nutrition_data_per: str) -> ServingSize:
    if basis == "100g":
        return ServingSize(amount=100, unit="g", grams_equivalent=100)
    if basis == "100ml":
        return ServingSize(amount=100, unit="ml", ml_equivalent=100)
    if basis == "serving" or "serving" in nutrition_data_per:
        return ServingSize(amount=1, unit="portion")
    return ServingSize(amount=1, unit=guess_unit(nutrition_data_per))


def parse_product(record: dict[str, object]) -> Product | None:
    """Normalize a raw product record, or return None without a calorie figure.

    Calories come from the serving figure when a serving size could be read,
    otherwise per 100 g, per 100 ml, an unresolved serving figure, and the
    unscoped figure, in that order.
    """
    if not record:
        return None
    raw_nutriments = record.get("nutriments")
    nutriments = raw_nutriments if isinstance(raw_nutriments, dict) else {}

    raw_serving = next(
        (record.get(name) for name in _SERVING_FIELDS if record.get(name)), ""
    )
    serving = parse_serving_size(raw_serving, fallback_unit=None)
    calories, basis = _select_calories(nutriments, serving is not None)
    if calories is None:
        return None
    protein = _select_macro(nutriments, _MACRO_FIELDS["protein"], basis)
    carbs = _select_macro(nutriments, _MACRO_FIELDS["carbs"], basis)
    fats = _select_macro(nutriments, _MACRO_FIELDS["fats"], basis)

    nutrition_data_per = str(record.get("nutrition_data_per") or "").strip().lower()
    if serving is None:
        serving = _fallback_serving(basis, nutrition_data_per)

    grams_equivalent = serving.grams_equivalent
    if grams_equivalent is None and serving.unit == "g":
        grams_equivalent = serving.amount
    ml_equivalent = serving.ml_equivalent
    if ml_equivalent is None and serving.unit == "ml":
        ml_equivalent = serving.amount

    calories_serving = _number(nutriments.get("energy-kcal_serving"))
    if not grams_equivalent or grams_equivalent <= 0:
        grams_equivalent = _derive_equivalent(
            calories_serving, _number(nutriments.get("energy-kcal_100g"))
        )
    if not ml_equivalent or ml_equivalent <= 0:
        ml_equivalent = _derive_equivalent(
            calories_serving, _number(nutriments.get("energy-kcal_100ml"))
        )

    name = (
        record.get("product_name")
        or record.get("generic_name")
        or record.get("brands")
        or "Unknown item"
    )
    return Product(
        name=str(name).strip(),
        barcode=str(record["code"]) if record.get("code") else None,
        calories=round(calories),
        protein=round(protein) if protein is not None else None,
        carbs=round(carbs) if carbs is not None else None,
        fats=round(fats) if fats is not None else None,
        weight_amount=serving.amount,
        weight_unit=serving.unit,
        weight_grams_equivalent=grams_equivalent,
        weight_ml_equivalent=ml_equivalent,
    )


def product_to_suggestion(
    product: Product, record: dict[str, object]
) -> RemoteSuggestion:
    """Project a parsed remote product into a suggestion."""
    provider = str(record.get("brands") or "").strip() or SOURCE_REMOTE_DEFAULT
    product_id = str(record.get("code") or record.get("_id") or product.name)
    serving_text = record.get("serving_size")
    return RemoteSuggestion(
        product_id=product_id,
        name=product.name,
        provider=provider,
        barcode=product.barcode,
        serving_label=str(serving_text) if serving_text else None,
        prefill=SuggestionPrefill(
            type="Liquid" if product.weight_unit == "ml" else "Food",
            calories=product.calories,
            protein=product.protein,
            carbs=product.carbs,
            fats=product.fats,
            weight_amount=product.weight_amount,
            weight_unit=product.weight_unit,
            barcode=product.barcode,
        ),
    )


@dataclass
class ProductService:
    """Searches and looks up products in the remote database."""

    client: OpenFoodFactsClient
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    page_size: int = REMOTE_SEARCH_PAGE_SIZE
    result_limit: int = REMOTE_RESULT_LIMIT
    relevance_max_score: float = REMOTE_RELEVANCE_MAX_SCORE

    async def search_remote(self, query: str) -> list[RemoteSuggestion]:
        """Search remote products relevant to a query."""
        if not query or not query.strip():
            return []
        payload = await self._call_with_retry(
            lambda: self.client.search_products(query, page_size=self.page_size),
            action="search",
        )
        raw_products = payload.get("products")
        suggestions: list[RemoteSuggestion] = []
        for record in raw_products if isinstance(raw_products, list) else []:
            if not isinstance(record, dict):
                continue
            product = parse_product(record)
            if product is None or not is_likely_food_name(product.name):
                continue
            if not is_relevant_match(product.name, query, self.relevance_max_score):
                continue
            suggestions.append(product_to_suggestion(product, record))
            if len(suggestions) >= self.result_limit:
                break
        if self.debug:
            _logger.info(
                "Remote search: query=%s results=%s", query, len(suggestions)
            )
        return suggestions

    async def lookup_by_barcode(self, barcode: str) -> Product | None:
        """Look up a product by barcode."""
        normalized = barcode.strip() if barcode else ""
        if not normalized:
            return None
        payload = await self._call_with_retry(
            lambda: self.client.get_product(normalized),
            action=f"barcode:{normalized}",
        )
        record = payload.get("product")
        if not isinstance(record, dict):
            return None
        if self.debug:
            _logger.info("Remote barcode lookup: barcode=%s", normalized)
        return parse_product(record)

    async def lookup_by_query(self, query: str) -> Product | None:
        """Look up the first remote product matching free text."""
        if not query or not query.strip():
            return None
        payload = await self._call_with_retry(
            lambda: self.client.search_products(query, page_size=1),
            action="lookup",
        )
        raw_products = payload.get("products")
        if not isinstance(raw_products, list) or not raw_products:
            return None
        first = raw_products[0]
        return parse_product(first) if isinstance(first, dict) else None

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                status_code = _status_code_from_exception(exc)
                if self.debug:
                    _logger.warning(
                        "Remote %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        status_code,
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
