"""Quick Add catalog of common foods and drinks."""

from dataclasses import dataclass

from food_suggest.domain.suggestions import CatalogSuggestion, SuggestionPrefill
from food_suggest.services.similarity import NO_MATCH_SCORE, has_token_overlap, score

CATALOG_LIMIT = 6
KEYWORD_BONUS = 0.1
KEYWORD_MAX_SCORE = 0.85
NAME_MAX_SCORE = 0.6


@dataclass(frozen=True)
class CatalogItem:
    """A curated item with aliases used for matching."""

    id: str
    name: str
    keywords: tuple[str, ...]
    serving: str
    prefill: SuggestionPrefill


def _item(  # noqa: PLR0913
    item_id: str,
    name: str,
    keywords: tuple[str, ...],
    serving: str,
    item_type: str,
    macros: tuple[float, float, float, float],
    weight: tuple[float, str],
    barcode: str | None = None,
) -> CatalogItem:
    calories, protein, carbs, fats = macros
    weight_amount, weight_unit = weight
    return CatalogItem(
        id=item_id,
        name=name,
        keywords=keywords,
        serving=serving,
        prefill=SuggestionPrefill(
            type=item_type,
            calories=calories,
            protein=protein,
            carbs=carbs,
            fats=fats,
            weight_amount=weight_amount,
            weight_unit=weight_unit,
            barcode=barcode,
        ),
    )


QUICK_ADD_ITEMS: tuple[CatalogItem, ...] = (
    _item(
        "quick-water",
        "Water (500 ml)",
        ("water", "h2o", "plain water"),
        "500 ml",
        "Liquid",
        (0, 0, 0, 0),
        (500, "ml"),
    ),
    _item(
        "quick-diet-coke",
        "Diet Coke (can)",
        ("diet coke", "coke zero", "coca cola zero", "zero coke"),
        "355 ml can",
        "Liquid",
        (0, 0, 0, 0),
        (355, "ml"),
        barcode="049000050103",
    ),
    _item(
        "quick-black-coffee",
        "Black Coffee (12 oz)",
        ("coffee", "black coffee", "americano"),
        "355 ml",
        "Liquid",
        (5, 0, 1, 0),
        (355, "ml"),
    ),
    _item(
        "quick-eggs",
        "Scrambled Eggs (2 large)",
        ("egg", "eggs", "scrambled eggs"),
        "2 large eggs",
        "Food",
        (140, 12, 1, 10),
        (100, "g"),
    ),
    _item(
        "quick-wheat-bread",
        "Whole Wheat Bread (2 slices)",
        ("bread", "toast", "whole wheat"),
        "2 slices",
        "Food",
        (120, 5, 22, 2),
        (60, "g"),
    ),
    _item(
        "quick-brown-rice",
        "Brown Rice (1 cup cooked)",
        ("rice", "brown rice"),
        "1 cup cooked",
        "Food",
        (215, 5, 45, 2),
        (185, "g"),
    ),
    _item(
        "quick-pasta",
        "Pasta (1 cup cooked)",
        ("pasta", "noodles"),
        "1 cup cooked",
        "Food",
        (220, 7, 42, 1),
        (140, "g"),
    ),
    _item(
        "quick-chicken-breast",
        "Chicken Breast (grilled)",
        ("chicken", "chicken breast", "grilled chicken"),
        "150 g",
        "Food",
        (230, 43, 0, 5),
        (150, "g"),
    ),
    _item(
        "quick-greek-yogurt",
        "Plain Greek Yogurt",
        ("yogurt", "greek yogurt"),
        "170 g cup",
        "Food",
        (100, 17, 6, 0),
        (170, "g"),
    ),
    _item(
        "quick-apple",
        "Apple (medium)",
        ("apple",),
        "1 medium apple",
        "Food",
        (95, 0, 25, 0),
        (180, "g"),
    ),
    _item(
        "quick-banana",
        "Banana (medium)",
        ("banana",),
        "1 medium banana",
        "Food",
        (105, 1, 27, 0),
        (120, "g"),
    ),
    _item(
        "quick-peanut-butter",
        "Peanut Butter (2 tbsp)",
        ("peanut butter", "pb"),
        "2 tbsp",
        "Food",
        (190, 8, 7, 16),
        (32, "g"),
    ),
    _item(
        "quick-almonds",
        "Almonds (handful)",
        ("almonds", "nuts"),
        "28 g",
        "Food",
        (170, 6, 6, 15),
        (28, "g"),
    ),
    _item(
        "quick-oatmeal",
        "Oatmeal (cooked)",
        ("oatmeal", "oats", "porridge"),
        "1 cup cooked",
        "Food",
        (150, 6, 27, 3),
        (240, "g"),
    ),
    _item(
        "quick-sweet-potato",
        "Sweet Potato (medium)",
        ("sweet potato", "yam"),
        "1 medium (130 g)",
        "Food",
        (112, 2, 26, 0),
        (130, "g"),
    ),
    _item(
        "quick-broccoli",
        "Broccoli (steamed cup)",
        ("broccoli",),
        "1 cup steamed",
        "Food",
        (55, 4, 11, 1),
        (156, "g"),
    ),
    _item(
        "quick-cottage-cheese",
        "Cottage Cheese (1/2 cup)",
        ("cottage cheese", "curds"),
        "1/2 cup",
        "Food",
        (110, 13, 5, 5),
        (113, "g"),
    ),
    _item(
        "quick-avocado",
        "Avocado (half)",
        ("avocado", "guacamole"),
        "1/2 avocado",
        "Food",
        (120, 1, 6, 11),
        (75, "g"),
    ),
    _item(
        "quick-spinach",
        "Spinach (raw cup)",
        ("spinach", "leafy greens"),
        "1 cup raw",
        "Food",
        (7, 1, 1, 0),
        (30, "g"),
    ),
    _item(
        "quick-carrots",
        "Carrots (baby handful)",
        ("carrot", "carrots"),
        "85 g",
        "Food",
        (35, 1, 8, 0),
        (85, "g"),
    ),
    _item(
        "quick-hummus",
        "Hummus (3 tbsp)",
        ("hummus",),
        "3 tbsp",
        "Food",
        (105, 5, 9, 6),
        (45, "g"),
    ),
    _item(
        "quick-protein-shake",
        "Protein Shake (1 scoop)",
        ("protein shake", "whey shake"),
        "30 g powder",
        "Liquid",
        (120, 24, 3, 2),
        (350, "ml"),
    ),
    _item(
        "quick-cottage-egg",
        "Egg Whites (1 cup)",
        ("egg white", "egg whites"),
        "1 cup liquid whites",
        "Food",
        (125, 26, 2, 0),
        (243, "g"),
    ),
    _item(
        "quick-salmon",
        "Salmon Fillet (baked)",
        ("salmon", "fish"),
        "120 g",
        "Food",
        (235, 25, 0, 14),
        (120, "g"),
    ),
    _item(
        "quick-ground-turkey",
        "Ground Turkey (lean, 4 oz)",
        ("turkey", "ground turkey"),
        "4 oz cooked",
        "Food",
        (170, 23, 0, 8),
        (113, "g"),
    ),
    _item(
        "quick-black-beans",
        "Black Beans (1/2 cup)",
        ("beans", "black beans"),
        "1/2 cup cooked",
        "Food",
        (110, 7, 20, 0),
        (85, "g"),
    ),
    _item(
        "quick-lentils",
        "Lentils (1 cup cooked)",
        ("lentils",),
        "1 cup cooked",
        "Food",
        (230, 18, 40, 1),
        (198, "g"),
    ),
    _item(
        "quick-mixed-berries",
        "Mixed Berries (cup)",
        ("berries", "fruit mix"),
        "1 cup",
        "Food",
        (70, 1, 17, 0),
        (140, "g"),
    ),
    _item(
        "quick-canned-tuna",
        "Canned Tuna (in water)",
        ("tuna", "canned tuna"),
        "1 can drained",
        "Food",
        (120, 26, 0, 1),
        (142, "g"),
    ),
    _item(
        "quick-granola",
        "Granola (1/2 cup)",
        ("granola",),
        "1/2 cup",
        "Food",
        (200, 5, 32, 6),
        (60, "g"),
    ),
    _item(
        "quick-trail-mix",
        "Trail Mix (1/4 cup)",
        ("trail mix", "nuts mix"),
        "1/4 cup",
        "Food",
        (150, 4, 17, 8),
        (40, "g"),
    ),
    _item(
        "quick-cheddar",
        "Cheddar Cheese (1 oz)",
        ("cheddar", "cheese"),
        "28 g",
        "Food",
        (115, 7, 1, 9),
        (28, "g"),
    ),
    _item(
        "quick-yogurt-parfait",
        "Yogurt Parfait (cup)",
        ("parfait",),
        "1 cup",
        "Food",
        (180, 10, 30, 4),
        (220, "g"),
    ),
    _item(
        "quick-orange-juice",
        "Orange Juice (250 ml)",
        ("orange juice", "oj"),
        "250 ml",
        "Liquid",
        (110, 2, 26, 0),
        (250, "ml"),
    ),
    _item(
        "quick-iced-tea",
        "Unsweet Iced Tea (16 oz)",
        ("iced tea", "tea"),
        "16 oz",
        "Liquid",
        (5, 0, 1, 0),
        (473, "ml"),
    ),
    _item(
        "quick-sparkling-water",
        "Sparkling Water (can)",
        ("sparkling water", "seltzer"),
        "355 ml",
        "Liquid",
        (0, 0, 0, 0),
        (355, "ml"),
    ),
    _item(
        "quick-tofu",
        "Tofu (firm, 100 g)",
        ("tofu",),
        "100 g",
        "Food",
        (85, 9, 3, 5),
        (100, "g"),
    ),
    _item(
        "quick-quinoa",
        "Quinoa (1 cup cooked)",
        ("quinoa",),
        "1 cup cooked",
        "Food",
        (220, 8, 39, 4),
        (185, "g"),
    ),
    _item(
        "quick-bagel",
        "Bagel (plain)",
        ("bagel",),
        "1 medium bagel",
        "Food",
        (270, 10, 55, 2),
        (105, "g"),
    ),
    _item(
        "quick-flour-tortilla",
        "Flour Tortilla (large)",
        ("tortilla", "wrap"),
        "1 large tortilla",
        "Food",
        (180, 6, 30, 4),
        (60, "g"),
    ),
    _item(
        "quick-olive-oil",
        "Olive Oil (1 tbsp)",
        ("olive oil", "oil"),
        "1 tbsp",
        "Food",
        (119, 0, 0, 14),
        (14, "g"),
    ),
    _item(
        "quick-butter",
        "Butter (1 tbsp)",
        ("butter",),
        "1 tbsp",
        "Food",
        (100, 0, 0, 11),
        (14, "g"),
    ),
    _item(
        "quick-cheese-stick",
        "Cheese Stick (mozzarella)",
        ("string cheese", "mozzarella"),
        "1 stick",
        "Food",
        (80, 7, 1, 6),
        (28, "g"),
    ),
    _item(
        "quick-protein-bar",
        "Protein Bar (generic)",
        ("protein bar", "bar"),
        "1 bar",
        "Food",
        (210, 20, 22, 8),
        (60, "g"),
    ),
    _item(
        "quick-veggie-burger",
        "Veggie Burger Patty",
        ("veggie burger", "plant-based patty"),
        "1 patty",
        "Food",
        (150, 15, 10, 6),
        (100, "g"),
    ),
    _item(
        "quick-cauliflower",
        "Cauliflower Rice (cup)",
        ("cauliflower", "cauli rice"),
        "1 cup",
        "Food",
        (25, 2, 5, 0),
        (120, "g"),
    ),
    _item(
        "quick-potato",
        "Baked Potato (medium)",
        ("potato", "baked potato", "white potato"),
        "1 medium potato",
        "Food",
        (160, 4, 37, 0),
        (173, "g"),
    ),
    _item(
        "quick-onion",
        "Onion (medium)",
        ("onion", "yellow onion", "white onion", "red onion"),
        "1 medium onion",
        "Food",
        (45, 1, 11, 0),
        (110, "g"),
    ),
    _item(
        "quick-chia-pudding",
        "Chia Pudding (1/2 cup)",
        ("chia", "chia pudding"),
        "1/2 cup",
        "Food",
        (150, 5, 12, 9),
        (120, "g"),
    ),
    _item(
        "quick-edamame",
        "Edamame (1 cup shelled)",
        ("edamame", "soybeans"),
        "1 cup shelled",
        "Food",
        (190, 17, 15, 8),
        (155, "g"),
    ),
    _item(
        "quick-pbj",
        "PB&J Sandwich",
        ("pb&j", "peanut butter jelly"),
        "1 sandwich",
        "Food",
        (330, 11, 42, 14),
        (140, "g"),
    ),
    _item(
        "quick-tomato-soup",
        "Tomato Soup (cup)",
        ("tomato soup", "soup"),
        "1 cup",
        "Liquid",
        (90, 3, 18, 1),
        (245, "ml"),
    ),
    _item(
        "quick-apple-juice",
        "Apple Juice (8 oz)",
        ("apple juice",),
        "240 ml",
        "Liquid",
        (110, 0, 27, 0),
        (240, "ml"),
    ),
)


def best_keyword_score(keywords: tuple[str, ...], query: str) -> float:
    """Return the best score across an item's keywords."""
    return min((score(keyword, query) for keyword in keywords), default=NO_MATCH_SCORE)


def search_catalog(
    query: str,
    items: tuple[CatalogItem, ...] = QUICK_ADD_ITEMS,
    limit: int = CATALOG_LIMIT,
) -> list[CatalogSuggestion]:
    """Score catalog items against a query and return the best matches."""
    if not query or not query.strip():
        return []
    matches: list[CatalogSuggestion] = []
    for item in items:
        keyword_score = best_keyword_score(item.keywords, query)
        name_score = score(item.name, query)
        if (
            keyword_score > KEYWORD_MAX_SCORE
            and name_score > NAME_MAX_SCORE
            and not has_token_overlap(item.name, query)
        ):
            continue
        matches.append(
            CatalogSuggestion(
                item_id=item.id,
                name=item.name,
                score=min(name_score, keyword_score - KEYWORD_BONUS),
                prefill=item.prefill,
                serving_label=item.serving,
            )
        )
    matches.sort(key=lambda suggestion: suggestion.score)
    return matches[:limit]
