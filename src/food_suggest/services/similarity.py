"""Approximate string matching for food names."""

import re

from rapidfuzz.distance import Levenshtein

NO_MATCH_SCORE = 99.0
NON_FOOD_SCORE = 98.0

TOKEN_MATCH_DISTANCE = 0.35
PREFIX_BONUS = 0.15
SUBSTRING_BONUS = 0.10
COVERAGE_BONUS = 0.25
COVERAGE_PENALTY = 0.5

NON_FOOD_TERMS = (
    "packaging",
    "package",
    "promo",
    "promotion",
    "coupon",
    "voucher",
    "sample",
    "test product",
    "test item",
    "gift card",
    "sticker",
    "tray",
    "fork",
    "spoon",
    "knife",
    "cutlery",
    "napkin",
    "straw",
    "utensil",
    "tableware",
    "lid",
    "cap",
    "container",
    "film",
    "plastic film",
    "sachet",
    "bag for",
    "bottle deposit",
    "package insert",
    "label",
    "brochure",
    "flyer",
    "merch",
    "pack of",
    "bundle",
    "collector",
    "souvenir",
    "straws",
    "cups",
    "plates",
    "wrapper",
    "advertisement",
    "yoga mat",
)

PROMO_PATTERNS = (
    re.compile(r"scan\s+to\s+win"),
    re.compile(r"scan.*win"),
    re.compile(r"win.*scan"),
    re.compile(r"enter.*win"),
    re.compile(r"collect.*points"),
    re.compile(r"instant\s+win"),
    re.compile(r"game\s*piece"),
    re.compile(r"contest"),
    re.compile(r"sweepstake"),
    re.compile(r"promotion"),
)

_LETTER = re.compile(r"[a-z]")
_NON_FOOD = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in NON_FOOD_TERMS) + r")\b"
)


def normalize_text(value: object) -> str:
    """Trim and lower-case a value for matching."""
    if value is None:
        return ""
    return str(value).strip().lower()


def tokenize(value: object) -> list[str]:
    """Split normalized text on whitespace."""
    return normalize_text(value).split()


def normalized_distance(a: str, b: str) -> float:
    """Edit distance divided by the longer length."""
    return Levenshtein.normalized_distance(a, b)


def is_likely_food_name(name: object) -> bool:
    """Reject packaging, promotional and otherwise non-food names."""
    normalized = normalize_text(name)
    if len(normalized) < 3:
        return False
    if not _LETTER.search(normalized):
        return False
    if _NON_FOOD.search(normalized):
        return False
    return not any(pattern.search(normalized) for pattern in PROMO_PATTERNS)


def token_matches(word: str, token: str) -> bool:
    """Return True when a candidate word approximately matches a query token."""
    if not word or not token:
        return False
    if word == token or token in word or word in token:
        return True
    if len(word) >= 3 and len(token) >= 3:
        return normalized_distance(word, token) <= TOKEN_MATCH_DISTANCE
    return False


def _coverage_from_tokens(name_tokens: list[str], query_tokens: list[str]) -> float:
    if not name_tokens or not query_tokens:
        return 0.0
    matches = sum(
        1
        for token in query_tokens
        if any(token_matches(word, token) for word in name_tokens)
    )
    return min(matches / len(query_tokens), 1.0)


def token_coverage(candidate: object, query: object) -> float:
    """Fraction of query tokens matched by at least one candidate token."""
    return _coverage_from_tokens(tokenize(candidate), tokenize(query))


def score(candidate: object, query: object) -> float:
    """Return a dissimilarity score where lower is a better match.

    Exact matches score 0. Multi-word queries are matched against the best
    single word of the candidate, then adjusted by prefix/substring bonuses
    and by how many query words the candidate covers.
    """
    text = normalize_text(candidate)
    normalized_query = normalize_text(query)
    if not text or not normalized_query:
        return NO_MATCH_SCORE
    if not is_likely_food_name(text):
        return NON_FOOD_SCORE
    if text == normalized_query:
        return 0.0

    best = normalized_distance(text, normalized_query)
    name_tokens = text.split()
    query_tokens = normalized_query.split()
    for token in query_tokens:
        for word in name_tokens:
            best = min(best, normalized_distance(word, token))

    bonus = 0.0
    if text.startswith(normalized_query):
        bonus -= PREFIX_BONUS
    elif normalized_query in text:
        bonus -= SUBSTRING_BONUS

    coverage = _coverage_from_tokens(name_tokens, query_tokens)
    bonus -= coverage * COVERAGE_BONUS

    penalty = 0.0
    if len(query_tokens) > 1:
        penalty = max(1 - coverage, 0.0) * COVERAGE_PENALTY

    return round(max(best + bonus + penalty, 0.0), 4)


def has_token_overlap(name: object, query: object) -> bool:
    """Return True on a direct substring or word overlap."""
    normalized_name = normalize_text(name)
    normalized_query = normalize_text(query)
    if not normalized_name or not normalized_query:
        return False
    if normalized_query in normalized_name:
        return True
    return any(
        token in normalized_name
        for token in normalized_query.split()
        if len(token) >= 2
    )


def is_relevant_match(name: object, query: object, max_score: float = 0.6) -> bool:
    """Return True when a name overlaps the query or scores within a bound."""
    if not normalize_text(name) or not normalize_text(query):
        return False
    if has_token_overlap(name, query):
        return True
    return score(name, query) <= max_score
