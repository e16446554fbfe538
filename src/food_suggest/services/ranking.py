"""Merging and ranking of suggestions from several sources."""

from collections.abc import Sequence
from dataclasses import dataclass

from food_suggest.domain.suggestions import (
    CatalogSuggestion,
    LocalSuggestion,
    RemoteSuggestion,
    Suggestion,
)
from food_suggest.services.similarity import (
    is_likely_food_name,
    normalize_text,
    score,
    token_coverage,
)

RESULT_LIMIT = 10
LOCAL_BIAS = -0.1
CATALOG_BIAS = -0.15
REMOTE_BIAS = 0.2
COVERAGE_TIE_MARGIN = 0.05
MAX_SCORE = 0.7
TWO_TOKEN_MIN_COVERAGE = 0.55
MULTI_TOKEN_MIN_COVERAGE = 0.65


@dataclass(frozen=True)
class ScoredSuggestion:
    """A suggestion with the internal fields used while ranking."""

    suggestion: Suggestion
    score: float
    coverage: float


def _order(candidates: list[ScoredSuggestion]) -> list[ScoredSuggestion]:
    """Order by coverage, falling back to score when coverage is close.

    Coverage differences within the tie margin are decided by score. That
    comparison is not transitive, so items are placed by a stable insertion
    pass.
    """
    ordered: list[ScoredSuggestion] = []
    for item in candidates:
        position = len(ordered)
        while position > 0 and _precedes(item, ordered[position - 1]):
            position -= 1
        ordered.insert(position, item)
    return ordered


def _precedes(first: ScoredSuggestion, second: ScoredSuggestion) -> bool:
    coverage_diff = first.coverage - second.coverage
    if abs(coverage_diff) > COVERAGE_TIE_MARGIN:
        return coverage_diff > 0
    return first.score < second.score


def _is_exact(item: ScoredSuggestion, normalized_query: str) -> bool:
    return normalize_text(item.suggestion.name) == normalized_query


def rank(
    query: str,
    local: Sequence[LocalSuggestion],
    catalog: Sequence[CatalogSuggestion],
    remote: Sequence[RemoteSuggestion],
    limit: int = RESULT_LIMIT,
) -> list[Suggestion]:
    """Merge suggestions from all sources into one ordered list."""
    normalized_query = normalize_text(query)
    if not normalized_query:
        return []
    query_tokens = normalized_query.split()

    candidates: list[ScoredSuggestion] = []
    seen: set[str] = set()

    def push(suggestion: Suggestion, source_score: float | None, bias: float) -> None:
        if not is_likely_food_name(suggestion.name):
            return
        key = normalize_text(suggestion.name)
        if not key or key in seen:
            return
        seen.add(key)
        computed = score(suggestion.name, query)
        base = computed if source_score is None else min(source_score, computed)
        candidates.append(
            ScoredSuggestion(
                suggestion=suggestion,
                score=base + bias,
                coverage=token_coverage(suggestion.name, query),
            )
        )

    for item in local:
        push(item.to_suggestion(), item.score, LOCAL_BIAS)
    for item in catalog:
        push(item.to_suggestion(), item.score, CATALOG_BIAS)
    for item in remote:
        if len(candidates) >= limit:
            break
        push(item.to_suggestion(), None, REMOTE_BIAS)

    ordered = _order(candidates)
    exact = [item for item in ordered if _is_exact(item, normalized_query)]
    others = [item for item in ordered if not _is_exact(item, normalized_query)]
    prioritized = exact + others

    filtered = [item for item in prioritized if item.score <= MAX_SCORE] or prioritized

    if len(query_tokens) > 1:
        threshold = TWO_TOKEN_MIN_COVERAGE
        if len(query_tokens) >= 3:
            threshold = MULTI_TOKEN_MIN_COVERAGE
        covered = [item for item in filtered if item.coverage >= threshold]
        if covered:
            filtered = covered

    return [item.suggestion for item in filtered[:limit]]


def rank_short_query(
    query: str,
    local: Sequence[LocalSuggestion],
    catalog: Sequence[CatalogSuggestion],
    limit: int = RESULT_LIMIT,
) -> list[Suggestion]:
    """Rank network-free results for queries too short for remote search."""
    if not normalize_text(query):
        return []
    scored: list[tuple[float, Suggestion]] = [
        (item.score, item.to_suggestion()) for item in local
    ]
    scored.extend((item.score, item.to_suggestion()) for item in catalog)
    scored.sort(key=lambda pair: pair[0])
    return [suggestion for _, suggestion in scored[:limit]]
