"""Suggestions drawn from the user's own logged history."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_suggest.domain.suggestions import (
    HistoryEntry,
    LocalSuggestion,
    Product,
    SuggestionPrefill,
)
from food_suggest.services.servings import format_weight_label
from food_suggest.services.similarity import is_likely_food_name, normalize_text, score

HISTORY_SCAN_LIMIT = 40
HISTORY_RESULT_LIMIT = 5


class HistoryRepository(Protocol):
    """Read-only access to previously logged entries."""

    def search_entries(
        self, user_id: UUID, query: str, limit: int
    ) -> list[HistoryEntry]:
        """Return entries whose name contains the query, newest first."""

    def find_by_barcode(self, user_id: UUID, barcode: str) -> HistoryEntry | None:
        """Return the newest entry logged with a barcode, if any."""


@dataclass
class HistoryService:
    """Searches a user's past entries."""

    repository: HistoryRepository
    scan_limit: int = HISTORY_SCAN_LIMIT
    result_limit: int = HISTORY_RESULT_LIMIT

    def search_local(self, user_id: UUID, query: str) -> list[LocalSuggestion]:
        """Return the best-scoring distinct past entries matching a query."""
        if not query or not query.strip():
            return []
        entries = self.repository.search_entries(
            user_id, query.strip(), self.scan_limit
        )
        seen: set[str] = set()
        suggestions: list[LocalSuggestion] = []
        for entry in entries:
            key = normalize_text(entry.name)
            if not key or key in seen or not is_likely_food_name(entry.name):
                continue
            seen.add(key)
            suggestions.append(_to_suggestion(entry, score(entry.name, query)))
        suggestions.sort(key=lambda suggestion: suggestion.score)
        return suggestions[: self.result_limit]

    def find_by_barcode(self, user_id: UUID, barcode: str) -> Product | None:
        """Return what the user last logged for a barcode."""
        normalized = barcode.strip() if barcode else ""
        if not normalized:
            return None
        entry = self.repository.find_by_barcode(user_id, normalized)
        if entry is None:
            return None
        return entry_to_product(entry)


def entry_to_product(entry: HistoryEntry) -> Product:
    """Map a logged entry to a product record."""
    return Product(
        name=entry.name or "Logged item",
        barcode=entry.barcode or None,
        calories=entry.calories,
        protein=entry.protein,
        carbs=entry.carbs,
        fats=entry.fats,
        weight_amount=entry.weight_amount,
        weight_unit=entry.weight_unit or None,
    )


def _to_suggestion(entry: HistoryEntry, entry_score: float) -> LocalSuggestion:
    return LocalSuggestion(
        entry_id=str(entry.id),
        name=entry.name,
        score=entry_score,
        barcode=entry.barcode,
        serving_label=format_weight_label(entry.weight_amount, entry.weight_unit),
        prefill=SuggestionPrefill(
            type=entry.type or "Food",
            calories=entry.calories,
            protein=entry.protein,
            carbs=entry.carbs,
            fats=entry.fats,
            weight_amount=entry.weight_amount,
            weight_unit=entry.weight_unit or None,
            barcode=entry.barcode or None,
        ),
    )
