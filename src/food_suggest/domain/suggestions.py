"""Domain models for food suggestions and product lookups."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

SOURCE_RECENT = "Recent"
SOURCE_QUICK_ADD = "Quick Add"
SOURCE_REMOTE_DEFAULT = "OpenFoodFacts"


@dataclass(frozen=True)
class ServingSize:
    """Canonical serving description."""

    amount: float
    unit: str
    grams_equivalent: float | None = None
    ml_equivalent: float | None = None


@dataclass(frozen=True)
class SuggestionPrefill:
    """Values used to prefill a log entry form."""

    type: str = "Food"
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None
    weight_amount: float | None = None
    weight_unit: str | None = None
    barcode: str | None = None


@dataclass(frozen=True)
class Suggestion:
    """Public suggestion shape returned to callers."""

    id: str
    name: str
    source_tag: str
    prefill: SuggestionPrefill = field(default_factory=SuggestionPrefill)
    barcode: str | None = None
    serving_label: str | None = None


@dataclass(frozen=True)
class LocalSuggestion:
    """Suggestion built from the user's own logged history."""

    entry_id: str
    name: str
    score: float
    prefill: SuggestionPrefill
    barcode: str | None = None
    serving_label: str | None = None

    def to_suggestion(self) -> Suggestion:
        return Suggestion(
            id=f"recent-{self.entry_id}",
            name=self.name,
            source_tag=SOURCE_RECENT,
            prefill=self.prefill,
            barcode=self.barcode,
            serving_label=self.serving_label,
        )


@dataclass(frozen=True)
class CatalogSuggestion:
    """Suggestion built from the Quick Add catalog."""

    item_id: str
    name: str
    score: float
    prefill: SuggestionPrefill
    serving_label: str | None = None

    def to_suggestion(self) -> Suggestion:
        return Suggestion(
            id=self.item_id,
            name=self.name,
            source_tag=SOURCE_QUICK_ADD,
            prefill=self.prefill,
            barcode=self.prefill.barcode,
            serving_label=self.serving_label,
        )


@dataclass(frozen=True)
class RemoteSuggestion:
    """Suggestion built from a remote product database record."""

    product_id: str
    name: str
    provider: str
    prefill: SuggestionPrefill
    barcode: str | None = None
    serving_label: str | None = None

    def to_suggestion(self) -> Suggestion:
        return Suggestion(
            id=self.product_id,
            name=self.name,
            source_tag=self.provider,
            prefill=self.prefill,
            barcode=self.barcode,
            serving_label=self.serving_label,
        )


@dataclass(frozen=True)
class Product:
    """Normalized product lookup result. Missing numbers mean unknown."""

    name: str
    barcode: str | None = None
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None
    weight_amount: float | None = None
    weight_unit: str | None = None
    weight_grams_equivalent: float | None = None
    weight_ml_equivalent: float | None = None


@dataclass(frozen=True)
class HistoryEntry:
    """A previously logged food or drink item."""

    id: int
    user_id: UUID
    name: str
    type: str
    created_at: datetime
    barcode: str | None = None
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None
    weight_amount: float | None = None
    weight_unit: str | None = None
