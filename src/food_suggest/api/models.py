"""Pydantic models for the suggestion and lookup endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from food_suggest.domain.suggestions import Product, Suggestion, SuggestionPrefill


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PrefillModel(_CamelModel):
    """Values used to prefill a log entry."""

    type: str = "Food"
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None
    weight_amount: float | None = None
    weight_unit: str | None = None
    barcode: str | None = None

    @classmethod
    def from_domain(cls, prefill: SuggestionPrefill) -> "PrefillModel":
        return cls(
            type=prefill.type,
            calories=prefill.calories,
            protein=prefill.protein,
            carbs=prefill.carbs,
            fats=prefill.fats,
            weight_amount=prefill.weight_amount,
            weight_unit=prefill.weight_unit,
            barcode=prefill.barcode,
        )

    def to_domain(self) -> SuggestionPrefill:
        return SuggestionPrefill(
            type=self.type,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fats=self.fats,
            weight_amount=self.weight_amount,
            weight_unit=self.weight_unit,
            barcode=self.barcode,
        )


class SuggestionModel(_CamelModel):
    """A single suggestion."""

    id: str
    name: str
    source_tag: str
    barcode: str | None = None
    serving_label: str | None = None
    prefill_macros: PrefillModel = Field(default_factory=PrefillModel)

    @classmethod
    def from_domain(cls, suggestion: Suggestion) -> "SuggestionModel":
        return cls(
            id=suggestion.id,
            name=suggestion.name,
            source_tag=suggestion.source_tag,
            barcode=suggestion.barcode,
            serving_label=suggestion.serving_label,
            prefill_macros=PrefillModel.from_domain(suggestion.prefill),
        )

    def to_domain(self) -> Suggestion:
        return Suggestion(
            id=self.id,
            name=self.name,
            source_tag=self.source_tag,
            barcode=self.barcode,
            serving_label=self.serving_label,
            prefill=self.prefill_macros.to_domain(),
        )


class SuggestionsResponse(_CamelModel):
    """Search endpoint response."""

    suggestions: list[SuggestionModel]


class ProductModel(_CamelModel):
    """A normalized product."""

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

    @classmethod
    def from_domain(cls, product: Product) -> "ProductModel":
        return cls(
            name=product.name,
            barcode=product.barcode,
            calories=product.calories,
            protein=product.protein,
            carbs=product.carbs,
            fats=product.fats,
            weight_amount=product.weight_amount,
            weight_unit=product.weight_unit,
            weight_grams_equivalent=product.weight_grams_equivalent,
            weight_ml_equivalent=product.weight_ml_equivalent,
        )

    def to_domain(self) -> Product:
        return Product(**self.model_dump())


class LookupResponse(_CamelModel):
    """Lookup endpoint response."""

    product: ProductModel
