"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from food_suggest.adapters.openfoodfacts_client import OpenFoodFactsClient
from food_suggest.config import Settings
from food_suggest.containers import AppContainer, build_caches
from food_suggest.domain.suggestions import HistoryEntry
from food_suggest.services.history import HistoryRepository, HistoryService
from food_suggest.services.products import ProductService
from food_suggest.services.suggestions import SuggestionService


@dataclass
class InMemoryHistoryRepository(HistoryRepository):
    """In-memory history repository for tests."""

    entries: list[HistoryEntry] = field(default_factory=list)
    searches: list[tuple[UUID, str]] = field(default_factory=list)
    error: Exception | None = None

    def add(self, user_id: UUID, name: str, **fields: object) -> HistoryEntry:
        entry = HistoryEntry(
            id=len(self.entries) + 1,
            user_id=user_id,
            name=name,
            type=str(fields.pop("type", "Food")),
            created_at=datetime(2024, 1, 1, tzinfo=UTC)
            + timedelta(minutes=len(self.entries)),
            **fields,  # type: ignore[arg-type]
        )
        self.entries.append(entry)
        return entry

    def search_entries(
        self, user_id: UUID, query: str, limit: int
    ) -> list[HistoryEntry]:
        self.searches.append((user_id, query))
        if self.error is not None:
            raise self.error
        needle = query.lower()
        matches = [
            entry
            for entry in self.entries
            if entry.user_id == user_id and needle in entry.name.lower()
        ]
        matches.sort(key=lambda entry: (entry.created_at, entry.id), reverse=True)
        return matches[:limit]

    def find_by_barcode(self, user_id: UUID, barcode: str) -> HistoryEntry | None:
        if self.error is not None:
            raise self.error
        matches = [
            entry
            for entry in self.entries
            if entry.user_id == user_id and entry.barcode == barcode
        ]
        if not matches:
            return None
        return max(matches, key=lambda entry: (entry.created_at, entry.id))


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake product database returning canned payloads."""

    products: list[dict[str, object]] = field(default_factory=list)
    barcodes: dict[str, dict[str, object]] = field(default_factory=dict)
    error: Exception | None = None
    search_calls: list[str] = field(default_factory=list)
    product_calls: list[str] = field(default_factory=list)
    closed: bool = False

    async def search_products(
        self, query: str, page_size: int = 8
    ) -> dict[str, object]:
        self.search_calls.append(query)
        if self.error is not None:
            raise self.error
        return {"products": self.products[:page_size]}

    async def get_product(self, barcode: str) -> dict[str, object]:
        self.product_calls.append(barcode)
        if self.error is not None:
            raise self.error
        record = self.barcodes.get(barcode)
        return {"product": record} if record else {}

    async def close(self) -> None:
        self.closed = True


def off_record(  # noqa: PLR0913
    name: str,
    *,
    code: str = "0000000000000",
    brands: str | None = None,
    serving_size: str | None = "100 g",
    kcal_100g: float | None = 100,
    kcal_serving: float | None = None,
    protein_100g: float | None = 5,
    carbs_100g: float | None = 10,
    fat_100g: float | None = 2,
) -> dict[str, object]:
    """Build a raw Open Food Facts product record."""
    nutriments: dict[str, object] = {}
    if kcal_100g is not None:
        nutriments["energy-kcal_100g"] = kcal_100g
    if kcal_serving is not None:
        nutriments["energy-kcal_serving"] = kcal_serving
    if protein_100g is not None:
        nutriments["proteins_100g"] = protein_100g
    if carbs_100g is not None:
        nutriments["carbohydrates_100g"] = carbs_100g
    if fat_100g is not None:
        nutriments["fat_100g"] = fat_100g
    record: dict[str, object] = {
        "code": code,
        "product_name": name,
        "nutriments": nutriments,
    }
    if brands:
        record["brands"] = brands
    if serving_size:
        record["serving_size"] = serving_size
    return record


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        api_token="api-token",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def history_repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def suggestion_service(
    settings: Settings,
    history_repository: InMemoryHistoryRepository,
    openfoodfacts_client: FakeOpenFoodFactsClient,
) -> SuggestionService:
    search_cache, barcode_cache = build_caches(settings)
    # Wait for remote results without a deadline.
    search_cache.timeout_seconds = None
    return SuggestionService(
        history_service=HistoryService(history_repository),
        product_service=ProductService(
            client=openfoodfacts_client, retry_delay_seconds=0
        ),
        search_cache=search_cache,
        barcode_cache=barcode_cache,
    )


@pytest.fixture
def container(
    settings: Settings,
    suggestion_service: SuggestionService,
    openfoodfacts_client: FakeOpenFoodFactsClient,
) -> AppContainer:
    async def close_resources() -> None:
        await openfoodfacts_client.close()

    return AppContainer(
        settings=settings,
        openfoodfacts_client=openfoodfacts_client,
        history_service=suggestion_service.history_service,
        product_service=suggestion_service.product_service,
        search_cache=suggestion_service.search_cache,
        barcode_cache=suggestion_service.barcode_cache,
        suggestion_service=suggestion_service,
        close_resources=close_resources,
    )
