"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_suggest.adapters.openfoodfacts_client import (
    HttpxOpenFoodFactsClient,
    OpenFoodFactsClient,
)
from food_suggest.adapters.supabase_history_repository import (
    SupabaseHistoryRepository,
)
from food_suggest.config import Settings
from food_suggest.domain.suggestions import Product, RemoteSuggestion
from food_suggest.services.cache import CoalescingCache
from food_suggest.services.history import HistoryService
from food_suggest.services.products import ProductService
from food_suggest.services.suggestions import SuggestionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    openfoodfacts_client: OpenFoodFactsClient
    history_service: HistoryService
    product_service: ProductService
    search_cache: CoalescingCache[list[RemoteSuggestion]]
    barcode_cache: CoalescingCache[Product]
    suggestion_service: SuggestionService
    close_resources: Callable[[], Awaitable[None]]


def build_caches(
    settings: Settings,
) -> tuple[CoalescingCache[list[RemoteSuggestion]], CoalescingCache[Product]]:
    """Create the remote search and barcode caches from settings."""
    search_cache: CoalescingCache[list[RemoteSuggestion]] = CoalescingCache(
        ttl_seconds=settings.remote_search_cache_ttl_seconds,
        max_entries=settings.remote_search_cache_limit,
        timeout_seconds=settings.remote_search_timeout_seconds,
        name="remote-search",
    )
    barcode_cache: CoalescingCache[Product] = CoalescingCache(
        ttl_seconds=settings.barcode_cache_ttl_seconds,
        max_entries=settings.barcode_cache_limit,
        name="barcode",
    )
    return search_cache, barcode_cache


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    history_service = HistoryService(SupabaseHistoryRepository(supabase_client))
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        search_url=resolved_settings.openfoodfacts_search_url,
        user_agent=resolved_settings.openfoodfacts_user_agent,
        timeout_seconds=resolved_settings.remote_timeout_seconds,
    )
    product_service = ProductService(
        client=openfoodfacts_client, debug=resolved_settings.debug
    )
    search_cache, barcode_cache = build_caches(resolved_settings)
    suggestion_service = SuggestionService(
        history_service=history_service,
        product_service=product_service,
        search_cache=search_cache,
        barcode_cache=barcode_cache,
    )

    async def close_resources() -> None:
        await openfoodfacts_client.close()

    return AppContainer(
        settings=resolved_settings,
        openfoodfacts_client=openfoodfacts_client,
        history_service=history_service,
        product_service=product_service,
        search_cache=search_cache,
        barcode_cache=barcode_cache,
        suggestion_service=suggestion_service,
        close_resources=close_resources,
    )
