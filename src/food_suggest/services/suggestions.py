"""Search and lookup operations exposed to the rest of the application."""

import logging
from dataclasses import dataclass
from uuid import UUID

from food_suggest.domain.suggestions import Product, RemoteSuggestion, Suggestion
from food_suggest.services.cache import CoalescingCache
from food_suggest.services.catalog import search_catalog
from food_suggest.services.history import HistoryService
from food_suggest.services.products import ProductService
from food_suggest.services.ranking import rank, rank_short_query
from food_suggest.services.similarity import normalize_text

MIN_REMOTE_QUERY_LENGTH = 2

_logger = logging.getLogger(__name__)


class ProductNotFoundError(LookupError):
    """Raised when no source has data for a lookup."""


class LookupUnavailableError(RuntimeError):
    """Raised when the remote source failed and nothing else had data."""


@dataclass
class SuggestionService:
    """Combines history, catalog and remote sources into suggestions."""

    history_service: HistoryService
    product_service: ProductService
    search_cache: CoalescingCache[list[RemoteSuggestion]]
    barcode_cache: CoalescingCache[Product]

    async def search(self, user_id: UUID, query_text: str) -> list[Suggestion]:
        """Return up to ten ranked suggestions for a partial query."""
        query = (query_text or "").strip()
        if not query:
            return []
        local = self.history_service.search_local(user_id, query)
        catalog = search_catalog(query)
        if len(query) < MIN_REMOTE_QUERY_LENGTH:
            return rank_short_query(query, local, catalog)
        remote = await self._remote_suggestions(query)
        return rank(query, local, catalog, remote)

    async def lookup(
        self,
        user_id: UUID,
        barcode: str | None = None,
        query_text: str | None = None,
    ) -> Product:
        """Resolve a barcode or free-text query to a single product.

        Raises ProductNotFoundError when no source knows the item and
        LookupUnavailableError when the remote source failed.
        """
        code = (barcode or "").strip()
        query = (query_text or "").strip()
        if not code and not query:
            raise ValueError("Provide a barcode or search term.")

        failure: Exception | None = None
        if code:
            local = self.history_service.find_by_barcode(user_id, code)
            if local is not None:
                return local
            try:
                product = await self.barcode_cache.get_or_fetch(
                    code, lambda: self.product_service.lookup_by_barcode(code)
                )
            except Exception as exc:
                _logger.warning("Barcode lookup failed: barcode=%s error=%s", code, exc)
                failure = exc
                product = None
            if product is not None:
                return product

        if query:
            try:
                product = await self.product_service.lookup_by_query(query)
            except Exception as exc:
                _logger.warning("Query lookup failed: query=%s error=%s", query, exc)
                failure = exc
                product = None
            if product is not None:
                return product

        if failure is not None:
            raise LookupUnavailableError(str(failure) or "Lookup failed.") from failure
        raise ProductNotFoundError("No nutrition data found for that item.")

    async def _remote_suggestions(self, query: str) -> list[RemoteSuggestion]:
        key = normalize_text(query)
        try:
            results = await self.search_cache.get_or_fetch(
                key, lambda: self.product_service.search_remote(query)
            )
        except Exception as exc:
            _logger.warning("Remote search failed: query=%s error=%s", query, exc)
            cached = self.search_cache.get(key, allow_stale=True)
            return cached.value if cached else []
        return results or []
