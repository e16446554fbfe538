"""Client for the service's own search and lookup endpoints."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

import httpx

from food_suggest.api.models import LookupResponse, SuggestionsResponse
from food_suggest.domain.suggestions import Product, Suggestion


class SuggestionApiClient(Protocol):
    """Interface for calling the suggestion endpoints."""

    async def search(self, query: str) -> list[Suggestion]:
        """Return suggestions for a query."""

    async def lookup(
        self, barcode: str | None = None, query: str | None = None
    ) -> Product | None:
        """Return a product for a barcode or query, or None when not found."""


@dataclass
class HttpxSuggestionApiClient(SuggestionApiClient):
    """HTTPX-backed client used by interactive front ends."""

    base_url: str
    api_token: str
    user_id: UUID
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, api_token: str, user_id: UUID
    ) -> "HttpxSuggestionApiClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            api_token=api_token,
            user_id=user_id,
            http_client=httpx.AsyncClient(),
        )

    async def search(self, query: str) -> list[Suggestion]:
        """Call the search endpoint."""
        response = await self.http_client.get(
            f"{self.base_url.rstrip('/')}/nutrition/search",
            params={"user_id": str(self.user_id), "q": query},
            headers={"X-Api-Token": self.api_token},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = SuggestionsResponse.model_validate(response.json())
        return [item.to_domain() for item in payload.suggestions]

    async def lookup(
        self, barcode: str | None = None, query: str | None = None
    ) -> Product | None:
        """Call the lookup endpoint."""
        params = {"user_id": str(self.user_id)}
        if barcode:
            params["barcode"] = barcode
        if query:
            params["q"] = query
        response = await self.http_client.get(
            f"{self.base_url.rstrip('/')}/nutrition/lookup",
            params=params,
            headers={"X-Api-Token": self.api_token},
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        return LookupResponse.model_validate(response.json()).product.to_domain()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
