"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

SEARCH_FIELDS = "code,product_name,generic_name,brands,serving_size,nutriments"
PRODUCT_FIELDS = (
    "code,product_name,generic_name,brands,serving_size,serving_quantity,"
    "quantity,nutrition_data_per,nutriments"
)


class OpenFoodFactsError(RuntimeError):
    """Raised when the product database returns an unusable response."""


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts interactions."""

    async def search_products(
        self, query: str, page_size: int = 8
    ) -> dict[str, object]:
        """Search products by free text and return raw API data."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    search_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 5.0

    @classmethod
    def create(
        cls,
        base_url: str,
        search_url: str,
        user_agent: str,
        timeout_seconds: float = 5.0,
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed keep-alive httpx session."""
        http_client = httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            limits=httpx.Limits(max_connections=8, keepalive_expiry=15),
        )
        return cls(
            base_url=base_url,
            search_url=search_url,
            http_client=http_client,
            timeout_seconds=timeout_seconds,
        )

    async def search_products(
        self, query: str, page_size: int = 8
    ) -> dict[str, object]:
        """Search products by free text."""
        response = await self.http_client.get(
            self.search_url,
            params={
                "search_terms": query,
                "search_simple": "1",
                "action": "process",
                "json": "1",
                "page_size": str(page_size),
                "fields": SEARCH_FIELDS,
            },
            timeout=self.timeout_seconds,
        )
        return _json_payload(response)

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        url = f"{self.base_url.rstrip('/')}/product/{quote(barcode, safe='')}.json"
        response = await self.http_client.get(
            url,
            params={"fields": PRODUCT_FIELDS},
            timeout=self.timeout_seconds,
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return {}
        return _json_payload(response)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _json_payload(response: httpx.Response) -> dict[str, object]:
    response.raise_for_status()
    try:
        payload = response.json()
    except ValueError as exc:
        raise OpenFoodFactsError("Invalid response from lookup service.") from exc
    if not isinstance(payload, dict):
        raise OpenFoodFactsError("Invalid response from lookup service.")
    return payload
