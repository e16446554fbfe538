"""Tests for HTTP-based adapters."""

import asyncio
from uuid import uuid4

import httpx
import pytest

from food_suggest.adapters.openfoodfacts_client import (
    HttpxOpenFoodFactsClient,
    OpenFoodFactsError,
)
from food_suggest.adapters.suggestion_api_client import HttpxSuggestionApiClient


def _off_client(handler) -> HttpxOpenFoodFactsClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxOpenFoodFactsClient(
        base_url="https://off.example/api/v2",
        search_url="https://off.example/cgi/search.pl",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_openfoodfacts_search_sends_query_params() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/cgi/search.pl"
        assert request.url.params["search_terms"] == "greek yogurt"
        assert request.url.params["page_size"] == "8"
        assert request.url.params["json"] == "1"
        return httpx.Response(200, json={"products": [{"code": "1"}]})

    client = _off_client(handler)

    payload = asyncio.run(client.search_products("greek yogurt"))

    assert payload == {"products": [{"code": "1"}]}


def test_openfoodfacts_get_product() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v2/product/049000050103.json"
        assert "nutriments" in request.url.params["fields"]
        return httpx.Response(200, json={"status": 1, "product": {"code": "1"}})

    client = _off_client(handler)

    payload = asyncio.run(client.get_product("049000050103"))

    assert payload["product"] == {"code": "1"}


def test_openfoodfacts_missing_product_is_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status": 0})

    client = _off_client(handler)

    assert asyncio.run(client.get_product("000")) == {}


def test_openfoodfacts_errors() -> None:
    def server_error(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={})

    def not_json(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html></html>")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(_off_client(server_error).search_products("rice"))
    with pytest.raises(OpenFoodFactsError):
        asyncio.run(_off_client(not_json).search_products("rice"))


def test_openfoodfacts_create_sets_user_agent() -> None:
    client = HttpxOpenFoodFactsClient.create(
        base_url="https://off.example/api/v2",
        search_url="https://off.example/cgi/search.pl",
        user_agent="food-suggest-tests/1.0",
    )

    assert client.http_client.headers["User-Agent"] == "food-suggest-tests/1.0"
    asyncio.run(client.close())


def test_suggestion_api_client_search() -> None:
    user_id = uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/nutrition/search"
        assert request.url.params["q"] == "yog"
        assert request.url.params["user_id"] == str(user_id)
        assert request.headers["X-Api-Token"] == "token"
        return httpx.Response(
            200,
            json={
                "suggestions": [
                    {
                        "id": "quick-greek-yogurt",
                        "name": "Plain Greek Yogurt",
                        "sourceTag": "Quick Add",
                        "servingLabel": "170 g cup",
                        "prefillMacros": {
                            "type": "Food",
                            "calories": 100,
                            "weightAmount": 170,
                            "weightUnit": "g",
                        },
                    }
                ]
            },
        )

    client = HttpxSuggestionApiClient(
        base_url="https://api.example/",
        api_token="token",
        user_id=user_id,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    results = asyncio.run(client.search("yog"))

    assert results[0].name == "Plain Greek Yogurt"
    assert results[0].source_tag == "Quick Add"
    assert results[0].prefill.weight_amount == 170


def test_suggestion_api_client_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/nutrition/lookup"
        if request.url.params.get("barcode") == "missing":
            return httpx.Response(404, json={"detail": "not found"})
        return httpx.Response(
            200,
            json={
                "product": {
                    "name": "Oat Milk",
                    "barcode": "777",
                    "calories": 120,
                    "weightAmount": 250,
                    "weightUnit": "ml",
                    "weightMlEquivalent": 250,
                }
            },
        )

    client = HttpxSuggestionApiClient(
        base_url="https://api.example",
        api_token="token",
        user_id=uuid4(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    product = asyncio.run(client.lookup(barcode="777"))
    missing = asyncio.run(client.lookup(barcode="missing"))

    assert product is not None
    assert product.name == "Oat Milk"
    assert product.weight_ml_equivalent == 250
    assert missing is None
