"""Tests for container wiring."""

import asyncio

from food_suggest.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.suggestion_service is not None
    assert container.search_cache.max_entries == settings.remote_search_cache_limit
    assert container.search_cache.timeout_seconds == 0.4
    assert container.barcode_cache.ttl_seconds == 21600
    asyncio.run(container.close_resources())
