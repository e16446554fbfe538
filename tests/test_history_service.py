"""Tests for history-based suggestions."""

from uuid import uuid4

from food_suggest.domain.suggestions import SOURCE_RECENT
from food_suggest.services.history import HistoryService
from tests.conftest import InMemoryHistoryRepository


def test_search_local_scores_and_dedupes(history_repository, user_id) -> None:
    history_repository.add(user_id, "Greek Yogurt", calories=100)
    history_repository.add(user_id, "greek yogurt", calories=120)
    history_repository.add(user_id, "Yogurt Bowl", calories=200)
    history_repository.add(uuid4(), "Greek Yogurt Honey", calories=150)
    service = HistoryService(history_repository)

    results = service.search_local(user_id, "yog")

    assert [item.name for item in results] == ["Yogurt Bowl", "greek yogurt"]
    assert results[1].prefill.calories == 120
    assert results[0].score < results[1].score


def test_search_local_skips_non_food_and_caps(user_id) -> None:
    repository = InMemoryHistoryRepository()
    repository.add(user_id, "Rice Container Lid")
    for index in range(8):
        repository.add(user_id, f"Rice Bowl {index}")
    service = HistoryService(repository, result_limit=5)

    results = service.search_local(user_id, "rice")

    assert len(results) == 5
    assert all("Lid" not in item.name for item in results)


def test_search_local_empty_query(history_repository, user_id) -> None:
    service = HistoryService(history_repository)

    assert service.search_local(user_id, "  ") == []
    assert history_repository.searches == []


def test_local_suggestion_shape(history_repository, user_id) -> None:
    entry = history_repository.add(
        user_id,
        "Oat Milk",
        type="Liquid",
        calories=120,
        protein=3,
        weight_amount=250,
        weight_unit="ml",
    )
    service = HistoryService(history_repository)

    suggestion = service.search_local(user_id, "oat milk")[0].to_suggestion()

    assert suggestion.id == f"recent-{entry.id}"
    assert suggestion.source_tag == SOURCE_RECENT
    assert suggestion.serving_label == "250 ml"
    assert suggestion.prefill.type == "Liquid"
    assert suggestion.prefill.calories == 120


def test_find_by_barcode_returns_latest(history_repository, user_id) -> None:
    history_repository.add(user_id, "Old Granola", barcode="123", calories=200)
    history_repository.add(user_id, "New Granola", barcode="123", calories=210)
    service = HistoryService(history_repository)

    product = service.find_by_barcode(user_id, " 123 ")

    assert product is not None
    assert product.name == "New Granola"
    assert product.calories == 210
    assert service.find_by_barcode(uuid4(), "123") is None
    assert service.find_by_barcode(user_id, "") is None
