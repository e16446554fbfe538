"""Tests for Supabase adapters."""

from dataclasses import dataclass, field
from uuid import uuid4

from food_suggest.adapters.supabase_history_repository import (
    SupabaseHistoryRepository,
    escape_like_pattern,
)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: list[list[dict[str, object]]] = field(default_factory=list)
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: list[tuple[str, bool]] = field(default_factory=list)
    last_limit: int | None = None

    def queue(self, data: list[dict[str, object]]) -> None:
        self.response_queue.append(data)

    def select(self, *_args) -> "FakeTable":
        self.last_filters = []
        self.last_order = []
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def execute(self) -> FakeResponse:
        data = self.response_queue.pop(0) if self.response_queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(user_id, **overrides) -> dict[str, object]:  # type: ignore[no-untyped-def]
    row: dict[str, object] = {
        "id": 7,
        "user_id": str(user_id),
        "item_name": "Greek Yogurt",
        "item_type": "Food",
        "barcode": None,
        "calories": 100,
        "protein_grams": "17",
        "carbs_grams": 6,
        "fats_grams": None,
        "weight_amount": 170,
        "weight_unit": "g",
        "created_at": "2024-03-01T08:30:00+00:00",
    }
    row.update(overrides)
    return row


def test_supabase_history_repository_search() -> None:
    client = FakeSupabaseClient()
    repo = SupabaseHistoryRepository(client)  # type: ignore[arg-type]
    user_id = uuid4()
    table = client.table("nutrition_entries")
    table.queue([_row(user_id)])

    entries = repo.search_entries(user_id, "100%_yog", limit=40)

    assert entries[0].id == 7
    assert entries[0].user_id == user_id
    assert entries[0].name == "Greek Yogurt"
    assert entries[0].protein == 17.0
    assert entries[0].fats is None
    assert entries[0].created_at.year == 2024
    assert ("user_id", str(user_id)) in table.last_filters
    assert ("item_name", "%100\\%\\_yog%") in table.last_filters
    assert table.last_order == [("created_at", True), ("id", True)]
    assert table.last_limit == 40


def test_supabase_history_repository_find_by_barcode() -> None:
    client = FakeSupabaseClient()
    repo = SupabaseHistoryRepository(client)  # type: ignore[arg-type]
    user_id = uuid4()
    table = client.table("nutrition_entries")
    table.queue([_row(user_id, barcode="049000050103", item_type="Liquid")])

    entry = repo.find_by_barcode(user_id, "049000050103")
    missing = repo.find_by_barcode(user_id, "000")

    assert entry is not None
    assert entry.barcode == "049000050103"
    assert entry.type == "Liquid"
    assert ("barcode", "000") in table.last_filters
    assert table.last_limit == 1
    assert missing is None


def test_escape_like_pattern() -> None:
    assert escape_like_pattern("50%_off\\") == "50\\%\\_off\\\\"
    assert escape_like_pattern("plain") == "plain"
