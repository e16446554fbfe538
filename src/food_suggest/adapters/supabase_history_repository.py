"""Supabase implementation for reading logged nutrition entries."""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from food_suggest.domain.suggestions import HistoryEntry
from food_suggest.services.history import HistoryRepository

_ENTRY_COLUMNS = (
    "id, user_id, item_name, item_type, barcode, calories, protein_grams, "
    "carbs_grams, fats_grams, weight_amount, weight_unit, created_at"
)
_LIKE_SPECIAL = re.compile(r"([%_\\])")


@dataclass
class SupabaseHistoryRepository(HistoryRepository):
    """Supabase-backed read access to a user's nutrition entries."""

    client: Client

    def search_entries(
        self, user_id: UUID, query: str, limit: int
    ) -> list[HistoryEntry]:
        """Return entries whose name contains the query, newest first."""
        pattern = f"%{escape_like_pattern(query)}%"
        response = (
            self.client.table("nutrition_entries")
            .select(_ENTRY_COLUMNS)
            .eq("user_id", str(user_id))
            .ilike("item_name", pattern)
            .order("created_at", desc=True)
            .order("id", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def find_by_barcode(self, user_id: UUID, barcode: str) -> HistoryEntry | None:
        """Return the newest entry logged with a barcode, if any."""
        if not barcode:
            return None
        response = (
            self.client.table("nutrition_entries")
            .select(_ENTRY_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("barcode", barcode)
            .order("created_at", desc=True)
            .order("id", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])


def escape_like_pattern(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return _LIKE_SPECIAL.sub(r"\\\1", value)


def _optional_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_entry(row: dict[str, object]) -> HistoryEntry:
    """Parse a nutrition entry row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return HistoryEntry(
        id=int(row["id"]),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("item_name") or ""),
        type=str(row.get("item_type") or "Food"),
        created_at=created_at,
        barcode=row.get("barcode") or None,
        calories=_optional_float(row.get("calories")),
        protein=_optional_float(row.get("protein_grams")),
        carbs=_optional_float(row.get("carbs_grams")),
        fats=_optional_float(row.get("fats_grams")),
        weight_amount=_optional_float(row.get("weight_amount")),
        weight_unit=row.get("weight_unit") or None,
    )
