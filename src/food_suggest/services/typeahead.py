"""Debounced search-as-you-type for interactive clients."""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from food_suggest.adapters.suggestion_api_client import SuggestionApiClient
from food_suggest.config import Settings
from food_suggest.domain.suggestions import Suggestion
from food_suggest.services.cache import CachedValue, CoalescingCache
from food_suggest.services.catalog import search_catalog

DEBOUNCE_SECONDS = 0.25
REQUEST_TIMEOUT_SECONDS = 0.7
MIN_QUERY_LENGTH = 2

STATUS_EMPTY = "Type a food name to see suggestions."
STATUS_SEARCHING = "Searching for suggestions..."
STATUS_REFRESHING = "Refreshing suggestions..."
STATUS_RESULTS = "Tap a suggestion below to auto-fill the form."
STATUS_NO_RESULTS = "No matches yet. Try refining the name or scan a barcode."
STATUS_SLOW = "Network is slow. Showing recent results for now."
STATUS_STILL_SEARCHING = "Still searching... this is taking longer than expected."
STATUS_REFRESH_FAILED = "Unable to refresh suggestions. Showing recent results."
STATUS_FAILED = "Unable to fetch suggestions right now."

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeaheadState:
    """What the view should currently show."""

    query: str
    suggestions: list[Suggestion] = field(default_factory=list)
    status: str = STATUS_EMPTY
    loading: bool = False


def resolve_status(suggestions: list[Suggestion]) -> str:
    return STATUS_RESULTS if suggestions else STATUS_NO_RESULTS


class TypeaheadController:
    """Debounces keystrokes and applies only the latest request's results.

    Must be driven from inside a running event loop. Requests abandoned by a
    newer keystroke are not cancelled; their results still land in the cache.
    """

    def __init__(  # noqa: PLR0913
        self,
        search: Callable[[str], Awaitable[list[Suggestion]]],
        cache: CoalescingCache[list[Suggestion]],
        on_change: Callable[[TypeaheadState], None],
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.search = search
        self.cache = cache
        self.on_change = on_change
        self.debounce_seconds = debounce_seconds
        self.timeout_seconds = timeout_seconds
        self._timer: asyncio.Task[None] | None = None
        self._tokens = itertools.count(1)
        self._active_token: int | None = None
        self._closed = False
        self._requests: set[asyncio.Task[None]] = set()

    def on_query_changed(self, text: str) -> None:
        """Handle a keystroke."""
        if self._closed:
            return
        self._cancel_timer()
        query = text.strip()
        if not query:
            self._active_token = None
            self._publish(TypeaheadState(query=query))
            return
        if len(query) < MIN_QUERY_LENGTH:
            self._active_token = None
            suggestions = [item.to_suggestion() for item in search_catalog(query)]
            self._publish(
                TypeaheadState(
                    query=query,
                    suggestions=suggestions,
                    status=resolve_status(suggestions),
                )
            )
            return
        self._timer = asyncio.get_running_loop().create_task(self._debounce(query))

    async def wait_idle(self) -> None:
        """Wait for the pending timer and any running requests."""
        while self._timer is not None or self._requests:
            pending = [task for task in (self._timer, *self._requests) if task]
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Stop applying results, e.g. when the view goes away."""
        self._closed = True
        self._active_token = None
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _debounce(self, query: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._timer = None
        request = asyncio.get_running_loop().create_task(self._fire(query))
        self._requests.add(request)
        request.add_done_callback(self._requests.discard)

    async def _fire(self, query: str) -> None:
        token = next(self._tokens)
        self._active_token = token
        hint = self.cache.get(query)
        if hint is not None:
            if not hint.is_stale:
                status = resolve_status(hint.value)
            elif hint.value:
                status = STATUS_REFRESHING
            else:
                status = STATUS_SEARCHING
            self._publish(TypeaheadState(query, hint.value, status, loading=True))
        else:
            self._publish(TypeaheadState(query, [], STATUS_SEARCHING, loading=True))

        try:
            outcome = await self.cache.get_or_fetch_result(
                query,
                lambda: self.search(query),
                timeout_seconds=self.timeout_seconds,
                force_refresh=True,
            )
        except Exception as exc:
            if self._is_current(token):
                _logger.warning(
                    "Suggestion request failed: query=%s error=%s", query, exc
                )
                self._publish(self._failure_state(query, hint))
            return

        if not self._is_current(token):
            return
        if not outcome.timed_out and outcome.value is not None:
            results = outcome.value
            self._publish(TypeaheadState(query, results, resolve_status(results)))
        elif hint is not None:
            self._publish(TypeaheadState(query, hint.value, STATUS_SLOW))
        else:
            self._publish(TypeaheadState(query, [], STATUS_STILL_SEARCHING))

    @staticmethod
    def _failure_state(
        query: str, hint: CachedValue[list[Suggestion]] | None
    ) -> TypeaheadState:
        if hint is not None:
            return TypeaheadState(query, hint.value, STATUS_REFRESH_FAILED)
        return TypeaheadState(query, [], STATUS_FAILED)

    def _is_current(self, token: int) -> bool:
        return not self._closed and self._active_token == token

    def _publish(self, state: TypeaheadState) -> None:
        self.on_change(state)


def create_typeahead(
    api_client: SuggestionApiClient,
    on_change: Callable[[TypeaheadState], None],
    settings: Settings,
) -> TypeaheadController:
    """Build a controller that searches through the suggestion API.

    Results are kept in a client-side cache sized by the ``client_*`` settings.
    """
    cache: CoalescingCache[list[Suggestion]] = CoalescingCache(
        ttl_seconds=settings.client_cache_ttl_seconds,
        max_entries=settings.client_cache_limit,
        timeout_seconds=settings.client_request_timeout_seconds,
        name="typeahead",
    )
    return TypeaheadController(
        api_client.search,
        cache,
        on_change,
        debounce_seconds=settings.typeahead_debounce_seconds,
        timeout_seconds=settings.client_request_timeout_seconds,
    )
