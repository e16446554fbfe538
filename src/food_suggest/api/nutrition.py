"""Suggestion and lookup endpoints with simple token auth."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from food_suggest.api.models import (
    LookupResponse,
    ProductModel,
    SuggestionModel,
    SuggestionsResponse,
)
from food_suggest.services.suggestions import (
    LookupUnavailableError,
    ProductNotFoundError,
)

if TYPE_CHECKING:
    from food_suggest.containers import AppContainer

router = APIRouter(prefix="/nutrition", tags=["nutrition"])

_logger = logging.getLogger(__name__)


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get(
    "/search",
    dependencies=[Depends(require_api_token)],
    response_model=SuggestionsResponse,
    response_model_by_alias=True,
)
async def search(
    request: Request, user_id: UUID, q: str = Query(default="")
) -> SuggestionsResponse:
    """Return ranked suggestions for a partial food name."""
    container: AppContainer = request.app.state.container
    try:
        suggestions = await container.suggestion_service.search(user_id, q)
    except Exception as exc:
        _logger.exception("Suggestion search failed", extra={"query": q})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to fetch suggestions right now.",
        ) from exc
    return SuggestionsResponse(
        suggestions=[SuggestionModel.from_domain(item) for item in suggestions]
    )


@router.get(
    "/lookup",
    dependencies=[Depends(require_api_token)],
    response_model=LookupResponse,
    response_model_by_alias=True,
)
async def lookup(
    request: Request,
    user_id: UUID,
    barcode: str | None = None,
    q: str | None = None,
) -> LookupResponse:
    """Resolve a barcode or search term to one product."""
    container: AppContainer = request.app.state.container
    try:
        product = await container.suggestion_service.lookup(
            user_id, barcode=barcode, query_text=q
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except ProductNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except LookupUnavailableError as exc:
        _logger.warning("Lookup unavailable: barcode=%s query=%s", barcode, q)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Nutrition lookup is unavailable right now.",
        ) from exc
    except Exception as exc:
        _logger.exception(
            "Nutrition lookup failed", extra={"barcode": barcode, "query": q}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to look up that item right now.",
        ) from exc
    return LookupResponse(product=ProductModel.from_domain(product))
