"""API routes returning JSON for external consumers."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from mediafetch.core.errors import MediaFetchError
from mediafetch.models.filters import Filters, Order, Sort
from mediafetch.providers import ProviderRegistry
from mediafetch.providers.base import Genre, MediaProvider, NavInfo
from mediafetch.services.search import ResultGroup, search_providers

router = APIRouter()


def _get_provider(name: str) -> MediaProvider:
    provider = ProviderRegistry.get(name)
    if provider is None:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {name}")
    return provider


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "mediafetch"}


@router.get("/providers")
async def list_providers():
    """List all registered providers."""
    return {"providers": ProviderRegistry.names()}


@router.get("/providers/{name}/navigation", response_model=List[NavInfo])
async def provider_navigation(name: str):
    """Sort tabs of a provider, in display order."""
    return _get_provider(name).get_navigation()


@router.get("/providers/{name}/genres", response_model=List[Genre])
async def provider_genres(name: str):
    return _get_provider(name).get_genres()


@router.get("/providers/{name}/items", response_model=ResultGroup)
async def provider_items(
    name: str,
    keywords: Optional[str] = Query(None, description="Search keywords"),
    genre: Optional[str] = Query(None),
    sort: Sort = Query(Sort.POPULARITY),
    order: Order = Query(Order.DESC),
    page: Optional[int] = Query(None, ge=1),
    lang: Optional[str] = Query("en"),
):
    """Fetch one page of a provider's catalog. The page asked for is the page served."""
    provider = _get_provider(name)
    filters = Filters(
        keywords=keywords,
        genre=genre,
        sort=sort,
        order=order,
        page=page,
        lang_code=lang,
    )
    try:
        result = await provider.paged().fetch_list(None, filters)
    except MediaFetchError as e:
        raise HTTPException(
            status_code=502, detail={"kind": e.kind.value, "message": str(e)}
        ) from e
    return ResultGroup(
        provider_name=provider.name, title=provider.result_title, items=result.items
    )


@router.get("/search", response_model=List[ResultGroup])
async def api_search(q: str = Query(..., min_length=1, description="Search query")):
    """Search every registered provider."""
    return await search_providers(q)
