"""
Journal listing and detail endpoints.
"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..deps import QueryServiceDep
from ..schemas.journal import (
    CategoryCount,
    CategoryListResponse,
    JournalDetailResponse,
    JournalListResponse,
    JournalSummary,
)
from catalog.config import DEFAULT_JOURNAL_SORT, DEFAULT_JOURNAL_STATUS
from catalog.journals import (
    FEATURED_PAGE,
    FEATURED_SECTION,
    JOURNAL_NOT_FOUND,
    JournalCategoriesReader,
    JournalDetailReader,
    JournalListingOptions,
    journal_listing_reader,
)
from catalog.query import QueryConstructionError, QueryService

router = APIRouter()


async def _list_journals(service: QueryService, options: JournalListingOptions) -> JournalListResponse:
    try:
        reader = journal_listing_reader(service, options)
    except QueryConstructionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    state = await reader.fetch()

    if state.is_failed:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to load journals: {state.error}",
        )

    journals = [JournalSummary(**asdict(item)) for item in state.data]

    return JournalListResponse(
        journals=journals,
        total=len(journals),
    )


@router.get("/journals", response_model=JournalListResponse)
async def get_journals(
    service: QueryServiceDep,
    featured: bool = Query(False, description="Only featured journals"),
    category: Optional[str] = Query(None, description="Filter by subject area"),
    status: Optional[str] = Query(DEFAULT_JOURNAL_STATUS, description="Filter by journal status"),
    sort_by: str = Query(DEFAULT_JOURNAL_SORT, description="Column to sort by"),
    ascending: bool = Query(True, description="Sort direction"),
    limit: Optional[int] = Query(None, ge=0, le=1000),
):
    """
    List journals.

    Filtering and sorting are done by the remote store.
    """
    options = JournalListingOptions(
        featured_only=featured,
        category=category,
        status=status or None,
        limit=limit,
        sort_by=sort_by,
        ascending=ascending,
    )
    return await _list_journals(service, options)


@router.get("/journals/featured", response_model=JournalListResponse)
async def get_featured_journals(
    service: QueryServiceDep,
    limit: Optional[int] = Query(None, ge=0, le=1000),
):
    """List featured journals, most viewed first."""
    options = JournalListingOptions(
        featured_only=FEATURED_PAGE.featured_only,
        status=FEATURED_PAGE.status,
        sort_by=FEATURED_PAGE.sort_by,
        ascending=FEATURED_PAGE.ascending,
        limit=limit,
    )
    return await _list_journals(service, options)


@router.get("/journals/featured/section", response_model=JournalListResponse)
async def get_featured_section(service: QueryServiceDep):
    """Newest featured journals for the home page."""
    return await _list_journals(service, FEATURED_SECTION)


@router.get("/journals/categories", response_model=CategoryListResponse)
async def get_categories(service: QueryServiceDep):
    """List subject areas of active journals with journal counts."""
    state = await JournalCategoriesReader(service).fetch()

    if state.is_failed:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to load categories: {state.error}",
        )

    categories = [CategoryCount(name=c.name, count=c.count) for c in state.data]

    return CategoryListResponse(
        categories=categories,
        total=len(categories),
    )


@router.get("/journals/{journal_id}", response_model=JournalDetailResponse)
async def get_journal(journal_id: str, service: QueryServiceDep):
    """Get a single journal with its publisher, society, indexing and editorial team."""
    state = await JournalDetailReader(service, journal_id).fetch()

    if state.is_failed:
        if state.error == JOURNAL_NOT_FOUND:
            raise HTTPException(status_code=404, detail=JOURNAL_NOT_FOUND)
        raise HTTPException(
            status_code=502,
            detail=f"Failed to load journal: {state.error}",
        )

    return JournalDetailResponse(journal=state.data)
