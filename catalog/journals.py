"""
Journal listings, detail and categories.

Builds ListingQuery values for the journal views and maps raw journal rows
(with embedded publisher/society organizations) into display-ready
JournalItem objects.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Optional

from .config import (
    DEFAULT_JOURNAL_SORT,
    DEFAULT_JOURNAL_STATUS,
    FEATURED_SECTION_LIMIT,
    PLACEHOLDER_IMAGE_URL,
    QUERY_TIMEOUT,
)
from .fetch_state import FetchState
from .listing import FilteredListingReader
from .query import ListingQuery, Predicate, QueryService, contains, eq, is_null
from .schema import JOURNALS

JOURNAL_NOT_FOUND = "Journal not found"

_ORG_FIELDS = "id, org_name, org_acronym, org_type, website_url, logo_url"

# Journals with their publisher and society organizations embedded
JOURNAL_SELECT = (
    "*, "
    f"publisher:organizations!journals_publisher_org_id_fkey({_ORG_FIELDS}), "
    f"society:organizations!journals_society_org_id_fkey({_ORG_FIELDS})"
)

JOURNAL_DETAIL_SELECT = (
    "*, "
    "publisher:organizations!journals_publisher_org_id_fkey("
    "id, org_name, org_acronym, org_type, website_url, email, phone, address, city, country, logo_url), "
    "society:organizations!journals_society_org_id_fkey("
    "id, org_name, org_acronym, org_type, website_url, email, logo_url), "
    "indexing:journal_indexing("
    "id, indexed_since, status, "
    "service:indexing_services(service_name, service_acronym, website_url, logo_url)), "
    "editorial_team:journal_editorial_team("
    "id, role, role_type, is_active, "
    "person:people(id, full_name, title, affiliation, photo_url, email))"
)


@dataclass(frozen=True)
class JournalItem:
    """A journal row normalized for display."""

    id: str
    title: str
    href: str
    description: str
    image_url: str
    category_title: str
    category_href: str
    publisher: str
    publisher_logo: Optional[str] = None
    society: Optional[str] = None
    short_title: Optional[str] = None
    acronym: Optional[str] = None
    journal_type: Optional[str] = None
    peer_review_type: Optional[str] = None
    issn: Optional[str] = None
    issn_print: Optional[str] = None
    issn_online: Optional[str] = None
    eissn: Optional[str] = None
    language: Optional[str] = None
    frequency: Optional[str] = None
    first_year: Optional[int] = None
    is_featured: bool = False
    is_indexed: bool = False
    views_count: int = 0
    downloads_count: int = 0
    journal_url: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class CategoryCount:
    """Number of active journals in one subject area."""

    name: str
    count: int


@dataclass(frozen=True)
class JournalListingOptions:
    """Options accepted by the journal listing views."""

    featured_only: bool = False
    category: Optional[str] = None
    status: Optional[str] = DEFAULT_JOURNAL_STATUS
    limit: Optional[int] = None
    sort_by: str = DEFAULT_JOURNAL_SORT
    ascending: bool = True


# Home page section: newest featured journals
FEATURED_SECTION = JournalListingOptions(
    featured_only=True,
    sort_by="created_at",
    ascending=False,
    limit=FEATURED_SECTION_LIMIT,
)

# Featured journals page: most viewed first
FEATURED_PAGE = JournalListingOptions(
    featured_only=True,
    sort_by="views_count",
    ascending=False,
)

BROWSE_ALL = JournalListingOptions()


# ===================
# Row mapping
# ===================
def _text(value: Any) -> Optional[str]:
    """Non-empty string or None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _org(row: dict[str, Any], key: str) -> dict[str, Any]:
    org = row.get(key)
    return org if isinstance(org, dict) else {}


def _subject_areas(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [area for area in (_text(v) for v in value) if area]


def map_journal_row(row: dict[str, Any]) -> JournalItem:
    """
    Map a raw journal row into a JournalItem.

    Never raises for a row of the journals collection: missing or malformed
    optional fields fall back to defaults.
    """
    journal_id = _text(row.get("id")) or ""
    areas = _subject_areas(row.get("subject_area"))
    first_area = areas[0] if areas else None
    publisher = _org(row, "publisher")
    society = _org(row, "society")
    issn_print = _text(row.get("issn_print"))
    issn_online = _text(row.get("issn_online"))

    return JournalItem(
        id=journal_id,
        title=_text(row.get("full_title")) or "",
        href=f"/journals/{journal_id}",
        description=(
            _text(row.get("description"))
            or _text(row.get("aims_scope"))
            or "No description available"
        ),
        image_url=(
            _text(row.get("cover_image_url"))
            or _text(row.get("banner_image_url"))
            or PLACEHOLDER_IMAGE_URL
        ),
        category_title=first_area or "General",
        category_href=f"/journals/category/{first_area or 'general'}",
        publisher=_text(publisher.get("org_name")) or "Unknown Publisher",
        publisher_logo=_text(publisher.get("logo_url")),
        society=_text(society.get("org_name")),
        short_title=_text(row.get("short_title")),
        acronym=_text(row.get("acronym")),
        journal_type=_text(row.get("journal_type")),
        peer_review_type=_text(row.get("peer_review_type")),
        issn=issn_print or issn_online,
        issn_print=issn_print,
        issn_online=issn_online,
        eissn=_text(row.get("e_issn")),
        language=_text(row.get("language")),
        frequency=_text(row.get("publication_frequency")),
        first_year=_int(row.get("first_publication_year"), default=None),
        is_featured=bool(row.get("is_featured") or False),
        is_indexed=bool(row.get("is_indexed") or False),
        views_count=_int(row.get("views_count")),
        downloads_count=_int(row.get("downloads_count")),
        journal_url=_text(row.get("website_url")),
        email=_text(row.get("email")),
    )


# ===================
# Query building
# ===================
def build_journal_query(options: JournalListingOptions) -> ListingQuery:
    """
    Compose the journal ListingQuery for a set of view options.

    Raises:
        QueryConstructionError: If sort_by is not a journal column or limit is negative
    """
    filters: list[Predicate] = []

    if options.status:
        filters.append(eq("status", options.status))

    if options.featured_only:
        filters.append(eq("is_featured", True))

    if options.category:
        filters.append(contains("subject_area", [options.category]))

    # Soft-deleted journals are never listed
    filters.append(is_null("deleted_at"))

    return ListingQuery(
        collection=JOURNALS,
        filters=tuple(filters),
        sort_field=options.sort_by,
        sort_ascending=options.ascending,
        limit=options.limit,
        columns=JOURNAL_SELECT,
    )


def journal_listing_reader(
    service: QueryService,
    options: JournalListingOptions = BROWSE_ALL,
    timeout: Optional[float] = QUERY_TIMEOUT,
) -> FilteredListingReader[JournalItem]:
    """Reader for a journal listing view."""
    return FilteredListingReader(
        service,
        build_journal_query(options),
        map_journal_row,
        timeout=timeout,
    )


# ===================
# Detail and categories
# ===================
class JournalDetailReader:
    """Reads a single non-deleted journal with its related records."""

    def __init__(
        self,
        service: QueryService,
        journal_id: str,
        timeout: Optional[float] = QUERY_TIMEOUT,
    ):
        query = ListingQuery(
            collection=JOURNALS,
            filters=(eq("id", journal_id), is_null("deleted_at")),
            sort_field="id",
            limit=1,
            columns=JOURNAL_DETAIL_SELECT,
        )
        self.journal_id = journal_id
        self._listing: FilteredListingReader[dict[str, Any]] = FilteredListingReader(
            service, query, dict, timeout=timeout
        )

    def cancel(self) -> None:
        self._listing.cancel()

    async def fetch(self) -> FetchState[Optional[dict[str, Any]]]:
        state = await self._listing.fetch()

        if state.is_failed:
            return FetchState.failed(state.error or "", None)

        if not state.data:
            return FetchState.failed(JOURNAL_NOT_FOUND, None)

        return FetchState.ready(state.data[0])


def count_categories(subject_areas: list[list[str]]) -> list[CategoryCount]:
    """
    Flatten per-journal subject areas into counts.

    Sorted by count descending, then by name.
    """
    counter: Counter[str] = Counter()
    for areas in subject_areas:
        counter.update(areas)

    return [
        CategoryCount(name=name, count=count)
        for name, count in sorted(counter.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


class JournalCategoriesReader:
    """Subject areas of active journals with how many journals use each."""

    def __init__(self, service: QueryService, timeout: Optional[float] = QUERY_TIMEOUT):
        query = ListingQuery(
            collection=JOURNALS,
            filters=(eq("status", DEFAULT_JOURNAL_STATUS), is_null("deleted_at")),
            sort_field="id",
            columns="subject_area",
        )
        self._listing: FilteredListingReader[list[str]] = FilteredListingReader(
            service,
            query,
            lambda row: _subject_areas(row.get("subject_area")),
            timeout=timeout,
        )

    def cancel(self) -> None:
        self._listing.cancel()

    async def fetch(self) -> FetchState[list[CategoryCount]]:
        state = await self._listing.fetch()

        if state.is_failed:
            return FetchState.failed(state.error or "", [])

        return FetchState.ready(count_categories(state.data))
