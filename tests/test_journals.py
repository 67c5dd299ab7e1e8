import pytest

from catalog.config import PLACEHOLDER_IMAGE_URL
from catalog.journals import (
    FEATURED_SECTION,
    JOURNAL_NOT_FOUND,
    JOURNAL_SELECT,
    CategoryCount,
    JournalCategoriesReader,
    JournalDetailReader,
    JournalListingOptions,
    build_journal_query,
    count_categories,
    journal_listing_reader,
    map_journal_row,
)
from catalog.query import QueryConstructionError, contains, eq, is_null


def test_map_journal_row_uses_defaults_for_missing_fields():
    item = map_journal_row({"id": 7, "full_title": "Philippine Journal of Surgery"})

    assert item.id == "7"
    assert item.title == "Philippine Journal of Surgery"
    assert item.href == "/journals/7"
    assert item.description == "No description available"
    assert item.image_url == PLACEHOLDER_IMAGE_URL
    assert item.category_title == "General"
    assert item.category_href == "/journals/category/general"
    assert item.publisher == "Unknown Publisher"
    assert item.publisher_logo is None
    assert item.society is None
    assert item.issn is None
    assert item.views_count == 0
    assert item.downloads_count == 0
    assert item.is_featured is False
    assert item.is_indexed is False
    assert item.first_year is None


def test_map_journal_row_never_raises_on_malformed_fields():
    item = map_journal_row({
        "id": "abc",
        "full_title": None,
        "subject_area": 42,
        "publisher": "not an object",
        "society": ["also", "wrong"],
        "views_count": "many",
        "downloads_count": None,
        "first_publication_year": "unknown",
        "is_featured": None,
    })

    assert item.title == ""
    assert item.category_title == "General"
    assert item.publisher == "Unknown Publisher"
    assert item.society is None
    assert item.views_count == 0
    assert item.downloads_count == 0
    assert item.first_year is None
    assert item.is_featured is False


def test_map_journal_row_maps_full_record():
    item = map_journal_row({
        "id": "j1",
        "full_title": "Acta Medica Philippina",
        "short_title": "Acta Med Philipp",
        "acronym": "AMP",
        "description": "",
        "aims_scope": "General medicine and allied health",
        "cover_image_url": None,
        "banner_image_url": "https://cdn.example.org/amp.png",
        "subject_area": ["Internal Medicine", "Public Health"],
        "publisher": {"org_name": "University of the Philippines Manila", "logo_url": "https://cdn.example.org/up.png"},
        "society": {"org_name": "Philippine Medical Association"},
        "issn_print": None,
        "issn_online": "2094-9278",
        "e_issn": "2094-9278",
        "language": "English",
        "publication_frequency": "Monthly",
        "first_publication_year": 1939,
        "is_featured": True,
        "is_indexed": True,
        "views_count": 1520,
        "downloads_count": "310",
        "website_url": "https://actamedicaphilippina.upm.edu.ph",
        "email": "editor@example.org",
    })

    assert item.description == "General medicine and allied health"
    assert item.image_url == "https://cdn.example.org/amp.png"
    assert item.category_title == "Internal Medicine"
    assert item.category_href == "/journals/category/Internal Medicine"
    assert item.publisher == "University of the Philippines Manila"
    assert item.publisher_logo == "https://cdn.example.org/up.png"
    assert item.society == "Philippine Medical Association"
    assert item.issn == "2094-9278"
    assert item.frequency == "Monthly"
    assert item.first_year == 1939
    assert item.downloads_count == 310
    assert item.is_featured is True
    assert item.journal_url == "https://actamedicaphilippina.upm.edu.ph"


def test_build_journal_query_composes_filters_in_order():
    options = JournalListingOptions(featured_only=True, category="Cardiology", limit=5)

    query = build_journal_query(options)

    assert query.filters == (
        eq("status", "active"),
        eq("is_featured", True),
        contains("subject_area", ["Cardiology"]),
        is_null("deleted_at"),
    )
    assert query.sort_field == "full_title"
    assert query.sort_ascending is True
    assert query.limit == 5
    assert query.columns == JOURNAL_SELECT


def test_build_journal_query_without_status():
    query = build_journal_query(JournalListingOptions(status=None))

    assert query.filters == (is_null("deleted_at"),)


def test_featured_section_preset():
    query = build_journal_query(FEATURED_SECTION)

    assert query.sort_field == "created_at"
    assert query.sort_ascending is False
    assert query.limit == 3


def test_unknown_sort_field_is_rejected_before_any_call(fake_service):
    with pytest.raises(QueryConstructionError, match="popularity"):
        journal_listing_reader(fake_service, JournalListingOptions(sort_by="popularity"))

    assert fake_service.select_calls == []


def test_count_categories_sorted_by_count_then_name():
    result = count_categories([
        ["Surgery", "Pediatrics"],
        ["Pediatrics"],
        [],
        ["Cardiology", "Surgery"],
    ])

    assert result == [
        CategoryCount("Pediatrics", 2),
        CategoryCount("Surgery", 2),
        CategoryCount("Cardiology", 1),
    ]


@pytest.mark.asyncio
async def test_categories_reader_counts_active_journals(fake_service_cls, make_journal):
    service = fake_service_cls(tables={
        "journals": [
            make_journal(1, subject_area=["Surgery"]),
            make_journal(2, subject_area=["Surgery", "Oncology"]),
            make_journal(3, subject_area=None),
            make_journal(4, subject_area=["Oncology"], status="inactive"),
        ]
    })

    state = await JournalCategoriesReader(service).fetch()

    assert state.is_ready
    assert state.data == [CategoryCount("Surgery", 2), CategoryCount("Oncology", 1)]
    assert service.select_calls[0]["columns"] == "subject_area"


@pytest.mark.asyncio
async def test_categories_reader_failure(fake_service_cls):
    service = fake_service_cls(failures={"journals": "HTTP 503"})

    state = await JournalCategoriesReader(service).fetch()

    assert state.is_failed
    assert state.error == "HTTP 503"
    assert state.data == []


@pytest.mark.asyncio
async def test_detail_reader_returns_single_journal(fake_service):
    state = await JournalDetailReader(fake_service, "j3").fetch()

    assert state.is_ready
    assert state.data["full_title"] == "Journal 3"
    call = fake_service.select_calls[0]
    assert call["limit"] == 1
    assert eq("id", "j3") in call["filters"]


@pytest.mark.asyncio
async def test_detail_reader_skips_deleted_journals(fake_service):
    state = await JournalDetailReader(fake_service, "j99").fetch()

    assert state.is_failed
    assert state.error == JOURNAL_NOT_FOUND
    assert state.data is None
