"""
Journal-related schemas.
"""

from typing import Any, Optional

from pydantic import BaseModel


class JournalSummary(BaseModel):
    """A journal as shown in listings."""
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


class JournalListResponse(BaseModel):
    """Response containing a list of journals."""
    journals: list[JournalSummary]
    total: int


class CategoryCount(BaseModel):
    """Number of journals in a subject area."""
    name: str
    count: int


class CategoryListResponse(BaseModel):
    """Response containing subject areas."""
    categories: list[CategoryCount]
    total: int


class JournalDetailResponse(BaseModel):
    """A single journal record with related organizations, indexing and editorial team."""
    journal: dict[str, Any]
