import asyncio
from typing import Any, Optional

import pytest

from catalog.query import Operator, QueryFailure


def _matches(row: dict[str, Any], predicate) -> bool:
    value = row.get(predicate.field)
    if predicate.operator is Operator.EQ:
        return value == predicate.value
    if predicate.operator is Operator.IS_NULL:
        return value is None
    if predicate.operator is Operator.IN:
        return value in predicate.value
    if predicate.operator is Operator.CONTAINS:
        return isinstance(value, list) and all(v in value for v in predicate.value)
    raise AssertionError(f"unexpected operator {predicate.operator}")


class FakeQueryService:
    """In-memory QueryService over lists of row dicts."""

    def __init__(
        self,
        tables: Optional[dict[str, list[dict[str, Any]]]] = None,
        failures: Optional[dict[str, str]] = None,
        delays: Optional[dict[str, float]] = None,
    ):
        self.tables = tables or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.count_calls: list[tuple] = []
        self.select_calls: list[dict[str, Any]] = []

    async def _settle(self, collection: str) -> None:
        delay = self.delays.get(collection)
        if delay:
            await asyncio.sleep(delay)
        if collection in self.failures:
            raise QueryFailure(self.failures[collection])

    def _rows(self, collection: str, filters) -> list[dict[str, Any]]:
        rows = self.tables.get(collection, [])
        return [r for r in rows if all(_matches(r, p) for p in filters)]

    async def count(self, collection, filters, count_column="id"):
        self.count_calls.append((collection, tuple(filters), count_column))
        matched = len(self._rows(collection, filters))
        await self._settle(collection)
        return matched

    async def select(self, collection, filters, sort, limit=None, columns="*"):
        self.select_calls.append({
            "collection": collection,
            "filters": tuple(filters),
            "sort": sort,
            "limit": limit,
            "columns": columns,
        })
        rows = sorted(
            self._rows(collection, filters),
            key=lambda r: (r.get(sort.field) is None, r.get(sort.field)),
            reverse=not sort.ascending,
        )
        if limit:
            rows = rows[:limit]
        rows = [dict(r) for r in rows]
        await self._settle(collection)
        return rows


def _journal(n: int, **fields) -> dict[str, Any]:
    row = {
        "id": f"j{n}",
        "full_title": f"Journal {n}",
        "status": "active",
        "is_featured": False,
        "deleted_at": None,
        "views_count": 0,
        "subject_area": ["General Medicine"],
    }
    row.update(fields)
    return row


@pytest.fixture
def make_journal():
    return _journal


@pytest.fixture
def fake_service_cls():
    return FakeQueryService


@pytest.fixture
def directory_tables():
    """12 active journals of 20, 5 approved reviewers, 3 active editors."""
    journals = [_journal(i) for i in range(12)]
    journals += [_journal(i, status="inactive") for i in range(12, 20)]
    # Soft-deleted rows are never counted
    journals.append(_journal(99, deleted_at="2025-01-01T00:00:00Z"))

    profiles = [{"id": f"u{i}", "role": "reviewer", "approval_status": "approved"} for i in range(5)]
    profiles += [
        {"id": "u10", "role": "reviewer", "approval_status": "pending"},
        {"id": "u11", "role": "author", "approval_status": "approved"},
    ]

    team = [
        {"id": "t1", "person_id": "p1", "role_type": "editor_in_chief", "is_active": True},
        {"id": "t2", "person_id": "p2", "role_type": "associate_editor", "is_active": True},
        {"id": "t3", "person_id": "p3", "role_type": "associate_editor", "is_active": True},
        {"id": "t4", "person_id": "p4", "role_type": "associate_editor", "is_active": False},
        {"id": "t5", "person_id": "p5", "role_type": "board_member", "is_active": True},
    ]

    return {
        "journals": journals,
        "user_profiles": profiles,
        "journal_editorial_team": team,
    }


@pytest.fixture
def fake_service(directory_tables):
    return FakeQueryService(tables=directory_tables)
