"""
Shared query contracts for the read layer.

Readers describe what they want with these types and hand them to a
QueryService. Nothing here performs IO.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Sequence


class QueryFailure(Exception):
    """A remote query failed (network, permission, malformed query)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class QueryConstructionError(ValueError):
    """A query description is invalid and must not be sent."""


class Operator(str, Enum):
    """Predicate operators supported by the remote store."""

    EQ = "eq"
    IS_NULL = "is_null"
    IN = "in"
    CONTAINS = "contains"


@dataclass(frozen=True)
class Predicate:
    """A single field-operator-value condition. Predicates are AND-combined."""

    field: str
    operator: Operator
    value: Any = None


def eq(field_name: str, value: Any) -> Predicate:
    return Predicate(field_name, Operator.EQ, value)


def is_null(field_name: str) -> Predicate:
    return Predicate(field_name, Operator.IS_NULL)


def in_(field_name: str, values: Sequence[Any]) -> Predicate:
    return Predicate(field_name, Operator.IN, tuple(values))


def contains(field_name: str, values: Sequence[Any]) -> Predicate:
    """Array column contains every one of `values`."""
    return Predicate(field_name, Operator.CONTAINS, tuple(values))


@dataclass(frozen=True)
class Collection:
    """A named remote table and the columns it exposes."""

    name: str
    columns: frozenset[str]

    def has_column(self, column: str) -> bool:
        return column in self.columns


@dataclass(frozen=True)
class Sort:
    """Sort specification delegated to the remote store."""

    field: str
    ascending: bool = True


def _check_filters(collection: Collection, filters: Sequence[Predicate]) -> None:
    for predicate in filters:
        if not collection.has_column(predicate.field):
            raise QueryConstructionError(
                f"Unknown filter field '{predicate.field}' for collection '{collection.name}'"
            )


@dataclass(frozen=True)
class StatSpec:
    """
    Declarative description of one count query.

    Only a cardinality is ever requested, never row bodies.
    """

    name: str
    collection: Collection
    filters: tuple[Predicate, ...] = ()
    count_column: str = "id"

    def __post_init__(self):
        object.__setattr__(self, "filters", tuple(self.filters))
        _check_filters(self.collection, self.filters)
        if not self.collection.has_column(self.count_column):
            raise QueryConstructionError(
                f"Unknown count column '{self.count_column}' for collection '{self.collection.name}'"
            )


@dataclass(frozen=True)
class ListingQuery:
    """
    Declarative description of a filtered, sorted read.

    A limit of 0 or None means no limit is applied by this layer.
    """

    collection: Collection
    sort_field: str
    sort_ascending: bool = True
    filters: tuple[Predicate, ...] = ()
    limit: Optional[int] = None
    columns: str = "*"

    def __post_init__(self):
        object.__setattr__(self, "filters", tuple(self.filters))
        if not self.collection.has_column(self.sort_field):
            raise QueryConstructionError(
                f"Unknown sort field '{self.sort_field}' for collection '{self.collection.name}'"
            )
        _check_filters(self.collection, self.filters)
        if self.limit is not None and self.limit < 0:
            raise QueryConstructionError(f"Limit must not be negative, got {self.limit}")

    @property
    def sort(self) -> Sort:
        return Sort(field=self.sort_field, ascending=self.sort_ascending)

    @property
    def effective_limit(self) -> Optional[int]:
        return self.limit or None


class QueryService(Protocol):
    """
    Remote query capability shared by every reader.

    Implementations are stateless and reentrant; any number of calls may be
    in flight at once. Failures are raised as QueryFailure.
    """

    async def count(
        self,
        collection: str,
        filters: Sequence[Predicate],
        count_column: str = "id",
    ) -> Optional[int]:
        ...

    async def select(
        self,
        collection: str,
        filters: Sequence[Predicate],
        sort: Sort,
        limit: Optional[int] = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        ...
