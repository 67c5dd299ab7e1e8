"""
Filtered, sorted listings.

One select per fetch cycle; rows come back in the order the remote store
sorted them and are mapped one by one into display items.
"""

import asyncio
import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from .config import QUERY_TIMEOUT
from .fetch_state import Activations, ActivationToken, FetchState
from .query import ListingQuery, QueryService

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

RowMapper = Callable[[dict[str, Any]], ItemT]


class FilteredListingReader(Generic[ItemT]):
    """
    Reads one ListingQuery into an ordered list of items.

    The mapper must be total: it has to produce an item for any row of the
    collection, substituting defaults for missing optional fields.
    """

    def __init__(
        self,
        service: QueryService,
        query: ListingQuery,
        mapper: RowMapper,
        timeout: Optional[float] = QUERY_TIMEOUT,
    ):
        self.service = service
        self.query = query
        self.mapper = mapper
        self.timeout = timeout
        self._activations = Activations()
        self._state: FetchState[list[ItemT]] = FetchState.loading([])

    @property
    def state(self) -> FetchState[list[ItemT]]:
        """Latest published state."""
        return self._state

    def cancel(self) -> None:
        """Discard the result of any fetch still in flight."""
        self._activations.cancel()

    def _publish(self, token: ActivationToken, state: FetchState[list[ItemT]]) -> None:
        if token.is_current:
            self._state = state
        else:
            logger.debug(f"Discarding stale {self.query.collection.name} listing ({token!r})")

    async def _select(self) -> list[dict[str, Any]]:
        query = self.query
        call = self.service.select(
            query.collection.name,
            query.filters,
            query.sort,
            limit=query.effective_limit,
            columns=query.columns,
        )
        if self.timeout:
            return await asyncio.wait_for(call, timeout=self.timeout)
        return await call

    async def fetch(self) -> FetchState[list[ItemT]]:
        """
        Run one fetch cycle.

        Returns:
            Ready with the mapped rows (possibly empty), or Failed with the
            reason and an empty list.
        """
        token = self._activations.begin()
        self._publish(token, FetchState.loading([]))

        try:
            rows = await self._select()
        except Exception as e:
            if self.timeout and isinstance(e, asyncio.TimeoutError):
                reason = f"timeout after {self.timeout:g}s"
            else:
                reason = getattr(e, "reason", None) or str(e) or e.__class__.__name__
            logger.warning(f"Listing from {self.query.collection.name} failed: {reason}")
            result = FetchState.failed(reason, [])
            self._publish(token, result)
            return result

        items = [self.mapper(row) for row in rows or []]
        result = FetchState.ready(items)
        self._publish(token, result)
        return result
