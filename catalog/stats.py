"""
Dashboard statistics aggregation.

Fans out one count query per StatSpec, waits for all of them, and
reconciles the results into a single StatsSnapshot. If any count fails the
whole snapshot degrades to zeros and the reader reports the first failure.
"""

import asyncio
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from .config import QUERY_TIMEOUT
from .fetch_state import Activations, ActivationToken, FetchState
from .query import QueryService, StatSpec, eq, in_, is_null
from .schema import JOURNAL_EDITORIAL_TEAM, JOURNALS, USER_PROFILES

logger = logging.getLogger(__name__)


HOME_STAT_SPECS: tuple[StatSpec, ...] = (
    # Active journals
    StatSpec(
        name="journals",
        collection=JOURNALS,
        filters=(eq("status", "active"), is_null("deleted_at")),
    ),
    # Every journal counts as a published resource
    StatSpec(
        name="resources",
        collection=JOURNALS,
        filters=(is_null("deleted_at"),),
    ),
    StatSpec(
        name="peer_reviewers",
        collection=USER_PROFILES,
        filters=(eq("role", "reviewer"), eq("approval_status", "approved")),
    ),
    StatSpec(
        name="editors",
        collection=JOURNAL_EDITORIAL_TEAM,
        filters=(
            in_("role_type", ["editor_in_chief", "associate_editor"]),
            eq("is_active", True),
        ),
        count_column="person_id",
    ),
)


@dataclass(frozen=True)
class StatsSnapshot:
    """Immutable mapping of stat name to a non-negative count."""

    counts: Mapping[str, int]

    def __post_init__(self):
        object.__setattr__(self, "counts", MappingProxyType(dict(self.counts)))

    @classmethod
    def zeros(cls, names: Iterable[str]) -> "StatsSnapshot":
        return cls({name: 0 for name in names})

    def __getitem__(self, name: str) -> int:
        return self.counts[name]

    def __contains__(self, name: object) -> bool:
        return name in self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def as_dict(self) -> dict[str, int]:
        return dict(self.counts)


@dataclass
class _CountOutcome:
    """Result of one count query within an activation."""

    name: str
    count: int = 0
    error: Optional[str] = None


class AggregateStatsReader:
    """
    Reads several independent counts concurrently into one snapshot.

    Usage:
        reader = AggregateStatsReader(service)
        state = await reader.fetch()
        if state.is_ready:
            print(state.data["journals"])
    """

    def __init__(
        self,
        service: QueryService,
        specs: Sequence[StatSpec] = HOME_STAT_SPECS,
        timeout: Optional[float] = QUERY_TIMEOUT,
    ):
        names = [spec.name for spec in specs]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate stat names: {', '.join(duplicates)}")

        self.service = service
        self.specs = tuple(specs)
        self.timeout = timeout
        self._activations = Activations()
        self._state: FetchState[StatsSnapshot] = FetchState.loading(self._zeros())

    @property
    def state(self) -> FetchState[StatsSnapshot]:
        """Latest published state."""
        return self._state

    def _zeros(self) -> StatsSnapshot:
        return StatsSnapshot.zeros(spec.name for spec in self.specs)

    def cancel(self) -> None:
        """Discard the result of any fetch still in flight."""
        self._activations.cancel()

    def _publish(self, token: ActivationToken, state: FetchState[StatsSnapshot]) -> None:
        if token.is_current:
            self._state = state
        else:
            logger.debug(f"Discarding stale stats result ({token!r})")

    async def _count(self, spec: StatSpec) -> _CountOutcome:
        """Run one count, converting any failure into an outcome."""
        try:
            call = self.service.count(
                spec.collection.name,
                spec.filters,
                count_column=spec.count_column,
            )
            if self.timeout:
                count = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                count = await call
        except Exception as e:
            if self.timeout and isinstance(e, asyncio.TimeoutError):
                reason = f"timeout after {self.timeout:g}s"
            else:
                reason = getattr(e, "reason", None) or str(e) or e.__class__.__name__
            return _CountOutcome(name=spec.name, error=reason)

        return _CountOutcome(name=spec.name, count=max(int(count or 0), 0))

    async def fetch(self) -> FetchState[StatsSnapshot]:
        """
        Run one fetch cycle.

        Returns:
            Ready with real counts when every query succeeds, otherwise
            Failed with the first failure reason and an all-zero snapshot.
            A superseded cycle still returns its own result but does not
            publish it to `state`.
        """
        token = self._activations.begin()
        self._publish(token, FetchState.loading(self._zeros()))

        if not self.specs:
            result = FetchState.ready(StatsSnapshot({}))
            self._publish(token, result)
            return result

        outcomes = await asyncio.gather(*(self._count(spec) for spec in self.specs))

        failures = [o for o in outcomes if o.error is not None]
        for failure in failures:
            logger.warning(f"Stat '{failure.name}' failed: {failure.error}")

        if failures:
            result = FetchState.failed(failures[0].error, self._zeros())
        else:
            result = FetchState.ready(StatsSnapshot({o.name: o.count for o in outcomes}))

        self._publish(token, result)
        return result
