"""
Statistics endpoints.
"""

from fastapi import APIRouter

from ..deps import QueryServiceDep
from ..schemas.stats import HomeStats, StatsResponse
from catalog.stats import AggregateStatsReader

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: QueryServiceDep):
    """
    Get the dashboard statistics.

    Always answers 200. When any count fails every stat is reported as 0
    together with the failure reason, so the page can still render.
    """
    state = await AggregateStatsReader(service).fetch()

    return StatsResponse(
        status=state.status.value,
        error=state.error,
        stats=HomeStats(**state.data.as_dict()),
    )
