"""
Statistics-related schemas.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HomeStats(BaseModel):
    """Dashboard counts. All zero when the stats could not be loaded."""
    model_config = ConfigDict(populate_by_name=True)

    journals: int = 0
    resources: int = 0
    peer_reviewers: int = Field(default=0, alias="peerReviewers")
    editors: int = 0


class StatsResponse(BaseModel):
    """Dashboard statistics with the fetch outcome."""
    status: str  # "ready" or "failed"
    error: Optional[str] = None
    stats: HomeStats
