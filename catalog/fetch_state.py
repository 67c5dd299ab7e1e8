"""
Tri-state fetch results and activation tokens.

Readers publish a FetchState that is exactly one of loading, failed or
ready. Each fetch cycle runs under an ActivationToken; starting a new cycle
(or cancelling) invalidates older tokens so their results are never
published.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FetchStatus(str, Enum):
    LOADING = "loading"
    FAILED = "failed"
    READY = "ready"


@dataclass(frozen=True)
class FetchState(Generic[T]):
    """
    Result of one fetch cycle as seen by the presentation layer.

    A failed state carries the empty/default data value and the reason.
    """

    status: FetchStatus
    data: T
    error: Optional[str] = None

    @classmethod
    def loading(cls, default: T) -> "FetchState[T]":
        return cls(status=FetchStatus.LOADING, data=default)

    @classmethod
    def failed(cls, reason: str, default: T) -> "FetchState[T]":
        return cls(status=FetchStatus.FAILED, data=default, error=reason)

    @classmethod
    def ready(cls, data: T) -> "FetchState[T]":
        return cls(status=FetchStatus.READY, data=data)

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def is_failed(self) -> bool:
        return self.status is FetchStatus.FAILED

    @property
    def is_ready(self) -> bool:
        return self.status is FetchStatus.READY


class ActivationToken:
    """Identifies one fetch cycle of a reader."""

    def __init__(self, activations: "Activations", sequence: int):
        self._activations = activations
        self.sequence = sequence

    @property
    def is_current(self) -> bool:
        return self._activations.current == self.sequence

    def __repr__(self) -> str:
        return f"ActivationToken(sequence={self.sequence}, current={self.is_current})"


class Activations:
    """Monotonic activation counter owned by a single reader."""

    def __init__(self):
        self.current = 0

    def begin(self) -> ActivationToken:
        """Start a new activation, superseding any in flight."""
        self.current += 1
        return ActivationToken(self, self.current)

    def cancel(self) -> None:
        """Invalidate the current activation without starting another."""
        self.current += 1
