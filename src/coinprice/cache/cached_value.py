from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

# Returns seconds; monotonic for TTLs, wall clock where UTC days matter
Clock = Callable[[], float]


@dataclass(frozen=True)
class CachedValue(Generic[T]):
    """A value paired with the instant it was produced."""

    value: T
    produced_at: float

    def is_fresh(self, ttl: float, now: float) -> bool:
        return now - self.produced_at < ttl
