"""Round-robin rider auto-assignment."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


class RoundRobinAssigner:
    """Hands out riders in rotation using a single counter.

    The counter lives as long as the admin session that owns it. Inactive
    riders are not skipped.
    """

    def __init__(self) -> None:
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    def pick(self, riders: Sequence[T]) -> T | None:
        if not riders:
            return None
        idx = self._counter % len(riders)
        self._counter = idx + 1
        return riders[idx]

    def reset(self) -> None:
        self._counter = 0
