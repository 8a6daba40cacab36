"""
Slot Selector

Chooses which days of a cadence window get a call and what time of day each
call is placed at. Randomness comes from an injected source so tests can
script exact outputs.
"""

import random
from datetime import datetime, timedelta
from typing import Protocol

from take5.shared.cadence import HourRange


class RandomSource(Protocol):
    """Anything with an inclusive uniform integer draw (random.Random fits)."""

    def randint(self, a: int, b: int) -> int: ...


class SlotSelector:
    """
    Randomized day and time-of-day selection.

    Each selector owns its random source, so concurrent callers that build
    their own selectors never share state.
    """

    def __init__(self, rng: RandomSource | None = None, *, seed: int | None = None) -> None:
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)

    def pick_days(
        self,
        window_start: datetime,
        window_length_days: int,
        count: int,
    ) -> list[datetime]:
        """
        Select distinct days from a window, uniformly and without replacement.

        Args:
            window_start: First day of the window (its time of day is kept)
            window_length_days: Number of consecutive days in the window
            count: Days wanted; capped at the window length

        Returns:
            Selected days sorted ascending, at most one per calendar date

        Raises:
            ValueError: If the window is empty
        """
        if window_length_days < 1:
            raise ValueError(f"window_length_days must be >= 1, got {window_length_days}")

        available = [window_start + timedelta(days=i) for i in range(window_length_days)]
        wanted = max(0, min(count, window_length_days))

        selected: list[datetime] = []
        for _ in range(wanted):
            index = self._rng.randint(0, len(available) - 1)
            selected.append(available.pop(index))

        return sorted(selected)

    def random_time_within(self, hour_range: HourRange) -> tuple[int, int]:
        """
        Draw a time of day inside an inclusive hour range.

        Returns:
            (hour, minute) with hour in [start, end] and minute in [0, 59]
        """
        start, end = hour_range
        if start > end:
            raise ValueError(f"Invalid hour range: {hour_range}")
        hour = self._rng.randint(start, end)
        minute = self._rng.randint(0, 59)
        return hour, minute
