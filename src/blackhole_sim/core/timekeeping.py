"""Frame clock feeding wall-clock deltas into the engine."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`.

    ``tick`` returns the seconds since the previous tick, capped at
    ``max_dt`` so a stalled window does not produce one huge step.
    """

    max_dt: float = 0.1
    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return min(max(dt, 0.0), self.max_dt)

    def restart(self) -> None:
        self.last_time = time.perf_counter()


__all__ = ["FrameTimer"]
