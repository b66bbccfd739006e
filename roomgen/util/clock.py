"""A system to pace host ticks while generation runs continuously."""

import statistics
import time
from collections import deque

from roomgen.config import FPS_SAMPLE_SIZE
from roomgen.types import DeltaTime


class Clock:
    """Measure tick rate and sync to a given number of ticks per second."""

    def __init__(self) -> None:
        self.last_time = time.perf_counter()
        self.last_delta_time: DeltaTime = DeltaTime(0.0)
        self.time_samples: deque[float] = deque(maxlen=FPS_SAMPLE_SIZE)
        self.drift_time = 0.0

    def sync(self, tps: float | None = None) -> DeltaTime:
        """Sync to a given tick rate and return the delta time."""
        if tps is not None:
            desired_tick_time = 1 / tps
            target_time = self.last_time + desired_tick_time - self.drift_time
            sleep_time = max(0, target_time - time.perf_counter() - 0.001)
            if sleep_time:
                time.sleep(sleep_time)
            while (drift_time := time.perf_counter() - target_time) < 0:
                pass
            self.drift_time = min(drift_time, desired_tick_time)

        current_time = time.perf_counter()
        delta_time = DeltaTime(max(0, current_time - self.last_time))
        self.last_time = current_time
        self.last_delta_time = delta_time
        self.time_samples.append(delta_time)
        return delta_time

    @property
    def mean_tps(self) -> float:
        """The tick rate over the sampled ticks."""
        if not self.time_samples:
            return 0
        try:
            return 1 / statistics.fmean(self.time_samples)
        except ZeroDivisionError:
            return 0
