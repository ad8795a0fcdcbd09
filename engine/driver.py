"""
Step driver for the Round-Robin & Deadlock engines.

Owns the simulation clock and paces engine steps. Pacing never changes what
an engine computes, only how fast steps are issued; tests pass a no-op
sleep to drive engines synchronously.
"""

import time
from typing import Callable, Optional

RR_MIN_INTERVAL = 0.05
DEADLOCK_MIN_INTERVAL = 0.2
BASE_INTERVAL = 1.0


class SimulationDriver:
    """
    Cancellable driver for any engine exposing step(), pause(), resume(),
    reset() and the paused/halted flags.

    Attributes:
        clock: Number of steps that made progress since the last reset
        cancelled: True after cancel(); no further steps are issued
    """

    def __init__(
        self,
        engine,
        speed: float = 1.0,
        base_interval: float = BASE_INTERVAL,
        min_interval: float = RR_MIN_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        on_step: Optional[Callable[[int], None]] = None
    ):
        """
        Initialize driver.

        Args:
            engine: Engine to drive
            speed: Speed multiplier (2.0 = twice as fast)
            base_interval: Seconds between steps at speed 1.0
            min_interval: Lower bound on the pause between steps
            sleep: Sleep function used between steps
            on_step: Callback invoked with the clock after each step
        """
        if speed <= 0:
            raise ValueError(f"Speed must be positive (got {speed})")
        self.engine = engine
        self.speed = speed
        self.base_interval = base_interval
        self.min_interval = min_interval
        self.sleep = sleep
        self.on_step = on_step
        self.clock = 0
        self.cancelled = False

    @property
    def interval(self) -> float:
        """Seconds to wait between two steps."""
        return max(self.min_interval, self.base_interval / self.speed)

    def set_speed(self, speed: float) -> None:
        if speed <= 0:
            raise ValueError(f"Speed must be positive (got {speed})")
        self.speed = speed

    def step(self) -> bool:
        """
        Issue one engine step unless paused or cancelled.

        Returns:
            True if the engine made progress
        """
        if self.cancelled or self.engine.paused:
            return False
        progressed = self.engine.step()
        if progressed:
            self.clock += 1
        return progressed

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        Step repeatedly until the engine halts or makes no progress, the
        driver is paused or cancelled, or max_steps is reached.

        Args:
            max_steps: Upper bound on steps for this call (None = unbounded)

        Returns:
            Number of steps that made progress during this call
        """
        steps = 0
        while not self.cancelled and not self.engine.paused:
            if max_steps is not None and steps >= max_steps:
                break
            if not self.step():
                break
            steps += 1
            if self.on_step:
                self.on_step(self.clock)
            if self.engine.halted or self.cancelled or self.engine.paused:
                break
            self.sleep(self.interval)
        return steps

    def pause(self) -> None:
        self.engine.pause()

    def resume(self) -> None:
        self.engine.resume()

    def cancel(self) -> None:
        """Stop issuing steps; a step in progress always completes."""
        self.cancelled = True

    def reset(self) -> None:
        """Reset the engine and the clock; the driver becomes usable again."""
        self.engine.reset()
        self.clock = 0
        self.cancelled = False
