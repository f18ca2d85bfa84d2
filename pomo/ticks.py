"""Generation-tagged countdown ticks.

Nothing here holds state. A ``ScheduleTick`` command asks the host loop to
deliver ``TickEvent(generation)`` back to the session after one quantum; the
session drops any tick whose generation is no longer current, which is the
only cancellation there is.
"""

from dataclasses import dataclass
from datetime import timedelta

TICK_QUANTUM = timedelta(seconds=1)


@dataclass(frozen=True)
class TickEvent:
    """One quantum elapsed for the tick chain tagged ``generation``."""
    generation: int


@dataclass(frozen=True)
class ScheduleTick:
    """Deliver ``TickEvent(generation)`` after ``delay``."""
    generation: int
    delay: timedelta = TICK_QUANTUM

    def event(self) -> TickEvent:
        return TickEvent(self.generation)


def schedule_tick(generation: int) -> ScheduleTick:
    """Return the command that produces the next tick for ``generation``."""
    return ScheduleTick(generation)
