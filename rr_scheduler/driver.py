from __future__ import annotations

import time
from typing import Callable, Optional

from .engine import Simulation
from .models import Snapshot

TickCallback = Callable[[Snapshot], Optional[bool]]


def drive(
    simulation: Simulation,
    on_tick: Optional[TickCallback] = None,
    delay: float = 0.0,
    max_ticks: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Invoke ``simulation.tick()`` repeatedly at a fixed cadence.

    Stops when the run completes, after ``max_ticks`` ticks, or when
    ``on_tick`` returns False. Stopping is a pause: state is left as it is and
    a later call picks up from the same tick. Returns the number of ticks run.
    """
    ticks = 0
    while not simulation.is_completed:
        if max_ticks is not None and ticks >= max_ticks:
            break

        snapshot = simulation.tick()
        ticks += 1

        if on_tick is not None and on_tick(snapshot) is False:
            break
        if delay > 0 and not snapshot.is_completed:
            sleep(delay)

    return ticks
