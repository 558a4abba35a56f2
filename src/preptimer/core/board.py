"""Timer board — polls the countdown of every active order once per tick.

The board is the scheduling layer around the pure calculator: it keeps a
map from order id to the snapshot being watched, and cancelling a timer is
just removing its entry.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable

from preptimer.core.countdown import TimerState, calculate_timer_state, is_order_preparing
from preptimer.core.snapshot import OrderSnapshot, resolve_now

logger = logging.getLogger(__name__)

TickCallback = Callable[[datetime, "dict[str, TimerState]"], None]


class TimerBoard:
    """Tracks the orders whose countdown should be recomputed on each tick."""

    def __init__(self) -> None:
        self._tracked: dict[str, OrderSnapshot] = {}

    # -- public interface ----------------------------------------------------

    def track(self, order_id: str, snapshot: Any) -> bool:
        """Start (or refresh) the timer for *order_id*.

        Returns ``False`` and tracks nothing if *snapshot* is unusable.
        """
        coerced = OrderSnapshot.coerce(snapshot)
        if coerced is None:
            logger.debug("Not tracking %s: unusable snapshot", order_id)
            return False
        self._tracked[order_id] = coerced
        return True

    def cancel(self, order_id: str) -> bool:
        """Stop the timer for *order_id*.  Returns ``False`` if it was not tracked."""
        return self._tracked.pop(order_id, None) is not None

    def active(self) -> list[str]:
        """Return the ids currently tracked, in the order they were added."""
        return list(self._tracked)

    def tick(self, now: Any = None) -> dict[str, TimerState]:
        """Compute every preparing order's state at one shared instant.

        Orders that are no longer preparing are cancelled automatically.
        """
        now = resolve_now(now)
        states: dict[str, TimerState] = {}
        for order_id, snapshot in list(self._tracked.items()):
            if not is_order_preparing(snapshot):
                logger.info("Order %s left the preparing phase, cancelling its timer", order_id)
                self.cancel(order_id)
                continue
            states[order_id] = calculate_timer_state(snapshot, now)
        return states

    def run(
        self,
        interval: float = 1.0,
        ticks: int | None = None,
        on_tick: TickCallback | None = None,
        clock: Callable[[], datetime] = resolve_now,
    ) -> int:
        """Tick every *interval* seconds until nothing is tracked.

        Stops early after *ticks* ticks when given.  Returns the number of
        ticks performed.
        """
        count = 0
        while self._tracked and (ticks is None or count < ticks):
            now = clock()
            states = self.tick(now)
            count += 1
            if on_tick is not None:
                on_tick(now, states)
            if not self._tracked or (ticks is not None and count >= ticks):
                break
            time.sleep(interval)
        return count
