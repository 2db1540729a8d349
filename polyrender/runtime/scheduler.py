"""Watch-mode scheduler.

Runs a render pass once, or forever on a fixed interval. In watch mode a
failing pass is logged once per distinct message and retried on the next
tick; without an interval the first failure propagates to the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from ..core.errors import PolyrenderError
from ..core.models import RenderOutcome, WatchState

logger = logging.getLogger(__name__)


class WatchScheduler:
    """Repeat ``run_pass`` every ``interval`` seconds.

    Args:
        run_pass: Executes one full pipeline pass
        interval: Seconds between passes; None runs exactly once
        on_first_success: Called after the first successful pass only
        sleep: Sleep function, replaceable in tests
        max_cycles: Stop after this many passes (None: run until killed)
    """

    def __init__(
        self,
        run_pass: Callable[[], RenderOutcome],
        interval: float | None = None,
        *,
        on_first_success: Callable[[], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        max_cycles: int | None = None,
    ) -> None:
        self.run_pass = run_pass
        self.interval = interval
        self.on_first_success = on_first_success
        self.sleep = sleep
        self.max_cycles = max_cycles
        self.state = WatchState()

    @property
    def watching(self) -> bool:
        return self.interval is not None

    def run(self) -> None:
        """Drive passes until stopped.

        Raises:
            PolyrenderError: From the pass, when not watching
        """
        cycles = 0
        while True:
            self.cycle(self.state)
            cycles += 1
            if not self.watching:
                return
            if self.max_cycles is not None and cycles >= self.max_cycles:
                return
            self.sleep(self.interval)

    def cycle(self, state: WatchState) -> bool:
        """Run one pass, updating ``state``. Returns True on success."""
        try:
            self.run_pass()
        except PolyrenderError as e:
            if not self.watching:
                raise
            message = str(e)
            if message != state.last_error:
                logger.error(message)
                state.last_error = message
            return False

        if state.last_error is not None:
            logger.info("Render recovered")
        state.last_error = None

        if not state.has_completed_first_cycle:
            state.has_completed_first_cycle = True
            if self.on_first_success is not None:
                self.on_first_success()
        return True
