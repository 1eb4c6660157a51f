"""Paced run loop around the interpreter."""

import logging
import time
from typing import Callable, Optional

import numpy as np

from .constants import DEFAULT_CLOCK_HZ, TIMER_HZ, TRACE
from .errors import InvalidStepInputError, NotLoadedError
from .interpreter import Interpreter

logger = logging.getLogger(__name__)

STEP_NEXT = 'n'
STEP_QUIT = 'q'


class SystemClock:
    """Wall clock used outside of tests"""

    def now(self) -> float:
        return time.perf_counter()

    def sleep(self, seconds: float):
        time.sleep(seconds)


class Scheduler:
    """Drive the interpreter at a fixed logical clock rate

    Each iteration runs exactly one cycle, hands a display snapshot to
    ``on_frame`` when the cycle touched the display, ticks the delay and
    sound timers once per 1/60 s of elapsed wall time, and sleeps off the
    rest of the cycle period. Slow cycles are not caught up.

    With ``stepping`` enabled the loop waits on ``step_input`` after every
    cycle: 'n' runs the next cycle, 'q' ends the run.

    ``on_cycle`` runs after every cycle whether or not the display changed,
    so a window host can drain its event queue while the ROM is not drawing.
    """

    def __init__(self, interpreter: Interpreter, clock=None,
                 on_frame: Optional[Callable[[np.ndarray], None]] = None,
                 on_cycle: Optional[Callable[[], None]] = None,
                 stepping: bool = False,
                 step_input: Optional[Callable[[], str]] = None,
                 clock_hz: int = DEFAULT_CLOCK_HZ, timer_hz: int = TIMER_HZ):
        if clock_hz <= 0:
            raise ValueError(f"clock_hz must be positive, got {clock_hz}")
        if timer_hz <= 0:
            raise ValueError(f"timer_hz must be positive, got {timer_hz}")

        self.interpreter = interpreter
        self.clock = clock if clock is not None else SystemClock()
        self.on_frame = on_frame
        self.on_cycle = on_cycle
        self.stepping = stepping
        self.step_input = step_input if step_input is not None else input
        self.cycle_period = 1.0 / clock_hz
        self.timer_period = 1.0 / timer_hz
        self.cycles = 0
        self._stop_requested = False

    def stop(self):
        """Ask the loop to end before the next cycle"""
        self._stop_requested = True

    def run(self, max_cycles: Optional[int] = None) -> int:
        """Run until stopped, quit from step mode, or max_cycles is reached

        A stop() issued before run() ends it before the first cycle. The stop
        request is cleared when run() returns or raises.
        Returns the number of cycles executed by this call.
        """
        logger.log(TRACE, "run: start")
        state = self.interpreter.state
        if not state.rom_loaded:
            raise NotLoadedError()

        try:
            executed = self._loop(max_cycles)
        finally:
            self._stop_requested = False

        logger.log(TRACE, "run: exit")
        return executed

    def _loop(self, max_cycles: Optional[int]) -> int:
        state = self.interpreter.state
        executed = 0
        last_timer_tick = self.clock.now()

        while not self._stop_requested:
            if max_cycles is not None and executed >= max_cycles:
                break

            start = self.clock.now()
            while start - last_timer_tick >= self.timer_period:
                self.interpreter.update_timers()
                last_timer_tick += self.timer_period

            self.interpreter.cycle()
            executed += 1
            self.cycles += 1

            if state.redraw_pending:
                if self.on_frame is not None:
                    self.on_frame(state.display_snapshot())
                state.redraw_pending = False

            if self.on_cycle is not None:
                self.on_cycle()

            # sleep for slowing down clock if necessary
            elapsed = self.clock.now() - start
            if elapsed < self.cycle_period:
                self.clock.sleep(self.cycle_period - elapsed)

            if self.stepping and not self._confirm_step():
                break

        return executed

    def _confirm_step(self) -> bool:
        """Block for the next step command; False means quit"""
        logger.info("[%s] next, [%s] quit", STEP_NEXT, STEP_QUIT)
        try:
            answer = self.step_input().strip()
        except EOFError as e:
            # closed stdin reads as an empty line
            raise InvalidStepInputError("") from e
        if answer == STEP_NEXT:
            return True
        elif answer == STEP_QUIT:
            return False
        raise InvalidStepInputError(answer)
