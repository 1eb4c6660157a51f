import random

import pytest

from chip8vm import Dialect, Interpreter, MachineState, load_rom
from chip8vm.constants import DEFAULT_SEED


class FakeClock:
    """Clock that only moves when slept on"""

    def __init__(self, start: float = 0.0, advance_on_sleep: bool = True):
        self.t = start
        self.advance_on_sleep = advance_on_sleep
        self.sleeps = []

    def now(self) -> float:
        return self.t

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        if self.advance_on_sleep:
            self.t += seconds


class SlowClock(FakeClock):
    """Every reading costs `cost` seconds, so each cycle overruns its period"""

    def __init__(self, cost: float):
        super().__init__()
        self.cost = cost

    def now(self) -> float:
        t = self.t
        self.t += self.cost
        return t


@pytest.fixture
def make_cpu():
    """Build an interpreter with `program` loaded at 0x200"""
    def factory(program=b"", dialect=Dialect.ORIGINAL, seed=DEFAULT_SEED):
        state = MachineState()
        load_rom(state, bytes(program))
        return Interpreter(state, rng=random.Random(seed), dialect=dialect)
    return factory


@pytest.fixture
def fake_clock():
    return FakeClock()
