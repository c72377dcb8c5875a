"""Tick delivery contract.

A game session never keeps time itself. Something outside of it, a display
loop, a timer or a test, calls back with the milliseconds elapsed since the
previous tick. Any cadence is acceptable, including variable deltas.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol


TickCallback = Callable[[float], None]


class Scheduler(Protocol):
    @property
    def running(self) -> bool: ...

    def start(self, on_tick: TickCallback) -> None: ...

    def stop(self) -> None: ...


class ManualScheduler:
    """Delivers ticks only when told to. Drives sessions in tests and envs."""

    def __init__(self) -> None:
        self._on_tick: Optional[TickCallback] = None

    @property
    def running(self) -> bool:
        return self._on_tick is not None

    def start(self, on_tick: TickCallback) -> None:
        self._on_tick = on_tick

    def stop(self) -> None:
        self._on_tick = None

    def advance(self, delta_ms: float) -> bool:
        if self._on_tick is None:
            return False
        self._on_tick(delta_ms)
        return True

    def advance_many(self, delta_ms: float, count: int) -> int:
        delivered = 0
        for _ in range(count):
            if not self.advance(delta_ms):
                break
            delivered += 1
        return delivered
