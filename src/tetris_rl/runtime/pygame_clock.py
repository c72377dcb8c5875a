from __future__ import annotations

import logging
from typing import Optional

import pygame

from tetris_rl.game.scheduler import TickCallback


logger = logging.getLogger(__name__)


class PygameClockScheduler:
    """Wall-clock tick source paced by ``pygame.time.Clock``.

    ``start`` only registers the callback; ``run`` owns the loop and keeps
    delivering the milliseconds measured by the clock until ``stop`` is called
    (by the session on game over, or by the caller).
    """

    def __init__(self, fps: int = 60) -> None:
        self.fps = fps
        self._on_tick: Optional[TickCallback] = None
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._on_tick is not None

    def start(self, on_tick: TickCallback) -> None:
        self._on_tick = on_tick

    def stop(self) -> None:
        self._on_tick = None

    def run(self, max_frames: Optional[int] = None) -> int:
        pygame.init()
        try:
            clock = pygame.time.Clock()
            # First tick only primes the clock; its delta covers time spent before the loop
            clock.tick(self.fps)
            delivered = 0
            while self._on_tick is not None:
                if max_frames is not None and delivered >= max_frames:
                    break
                delta = clock.tick(self.fps)
                self._on_tick(float(delta))
                delivered += 1
            self.frames += delivered
            logger.debug("delivered %d tick(s) at %d fps", delivered, self.fps)
            return delivered
        finally:
            pygame.quit()
