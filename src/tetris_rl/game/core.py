from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from .catalog import TetrominoType
from .grid import Playfield
from .pieces import ActivePiece
from .rules import ScoringRules
from .scheduler import ManualScheduler, Scheduler


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_x: int = 3
    spawn_y: int = 0


@dataclass(frozen=True, eq=False)
class PieceView:
    kind: TetrominoType
    matrix: np.ndarray
    color: str
    x: Optional[int] = None
    y: Optional[int] = None
    ghost_y: Optional[int] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PieceView):
            return NotImplemented
        return (
            (self.kind, self.color, self.x, self.y, self.ghost_y)
            == (other.kind, other.color, other.x, other.y, other.ghost_y)
            and np.array_equal(self.matrix, other.matrix)
        )


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only copy of everything a presentation layer may show."""

    field: np.ndarray
    active: Optional[PieceView]
    next: Optional[PieceView]
    score: int
    level: int
    drop_interval: int
    lines_cleared_total: int
    state: SessionState

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameSnapshot):
            return NotImplemented
        return (
            (self.active, self.next, self.score, self.level, self.drop_interval, self.lines_cleared_total, self.state)
            == (other.active, other.next, other.score, other.level, other.drop_interval,
                other.lines_cleared_total, other.state)
            and np.array_equal(self.field, other.field)
        )

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.state is SessionState.PAUSED


def _frozen(array: np.ndarray) -> np.ndarray:
    copy = np.array(array, copy=True)
    copy.setflags(write=False)
    return copy


class GameSession:
    """Owns the field, the falling piece and the score; advances on ticks.

    Commands issued while the session is not running are ignored and return
    False. The scheduler is only told when to start and stop delivering
    ticks; all timing decisions happen in :meth:`tick`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.rng = random.Random(self.config.random_seed)
        self.field = Playfield(self.config.width, self.config.height)
        self.state = SessionState.IDLE
        self.current_piece: Optional[ActivePiece] = None
        self.next_piece: Optional[ActivePiece] = None
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.score = 0
        self.level = 1
        self.drop_interval = self.rules.initial_drop_interval
        self.drop_counter = 0.0
        self.lines_cleared_total = 0
        self.pieces_locked = 0

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.state is SessionState.PAUSED

    # Lifecycle

    def start(self) -> bool:
        if self.state in (SessionState.RUNNING, SessionState.PAUSED):
            return False
        self.field.reset()
        self._reset_counters()
        self.current_piece = None
        self.next_piece = self._random_piece()
        self.state = SessionState.RUNNING
        logger.info("session started")
        if self.spawn_piece():
            self.scheduler.start(self.tick)
        return True

    def stop(self) -> None:
        self.scheduler.stop()
        if self.state is not SessionState.IDLE:
            logger.info("session stopped in state %s", self.state.value)
        self.state = SessionState.IDLE

    def restart(self) -> bool:
        self.stop()
        return self.start()

    def pause(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        self.state = SessionState.PAUSED
        logger.debug("paused with drop counter at %.1f ms", self.drop_counter)
        return True

    def resume(self) -> bool:
        if self.state is not SessionState.PAUSED:
            return False
        self.state = SessionState.RUNNING
        logger.debug("resumed")
        return True

    def toggle_pause(self) -> bool:
        if self.state is SessionState.PAUSED:
            return self.resume()
        return self.pause()

    # Pieces

    def _random_piece(self) -> ActivePiece:
        kind = self.rng.choice(list(TetrominoType))
        return ActivePiece.spawn(kind, self.config.spawn_x, self.config.spawn_y)

    def spawn_piece(self) -> bool:
        """Promote the lookahead piece. Returns False if the spawn is blocked."""
        assert self.next_piece is not None
        piece = self.next_piece
        piece.x, piece.y = self.config.spawn_x, self.config.spawn_y
        self.current_piece = piece
        self.next_piece = self._random_piece()
        # Immediate collision check: if overlaps, game over
        if piece.collides(self.field):
            self.state = SessionState.GAME_OVER
            self.scheduler.stop()
            logger.info("game over: score=%d level=%d lines=%d", self.score, self.level, self.lines_cleared_total)
            return False
        return True

    def _lock_piece(self) -> int:
        assert self.current_piece is not None
        piece = self.current_piece
        if any(y < 0 for _, y in piece.cells_at(piece.x, piece.y)):
            # Locked with cells still above the field: the stack has topped out
            self.state = SessionState.GAME_OVER
            self.scheduler.stop()
            logger.info("lock out at %s: score=%d level=%d lines=%d",
                        piece.position, self.score, self.level, self.lines_cleared_total)
            return 0
        self.field.merge(piece.matrix, piece.position, int(piece.kind))
        self.pieces_locked += 1
        lines = self.field.clear_full_rows()
        self._award(lines)
        logger.debug("locked %s at %s, %d line(s)", piece.kind.name, piece.position, lines)
        self.spawn_piece()
        return lines

    def _award(self, lines: int) -> None:
        if lines <= 0:
            return
        self.score += self.rules.score_for_lines(lines, self.level)
        self.lines_cleared_total += lines
        new_level = self.rules.level_for_score(self.score)
        if new_level != self.level:
            self.level = new_level
            self.drop_interval = self.rules.drop_interval_for_level(self.level)
            logger.info("level %d, drop interval %d ms", self.level, self.drop_interval)

    def _step_down(self) -> bool:
        assert self.current_piece is not None
        self.drop_counter = 0.0
        moved = self.current_piece.try_move(self.field, 0, 1)
        if not moved:
            self._lock_piece()
        return moved

    # Commands

    def tick(self, delta_ms: float) -> None:
        if delta_ms < 0:
            raise ValueError(f"tick delta must be non-negative, got {delta_ms}")
        if self.state is not SessionState.RUNNING:
            return
        self.drop_counter += delta_ms
        if self.drop_counter > self.drop_interval:
            self._step_down()

    def move_left(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        return self.current_piece.try_move(self.field, -1, 0)

    def move_right(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        return self.current_piece.try_move(self.field, 1, 0)

    def rotate(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        return self.current_piece.try_rotate(self.field)

    def soft_drop_step(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        self._step_down()
        return True

    soft_drop = soft_drop_step

    def hard_drop(self) -> bool:
        if self.state is not SessionState.RUNNING:
            return False
        # Drop until collision
        while self.current_piece.try_move(self.field, 0, 1):
            pass
        self._lock_piece()
        return True

    def apply(self, action: Action) -> bool:
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.SOFT_DROP:
            return self.soft_drop_step()
        if action == Action.HARD_DROP:
            return self.hard_drop()
        return False

    # Views

    def snapshot(self) -> GameSnapshot:
        active = None
        if self.current_piece is not None:
            piece = self.current_piece
            active_states = (SessionState.RUNNING, SessionState.PAUSED)
            ghost = piece.landing_y(self.field) if self.state in active_states else None
            active = PieceView(piece.kind, _frozen(piece.matrix), piece.color, piece.x, piece.y, ghost)
        upcoming = None
        if self.next_piece is not None:
            upcoming = PieceView(self.next_piece.kind, _frozen(self.next_piece.matrix), self.next_piece.color)
        return GameSnapshot(
            field=_frozen(self.field.grid),
            active=active,
            next=upcoming,
            score=self.score,
            level=self.level,
            drop_interval=self.drop_interval,
            lines_cleared_total=self.lines_cleared_total,
            state=self.state,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.field.clone_state()
        if self.current_piece is not None and self.state is not SessionState.GAME_OVER:
            for x, y in self.current_piece.cells_at(self.current_piece.x, self.current_piece.y):
                if self.field.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state
