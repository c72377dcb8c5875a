"""Game module for Tetris RL.

Exports the rule engine and supporting classes:
- Playfield: Grid representation, collisions and line clearing
- ActivePiece: Falling piece with rotation mechanics
- TetrominoType: Enum of available piece types
- ScoringRules: Score, level and drop speed configuration
- GameSession: State machine driving spawn, fall, lock and clear
- ManualScheduler: Tick source driven by hand
"""

from .catalog import TetrominoType, as_shape, color_for, shapes
from .grid import Playfield, PlacementError
from .pieces import ActivePiece, rotate_clockwise
from .rules import ScoringRules
from .scheduler import ManualScheduler, Scheduler
from .core import Action, GameConfig, GameSession, GameSnapshot, PieceView, SessionState

__all__ = [
    "TetrominoType",
    "as_shape",
    "color_for",
    "shapes",
    "Playfield",
    "PlacementError",
    "ActivePiece",
    "rotate_clockwise",
    "ScoringRules",
    "ManualScheduler",
    "Scheduler",
    "Action",
    "GameConfig",
    "GameSession",
    "GameSnapshot",
    "PieceView",
    "SessionState",
]
