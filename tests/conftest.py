from __future__ import annotations

from typing import Callable

import pytest

from tetris_rl.game import ActivePiece, GameConfig, GameSession, TetrominoType


@pytest.fixture
def session() -> GameSession:
    game = GameSession(GameConfig(random_seed=1234))
    game.start()
    return game


@pytest.fixture
def prime_line() -> Callable[[GameSession], None]:
    """Fill the bottom row except the four cells a flat I piece will land in."""

    def prime(game: GameSession) -> None:
        game.field.grid[-1, :] = 1
        game.field.grid[-1, 3:7] = 0
        game.current_piece = ActivePiece.spawn(TetrominoType.I, 3, 0)

    return prime
