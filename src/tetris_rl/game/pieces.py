from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from .catalog import TetrominoType, color_of, shape_of
from .grid import Playfield


def rotate_clockwise(matrix: np.ndarray) -> np.ndarray:
    # Transpose, then reverse each row: rows become columns read bottom-to-top
    return matrix.T[:, ::-1].copy()


@dataclass
class ActivePiece:
    kind: TetrominoType
    matrix: np.ndarray = field(repr=False)
    x: int = 0
    y: int = 0

    @classmethod
    def spawn(cls, kind: TetrominoType, x: int = 0, y: int = 0) -> "ActivePiece":
        # Each piece owns a private, writable copy of the catalog shape
        return cls(kind=kind, matrix=np.array(shape_of(kind), dtype=bool, copy=True), x=x, y=y)

    @property
    def color(self) -> str:
        return color_of(self.kind)

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    def collides(self, playfield: Playfield) -> bool:
        return playfield.collides(self.matrix, self.position)

    def try_transform(self, playfield: Playfield, transform: Callable[["ActivePiece"], None]) -> bool:
        """Apply ``transform`` in place; roll back and return False on collision."""
        matrix, x, y = self.matrix, self.x, self.y
        transform(self)
        if self.collides(playfield):
            self.matrix, self.x, self.y = matrix, x, y
            return False
        return True

    def try_move(self, playfield: Playfield, dx: int, dy: int) -> bool:
        def shift(piece: ActivePiece) -> None:
            piece.x += dx
            piece.y += dy

        return self.try_transform(playfield, shift)

    def try_rotate(self, playfield: Playfield) -> bool:
        def turn(piece: ActivePiece) -> None:
            piece.matrix = rotate_clockwise(piece.matrix)

        return self.try_transform(playfield, turn)

    def landing_y(self, playfield: Playfield) -> int:
        y = self.y
        while not playfield.collides(self.matrix, (self.x, y + 1)):
            y += 1
        return y

    def cells_at(self, origin_x: int, origin_y: int) -> list[tuple[int, int]]:
        rows, cols = np.nonzero(self.matrix)
        return [(origin_x + int(dx), origin_y + int(dy)) for dy, dx in zip(rows, cols)]
