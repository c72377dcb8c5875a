from __future__ import annotations

import logging
from typing import Sequence, Tuple

import numpy as np


logger = logging.getLogger(__name__)

Position = Tuple[int, int]  # (x, y)


class PlacementError(ValueError):
    """Raised when a merge would overwrite an occupied or out-of-field cell."""


class Playfield:
    """Fixed-size grid of cells.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are ``TetrominoType`` identifiers, which map to colours.
    Row 0 is the top of the field; rows above it (negative indices) are open
    space where freshly spawned pieces may hang.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"field dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Playfield":
        if len(rows) == 0:
            raise ValueError("field needs at least one row")
        width = len(rows[0])
        for row in rows:
            if len(row) != width:
                raise ValueError(f"field rows must all have {width} cells, got {len(row)}")
        field = cls(width, len(rows))
        field.grid[:, :] = np.array(rows, dtype=np.int8)
        return field

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, row: int, col: int) -> bool:
        if row < 0 and 0 <= col < self.width:
            return False
        if not self.is_inside(col, row):
            raise IndexError(f"cell ({row}, {col}) is outside the field")
        return bool(self.grid[row, col] != 0)

    def collides(self, matrix: np.ndarray, pos: Position) -> bool:
        x0, y0 = pos
        rows, cols = np.nonzero(matrix)
        for my, mx in zip(rows.tolist(), cols.tolist()):
            x, y = x0 + mx, y0 + my
            if y >= self.height or x < 0 or x >= self.width:
                return True
            if self.is_occupied(y, x):
                return True
        return False

    def merge(self, matrix: np.ndarray, pos: Position, value: int) -> None:
        x0, y0 = pos
        rows, cols = np.nonzero(matrix)
        targets = [(y0 + my, x0 + mx) for my, mx in zip(rows.tolist(), cols.tolist())]
        for y, x in targets:
            if not self.is_inside(x, y) or self.grid[y, x] != 0:
                raise PlacementError(f"cannot merge piece {value} at {pos}: cell ({y}, {x}) unavailable")
        for y, x in targets:
            self.grid[y, x] = value

    def clear_full_rows(self) -> int:
        cleared = 0
        y = self.height - 1
        while y >= 0:
            if np.all(self.grid[y] != 0):
                # Shift everything above down by one and open an empty top row
                self.grid[1 : y + 1] = self.grid[0:y].copy()
                self.grid[0] = 0
                cleared += 1
            else:
                y -= 1
        if cleared:
            logger.debug("cleared %d row(s)", cleared)
        return cleared

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def column_heights(self) -> np.ndarray:
        filled = self.grid != 0
        first = np.where(filled.any(axis=0), filled.argmax(axis=0), self.height)
        return (self.height - first).astype(np.int32)

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self.grid[:, x]:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def get_bumpiness(self) -> int:
        heights = self.column_heights()
        return int(np.abs(np.diff(heights)).sum())

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
