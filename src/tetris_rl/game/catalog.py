from __future__ import annotations

from enum import IntEnum
from typing import Sequence, Tuple

import numpy as np


class TetrominoType(IntEnum):
    """Piece identifiers. The value is what a locked cell stores in the field."""

    I = 1
    O = 2
    T = 3
    L = 4
    J = 5
    S = 6
    Z = 7


Shape = np.ndarray


def as_shape(rows: Sequence[Sequence[int]]) -> Shape:
    """Build an immutable boolean shape, rejecting ragged or empty matrices."""
    if len(rows) == 0 or len(rows[0]) == 0:
        raise ValueError("shape must have at least one row and one column")
    width = len(rows[0])
    for row in rows:
        if len(row) != width:
            raise ValueError(f"shape rows must all have {width} columns, got {len(row)}")
    shape = np.array(rows, dtype=bool)
    shape.setflags(write=False)
    return shape


_SHAPES: Tuple[Shape, ...] = (
    as_shape([[1, 1, 1, 1]]),             # I
    as_shape([[1, 1], [1, 1]]),           # O
    as_shape([[1, 1, 1], [0, 1, 0]]),     # T
    as_shape([[1, 1, 1], [1, 0, 0]]),     # L
    as_shape([[1, 1, 1], [0, 0, 1]]),     # J
    as_shape([[1, 1, 0], [0, 1, 1]]),     # S
    as_shape([[0, 1, 1], [1, 1, 0]]),     # Z
)

_COLORS: Tuple[str, ...] = (
    "#FF0D72",
    "#0DC2FF",
    "#0DFF72",
    "#F538FF",
    "#FF8E0D",
    "#FFE138",
    "#3877FF",
)


def shapes() -> Tuple[Shape, ...]:
    return _SHAPES


def color_for(shape_index: int) -> str:
    if not 0 <= shape_index < len(_COLORS):
        raise IndexError(f"no piece at catalog index {shape_index}")
    return _COLORS[shape_index]


def shape_of(kind: TetrominoType) -> Shape:
    return _SHAPES[int(kind) - 1]


def color_of(kind: TetrominoType) -> str:
    return color_for(int(kind) - 1)
