from __future__ import annotations

import numpy as np
import pytest

from tetris_rl.game import ActivePiece, Playfield, TetrominoType, rotate_clockwise, shapes


def test_rotate_clockwise_t():
    rotated = rotate_clockwise(np.array([[1, 1, 1], [0, 1, 0]], dtype=bool))
    np.testing.assert_array_equal(rotated, [[0, 1], [1, 1], [0, 1]])


def test_rotate_clockwise_i_stands_up():
    assert rotate_clockwise(shapes()[0]).shape == (4, 1)


@pytest.mark.parametrize("shape", shapes())
def test_four_rotations_are_identity(shape):
    m = shape
    for _ in range(4):
        m = rotate_clockwise(m)
    np.testing.assert_array_equal(m, shape)


def test_spawn_copies_catalog_shape():
    piece = ActivePiece.spawn(TetrominoType.L, 3, 0)
    other = ActivePiece.spawn(TetrominoType.L, 3, 0)
    assert piece.matrix.flags.writeable
    assert not np.shares_memory(piece.matrix, shapes()[3])
    piece.matrix[0, 0] = False
    assert other.matrix[0, 0]
    assert shapes()[3][0, 0]
    assert piece.color == "#F538FF"


def test_blocked_rotation_leaves_piece_untouched():
    field = Playfield()
    piece = ActivePiece.spawn(TetrominoType.I, 3, 19)
    matrix = piece.matrix
    before = matrix.copy()
    assert not piece.try_rotate(field)
    assert piece.matrix is matrix
    np.testing.assert_array_equal(piece.matrix, before)
    assert piece.position == (3, 19)


def test_rotation_near_wall_is_not_kicked():
    field = Playfield()
    piece = ActivePiece.spawn(TetrominoType.I, 0, 0)
    piece.matrix = rotate_clockwise(piece.matrix)
    piece.x = 9
    # Lying flat again would poke through the right wall
    assert not piece.try_rotate(field)
    assert piece.position == (9, 0)
    assert piece.matrix.shape == (4, 1)


def test_move_reverts_on_collision():
    field = Playfield()
    piece = ActivePiece.spawn(TetrominoType.O, 0, 0)
    assert not piece.try_move(field, -1, 0)
    assert piece.position == (0, 0)
    assert piece.try_move(field, 1, 0)
    assert piece.position == (1, 0)


def test_try_transform_rolls_back_any_change():
    field = Playfield()
    field.grid[5, 5] = 1
    piece = ActivePiece.spawn(TetrominoType.O, 4, 2)

    def teleport(p: ActivePiece) -> None:
        p.x, p.y = 4, 4
        p.matrix = np.ones((3, 3), dtype=bool)

    assert not piece.try_transform(field, teleport)
    assert piece.position == (4, 2)
    assert piece.matrix.shape == (2, 2)


def test_landing_y():
    field = Playfield()
    piece = ActivePiece.spawn(TetrominoType.O, 3, 0)
    assert piece.landing_y(field) == 18
    field.grid[10, 4] = 1
    assert piece.landing_y(field) == 8


def test_cells_at():
    piece = ActivePiece.spawn(TetrominoType.S, 3, 0)
    assert sorted(piece.cells_at(3, 0)) == [(3, 0), (4, 0), (4, 1), (5, 1)]
