"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterable

import pytest

from src.quoridor.board import Board
from src.quoridor.fence import Fence
from src.quoridor.position import Position


@pytest.fixture
def make_board() -> Callable[..., Board]:
    """
    Call the inner function with pawn cells (row, col) for player 1 (goal row 0) and player 2 (goal row 8),
    the fences that should be standing, and whose turn it is (0 or 1).

    NOTE: fences are put on the board directly, without any legality checks.
    """

    def _create_board(
        player_one: tuple[int, int] = (8, 4),
        player_two: tuple[int, int] = (0, 4),
        fences: Iterable[Fence] = (),
        turn: int = 0,
    ) -> Board:
        board = Board.new()
        board.players[0].position = Position(*player_one)
        board.players[1].position = Position(*player_two)
        board.fences = frozenset(fences)
        board.current_player_index = turn
        return board

    return _create_board
