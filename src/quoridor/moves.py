"""
Pawn movement rules

A pawn steps one cell orthogonally. If the cell is taken by the opponent it jumps straight over,
and if that straight jump is cut off (fence or board edge) it may jump diagonally instead.

Fence placement rules live in placement.py (they need the path search, which in turn needs these rules).
"""

from typing import Iterable, Optional

from src.quoridor.board import Board, Player
from src.quoridor.position import (
    DIRECTION_NAMES,
    ORTHOGONAL_DIRECTIONS,
    Position,
    Vector,
    perpendicular,
)


def _is_open(
    board: Board, from_pos: Position, to_pos: Position, occupied: frozenset[Position]
) -> bool:
    """Target on the board, not behind a fence, and free to stand on"""
    return (
        to_pos.is_within_bounds()
        and not board.is_blocked(from_pos, to_pos)
        and to_pos not in occupied
    )


def _jump_destinations(
    board: Board, over: Position, direction: Vector, occupied: frozenset[Position]
) -> list[Position]:
    """
    Jumping over the pawn standing on `over`, having come in along `direction`.
    ---

    1. straight jump to the cell beyond, if open
    2. otherwise the two cells next to the jumped pawn, at a right angle to `direction`
    """
    beyond = over.step(direction)
    if _is_open(board, over, beyond, occupied):
        return [beyond]

    return [
        over.step(side)
        for side in perpendicular(direction)
        if _is_open(board, over, over.step(side), occupied)
    ]


def pawn_destinations(
    board: Board, origin: Position, occupied: Iterable[Position]
) -> set[Position]:
    """
    Every cell a pawn on `origin` may move to, given the cells blocked by other pawns.
    ---

    Taking the occupied cells as a parameter lets the path search ask this question for a pawn
    that is not actually standing on `origin`.
    """
    blocked_cells = frozenset(occupied) - {origin}
    destinations: set[Position] = set()
    for direction in ORTHOGONAL_DIRECTIONS:
        adjacent = origin.step(direction)
        if not adjacent.is_within_bounds():
            continue
        if board.is_blocked(origin, adjacent):
            continue

        if adjacent in blocked_cells:
            destinations.update(
                _jump_destinations(board, adjacent, direction, blocked_cells)
            )
        else:
            destinations.add(adjacent)
    return destinations


def legal_pawn_moves(board: Board, player: Player) -> set[Position]:
    others = [other.position for other in board.players if other.id != player.id]
    return pawn_destinations(board, player.position, others)


def is_legal_pawn_move(board: Board, player: Player, target: Position) -> bool:
    return target in legal_pawn_moves(board, player)


def resolve_direction_move(
    board: Board, player: Player, direction_name: str
) -> Optional[Position]:
    """
    Translate a direction ("up", "down", "left", "right") into a legal destination.
    ---

    Preference: the single step, then the straight jump, then any jump that has a component in the
    requested direction (diagonal jumps). Returns None if nothing goes that way.
    """
    direction = DIRECTION_NAMES[direction_name]
    legal = legal_pawn_moves(board, player)

    single_step = player.position.step(direction)
    if single_step in legal:
        return single_step

    straight_jump = single_step.step(direction)
    if straight_jump in legal:
        return straight_jump

    dr, dc = direction
    for move in sorted(legal):
        delta_row = move.row - player.position.row
        delta_col = move.col - player.position.col
        if (dr != 0 and delta_row * dr > 0) or (dc != 0 and delta_col * dc > 0):
            return move
    return None
