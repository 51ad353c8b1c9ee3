"""
Fence placement rules
----

A fence may be placed if, in this order:

1. it fits on the board
2. the exact same fence is not already standing
3. no standing fence is centred on the same post (this also covers crossing a perpendicular fence)
4. no standing fence of the same orientation on the same line overlaps its span
5. after placing it, every player still has a path to their goal row

The checks only ever look at a hypothetical fence set. The board is not touched.
"""

import logging
from itertools import product
from typing import Iterator, Optional

from src.core.shared_types import FenceRejection, Orientation
from src.quoridor.board import Board
from src.quoridor.fence import Fence
from src.quoridor.paths import has_path_to_goal
from src.quoridor.position import FENCE_SLOTS

LOGGER = logging.getLogger(__name__)


def all_fence_slots() -> Iterator[Fence]:
    """Every anchor/orientation combination that fits on the board (8 x 8 x 2 = 128)"""
    for row, col, orientation in product(
        range(FENCE_SLOTS), range(FENCE_SLOTS), Orientation
    ):
        yield Fence(row, col, orientation)


def check_fence_placement(board: Board, fence: Fence) -> Optional[FenceRejection]:
    """Returns the reason the fence is rejected, or None if it may be placed."""
    rejection = _geometry_rejection(board, fence)
    if rejection is None and not _keeps_all_paths_open(board, fence):
        rejection = FenceRejection.PATH_BLOCKED

    if rejection is not None:
        LOGGER.debug("Fence %s rejected: %s", fence.to_notation(), rejection)
    return rejection


def is_legal_fence_placement(board: Board, fence: Fence) -> bool:
    return check_fence_placement(board, fence) is None


def legal_fence_placements(board: Board) -> set[Fence]:
    return {fence for fence in all_fence_slots() if is_legal_fence_placement(board, fence)}


def _geometry_rejection(board: Board, fence: Fence) -> Optional[FenceRejection]:
    """Checks 1-4: everything that can be decided by comparing against the standing fences"""
    if not fence.is_within_bounds():
        return FenceRejection.BOUNDS

    if fence in board.fences:
        return FenceRejection.DUPLICATE

    if any(fence.shares_post_with(standing) for standing in board.fences):
        return FenceRejection.POST_OVERLAP

    if any(fence.overlaps_span_of(standing) for standing in board.fences):
        return FenceRejection.SPAN_OVERLAP

    return None


def _keeps_all_paths_open(board: Board, fence: Fence) -> bool:
    tentative_fences = board.fences | {fence}
    return all(
        has_path_to_goal(board, player, tentative_fences) for player in board.players
    )
