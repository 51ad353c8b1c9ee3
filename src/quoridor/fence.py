"""
Fences and the geometry of what they block.

A fence is anchored at (row, col) and is always two cells long:
* horizontal: lies between row `row` and `row + 1`, covering columns `col` and `col + 1`
* vertical: lies between column `col` and `col + 1`, covering rows `row` and `row + 1`

Both orientations are centred on the same post. In a doubled coordinate system (cells on even
coordinates, gaps on odd ones) that post sits at (2*row + 1, 2*col + 1).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from src.core.shared_types import Orientation
from src.quoridor.position import FENCE_SLOTS, Position

ORIENTATION_TO_CHAR: dict[Orientation, str] = {
    Orientation.HORIZONTAL: "h",
    Orientation.VERTICAL: "v",
}
CHAR_TO_ORIENTATION: dict[str, Orientation] = {
    value: key for key, value in ORIENTATION_TO_CHAR.items()
}


@dataclass(frozen=True, order=True)
class Fence:
    row: int
    col: int
    orientation: Orientation

    @classmethod
    def from_notation(cls, notation: str) -> Fence:
        """
        '<anchor cell><orientation>'
        ---

        ex) 'e3h' is the horizontal fence anchored below cell e3, i.e. Fence(2, 4, HORIZONTAL)
        """
        anchor = Position.from_algebraic(notation[:-1])
        orientation = CHAR_TO_ORIENTATION[notation[-1].lower()]
        return cls(anchor.row, anchor.col, orientation)

    def to_notation(self) -> str:
        anchor = Position(self.row, self.col)
        return f"{anchor.to_algebraic()}{ORIENTATION_TO_CHAR[self.orientation]}"

    @property
    def is_horizontal(self) -> bool:
        return self.orientation == Orientation.HORIZONTAL

    @property
    def post(self) -> tuple[int, int]:
        """Centre post in the doubled grid. Identical for both orientations."""
        return (2 * self.row + 1, 2 * self.col + 1)

    def is_within_bounds(self) -> bool:
        """Same range for both orientations: a fence needs room for its second cell."""
        return (0 <= self.row < FENCE_SLOTS) and (0 <= self.col < FENCE_SLOTS)

    def affected_cells(self) -> tuple[Position, ...]:
        """The four cells around the post, regardless of orientation"""
        return (
            Position(self.row, self.col),
            Position(self.row, self.col + 1),
            Position(self.row + 1, self.col),
            Position(self.row + 1, self.col + 1),
        )

    def blocks(self, from_pos: Position, to_pos: Position) -> bool:
        """Is the single orthogonal step between the two cells interrupted by this fence?"""
        if self.is_horizontal:
            # horizontal fences only stop vertical movement
            if from_pos.col != to_pos.col:
                return False
            min_row = min(from_pos.row, to_pos.row)
            max_row = max(from_pos.row, to_pos.row)
            return (min_row <= self.row < max_row) and (
                self.col <= from_pos.col <= self.col + 1
            )

        # vertical fences only stop horizontal movement
        if from_pos.row != to_pos.row:
            return False
        min_col = min(from_pos.col, to_pos.col)
        max_col = max(from_pos.col, to_pos.col)
        return (min_col <= self.col < max_col) and (
            self.row <= from_pos.row <= self.row + 1
        )

    def shares_post_with(self, other: Fence) -> bool:
        return self.post == other.post

    def overlaps_span_of(self, other: Fence) -> bool:
        """
        Two fences of the same orientation on the same line overlap unless one ends before the other starts.

        NOTE: Perpendicular fences never overlap here. With integer anchors they can only meet in a post,
        and that case is covered by `shares_post_with()`.
        """
        if self.orientation != other.orientation:
            return False

        if self.is_horizontal:
            if self.row != other.row:
                return False
            return not (self.col + 1 < other.col or other.col + 1 < self.col)

        if self.col != other.col:
            return False
        return not (self.row + 1 < other.row or other.row + 1 < self.row)


def fence_blocks(fence: Fence, from_pos: Position, to_pos: Position) -> bool:
    return fence.blocks(from_pos, to_pos)


def is_blocked(fences: Iterable[Fence], from_pos: Position, to_pos: Position) -> bool:
    """Any fence in the collection interrupting the step?"""
    return any(fence.blocks(from_pos, to_pos) for fence in fences)
