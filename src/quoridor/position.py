"""
A cell on the board

(placed in its own module as every other module of the engine needs to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Quoridor is played on a 9x9 grid. Fences sit in the 8 gaps between rows/columns.
BOARD_SIZE = 9
FENCE_SLOTS = BOARD_SIZE - 1

Vector = tuple[int, int]

UP: Vector = (-1, 0)
DOWN: Vector = (1, 0)
LEFT: Vector = (0, -1)
RIGHT: Vector = (0, 1)

# Fixed order. Move generation iterates over this, so results never depend on dict/set ordering.
ORTHOGONAL_DIRECTIONS: tuple[Vector, ...] = (UP, DOWN, LEFT, RIGHT)

DIRECTION_NAMES: dict[str, Vector] = {
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
}


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, cell: str) -> Position:
        """Algebraic notation: 'a1' - 'i9' get converted to (0,0) - (8,8). The letter is the column."""
        col = ord(cell[0].lower()) - ord("a")
        row = int(cell[1:]) - 1
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{self.row + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def step(self, direction: Vector) -> Position:
        dr, dc = direction
        return Position(self.row + dr, self.col + dc)

    def manhattan(self, other: Position) -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)

    def is_neighbour_of(self, other: Position) -> bool:
        """8-neighbourhood (king move in chess terms). A cell is not its own neighbour."""
        row_diff = abs(self.row - other.row)
        col_diff = abs(self.col - other.col)
        return max(row_diff, col_diff) == 1


def in_bounds(position: Position) -> bool:
    return position.is_within_bounds()


def chess_notation(position: Position) -> str:
    """Column letter + row number, row 0 -> '1'"""
    return position.to_algebraic()


def perpendicular(direction: Vector) -> tuple[Vector, Vector]:
    """The two directions at a right angle: moving vertically gives (left, right), horizontally gives (up, down)"""
    dr, _ = direction
    if dr != 0:
        return LEFT, RIGHT
    return UP, DOWN
