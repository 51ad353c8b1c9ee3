"""The board holds the state of a Quoridor game: where the pawns are, which fences stand, and whose turn it is."""

from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Optional, Self

from src.quoridor.fence import Fence, is_blocked
from src.quoridor.position import BOARD_SIZE, Position

FENCES_PER_PLAYER = 10
MAX_FENCES = 2 * FENCES_PER_PLAYER

# (starting cell, goal row) per seat. Player 1 starts at the bottom and walks up.
STARTING_SEATS: tuple[tuple[Position, int], ...] = (
    (Position(BOARD_SIZE - 1, BOARD_SIZE // 2), 0),
    (Position(0, BOARD_SIZE // 2), BOARD_SIZE - 1),
)


@dataclass
class Player:
    id: int
    position: Position
    goal_row: int
    fences_remaining: int = FENCES_PER_PLAYER
    name: str = ""

    @property
    def has_won(self) -> bool:
        return self.position.row == self.goal_row

    @property
    def forward(self) -> int:
        """Row direction towards the goal: -1 walks up the board, +1 walks down"""
        return -1 if self.goal_row < self.position.row else 1

    def row_distance_to_goal(self) -> int:
        return abs(self.position.row - self.goal_row)


@dataclass
class Board:
    players: list[Player]
    fences: frozenset[Fence] = field(default_factory=frozenset)
    current_player_index: int = 0
    game_over: bool = False
    winner_id: Optional[int] = None

    @classmethod
    def new(cls, names: tuple[str, str] = ("Player 1", "Player 2")) -> Self:
        """Fresh game: pawns in the middle of their home rows, 10 fences each, player 1 to move."""
        players = [
            Player(id=seat + 1, position=start, goal_row=goal_row, name=name)
            for seat, ((start, goal_row), name) in enumerate(zip(STARTING_SEATS, names))
        ]
        return cls(players)

    @property
    def size(self) -> int:
        return BOARD_SIZE

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def winner(self) -> Optional[Player]:
        if self.winner_id is None:
            return None
        return self.player(self.winner_id)

    def player(self, player_id: int) -> Player:
        return next(player for player in self.players if player.id == player_id)

    def opponent_of(self, player: Player) -> Player:
        return next(other for other in self.players if other.id != player.id)

    def player_at(self, position: Position) -> Optional[Player]:
        return next(
            (player for player in self.players if player.position == position), None
        )

    def is_occupied(self, position: Position) -> bool:
        return self.player_at(position) is not None

    def is_blocked(self, from_pos: Position, to_pos: Position) -> bool:
        """Convenience method: is the step interrupted by any of the placed fences"""
        return is_blocked(self.fences, from_pos, to_pos)

    def fences_placed_by(self, player: Player) -> int:
        return FENCES_PER_PLAYER - player.fences_remaining

    # --- MUTATIONS (only called by the game controller after validation) ---
    def move_pawn(self, player: Player, target: Position) -> None:
        player.position = target

    def add_fence(self, player: Player, fence: Fence) -> None:
        self.fences = self.fences | {fence}
        player.fences_remaining -= 1

    def advance_turn(self) -> None:
        self.current_player_index = (self.current_player_index + 1) % len(self.players)

    def declare_winner(self, player: Player) -> None:
        self.game_over = True
        self.winner_id = player.id

    # --- HYPOTHETICAL BOARDS ---
    def copy(self) -> Self:
        return deepcopy(self)

    def with_fence(self, fence: Fence) -> Self:
        """
        A copy of the board with one extra fence standing.
        ---

        Used to evaluate 'what if' placements. The live board is never touched.
        Fence counts are left alone: this is about topology, not about who paid for the fence.
        """
        return replace(
            self,
            players=[replace(player) for player in self.players],
            fences=self.fences | {fence},
        )
