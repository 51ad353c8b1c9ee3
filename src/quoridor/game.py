"""
The Game is the entrypoint into the domain layer for the service layer.
----

Two levels:

* plain functions (`new_game`, `apply_move`, `apply_fence`, `check_win`) validate a command against the board
  and then apply it. Nothing is written before the validation passed.
* the `Game` class is a session around one board: named players, turn checks, the AI state of the computer
  seat and a log of the moves played.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import (
    GameStateError,
    IllegalFenceError,
    IllegalMoveError,
    NoLegalMovesError,
    NotYourTurnError,
)
from src.core.shared_types import BotType, FenceRejection, Status
from src.quoridor.ai import (
    Action,
    AiState,
    FenceAction,
    MoveAction,
    NoAction,
    Policy,
)
from src.quoridor.board import Board, Player
from src.quoridor.fence import Fence
from src.quoridor.moves import legal_pawn_moves, resolve_direction_move
from src.quoridor.placement import check_fence_placement, legal_fence_placements
from src.quoridor.position import Position

LOGGER = logging.getLogger(__name__)

COMPUTER_NAME = "Computer"


# --- COMMANDS ON A BOARD ---
def new_game(names: tuple[str, str] = ("Player 1", "Player 2")) -> Board:
    return Board.new(names)


def check_win(board: Board) -> Optional[Player]:
    return next((player for player in board.players if player.has_won), None)


def apply_move(board: Board, player: Player, target: Position) -> Board:
    """Move the pawn. Raises IllegalMoveError (board untouched) if the target is not a legal destination."""
    _assert_can_act(board, player)
    if target not in legal_pawn_moves(board, player):
        raise IllegalMoveError(
            f"Player {player.id} cannot move from {player.position.to_algebraic()} to {target.to_algebraic()}"
        )

    board.move_pawn(player, target)
    LOGGER.info("Player %s moved to %s", player.id, target.to_algebraic())
    _end_turn(board)
    return board


def apply_fence(board: Board, fence: Fence) -> Board:
    """The player to move places a fence. Raises IllegalFenceError (board untouched) with the reason it failed."""
    player = board.current_player
    _assert_can_act(board, player)
    if player.fences_remaining <= 0:
        raise IllegalFenceError(
            f"Player {player.id} has no fences left", FenceRejection.NO_FENCES_LEFT
        )

    rejection = check_fence_placement(board, fence)
    if rejection is not None:
        raise IllegalFenceError(
            f"Fence {fence.to_notation()} cannot be placed: {rejection}", rejection
        )

    board.add_fence(player, fence)
    LOGGER.info("Player %s placed fence %s", player.id, fence.to_notation())
    _end_turn(board)
    return board


def apply_action(board: Board, player: Player, action: Action) -> Board:
    """Apply an AI decision. NoAction means the player is stuck, which should never happen."""
    match action:
        case MoveAction(target=target):
            return apply_move(board, player, target)
        case FenceAction(fence=fence):
            return apply_fence(board, fence)
        case _:
            raise NoLegalMovesError(f"Player {player.id} has no legal action")


def _assert_can_act(board: Board, player: Player) -> None:
    if board.game_over:
        raise GameStateError("The game is over")
    if board.current_player.id != player.id:
        raise NotYourTurnError(
            f"It is not your turn. Waiting for player {board.current_player.id} to move first."
        )


def _end_turn(board: Board) -> None:
    """After a winning move, the turn does not pass anymore."""
    winner = check_win(board)
    if winner is not None:
        board.declare_winner(winner)
        LOGGER.info("Player %s (%s) wins", winner.id, winner.name)
        return
    board.advance_turn()


# --- GAME SESSION ---
@dataclass
class Game:
    board: Board
    computer_id: Optional[int]
    bot: BotType
    seed: Optional[int] = None
    ai_state: AiState = field(default_factory=AiState)
    history: list[str] = field(default_factory=list)
    status: Status = Status.IN_PROGRESS
    policy: Policy = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.policy = Policy.from_bot(self.bot, self.seed)

    @classmethod
    def new_game(
        cls,
        player: str,
        bot: BotType = BotType.BOT2,
        seed: Optional[int] = None,
        opponent: Optional[str] = None,
    ) -> Self:
        """
        Human (seat 1, moves first) against the computer (seat 2).
        Supplying an opponent name instead makes it a game between two people.
        """
        if opponent is None and player == COMPUTER_NAME:
            raise GameStateError(f"{COMPUTER_NAME!r} is reserved for the computer opponent")
        second_name = opponent if opponent is not None else COMPUTER_NAME
        computer_id = None if opponent is not None else 2
        board = new_game((player, second_name))
        return cls(board=board, computer_id=computer_id, bot=bot, seed=seed)

    @property
    def current_player(self) -> Player:
        return self.board.current_player

    @property
    def is_computer_turn(self) -> bool:
        return (
            self.status == Status.IN_PROGRESS
            and self.current_player.id == self.computer_id
        )

    @property
    def winner(self) -> Optional[str]:
        winner = self.board.winner
        return winner.name if winner else None

    def legal_moves(self, player: str) -> list[str]:
        acting = self._assert_your_turn(player)
        return [move.to_algebraic() for move in sorted(legal_pawn_moves(self.board, acting))]

    def legal_fences(self, player: str) -> list[str]:
        acting = self._assert_your_turn(player)
        if acting.fences_remaining <= 0:
            return []
        return [fence.to_notation() for fence in sorted(legal_fence_placements(self.board))]

    def make_move(self, target: str, player: str) -> None:
        acting = self._assert_your_turn(player)
        destination = Position.from_algebraic(target)
        apply_move(self.board, acting, destination)
        self._record(destination.to_algebraic())

    def move_in_direction(self, direction: str, player: str) -> None:
        """Button-style control: 'up', 'down', 'left' or 'right', jumps resolved automatically."""
        acting = self._assert_your_turn(player)
        destination = resolve_direction_move(self.board, acting, direction)
        if destination is None:
            raise IllegalMoveError(f"No legal move {direction} for {player}")
        apply_move(self.board, acting, destination)
        self._record(destination.to_algebraic())

    def place_fence(self, notation: str, player: str) -> None:
        self._assert_your_turn(player)
        fence = Fence.from_notation(notation)
        apply_fence(self.board, fence)
        self._record(fence.to_notation())

    def play_ai_turn(self) -> Action:
        """
        Let the computer pick and play its action.
        ---

        If the computer has nothing to play (an invariant violation), it forfeits the game.
        """
        if not self.is_computer_turn:
            raise NotYourTurnError("It is not the computer's turn")

        computer = self.current_player
        action, self.ai_state = self.policy.decide(self.board, self.ai_state, computer)
        if isinstance(action, NoAction):
            LOGGER.error(
                "Computer has no legal action at %s, forfeiting",
                computer.position.to_algebraic(),
            )
            self._forfeit(computer)
            raise NoLegalMovesError("Computer has no legal action and forfeits")

        apply_action(self.board, computer, action)
        self._record(action.to_notation())
        return action

    def set_bot(self, bot: BotType) -> None:
        """Swap the computer opponent. Its memory starts over."""
        self.bot = bot
        self.policy = Policy.from_bot(bot, self.seed)
        self.ai_state = AiState()

    def restart(self) -> None:
        """Throw the board away and start over with the same players and bot."""
        names = (self.board.players[0].name, self.board.players[1].name)
        self.board = new_game(names)
        self.policy = Policy.from_bot(self.bot, self.seed)
        self.ai_state = AiState()
        self.history = []
        self.status = Status.IN_PROGRESS

    # -- PRIVATE HELPERS ---
    def _player_by_name(self, player: str) -> Player:
        found = next((p for p in self.board.players if p.name == player), None)
        if found is None:
            raise GameStateError(f"{player!r} does not play in this game")
        return found

    def _assert_your_turn(self, player: str) -> Player:
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")
        acting = self._player_by_name(player)
        if acting.id == self.computer_id:
            raise NotYourTurnError("The computer seat only plays through play_ai_turn()")
        if acting.id != self.current_player.id:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.current_player.name} to make a move first."
            )
        return acting

    def _record(self, notation: str) -> None:
        self.history.append(notation)
        if self.board.game_over:
            self.status = Status.WON

    def _forfeit(self, player: Player) -> None:
        self.board.declare_winner(self.board.opponent_of(player))
        self.status = Status.FORFEITED
