"""
Computer opponent
----

One policy, walked through in strict priority order. The first step that produces an action wins:

1. opening book (first two decisions only, 75% of the time)
2. immediate win
3. random early move (only for presets that enable it)
4. aggressive fence: the placement that improves the advantage the most, if it improves it by 3 or more
5. defensive fence: block the opponent once it gets close to its goal
6. best move: next cell on the weighted shortest path
7. no action (pawn completely boxed in)

The older, simpler bots are configuration presets of the same policy (see BOT_PRESETS).

The policy never mutates the board it is given. Fences are tried out on copies (`Board.with_fence()`)
and the caller applies the returned action exactly once.
"""

import logging
import math
import random
from dataclasses import dataclass, field, replace
from enum import Enum, StrEnum, auto
from itertools import chain
from typing import Optional

from src.core.shared_types import BotType, Orientation
from src.quoridor.board import Board, Player
from src.quoridor.fence import Fence
from src.quoridor.moves import legal_pawn_moves
from src.quoridor.paths import shortest_path_from, weighted_distance
from src.quoridor.placement import is_legal_fence_placement, legal_fence_placements
from src.quoridor.position import FENCE_SLOTS, LEFT, RIGHT, Position, Vector

LOGGER = logging.getLogger(__name__)

OPPONENT_HISTORY_LENGTH = 10


# --- ACTIONS ---
@dataclass(frozen=True)
class MoveAction:
    target: Position

    def to_notation(self) -> str:
        return self.target.to_algebraic()


@dataclass(frozen=True)
class FenceAction:
    fence: Fence

    def to_notation(self) -> str:
        return self.fence.to_notation()


@dataclass(frozen=True)
class NoAction:
    def to_notation(self) -> str:
        return "-"


Action = MoveAction | FenceAction | NoAction


# --- OPENING BOOK ---
class OpeningStep(StrEnum):
    """Sideways steps are absolute columns, FORWARD is towards the AI's own goal row."""

    LEFT = "left"
    RIGHT = "right"
    FORWARD = "forward"


OpeningPattern = tuple[OpeningStep, ...]

# (pattern, weight). The pure sideways triples are half as likely as the rest.
OPENING_BOOK: tuple[tuple[OpeningPattern, int], ...] = (
    ((OpeningStep.LEFT, OpeningStep.LEFT), 2),
    ((OpeningStep.FORWARD, OpeningStep.LEFT), 2),
    ((OpeningStep.FORWARD, OpeningStep.RIGHT), 2),
    ((OpeningStep.RIGHT, OpeningStep.RIGHT), 2),
    ((OpeningStep.LEFT, OpeningStep.FORWARD, OpeningStep.LEFT), 2),
    ((OpeningStep.RIGHT, OpeningStep.FORWARD, OpeningStep.RIGHT), 2),
    ((OpeningStep.LEFT, OpeningStep.LEFT, OpeningStep.LEFT), 1),
    ((OpeningStep.RIGHT, OpeningStep.RIGHT, OpeningStep.RIGHT), 1),
)


def opening_step_vector(step: OpeningStep, player: Player) -> Vector:
    if step == OpeningStep.LEFT:
        return LEFT
    if step == OpeningStep.RIGHT:
        return RIGHT
    return (player.forward, 0)


# --- STATE & CONFIGURATION ---
@dataclass(frozen=True)
class AiState:
    """
    Everything the AI remembers between its turns within one game.
    ---

    Owned by the game controller, passed in and handed back by `Policy.decide()`.
    A new game (or a different bot) starts again from `AiState()`.
    """

    move_count: int = 0
    previous_position: Optional[Position] = None
    opening_pattern: Optional[OpeningPattern] = None
    opening_step: int = 0
    opening_abandoned: bool = False
    opponent_distances: tuple[float, ...] = field(default_factory=tuple)


class FenceMetric(Enum):
    ADVANTAGE = auto()  # opponent distance minus own distance
    OPPONENT_DISTANCE = auto()  # opponent distance only


@dataclass(frozen=True)
class PolicyConfig:
    use_opening_book: bool = True
    opening_book_decisions: int = 2
    opening_probability: float = 0.75
    random_move_probability: float = 0.0
    random_move_decisions: int = 0
    use_fences: bool = True
    aggressive_fence_metric: FenceMetric = FenceMetric.ADVANTAGE
    aggressive_fence_threshold: float = 3.0
    # None switches the corresponding gate off: defend regardless of how close the opponent is
    defensive_max_opponent_distance: Optional[float] = 3.0
    defensive_max_opponent_rows: Optional[int] = 4
    # fences right in front are only tried while the opponent is at least this many rows from its goal
    direct_fence_min_opponent_rows: Optional[int] = None


BOT_PRESETS: dict[BotType, PolicyConfig] = {
    # movement only
    BotType.BOT0: PolicyConfig(use_opening_book=False, use_fences=False),
    # random early wandering and fences that only look at the opponent's distance
    BotType.BOT1: PolicyConfig(
        use_opening_book=False,
        random_move_probability=0.5,
        random_move_decisions=3,
        aggressive_fence_metric=FenceMetric.OPPONENT_DISTANCE,
        defensive_max_opponent_distance=None,
        defensive_max_opponent_rows=None,
        direct_fence_min_opponent_rows=6,
    ),
    BotType.BOT2: PolicyConfig(),
}

BOT_NAMES: dict[BotType, str] = {
    BotType.BOT0: "Bot 0 - Movement Only",
    BotType.BOT1: "Bot 1 - Basic Strategic",
    BotType.BOT2: "Bot 2 - Advantage Focused",
}


# --- CANDIDATE FENCES ---
def _clamp_slot(value: int) -> int:
    return max(0, min(FENCE_SLOTS - 1, value))


def direct_blocking_fences(opponent: Player) -> list[Fence]:
    """Horizontal fences right in front of the opponent, covering its column and one neighbour"""
    row, col = opponent.position.row, opponent.position.col
    fence_row = row - 1 if opponent.forward == -1 else row
    fences: list[Fence] = []
    for fence_col in (_clamp_slot(col - 1), _clamp_slot(col)):
        fence = Fence(fence_row, fence_col, Orientation.HORIZONTAL)
        if fence not in fences:
            fences.append(fence)
    return fences


def side_blocking_fences(opponent: Player) -> list[Fence]:
    """Vertical fences to the left/right of the opponent, on its row and on the row above"""
    row, col = opponent.position.row, opponent.position.col
    rows = [row, row - 1] if row > 0 else [row]
    fences: list[Fence] = []
    for fence_row in rows:
        if col > 0:
            fences.append(Fence(fence_row, col - 1, Orientation.VERTICAL))
        if col < FENCE_SLOTS:
            fences.append(Fence(fence_row, col, Orientation.VERTICAL))
    return fences


# --- THE POLICY ---
class Policy:
    """Priority-ordered move selection. Behaviour is set by a PolicyConfig, randomness by an injectable RNG."""

    def __init__(
        self,
        config: Optional[PolicyConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config if config is not None else BOT_PRESETS[BotType.BOT2]
        self._rng = rng if rng is not None else random.Random()

    @classmethod
    def from_bot(cls, bot: BotType, seed: Optional[int] = None) -> "Policy":
        return cls(BOT_PRESETS[bot], random.Random(seed))

    def decide(
        self, board: Board, state: AiState, player: Player
    ) -> tuple[Action, AiState]:
        """Choose an action for `player`. Returns the action and the AI state to use next turn."""
        opponent = board.opponent_of(player)
        decision_index = state.move_count
        backtrack_cell = state.previous_position
        state = self._track(board, state, player, opponent)

        legal = sorted(legal_pawn_moves(board, player))
        if not legal:
            LOGGER.error(
                "Player %s has no legal moves at %s", player.id, player.position
            )
            return NoAction(), state

        # 1. opening book
        if self._in_opening(state, decision_index):
            target, state = self._opening_move(board, state, player, legal)
            if target is not None:
                return self._move(target, "opening book"), state

        # 2. immediate win
        winning = next((move for move in legal if move.row == player.goal_row), None)
        if winning is not None:
            return self._move(winning, "immediate win"), state

        # 3. random early move
        if (
            decision_index < self.config.random_move_decisions
            and self._rng.random() < self.config.random_move_probability
        ):
            return self._move(self._random_move(legal, backtrack_cell), "random"), state

        if self.config.use_fences and player.fences_remaining > 0:
            # 4. aggressive fence
            fence = self._aggressive_fence(board, player, opponent)
            if fence is not None:
                return self._fence(fence, "aggressive fence"), state

            # 5. defensive fence
            fence = self._defensive_fence(board, opponent)
            if fence is not None:
                return self._fence(fence, "defensive fence"), state

        # 6. best move
        return self._move(self._best_move(board, player, legal), "best move"), state

    def opponent_trend(self, state: AiState) -> Optional[bool]:
        """
        Is the opponent getting closer to its goal over the last few turns?
        None when there is not enough history yet.
        """
        if len(state.opponent_distances) < 2:
            return None
        recent = state.opponent_distances[-3:]
        return recent[-1] < recent[0]

    # -- PRIVATE HELPERS ---
    def _track(
        self, board: Board, state: AiState, player: Player, opponent: Player
    ) -> AiState:
        """Bookkeeping done on every call, before any decision is made."""
        opponent_distance = weighted_distance(
            board, opponent.position, opponent.goal_row
        )
        history = (state.opponent_distances + (opponent_distance,))[
            -OPPONENT_HISTORY_LENGTH:
        ]
        return replace(
            state,
            move_count=state.move_count + 1,
            previous_position=player.position,
            opponent_distances=history,
        )

    def _in_opening(self, state: AiState, decision_index: int) -> bool:
        if not self.config.use_opening_book or state.opening_abandoned:
            return False
        if decision_index >= self.config.opening_book_decisions:
            return False
        return self._rng.random() < self.config.opening_probability

    def _opening_move(
        self, board: Board, state: AiState, player: Player, legal: list[Position]
    ) -> tuple[Optional[Position], AiState]:
        """
        Next scripted step of the opening.
        ---

        The pattern is drawn once per game. If the scripted step is not legal right now, the opening is
        given up for the rest of the game and the best move is played instead.
        """
        if state.opening_pattern is None:
            patterns = [pattern for pattern, _ in OPENING_BOOK]
            weights = [weight for _, weight in OPENING_BOOK]
            pattern = self._rng.choices(patterns, weights=weights)[0]
            state = replace(state, opening_pattern=pattern, opening_step=0)

        assert state.opening_pattern is not None
        if state.opening_step >= len(state.opening_pattern):
            return None, state

        step = state.opening_pattern[state.opening_step]
        target = player.position.step(opening_step_vector(step, player))
        if target in legal:
            return target, replace(state, opening_step=state.opening_step + 1)

        LOGGER.warning(
            "Opening step %s from %s is not possible, abandoning the opening",
            step,
            player.position.to_algebraic(),
        )
        abandoned = replace(state, opening_pattern=None, opening_abandoned=True)
        return self._best_move(board, player, legal), abandoned

    def _random_move(
        self, legal: list[Position], backtrack_cell: Optional[Position]
    ) -> Position:
        """Random legal move, not stepping back to where the AI came from unless that is the only option"""
        forward_options = [move for move in legal if move != backtrack_cell]
        return self._rng.choice(forward_options or legal)

    def _score(self, board: Board, player: Player, opponent: Player) -> float:
        opponent_distance = weighted_distance(
            board, opponent.position, opponent.goal_row
        )
        if self.config.aggressive_fence_metric == FenceMetric.OPPONENT_DISTANCE:
            return opponent_distance
        own_distance = weighted_distance(board, player.position, player.goal_row)
        return opponent_distance - own_distance

    def _aggressive_fence(
        self, board: Board, player: Player, opponent: Player
    ) -> Optional[Fence]:
        """
        Try every legal fence and keep the one that improves the score the most.
        ---

        Candidates are shuffled first, so among equally good fences the first one in shuffled order wins.
        """
        current = self._score(board, player, opponent)
        if math.isinf(current) or math.isnan(current):
            return None

        candidates = sorted(legal_fence_placements(board))
        self._rng.shuffle(candidates)

        best_fence: Optional[Fence] = None
        best_gain = 0.0
        for fence in candidates:
            score = self._score(board.with_fence(fence), player, opponent)
            if math.isinf(score) or math.isnan(score):
                continue
            gain = score - current
            if gain >= self.config.aggressive_fence_threshold and gain > best_gain:
                best_gain = gain
                best_fence = fence
        return best_fence

    def _defensive_fence(self, board: Board, opponent: Player) -> Optional[Fence]:
        """Only once the opponent is close: the first blocking fence that makes its route longer"""
        current = weighted_distance(board, opponent.position, opponent.goal_row)
        max_distance = self.config.defensive_max_opponent_distance
        max_rows = self.config.defensive_max_opponent_rows
        if max_distance is not None and current > max_distance:
            return None
        if max_rows is not None and opponent.row_distance_to_goal() > max_rows:
            return None

        min_rows = self.config.direct_fence_min_opponent_rows
        direct = (
            direct_blocking_fences(opponent)
            if min_rows is None or opponent.row_distance_to_goal() >= min_rows
            else []
        )
        for fence in chain(direct, side_blocking_fences(opponent)):
            if not is_legal_fence_placement(board, fence):
                continue
            new_distance = weighted_distance(
                board.with_fence(fence), opponent.position, opponent.goal_row
            )
            if new_distance > current:
                return fence
        return None

    def _best_move(self, board: Board, player: Player, legal: list[Position]) -> Position:
        """
        Follow the optimal route. Only if that gives no usable next cell, fall back to comparing
        the distance from every legal destination.
        """
        path = shortest_path_from(board, player)
        if len(path) > 1 and path[1] in legal:
            return path[1]
        return min(
            legal, key=lambda move: weighted_distance(board, move, player.goal_row)
        )

    def _move(self, target: Position, step: str) -> MoveAction:
        LOGGER.debug("AI moves to %s (%s)", target.to_algebraic(), step)
        return MoveAction(target)

    def _fence(self, fence: Fence, step: str) -> FenceAction:
        LOGGER.debug("AI places fence %s (%s)", fence.to_notation(), step)
        return FenceAction(fence)


def ai_decide(
    board: Board,
    ai_state: AiState,
    player: Player,
    policy: Optional[Policy] = None,
) -> tuple[Action, AiState]:
    """Functional entry point: decide with the given policy (default: BOT2 with an unseeded RNG)."""
    return (policy or Policy()).decide(board, ai_state, player)
