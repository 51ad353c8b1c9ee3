"""Unit tests for /src/quoridor/ai.py"""

import logging
import random
from typing import Callable
from unittest.mock import patch

import pytest

from src.core.shared_types import BotType, Orientation
from src.quoridor.ai import (
    BOT_PRESETS,
    OPENING_BOOK,
    AiState,
    FenceAction,
    MoveAction,
    NoAction,
    OpeningStep,
    Policy,
    PolicyConfig,
    ai_decide,
    direct_blocking_fences,
    side_blocking_fences,
)
from src.quoridor.board import Board
from src.quoridor.fence import Fence
from src.quoridor.moves import legal_pawn_moves
from src.quoridor.paths import weighted_distance
from src.quoridor.placement import is_legal_fence_placement
from src.quoridor.position import Position

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL
BoardFactory = Callable[..., Board]

# Past the opening and the random early moves
MID_GAME = AiState(move_count=5)


# -- CANDIDATE FENCES --
@pytest.mark.parametrize(
    "player_one, expected",
    [
        ((4, 4), [Fence(3, 3, H), Fence(3, 4, H)]),
        ((4, 0), [Fence(3, 0, H)]),
        ((2, 8), [Fence(1, 7, H)]),
    ],
)
def test_direct_blocking_fences_upwards(
    make_board: BoardFactory, player_one: tuple[int, int], expected: list[Fence]
) -> None:
    board = make_board(player_one=player_one)
    assert direct_blocking_fences(board.players[0]) == expected


def test_direct_blocking_fences_downwards(make_board: BoardFactory) -> None:
    board = make_board(player_two=(4, 8))
    assert direct_blocking_fences(board.players[1]) == [Fence(4, 7, H)]


@pytest.mark.parametrize(
    "player_one, expected",
    [
        ((4, 4), [Fence(4, 3, V), Fence(4, 4, V), Fence(3, 3, V), Fence(3, 4, V)]),
        ((0, 0), [Fence(0, 0, V)]),
        ((4, 8), [Fence(4, 7, V), Fence(3, 7, V)]),
    ],
)
def test_side_blocking_fences(
    make_board: BoardFactory, player_one: tuple[int, int], expected: list[Fence]
) -> None:
    board = make_board(player_one=player_one, player_two=(8, 0))
    assert side_blocking_fences(board.players[0]) == expected


# -- CONFIGURATION --
def test_opening_book_weights() -> None:
    assert len(OPENING_BOOK) == 8
    assert sum(weight for _, weight in OPENING_BOOK) == 14


def test_presets() -> None:
    assert not BOT_PRESETS[BotType.BOT0].use_fences
    assert not BOT_PRESETS[BotType.BOT0].use_opening_book
    assert BOT_PRESETS[BotType.BOT1].random_move_decisions == 3
    assert BOT_PRESETS[BotType.BOT1].defensive_max_opponent_distance is None
    assert BOT_PRESETS[BotType.BOT1].direct_fence_min_opponent_rows == 6
    assert BOT_PRESETS[BotType.BOT2].direct_fence_min_opponent_rows is None
    assert BOT_PRESETS[BotType.BOT2] == PolicyConfig()


# -- DECISIONS --
def test_immediate_win(make_board: BoardFactory) -> None:
    board = make_board(player_one=(3, 0), player_two=(7, 4), turn=1)
    action, _ = Policy(rng=random.Random(0)).decide(board, MID_GAME, board.players[1])
    assert action == MoveAction(Position(8, 4))


def test_best_move_follows_shortest_path(make_board: BoardFactory) -> None:
    board = make_board(player_one=(5, 0), turn=1)
    policy = Policy.from_bot(BotType.BOT0, seed=1)
    action, state = policy.decide(board, AiState(), board.players[1])

    assert action == MoveAction(Position(1, 4))
    assert state.move_count == 1
    assert state.previous_position == Position(0, 4)
    assert len(state.opponent_distances) == 1


def test_boxed_in_returns_no_action(
    make_board: BoardFactory, caplog: pytest.LogCaptureFixture
) -> None:
    # both fences share a post, so they can only get there by building the board by hand
    board = make_board(
        player_two=(0, 0), fences=[Fence(0, 0, H), Fence(0, 0, V)], turn=1
    )
    caplog.set_level(logging.ERROR, logger="src.quoridor.ai")

    action, state = Policy.from_bot(BotType.BOT2, seed=3).decide(
        board, AiState(), board.players[1]
    )

    assert action == NoAction()
    assert state.move_count == 1
    assert "no legal moves" in caplog.text


def test_board_is_not_mutated(make_board: BoardFactory) -> None:
    board = make_board(player_one=(2, 4), player_two=(4, 8), turn=1)
    snapshot = board.copy()

    Policy.from_bot(BotType.BOT2, seed=7).decide(board, AiState(), board.players[1])

    assert board == snapshot


def test_same_seed_same_decisions(make_board: BoardFactory) -> None:
    board = make_board(player_one=(7, 4), turn=1)

    first = Policy.from_bot(BotType.BOT2, seed=42).decide(
        board, AiState(), board.players[1]
    )
    second = Policy.from_bot(BotType.BOT2, seed=42).decide(
        board, AiState(), board.players[1]
    )

    assert first == second


def test_functional_entry_point(make_board: BoardFactory) -> None:
    board = make_board(player_one=(5, 0), turn=1)
    action, _ = ai_decide(
        board, AiState(), board.players[1], Policy.from_bot(BotType.BOT0)
    )
    assert action == MoveAction(Position(1, 4))


# -- OPENING BOOK --
def test_opening_follows_the_drawn_pattern(make_board: BoardFactory) -> None:
    # opponent away from columns 3 and 4, so the route after the opening is straight down column 3
    board = make_board(player_one=(7, 8), turn=1)
    ai_player = board.players[1]
    rng = random.Random(0)
    policy = Policy(PolicyConfig(opening_probability=1.0, use_fences=False), rng)
    pattern = (OpeningStep.LEFT, OpeningStep.FORWARD, OpeningStep.LEFT)

    with patch.object(rng, "choices", return_value=[pattern]) as mock_choices:
        action, state = policy.decide(board, AiState(), ai_player)
        assert action == MoveAction(Position(0, 3))
        board.move_pawn(ai_player, Position(0, 3))

        # forward is towards the AI's own goal row
        action, state = policy.decide(board, state, ai_player)
        assert action == MoveAction(Position(1, 3))
        board.move_pawn(ai_player, Position(1, 3))

        # third decision: the opening is over even though the pattern has a step left
        action, state = policy.decide(board, state, ai_player)
        assert action == MoveAction(Position(2, 3))

    mock_choices.assert_called_once()
    assert state.opening_pattern == pattern
    assert state.opening_step == 2


def test_opening_abandoned_when_blocked(make_board: BoardFactory) -> None:
    board = make_board(player_one=(7, 0), fences=[Fence(0, 3, V)], turn=1)
    rng = random.Random(0)
    policy = Policy(PolicyConfig(opening_probability=1.0, use_fences=False), rng)
    pattern = (OpeningStep.LEFT, OpeningStep.LEFT)

    with patch.object(rng, "choices", return_value=[pattern]):
        action, state = policy.decide(board, AiState(), board.players[1])

    assert action == MoveAction(Position(1, 4))
    assert state.opening_abandoned
    assert state.opening_pattern is None
    assert not policy._in_opening(state, 1)


def test_opening_skipped_when_disabled(make_board: BoardFactory) -> None:
    board = make_board(player_one=(5, 0), turn=1)
    rng = random.Random(0)
    policy = Policy(PolicyConfig(use_opening_book=False, use_fences=False), rng)

    with patch.object(rng, "choices") as mock_choices:
        action, state = policy.decide(board, AiState(), board.players[1])

    mock_choices.assert_not_called()
    assert action == MoveAction(Position(1, 4))
    assert state.opening_pattern is None


# -- RANDOM EARLY MOVES --
@pytest.mark.parametrize("seed", range(10))
def test_random_move_does_not_backtrack(make_board: BoardFactory, seed: int) -> None:
    board = make_board(player_one=(8, 0), player_two=(1, 4), turn=1)
    config = PolicyConfig(
        use_opening_book=False,
        random_move_probability=1.0,
        random_move_decisions=3,
        use_fences=False,
    )
    state = AiState(move_count=1, previous_position=Position(0, 4))

    action, _ = Policy(config, random.Random(seed)).decide(
        board, state, board.players[1]
    )

    assert isinstance(action, MoveAction)
    assert action.target != Position(0, 4)
    assert action.target in legal_pawn_moves(board, board.players[1])


# -- FENCES --
def test_aggressive_fence_improves_advantage(make_board: BoardFactory) -> None:
    board = make_board(player_one=(1, 4), player_two=(4, 8), turn=1)
    config = PolicyConfig(use_opening_book=False, aggressive_fence_threshold=0.5)
    opponent = board.players[0]

    action, _ = Policy(config, random.Random(5)).decide(board, AiState(), board.players[1])

    assert isinstance(action, FenceAction)
    assert is_legal_fence_placement(board, action.fence)
    before = weighted_distance(board, opponent.position, opponent.goal_row)
    after = weighted_distance(
        board.with_fence(action.fence), opponent.position, opponent.goal_row
    )
    assert after - before >= 0.5


def test_aggressive_fence_at_default_threshold(make_board: BoardFactory) -> None:
    """Player 1 stands in a channel along column 0 whose only short exit is the top"""
    channel = [Fence(1, 0, V), Fence(3, 0, V), Fence(5, 0, V)]
    board = make_board(player_one=(1, 0), player_two=(4, 8), fences=channel, turn=1)
    ai_player, opponent = board.players[1], board.players[0]

    action, _ = Policy(PolicyConfig(), random.Random(0)).decide(board, MID_GAME, ai_player)

    # closing the top sends player 1 down the channel and around
    assert action == FenceAction(Fence(0, 0, H))
    after = board.with_fence(action.fence)
    advantage_before = weighted_distance(
        board, opponent.position, opponent.goal_row
    ) - weighted_distance(board, ai_player.position, ai_player.goal_row)
    advantage_after = weighted_distance(
        after, opponent.position, opponent.goal_row
    ) - weighted_distance(after, ai_player.position, ai_player.goal_row)
    assert advantage_after - advantage_before >= 3.0


def test_no_aggressive_fence_below_threshold(make_board: BoardFactory) -> None:
    """Best single fence (right above player 1) only gains about 1.1"""
    board = make_board(player_one=(1, 4), player_two=(4, 4), turn=1)
    policy = Policy(PolicyConfig(), random.Random(0))
    assert policy._aggressive_fence(board, board.players[1], board.players[0]) is None


def test_aggressive_fence_ties_go_to_first_in_shuffled_order(
    make_board: BoardFactory,
) -> None:
    # H(0,3) and H(0,4) are mirror images around column 4, so they gain exactly the same
    board = make_board(player_one=(1, 4), player_two=(4, 4), turn=1)
    rng = random.Random(0)
    policy = Policy(PolicyConfig(aggressive_fence_threshold=1.0), rng)
    ai_player, opponent = board.players[1], board.players[0]

    with patch.object(rng, "shuffle"):
        assert policy._aggressive_fence(board, ai_player, opponent) == Fence(0, 3, H)

    with patch.object(
        rng, "shuffle", side_effect=lambda candidates: candidates.reverse()
    ):
        assert policy._aggressive_fence(board, ai_player, opponent) == Fence(0, 4, H)


def test_movement_only_bot_never_places_fences(make_board: BoardFactory) -> None:
    board = make_board(player_one=(1, 4), player_two=(4, 8), turn=1)
    action, _ = Policy.from_bot(BotType.BOT0, seed=5).decide(
        board, AiState(), board.players[1]
    )
    assert isinstance(action, MoveAction)


def test_defensive_fence_in_front_of_opponent(make_board: BoardFactory) -> None:
    board = make_board(player_one=(2, 4), player_two=(4, 8), turn=1)
    policy = Policy(PolicyConfig(use_opening_book=False), random.Random(0))

    action, _ = policy.decide(board, MID_GAME, board.players[1])

    assert action == FenceAction(Fence(1, 3, H))


def test_no_fence_without_fences_left(make_board: BoardFactory) -> None:
    board = make_board(player_one=(2, 4), player_two=(4, 8), turn=1)
    board.players[1].fences_remaining = 0
    policy = Policy(PolicyConfig(use_opening_book=False), random.Random(0))

    action, _ = policy.decide(board, MID_GAME, board.players[1])

    assert isinstance(action, MoveAction)


@pytest.mark.parametrize(
    "bot, expected",
    [
        (BotType.BOT1, FenceAction(Fence(7, 3, H))),  # defends regardless of distance
        (BotType.BOT2, MoveAction(Position(1, 0))),  # opponent too far away to bother
    ],
)
def test_defensive_gates_per_bot(
    make_board: BoardFactory, bot: BotType, expected: FenceAction | MoveAction
) -> None:
    board = make_board(player_two=(0, 0), turn=1)
    action, _ = Policy.from_bot(bot, seed=0).decide(board, MID_GAME, board.players[1])
    assert action == expected


def test_bot1_skips_fence_in_front_of_advanced_opponent(
    make_board: BoardFactory,
) -> None:
    """Four rows from its goal, player 1 only gets a fence beside it"""
    board = make_board(player_one=(4, 4), player_two=(0, 0), turn=1)
    action, _ = Policy.from_bot(BotType.BOT1, seed=0).decide(
        board, MID_GAME, board.players[1]
    )
    assert action == FenceAction(Fence(4, 3, V))


# -- OPPONENT TREND --
@pytest.mark.parametrize(
    "distances, expected",
    [
        ((), None),
        ((5.0,), None),
        ((5.0, 4.0, 3.0), True),
        ((3.0, 5.0, 4.0), False),
        ((3.0, 4.0), False),
    ],
)
def test_opponent_trend(distances: tuple[float, ...], expected: bool | None) -> None:
    state = AiState(opponent_distances=distances)
    assert Policy().opponent_trend(state) == expected
