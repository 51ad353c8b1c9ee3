"""Orchestration of communication from API layer to the game logic and the game store (and the reverse direction)."""

from uuid import UUID

from src.api.models import (
    ChangeBotRequest,
    ComputerTurnRequest,
    ComputerTurnResponse,
    CreateGameRequest,
    DeleteGameRequest,
    DirectionRequest,
    FenceRequest,
    GameResponse,
    GetGameRequest,
    LegalActionsRequest,
    LegalActionsResponse,
    MoveRequest,
    PlayerState,
)
from src.core.exceptions import RepositoryError
from src.db.repository import GameRepository
from src.quoridor.ai import FenceAction, MoveAction
from src.quoridor.game import Game


class QuoridorService:
    """Orchestration of layers for a Quoridor game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """A player starts a game, against the computer unless an opponent name is given."""
        new_game = Game.new_game(
            player=request.player_name,
            bot=request.bot,
            seed=request.seed,
            opponent=request.opponent_name,
        )
        stored_game, game_id = self.repo.create_game(new_game)
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by a frontend to check when it is the player's turn for instance.
        """
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_actions(self, request: LegalActionsRequest) -> LegalActionsResponse:
        """Pawn destinations and fence placements available to the player."""
        game = self._fetch_game(request.game_id)
        return LegalActionsResponse(
            game_id=request.game_id,
            player_name=request.player_name,
            pawn_moves=game.legal_moves(request.player_name),
            fences=game.legal_fences(request.player_name),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        game.make_move(request.to_square, request.player_name)
        self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def move_in_direction(self, request: DirectionRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        game.move_in_direction(request.direction, request.player_name)
        self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def place_fence(self, request: FenceRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        game.place_fence(request.fence, request.player_name)
        self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def computer_turn(self, request: ComputerTurnRequest) -> ComputerTurnResponse:
        """
        Let the computer play.
        ----
        A frontend may wait a bit before calling this for pacing. The engine does not care.
        """
        game = self._fetch_game(request.game_id)
        action = game.play_ai_turn()
        self.repo.update_game(request.game_id, game)

        # NoAction never gets here: the game raises NoLegalMovesError instead
        assert isinstance(action, (MoveAction, FenceAction))
        kind = "move" if isinstance(action, MoveAction) else "fence"
        return ComputerTurnResponse(
            game_id=request.game_id,
            action=kind,
            notation=action.to_notation(),
            game=self._create_game_response(request.game_id, game),
        )

    def change_bot(self, request: ChangeBotRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        game.set_bot(request.bot)
        self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _fetch_game(self, game_id: UUID) -> Game:
        game = self.repo.get_game(game_id)
        if game is None:
            raise RepositoryError(f"No game found with id {game_id}")
        return game

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the session into a GameResponse."""
        board = game.board
        return GameResponse(
            game_id=game_id,
            players=[
                PlayerState(
                    id=player.id,
                    name=player.name,
                    position=player.position.to_algebraic(),
                    goal_row=player.goal_row,
                    fences_remaining=player.fences_remaining,
                )
                for player in board.players
            ],
            fences=[fence.to_notation() for fence in sorted(board.fences)],
            current_player=board.current_player.name,
            status=game.status,
            winner=game.winner,
            bot=game.bot if game.computer_id is not None else None,
            move_history=list(game.history),
        )
