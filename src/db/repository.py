"""Protocol repository, and the in-memory implementation the service runs on (games are not persisted)"""

from typing import Protocol
from uuid import UUID, uuid4

from src.quoridor.game import Game


class GameRepository(Protocol):
    """Storage of running game sessions"""

    def get_game(self, game_id: UUID) -> Game | None:
        """Get game by ID, if it exists."""
        ...

    def create_game(self, game: Game) -> tuple[Game, UUID]:
        """Store new game and return it + the newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: Game) -> Game | None:
        """Replace the stored session."""
        ...

    def delete_game(self, game_id: UUID) -> Game | None:
        """Remove a game."""
        ...


class InMemoryGameRepository:
    """Sessions kept in a dictionary for as long as the process lives."""

    def __init__(self) -> None:
        self._games: dict[UUID, Game] = {}

    def get_game(self, game_id: UUID) -> Game | None:
        return self._games.get(game_id)

    def create_game(self, game: Game) -> tuple[Game, UUID]:
        new_id = uuid4()
        self._games[new_id] = game
        return game, new_id

    def update_game(self, game_id: UUID, game: Game) -> Game | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> Game | None:
        return self._games.pop(game_id, None)

    def __len__(self) -> int:
        return len(self._games)
