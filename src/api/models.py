"""Requests and Response models"""

import re
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ValidationInfo, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import BotType, Status
from src.quoridor.game import COMPUTER_NAME

PlayerName = str

# columns a-i, rows 1-9
CELL_PATTERN = re.compile(r"^[a-i][1-9]$")
# fence anchors only go up to h8 (the fence needs room for its second cell)
FENCE_PATTERN = re.compile(r"^[a-h][1-8][hv]$")
DIRECTIONS = ("up", "down", "left", "right")


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    bot: BotType = BotType.BOT2
    seed: Optional[int] = None
    opponent_name: Optional[str] = None

    @field_validator("opponent_name")
    @classmethod
    def validate_opponent_name(
        cls, value: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        if value is not None and value == info.data.get("player_name"):
            raise InvalidRequestError("Both players need a different name.")
        return value

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        if value == COMPUTER_NAME:
            raise InvalidRequestError(f"{COMPUTER_NAME!r} is the name of the computer opponent.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalActionsRequest(BaseModel):
    game_id: UUID
    player_name: str


class MoveRequest(BaseModel):
    game_id: UUID
    player_name: str
    to_square: str

    @field_validator("to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        value = value.strip().lower()
        if not CELL_PATTERN.match(value):
            raise InvalidRequestError(
                f"Cannot interpret to_square: {value!r} as a cell name (a1 - i9)."
            )
        return value


class DirectionRequest(BaseModel):
    game_id: UUID
    player_name: str
    direction: str

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in DIRECTIONS:
            raise InvalidRequestError(
                f"Direction must be one of {', '.join(DIRECTIONS)}. Got {value!r}"
            )
        return value


class FenceRequest(BaseModel):
    game_id: UUID
    player_name: str
    fence: str

    @field_validator("fence")
    @classmethod
    def validate_fence(cls, value: str) -> str:
        value = value.strip().lower()
        if not FENCE_PATTERN.match(value):
            raise InvalidRequestError(
                f"Cannot interpret fence: {value!r}. Expected anchor + orientation, ex. 'e3h' or 'c5v'."
            )
        return value


class ComputerTurnRequest(BaseModel):
    game_id: UUID


class ChangeBotRequest(BaseModel):
    game_id: UUID
    bot: BotType


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PlayerState(BaseModel):
    id: int
    name: PlayerName
    position: str
    goal_row: int
    fences_remaining: int


class GameResponse(BaseModel):
    game_id: UUID
    players: list[PlayerState]
    fences: list[str]
    current_player: PlayerName
    status: Status
    winner: Optional[PlayerName]
    bot: Optional[BotType]
    move_history: list[str]


class LegalActionsResponse(BaseModel):
    game_id: UUID
    player_name: PlayerName
    pawn_moves: list[str]
    fences: list[str]


class ComputerTurnResponse(BaseModel):
    game_id: UUID
    action: str
    notation: str
    game: GameResponse
