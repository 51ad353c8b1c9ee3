"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    WON = "won"
    FORFEITED = "forfeited"


class Orientation(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class BotType(StrEnum):
    """The three computer opponents. BOT2 is the complete one, the other two are reduced presets of the same policy."""

    BOT0 = "bot0"
    BOT1 = "bot1"
    BOT2 = "bot2"


class FenceRejection(StrEnum):
    """Reason codes for a fence that cannot be placed. Checked in this order."""

    BOUNDS = "out of bounds"
    DUPLICATE = "duplicate"
    POST_OVERLAP = "post overlap"
    SPAN_OVERLAP = "span overlap"
    PATH_BLOCKED = "blocks a path to goal"
    NO_FENCES_LEFT = "no fences remaining"
