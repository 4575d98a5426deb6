"""Enums for model fields."""

from enum import Enum


class DMStatus(str, Enum):
    """Lifecycle status of a tracked DM.

    Any status may move to any other; there is no terminal state.
    """

    WAITING = "Waiting"
    IN_CONVERSATION = "In Conversation"
    WON = "Won"
    LOST = "Lost"


class Platform(str, Enum):
    """Platforms a DM can be sent on."""

    X = "X"
    LINKEDIN = "LinkedIn"
