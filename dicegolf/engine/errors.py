"""Errors a GameSession raises to its caller.

The rules core never raises: it ignores what it cannot do. These errors
exist so a front end can tell a player why their input went nowhere.
"""

from __future__ import annotations


class DiceGolfError(Exception):
    """Base class for session errors."""


class InvalidActionError(DiceGolfError):
    """The payload was malformed or not allowed right now."""

    def __init__(self, reason: str, payload: object = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.payload = payload


class RoundOverError(DiceGolfError):
    """Input arrived after the ball was holed or the shots ran out."""


class NotYourTurnError(DiceGolfError):
    """Input arrived for someone other than the round's player."""


class PluginError(DiceGolfError):
    """The plugin failed on a payload it had already accepted."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original
