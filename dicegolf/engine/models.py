"""Envelopes passed between a round, its plugin and the bots that drive it."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dicegolf.games.dice_golf.types import CubeCoord

PlayerId = NewType("PlayerId", str)


class Player(BaseModel):
    player_id: PlayerId
    display_name: str
    is_bot: bool = False
    bot_id: str | None = None


# --- Round setup ---

class CourseOptions(BaseModel):
    """How the course for a round is chosen.

    An explicit ``seed`` wins, then ``daily`` (the course for ``day``,
    today by default), then the config's ``random_seed``.
    """

    model_config = ConfigDict(extra="forbid")

    seed: int | None = Field(default=None, ge=0)
    daily: bool = False
    day: date | None = None
    grid_size: int | None = Field(default=None, ge=1)


class GameConfig(BaseModel):
    options: CourseOptions = Field(default_factory=CourseOptions)
    # Seeds the dice; also the course seed when no option picks one.
    random_seed: int | None = None


# --- Phases ---

class PhaseName(str, Enum):
    PLAY = "play"
    ROLL_DICE = "roll_dice"
    GAME_OVER = "game_over"


class Phase(BaseModel):
    name: PhaseName
    player_id: PlayerId | None = None

    @property
    def auto_resolve(self) -> bool:
        """The dice are in the air; nobody acts until they land."""
        return self.name == PhaseName.ROLL_DICE


# --- Player input ---

class ShotAction(str, Enum):
    ROLL = "roll"
    PUTT = "putt"
    CANCEL_PUTT = "cancel_putt"
    MULLIGAN = "mulligan"
    MOVE = "move"


class PlayPayload(BaseModel):
    """One thing a player does on their turn. Only ``move`` names a cell."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: ShotAction
    q: int | None = None
    r: int | None = None
    s: int | None = None

    @model_validator(mode="after")
    def _check_target(self) -> PlayPayload:
        coords = (self.q, self.r, self.s)
        if self.action != ShotAction.MOVE:
            if coords != (None, None, None):
                raise ValueError(f"{self.action.value} does not take a cell")
            return self
        if None in coords:
            raise ValueError("move needs q, r and s")
        if self.q + self.r + self.s != 0:
            raise ValueError("q + r + s must be 0")
        return self

    @classmethod
    def move(cls, cell: CubeCoord) -> PlayPayload:
        return cls(action=ShotAction.MOVE, q=cell.q, r=cell.r, s=cell.s)

    @property
    def target(self) -> CubeCoord | None:
        if self.action != ShotAction.MOVE:
            return None
        return CubeCoord(self.q, self.r, self.s)


class Action(BaseModel):
    """A payload submitted for a player. Landing dice carry no payload."""

    player_id: PlayerId
    payload: PlayPayload | None = None


class Event(BaseModel):
    event_type: str
    player_id: PlayerId | None = None
    payload: dict = Field(default_factory=dict)


# --- Outcomes ---

class GameStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


class EndReason(str, Enum):
    HOLED = "holed"
    OUT_OF_SHOTS = "out_of_shots"


class GameResult(BaseModel):
    player_id: PlayerId
    reason: EndReason
    final_score: float
    strokes: int
    par: int
    mulligans_left: int
    seed: int

    @property
    def holed(self) -> bool:
        return self.reason == EndReason.HOLED


class TransitionResult(BaseModel):
    game_data: dict
    events: list[Event]
    next_phase: Phase
    score: float = 0
    game_over: GameResult | None = None
