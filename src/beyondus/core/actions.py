"""Action values and the wire message schema they are parsed from."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import ActionType, Zone
from .errors import InvalidVoteTargetError, InvalidZoneError


@dataclass(frozen=True)
class Move:
    zone: Zone


@dataclass(frozen=True)
class StartTask:
    pass


@dataclass(frozen=True)
class CompleteTask:
    success: bool = True


@dataclass(frozen=True)
class Investigate:
    pass


@dataclass(frozen=True)
class Vote:
    target_id: int


Action = Union[Move, StartTask, CompleteTask, Investigate, Vote]


def parse_zone(value: Any) -> Zone:
    """Accept a Zone, its display value ("Crash Site") or its name ("CRASH_SITE")."""
    if isinstance(value, Zone):
        return value
    try:
        return Zone(value)
    except ValueError:
        pass
    if isinstance(value, str) and value.upper() in Zone.__members__:
        return Zone[value.upper()]
    raise InvalidZoneError(value)


class ActionPayload(BaseModel):
    """Optional arguments of an action message."""

    model_config = ConfigDict(populate_by_name=True)

    zone: Optional[str] = None
    success: Optional[bool] = None
    target_id: Optional[int] = Field(default=None, alias="targetId")


class ActionMessage(BaseModel):
    """
    Action as submitted by a view or relayed by a transport:
    ``{"actorId": 3, "type": "vote", "payload": {"targetId": 1}}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    actor_id: int = Field(alias="actorId")
    type: ActionType
    payload: ActionPayload = Field(default_factory=ActionPayload)

    def to_action(self) -> Action:
        """Build the action value, validating its payload."""
        if self.type is ActionType.MOVE:
            if self.payload.zone is None:
                raise InvalidZoneError(None)
            return Move(parse_zone(self.payload.zone))
        if self.type is ActionType.START_TASK:
            return StartTask()
        if self.type is ActionType.COMPLETE_TASK:
            success = True if self.payload.success is None else self.payload.success
            return CompleteTask(success)
        if self.type is ActionType.INVESTIGATE:
            return Investigate()
        if self.payload.target_id is None:
            raise InvalidVoteTargetError(None)
        return Vote(self.payload.target_id)
