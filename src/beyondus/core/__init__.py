"""Game session state machine: roster, roles, actions, votes and wins."""

from .actions import Action, ActionMessage, CompleteTask, Investigate, Move, StartTask, Vote
from .config import GameConfig
from .enums import ActionType, EventKind, GamePhase, Role, TaskKind, Zone
from .errors import (
    DuplicateNameError,
    GameError,
    InsufficientPlayersError,
    InvalidActionError,
    InvalidNameError,
    InvalidVoteTargetError,
    InvalidZoneError,
    LobbyClosedError,
    NoInvestigationTargetError,
    NoOpenTaskError,
    SessionNotActiveError,
    UnknownActorError,
)
from .game_session import GameSession
from .game_state import EventLog, GameEvent, Participant, SessionState, TaskSession
from .roster import Roster
from .victory import WINNER_INVESTIGATORS, WINNER_SABOTEUR_ESCAPED, WINNER_SABOTEUR_VIA_DECOY

__all__ = [
    "Action",
    "ActionMessage",
    "ActionType",
    "CompleteTask",
    "DuplicateNameError",
    "EventKind",
    "EventLog",
    "GameConfig",
    "GameError",
    "GameEvent",
    "GamePhase",
    "GameSession",
    "InsufficientPlayersError",
    "Investigate",
    "InvalidActionError",
    "InvalidNameError",
    "InvalidVoteTargetError",
    "InvalidZoneError",
    "LobbyClosedError",
    "Move",
    "NoInvestigationTargetError",
    "NoOpenTaskError",
    "Participant",
    "Role",
    "Roster",
    "SessionNotActiveError",
    "SessionState",
    "StartTask",
    "TaskKind",
    "TaskSession",
    "UnknownActorError",
    "Vote",
    "WINNER_INVESTIGATORS",
    "WINNER_SABOTEUR_ESCAPED",
    "WINNER_SABOTEUR_VIA_DECOY",
    "Zone",
]
