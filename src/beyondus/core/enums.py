"""Enumerations for phases, roles, zones and actions."""

from enum import Enum


class GamePhase(Enum):
    """Lifecycle of a game session."""

    LOBBY = "lobby"
    PLAYING = "playing"
    ENDED = "ended"


class Role(Enum):
    """Hidden participant roles."""

    SABOTEUR = "saboteur"
    DECOY = "decoy"
    INVESTIGATOR = "investigator"


class Zone(Enum):
    """Named locations on the town map."""

    CRASH_SITE = "Crash Site"
    LAB = "Lab"
    SUBURBS = "Suburbs"
    WAREHOUSE = "Warehouse"
    AGENCY_HQ = "Agency HQ"


class ActionType(Enum):
    """Action kinds accepted by the dispatcher (wire names)."""

    MOVE = "move"
    START_TASK = "startTask"
    COMPLETE_TASK = "completeTask"
    INVESTIGATE = "investigate"
    VOTE = "vote"


class TaskKind(Enum):
    """Mini-games a task session can open."""

    WIRE_MATCH = "wire_match"
    MEMORY_PATTERN = "memory_pattern"
    CODE_HACK = "code_hack"


class EventKind(Enum):
    """Categories of entries in the session event log."""

    JOINED = "joined"
    LEFT = "left"
    BOTS_ADDED = "bots_added"
    STARTED = "started"
    MOVED = "moved"
    TASK_STARTED = "task_started"
    TASK_COMPLETED = "task_completed"
    SABOTAGE_PROGRESS = "sabotage_progress"
    INVESTIGATED = "investigated"
    VOTED = "voted"
    CAPTURED = "captured"
    VOTE_TIED = "vote_tied"
    GAME_ENDED = "game_ended"
    RESET = "reset"
