"""Validation errors raised by the game session.

None of these are fatal to the session: they are reported back to whoever
submitted the command (a view shows them, a bot drops the action).
"""


class GameError(Exception):
    """Base class for all rejected commands and actions."""


class UnknownActorError(GameError):
    """Participant id is not in the active roster."""

    def __init__(self, participant_id):
        super().__init__(f"Unknown participant: {participant_id}")
        self.participant_id = participant_id


class SessionNotActiveError(GameError):
    """Mutating action submitted while the game is not being played."""


class LobbyClosedError(GameError):
    """Roster change or start requested outside the lobby."""


class InsufficientPlayersError(GameError):
    """Role assignment attempted with too few participants."""

    def __init__(self, count: int, required: int):
        super().__init__(f"Need at least {required} participants, have {count}")
        self.count = count
        self.required = required


class DuplicateNameError(GameError):
    """An active human participant already uses this name."""

    def __init__(self, name: str):
        super().__init__(f"Name already taken: {name}")
        self.name = name


class InvalidNameError(GameError):
    """Blank participant name."""


class InvalidZoneError(GameError):
    """Zone is not one of the map's locations."""

    def __init__(self, zone):
        super().__init__(f"Unknown zone: {zone!r}")
        self.zone = zone


class InvalidVoteTargetError(GameError):
    """Vote target is missing or not an active participant."""

    def __init__(self, target_id):
        super().__init__(f"Invalid vote target: {target_id}")
        self.target_id = target_id


class InvalidActionError(GameError):
    """Action whose precondition does not hold."""


class NoOpenTaskError(InvalidActionError):
    """completeTask without a matching startTask."""


class NoInvestigationTargetError(InvalidActionError):
    """Nobody else is left to investigate."""
