"""Pytest configuration and fixtures."""

import pytest
from beyondus.core.config import GameConfig
from beyondus.core.enums import Role, Zone
from beyondus.core.game_session import GameSession

FORCED_ROLES = [Role.SABOTEUR, Role.DECOY, Role.INVESTIGATOR, Role.INVESTIGATOR, Role.INVESTIGATOR]


@pytest.fixture
def game_config():
    """Create a test game configuration."""
    return GameConfig(seed=1234, verbose=False)


@pytest.fixture
def lobby(game_config):
    """A lobby with five human participants (ids 0-4)."""
    session = GameSession(game_config)
    for name in ["Alice", "Bob", "Claire", "David", "Emma"]:
        session.join(name)
    return session


@pytest.fixture
def playing_session(lobby):
    """
    A started game with roles forced by id:
    0 = Saboteur, 1 = Decoy, 2-4 = Investigators.
    Everyone starts in the Lab (not task-eligible).
    """
    lobby.start()
    for participant, role in zip(lobby.roster, FORCED_ROLES):
        participant.role = role
        participant.zone = Zone.LAB
    return lobby


def vote_all(session, target_id):
    """Every active participant votes for ``target_id``; returns the last event."""
    from beyondus.core.actions import Vote

    event = None
    for participant_id in session.roster.ids:
        event = session.apply(participant_id, Vote(target_id))
    return event
