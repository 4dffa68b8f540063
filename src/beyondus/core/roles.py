"""Role assignment at game start."""

import logging
import random
from typing import Optional, Tuple

from .config import GameConfig
from .enums import Role, Zone
from .errors import InsufficientPlayersError
from .game_state import SessionState
from .roster import Roster


logger = logging.getLogger(__name__)


def assign_roles(
    roster: Roster,
    config: GameConfig,
    rng: Optional[random.Random] = None,
) -> Tuple[Roster, SessionState]:
    """
    Shuffle the roster and deal roles and starting zones.

    The first participant of a uniformly random permutation becomes the
    Saboteur, the second the Decoy, everyone else an Investigator. Each
    participant starts in a uniformly random zone.

    Returns:
        The updated roster and a fresh SessionState in the playing phase.

    Raises:
        InsufficientPlayersError: Fewer than ``config.min_players`` joined.
    """
    rng = rng or random.Random()
    if len(roster) < config.min_players:
        raise InsufficientPlayersError(len(roster), config.min_players)

    order = rng.sample(roster.ids, len(roster))
    zones = list(Zone)
    for position, participant_id in enumerate(order):
        participant = roster.require(participant_id)
        if position == 0:
            participant.role = Role.SABOTEUR
        elif position == 1:
            participant.role = Role.DECOY
        else:
            participant.role = Role.INVESTIGATOR
        participant.zone = rng.choice(zones)

    state = SessionState(sabotage_units_required=config.sabotage_units_required)
    logger.debug(f"Dealt roles to {len(order)} participants")
    return roster, state
