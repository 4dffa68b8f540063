"""Win condition checks."""

import logging
from typing import Optional

from .enums import Role
from .game_state import SessionState


logger = logging.getLogger(__name__)

WINNER_INVESTIGATORS = "Investigators"
WINNER_SABOTEUR_VIA_DECOY = "Saboteur (via Decoy)"
WINNER_SABOTEUR_ESCAPED = "Saboteur (escaped)"


def check_sabotage_victory(state: SessionState) -> bool:
    """
    End the game if the Saboteur has repaired enough units.
    Call after every change to ``sabotage_units_completed``.

    Returns:
        True if this call ended the game.
    """
    assert state.sabotage_units_completed <= state.sabotage_units_required, (
        f"sabotage units overflow: "
        f"{state.sabotage_units_completed}/{state.sabotage_units_required}"
    )
    if not state.is_playing:
        return False
    if state.sabotage_units_completed >= state.sabotage_units_required:
        state.end(WINNER_SABOTEUR_ESCAPED)
        logger.info("Sabotage complete. The Saboteur escaped.")
        return True
    return False


def capture_winner(role: Role) -> Optional[str]:
    """Winner produced by capturing a participant of ``role``, if any."""
    if role is Role.SABOTEUR:
        return WINNER_INVESTIGATORS
    if role is Role.DECOY:
        return WINNER_SABOTEUR_VIA_DECOY
    return None
