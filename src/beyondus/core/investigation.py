"""Probabilistic investigation hints."""

import random
from typing import List, Optional

from .enums import Role
from .errors import NoInvestigationTargetError
from .game_state import Participant


def investigate(
    true_role: Role,
    rng: Optional[random.Random] = None,
    saboteur_rate: float = 0.7,
    other_rate: float = 0.2,
) -> bool:
    """
    Roll a hint for a target with the given role.

    Returns True ("suspicious evidence") with probability ``saboteur_rate``
    when the target is the Saboteur, ``other_rate`` otherwise. A hint is
    never a reveal: both false positives and false negatives happen.
    """
    rng = rng or random
    rate = saboteur_rate if true_role is Role.SABOTEUR else other_rate
    return rng.random() < rate


def choose_target(candidates: List[Participant], rng: Optional[random.Random] = None) -> Participant:
    """Pick a uniformly random investigation target."""
    if not candidates:
        raise NoInvestigationTargetError("Nobody else to investigate")
    return (rng or random).choice(candidates)
