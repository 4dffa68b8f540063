"""Vote tallying and capture resolution."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .enums import Role
from .game_state import Participant, SessionState
from .roster import Roster
from .victory import capture_winner


logger = logging.getLogger(__name__)


@dataclass
class VoteOutcome:
    """Result of resolving a complete round of votes."""

    tally: Dict[int, int]
    captured: Optional[Participant] = None  # None when a tie captured nobody
    tied: List[int] = field(default_factory=list)
    winner: Optional[str] = None

    @property
    def game_over(self) -> bool:
        return self.winner is not None


def all_votes_in(state: SessionState, roster: Roster) -> bool:
    """True once every active participant has a vote recorded."""
    return len(roster) > 0 and all(pid in state.votes for pid in roster.ids)


def tally_votes(votes: Dict[int, int]) -> Counter:
    """Count votes per target."""
    return Counter(votes.values())


def leading_candidates(tally: Counter) -> List[int]:
    """Targets with the maximum vote count, lowest id first."""
    if not tally:
        return []
    max_votes = max(tally.values())
    return sorted(target for target, count in tally.items() if count == max_votes)


def resolve_votes(state: SessionState, roster: Roster, tie_break_method: str = "lowest_id") -> VoteOutcome:
    """
    Capture the most-voted participant and apply the consequence.

    Ties are broken by ``tie_break_method``: "lowest_id" captures the
    lowest id among the leaders, "no_capture" captures nobody and moves on
    to the next round.

    Capturing the Saboteur or the Decoy ends the game. Capturing an
    Investigator removes them and starts the next voting round. Votes are
    always cleared.
    """
    tally = tally_votes(state.votes)
    candidates = leading_candidates(tally)
    outcome = VoteOutcome(tally=dict(tally))

    if not candidates:
        return outcome

    if len(candidates) > 1:
        outcome.tied = candidates
        logger.info(f"Vote tied between participants {candidates}")
        if tie_break_method == "no_capture":
            state.votes = {}
            state.round += 1
            return outcome

    target = roster.require(candidates[0])
    outcome.captured = target
    winner = capture_winner(target.role)

    if winner is not None:
        state.end(winner)
        outcome.winner = winner
        logger.info(f"{target.name} captured. Winner: {winner}")
    else:
        assert target.role is Role.INVESTIGATOR
        roster.remove(target.id)
        state.votes = {}
        state.round += 1
        logger.info(f"{target.name} captured. Round {state.round} begins.")

    return outcome
