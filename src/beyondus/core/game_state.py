"""Core game state data structures."""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterator, List, Optional

from .enums import EventKind, GamePhase, Role, TaskKind, Zone


@dataclass
class Participant:
    """A human or bot taking part in the session."""

    id: int
    name: str
    is_bot: bool = False
    role: Optional[Role] = None  # Set by the role assigner
    zone: Optional[Zone] = None

    def public_view(self) -> Dict[str, Any]:
        """Fields every participant may see. Never includes the role."""
        return {
            "id": self.id,
            "name": self.name,
            "isBot": self.is_bot,
            "zone": self.zone.value if self.zone else None,
        }

    def private_view(self) -> Dict[str, Any]:
        """Fields only this participant may see."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value if self.role else None,
        }


@dataclass
class SessionState:
    """Mutable state of a game in progress.

    Created by the role assigner when the lobby starts a game and discarded
    on reset. Only the action dispatcher mutates it.
    """

    sabotage_units_required: int
    phase: GamePhase = GamePhase.PLAYING
    round: int = 1
    sabotage_units_completed: int = 0

    # voter id -> target id, latest vote wins
    votes: Dict[int, int] = field(default_factory=dict)
    winner: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self.phase is GamePhase.PLAYING

    def end(self, winner: str):
        """Move to the terminal phase."""
        assert self.phase is GamePhase.PLAYING, "game already ended"
        self.phase = GamePhase.ENDED
        self.winner = winner
        self.votes = {}


@dataclass
class TaskSession:
    """An open mini-game for one participant."""

    actor_id: int
    kind: TaskKind
    round: int  # Round the task was opened in

    def is_expired(self, current_round: int) -> bool:
        return self.round != current_round


@dataclass
class GameEvent:
    """One line of the public event log."""

    seq: int
    kind: EventKind
    text: str
    actor_id: Optional[int] = None
    target_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seq": self.seq,
            "kind": self.kind.value,
            "text": self.text,
            "actorId": self.actor_id,
            "targetId": self.target_id,
        }


class EventLog:
    """Append-only event log capped to the most recent ``limit`` entries."""

    def __init__(self, limit: int = 100):
        self._events: Deque[GameEvent] = deque(maxlen=limit)
        self._next_seq = 0

    def append(
        self,
        kind: EventKind,
        text: str,
        actor_id: Optional[int] = None,
        target_id: Optional[int] = None,
    ) -> GameEvent:
        event = GameEvent(self._next_seq, kind, text, actor_id, target_id)
        self._next_seq += 1
        self._events.append(event)
        return event

    def clear(self):
        self._events.clear()

    def recent(self, count: Optional[int] = None) -> List[GameEvent]:
        """Events oldest-first, optionally only the last ``count``."""
        events = list(self._events)
        if count is not None:
            events = events[-count:] if count > 0 else []
        return events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(list(self._events))
