"""Participant roster: join, leave and bot seeding."""

import logging
from typing import Dict, Iterator, List, Optional

from .errors import DuplicateNameError, InvalidNameError, UnknownActorError
from .game_state import Participant


logger = logging.getLogger(__name__)


class Roster:
    """
    Active participants keyed by id, in join order.
    Ids are never reused within a roster's lifetime, even after a clear.
    """

    def __init__(self, bot_name_prefix: str = "Bot"):
        self.bot_name_prefix = bot_name_prefix
        self._participants: Dict[int, Participant] = {}
        self._next_id = 0
        self._bot_counter = 0

    def join(self, name: str) -> Participant:
        """Add a human participant."""
        name = (name or "").strip()
        if not name:
            raise InvalidNameError("Participant name must not be blank")
        if any(p.name == name and not p.is_bot for p in self._participants.values()):
            raise DuplicateNameError(name)

        participant = self._add(name, is_bot=False)
        logger.debug(f"Participant {participant.id} joined as {name}")
        return participant

    def leave(self, participant_id: int) -> Participant:
        """Remove a participant, returning the removed record."""
        participant = self.require(participant_id)
        del self._participants[participant_id]
        logger.debug(f"Participant {participant_id} ({participant.name}) left")
        return participant

    def add_bots(self, count: int) -> List[Participant]:
        """Add ``count`` bots named "<prefix> 1", "<prefix> 2", ..."""
        if count < 0:
            raise ValueError("Bot count must not be negative")
        bots = []
        for _ in range(count):
            self._bot_counter += 1
            bots.append(self._add(f"{self.bot_name_prefix} {self._bot_counter}", is_bot=True))
        return bots

    def remove(self, participant_id: int) -> Participant:
        """Drop a captured participant from play."""
        return self.leave(participant_id)

    def clear(self):
        self._participants.clear()
        self._bot_counter = 0

    def get(self, participant_id: int) -> Optional[Participant]:
        return self._participants.get(participant_id)

    def require(self, participant_id: int) -> Participant:
        """Get a participant or raise UnknownActorError."""
        participant = self._participants.get(participant_id)
        if participant is None:
            raise UnknownActorError(participant_id)
        return participant

    def others(self, participant_id: int) -> List[Participant]:
        """Everyone except the given participant."""
        return [p for p in self._participants.values() if p.id != participant_id]

    @property
    def ids(self) -> List[int]:
        return list(self._participants)

    @property
    def bots(self) -> List[Participant]:
        return [p for p in self._participants.values() if p.is_bot]

    def _add(self, name: str, is_bot: bool) -> Participant:
        participant = Participant(id=self._next_id, name=name, is_bot=is_bot)
        self._participants[participant.id] = participant
        self._next_id += 1
        return participant

    def __contains__(self, participant_id) -> bool:
        return participant_id in self._participants

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._participants.values()))

    def __len__(self) -> int:
        return len(self._participants)
