"""Game session aggregate: the single source of truth for one game."""

import logging
import random
import threading
from typing import Any, Callable, Dict, List, Optional

from .actions import Action
from .config import GameConfig
from .dispatcher import ActionDispatcher
from .enums import EventKind, GamePhase
from .errors import LobbyClosedError
from .game_state import EventLog, GameEvent, Participant, SessionState, TaskSession
from .roles import assign_roles
from .roster import Roster


logger = logging.getLogger(__name__)

EventListener = Callable[[GameEvent], Any]


class GameSession:
    """
    Owns the roster, the session state and the event log.

    Lobby commands (join, leave, add_bots, start, reset) and participant
    actions (``apply``) are the only ways to change anything. All of them
    run under one re-entrant lock. Views read through ``snapshot`` and
    ``subscribe``; listeners are called after the lock is released.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.seed)
        self.lock = threading.RLock()

        self.roster = Roster(bot_name_prefix=self.config.bot_name_prefix)
        self.state: Optional[SessionState] = None
        self.open_tasks: Dict[int, TaskSession] = {}
        self.events = EventLog(limit=self.config.event_log_limit)

        self.dispatcher = ActionDispatcher(self)
        self._listeners: List[EventListener] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        if self.state is None:
            return GamePhase.LOBBY
        return self.state.phase

    @property
    def is_playing(self) -> bool:
        return self.phase is GamePhase.PLAYING

    def snapshot(self, viewer_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Public view of the session.

        Roles are never included, except the viewer's own role under
        ``"self"`` when ``viewer_id`` is an active participant.
        """
        with self.lock:
            state = self.state
            data = {
                "phase": self.phase.value,
                "round": state.round if state else None,
                "sabotageUnitsCompleted": state.sabotage_units_completed if state else 0,
                "sabotageUnitsRequired": (
                    state.sabotage_units_required if state else self.config.sabotage_units_required
                ),
                "winner": state.winner if state else None,
                "participants": [p.public_view() for p in self.roster],
            }
            viewer = self.roster.get(viewer_id) if viewer_id is not None else None
            if viewer is not None:
                data["self"] = viewer.private_view()
            return data

    def recent_events(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        with self.lock:
            return [event.to_dict() for event in self.events.recent(count)]

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener for new events. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lobby commands
    # ------------------------------------------------------------------

    def join(self, name: str) -> Participant:
        with self.lock:
            self._require_lobby("join")
            participant = self.roster.join(name)
            event = self.events.append(EventKind.JOINED, f"{participant.name} joined.", participant.id)
        self._notify([event])
        return participant

    def leave(self, participant_id: int) -> Participant:
        with self.lock:
            self._require_lobby("leave")
            participant = self.roster.leave(participant_id)
            event = self.events.append(EventKind.LEFT, f"{participant.name} left.", participant.id)
        self._notify([event])
        return participant

    def add_bots(self, count: int) -> List[Participant]:
        with self.lock:
            self._require_lobby("add bots")
            bots = self.roster.add_bots(count)
            events = []
            if bots:
                events.append(self.events.append(EventKind.BOTS_ADDED, f"{len(bots)} bot(s) joined."))
        self._notify(events)
        return bots

    def start(self) -> SessionState:
        """Deal roles and begin play."""
        with self.lock:
            self._require_lobby("start")
            _, state = assign_roles(self.roster, self.config, self.rng)
            self.state = state
            self.open_tasks.clear()
            event = self.events.append(EventKind.STARTED, "Roles assigned. Game started.")
        logger.info(f"Game started with {len(self.roster)} participants")
        self._notify([event])
        return state

    def reset(self):
        """Discard the game and empty the roster."""
        with self.lock:
            self.roster.clear()
            self.state = None
            self.open_tasks.clear()
            self.events.clear()
            event = self.events.append(EventKind.RESET, "Reset.")
        logger.info("Session reset")
        self._notify([event])

    # ------------------------------------------------------------------
    # Participant actions
    # ------------------------------------------------------------------

    def apply(self, actor_id: int, action: Action) -> GameEvent:
        """
        Apply a participant action through the dispatcher.

        Returns:
            The primary event. Follow-up events (captures, game end) are
            logged and delivered to listeners as well.
        """
        events = self.dispatcher.apply(actor_id, action)
        self._notify(events)
        return events[0]

    def _require_lobby(self, command: str):
        if self.phase is not GamePhase.LOBBY:
            raise LobbyClosedError(f"Cannot {command} while the game is {self.phase.value}")

    def _notify(self, events: List[GameEvent]):
        for event in events:
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception(f"Event listener failed on event {event.seq}")
