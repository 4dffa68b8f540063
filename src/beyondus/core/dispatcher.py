"""Action dispatcher: the single mutation path for a game in progress."""

import logging
from typing import Callable, Dict, List

from .actions import Action, CompleteTask, Investigate, Move, StartTask, Vote, parse_zone
from .enums import EventKind, Role, TaskKind
from .errors import (
    InvalidActionError,
    InvalidVoteTargetError,
    NoOpenTaskError,
    SessionNotActiveError,
)
from .game_state import GameEvent, Participant, TaskSession
from .investigation import choose_target, investigate
from .victory import check_sabotage_victory
from .voting import all_votes_in, resolve_votes


logger = logging.getLogger(__name__)


class ActionDispatcher:
    """
    Validates and applies participant actions against a GameSession.

    Every call runs under the session lock, so validation and the resulting
    mutation (including a vote-triggered capture) happen atomically with
    respect to any other submitter.
    """

    def __init__(self, session):
        self.session = session
        self._handlers: Dict[type, Callable[[Participant, Action], List[GameEvent]]] = {
            Move: self._move,
            StartTask: self._start_task,
            CompleteTask: self._complete_task,
            Investigate: self._investigate,
            Vote: self._vote,
        }

    def apply(self, actor_id: int, action: Action) -> List[GameEvent]:
        """
        Apply one action and return the events it produced, primary first.

        Raises:
            UnknownActorError: actor is not in the roster.
            SessionNotActiveError: the game is not being played.
            GameError: the action's own precondition failed.
        """
        handler = self._handlers.get(type(action))
        if handler is None:
            raise InvalidActionError(f"Unsupported action: {action!r}")

        with self.session.lock:
            actor = self.session.roster.require(actor_id)
            state = self.session.state
            if state is None or not state.is_playing:
                raise SessionNotActiveError(
                    f"Game is {self.session.phase.value}; actions are not accepted"
                )
            return handler(actor, action)

    def _move(self, actor: Participant, action: Move) -> List[GameEvent]:
        zone = parse_zone(action.zone)
        actor.zone = zone
        return [self._record(EventKind.MOVED, f"{actor.name} moved to {zone.value}", actor.id)]

    def _start_task(self, actor: Participant, action: StartTask) -> List[GameEvent]:
        kind = self.session.rng.choice(list(TaskKind))
        self.session.open_tasks[actor.id] = TaskSession(actor.id, kind, self.session.state.round)
        label = kind.value.replace("_", " ")
        return [self._record(EventKind.TASK_STARTED, f"{actor.name} started a task ({label}).", actor.id)]

    def _complete_task(self, actor: Participant, action: CompleteTask) -> List[GameEvent]:
        state = self.session.state
        task = self.session.open_tasks.get(actor.id)
        if task is None:
            raise NoOpenTaskError(f"{actor.name} has no task in progress")
        if task.is_expired(state.round):
            raise NoOpenTaskError(f"{actor.name}'s task expired with round {task.round}")
        del self.session.open_tasks[actor.id]

        eligible = actor.zone in self.session.config.task_eligible_zones
        if not (actor.role is Role.SABOTEUR and eligible and action.success):
            return [self._record(EventKind.TASK_COMPLETED, f"{actor.name} completed a neutral task.", actor.id)]

        state.sabotage_units_completed += 1
        events = [
            self._record(
                EventKind.SABOTAGE_PROGRESS,
                f"{actor.name} repaired a sabotage unit! "
                f"({state.sabotage_units_completed}/{state.sabotage_units_required})",
                actor.id,
            )
        ]
        if check_sabotage_victory(state):
            self.session.open_tasks.clear()
            events.append(
                self._record(EventKind.GAME_ENDED, "Sabotage complete. The Saboteur escaped and wins!")
            )
        return events

    def _investigate(self, actor: Participant, action: Investigate) -> List[GameEvent]:
        config = self.session.config
        target = choose_target(self.session.roster.others(actor.id), self.session.rng)
        suspicious = investigate(
            target.role,
            self.session.rng,
            saboteur_rate=config.suspicious_rate_saboteur,
            other_rate=config.suspicious_rate_other,
        )
        finding = "suspicious evidence" if suspicious else "nothing"
        return [
            self._record(
                EventKind.INVESTIGATED,
                f"{actor.name} investigated and found {finding} on {target.name}",
                actor.id,
                target.id,
            )
        ]

    def _vote(self, actor: Participant, action: Vote) -> List[GameEvent]:
        roster = self.session.roster
        target = roster.get(action.target_id)
        if target is None:
            raise InvalidVoteTargetError(action.target_id)

        state = self.session.state
        state.votes[actor.id] = target.id
        events = [
            self._record(EventKind.VOTED, f"{actor.name} voted to capture {target.name}", actor.id, target.id)
        ]

        # Checked against the votes as merged above, under the same lock
        if all_votes_in(state, roster):
            events.extend(self._resolve_votes())
        return events

    def _resolve_votes(self) -> List[GameEvent]:
        outcome = resolve_votes(
            self.session.state, self.session.roster, self.session.config.tie_break_method
        )
        if outcome.captured is None:
            names = ", ".join(self.session.roster.require(pid).name for pid in outcome.tied)
            return [self._record(EventKind.VOTE_TIED, f"Vote tied between {names}. Nobody was captured.")]

        captured = outcome.captured
        events = [
            self._record(EventKind.CAPTURED, f"Vote result: {captured.name} was captured.", target_id=captured.id)
        ]
        if captured.role is Role.SABOTEUR:
            events.append(self._record(EventKind.GAME_ENDED, "The Saboteur was captured. Investigators win!"))
        elif captured.role is Role.DECOY:
            events.append(self._record(EventKind.GAME_ENDED, "The Decoy was captured. The Saboteur wins!"))
        else:
            self.session.open_tasks.pop(captured.id, None)
            events.append(
                self._record(
                    EventKind.CAPTURED,
                    f"{captured.name} was an Investigator. The game continues.",
                    target_id=captured.id,
                )
            )
        if outcome.game_over:
            self.session.open_tasks.clear()
        return events

    def _record(self, kind: EventKind, text: str, actor_id=None, target_id=None) -> GameEvent:
        logger.info(text)
        return self.session.events.append(kind, text, actor_id, target_id)
