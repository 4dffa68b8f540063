"""Tests for the game session aggregate and its action dispatcher."""

import threading

import pytest
from beyondus.core.actions import CompleteTask, Investigate, Move, StartTask, Vote
from beyondus.core.config import GameConfig
from beyondus.core.enums import EventKind, GamePhase, Role, Zone
from beyondus.core.errors import (
    InsufficientPlayersError,
    InvalidVoteTargetError,
    InvalidZoneError,
    LobbyClosedError,
    NoOpenTaskError,
    SessionNotActiveError,
    UnknownActorError,
)
from beyondus.core.game_session import GameSession
from beyondus.core.victory import WINNER_INVESTIGATORS, WINNER_SABOTEUR_ESCAPED

from conftest import FORCED_ROLES, vote_all

SABOTEUR, DECOY, INVESTIGATOR = 0, 1, 2


def _repair(session, actor_id):
    session.apply(actor_id, StartTask())
    return session.apply(actor_id, CompleteTask(success=True))


class TestLobby:
    """Tests for lobby commands."""

    def test_initial_phase_is_lobby(self, game_config):
        session = GameSession(game_config)
        assert session.phase == GamePhase.LOBBY
        assert session.snapshot()["round"] is None

    def test_start_requires_three_participants(self, game_config):
        session = GameSession(game_config)
        session.join("Alice")
        session.add_bots(1)
        with pytest.raises(InsufficientPlayersError):
            session.start()
        assert session.phase == GamePhase.LOBBY

    def test_start_deals_roles(self, lobby):
        state = lobby.start()
        assert state.phase == GamePhase.PLAYING
        roles = [p.role for p in lobby.roster]
        assert roles.count(Role.SABOTEUR) == 1
        assert roles.count(Role.DECOY) == 1

    def test_start_only_from_lobby(self, playing_session):
        with pytest.raises(LobbyClosedError):
            playing_session.start()

    def test_roster_locked_during_play(self, playing_session):
        with pytest.raises(LobbyClosedError):
            playing_session.join("Frank")
        with pytest.raises(LobbyClosedError):
            playing_session.leave(INVESTIGATOR)
        with pytest.raises(LobbyClosedError):
            playing_session.add_bots(1)
        assert len(playing_session.roster) == 5

    def test_reset_returns_to_empty_lobby(self, playing_session):
        playing_session.reset()
        assert playing_session.phase == GamePhase.LOBBY
        assert len(playing_session.roster) == 0
        assert playing_session.open_tasks == {}
        assert [e["kind"] for e in playing_session.recent_events()] == ["reset"]


class TestActions:
    """Tests for individual actions."""

    def test_move(self, playing_session):
        event = playing_session.apply(DECOY, Move(Zone.SUBURBS))
        assert playing_session.roster.get(DECOY).zone == Zone.SUBURBS
        assert event.kind == EventKind.MOVED
        assert event.text == "Bob moved to Suburbs"

    def test_move_accepts_zone_value(self, playing_session):
        playing_session.apply(DECOY, Move("Agency HQ"))
        assert playing_session.roster.get(DECOY).zone == Zone.AGENCY_HQ

    def test_move_invalid_zone(self, playing_session):
        with pytest.raises(InvalidZoneError):
            playing_session.apply(DECOY, Move("Moon Base"))
        assert playing_session.roster.get(DECOY).zone == Zone.LAB

    def test_start_task_opens_session(self, playing_session):
        event = playing_session.apply(INVESTIGATOR, StartTask())
        assert INVESTIGATOR in playing_session.open_tasks
        assert event.kind == EventKind.TASK_STARTED
        assert event.text.startswith("Claire started a task")

    def test_complete_task_without_start(self, playing_session):
        with pytest.raises(NoOpenTaskError):
            playing_session.apply(INVESTIGATOR, CompleteTask())

    def test_task_expires_when_round_advances(self, playing_session):
        playing_session.apply(SABOTEUR, Move(Zone.WAREHOUSE))
        playing_session.apply(SABOTEUR, StartTask())
        vote_all(playing_session, INVESTIGATOR)
        assert playing_session.state.round == 2

        with pytest.raises(NoOpenTaskError):
            playing_session.apply(SABOTEUR, CompleteTask())
        assert playing_session.state.sabotage_units_completed == 0

        event = _repair(playing_session, SABOTEUR)
        assert event.kind == EventKind.SABOTAGE_PROGRESS
        assert playing_session.state.sabotage_units_completed == 1

    def test_investigator_task_is_neutral(self, playing_session):
        playing_session.apply(INVESTIGATOR, Move(Zone.CRASH_SITE))
        event = _repair(playing_session, INVESTIGATOR)
        assert event.text == "Claire completed a neutral task."
        assert playing_session.state.sabotage_units_completed == 0
        assert INVESTIGATOR not in playing_session.open_tasks

    def test_saboteur_outside_eligible_zone_is_neutral(self, playing_session):
        event = _repair(playing_session, SABOTEUR)
        assert event.kind == EventKind.TASK_COMPLETED
        assert playing_session.state.sabotage_units_completed == 0

    def test_failed_saboteur_task_is_neutral(self, playing_session):
        playing_session.apply(SABOTEUR, Move(Zone.WAREHOUSE))
        playing_session.apply(SABOTEUR, StartTask())
        playing_session.apply(SABOTEUR, CompleteTask(success=False))
        assert playing_session.state.sabotage_units_completed == 0

    def test_saboteur_repairs_unit(self, playing_session):
        playing_session.apply(SABOTEUR, Move(Zone.WAREHOUSE))
        event = _repair(playing_session, SABOTEUR)
        assert event.kind == EventKind.SABOTAGE_PROGRESS
        assert event.text == "Alice repaired a sabotage unit! (1/5)"

    def test_investigate_targets_someone_else(self, playing_session):
        for _ in range(20):
            event = playing_session.apply(INVESTIGATOR, Investigate())
            assert event.kind == EventKind.INVESTIGATED
            assert event.target_id != INVESTIGATOR
            assert event.target_id in playing_session.roster
            assert "investigated and found" in event.text

    def test_vote_records_latest_choice(self, playing_session):
        playing_session.apply(INVESTIGATOR, Vote(DECOY))
        playing_session.apply(INVESTIGATOR, Vote(SABOTEUR))
        assert playing_session.state.votes == {INVESTIGATOR: SABOTEUR}

    def test_self_vote_allowed(self, playing_session):
        event = playing_session.apply(INVESTIGATOR, Vote(INVESTIGATOR))
        assert event.text == "Claire voted to capture Claire"

    def test_vote_invalid_target(self, playing_session):
        with pytest.raises(InvalidVoteTargetError):
            playing_session.apply(INVESTIGATOR, Vote(99))
        assert playing_session.state.votes == {}

    def test_unknown_actor_does_not_mutate(self, playing_session):
        before = playing_session.snapshot()
        events_before = len(playing_session.events)
        with pytest.raises(UnknownActorError):
            playing_session.apply(99, Move(Zone.LAB))
        with pytest.raises(UnknownActorError):
            playing_session.apply(99, Vote(SABOTEUR))
        assert playing_session.snapshot() == before
        assert playing_session.state.votes == {}
        assert len(playing_session.events) == events_before

    def test_actions_rejected_in_lobby(self, lobby):
        with pytest.raises(SessionNotActiveError):
            lobby.apply(0, Move(Zone.LAB))


class TestScenarios:
    """End-to-end scenarios with roles forced to [S, D, I, I, I]."""

    def test_saboteur_escapes(self, playing_session):
        """Scenario A: five eligible repairs end the game."""
        playing_session.apply(SABOTEUR, Move(Zone.CRASH_SITE))
        for _ in range(5):
            _repair(playing_session, SABOTEUR)

        state = playing_session.state
        assert state.phase == GamePhase.ENDED
        assert state.winner == WINNER_SABOTEUR_ESCAPED
        assert state.sabotage_units_completed == 5
        ended = [e for e in playing_session.events if e.kind == EventKind.GAME_ENDED]
        assert len(ended) == 1

    def test_capture_saboteur(self, playing_session):
        """Scenario B."""
        vote_all(playing_session, SABOTEUR)
        assert playing_session.phase == GamePhase.ENDED
        assert playing_session.state.winner == WINNER_INVESTIGATORS

    def test_capture_decoy(self, playing_session):
        """Scenario C."""
        vote_all(playing_session, DECOY)
        assert playing_session.phase == GamePhase.ENDED
        assert "Saboteur" in playing_session.state.winner

    def test_capture_investigator(self, playing_session):
        """Scenario D."""
        vote_all(playing_session, INVESTIGATOR)
        state = playing_session.state
        assert INVESTIGATOR not in playing_session.roster
        assert len(playing_session.roster) == 4
        assert state.round == 2
        assert state.phase == GamePhase.PLAYING
        assert state.votes == {}

    def test_next_round_needs_votes_from_remaining_only(self, playing_session):
        vote_all(playing_session, INVESTIGATOR)
        vote_all(playing_session, SABOTEUR)
        assert playing_session.state.winner == WINNER_INVESTIGATORS

    def test_final_vote_is_counted(self, playing_session):
        """The vote that completes the round decides it."""
        for participant_id in [0, 1, 2, 3]:
            playing_session.apply(participant_id, Vote(3 if participant_id < 2 else 4))
        # 2 votes each for 3 and 4; the last voter breaks the tie
        playing_session.apply(4, Vote(4))
        assert 4 not in playing_session.roster
        assert 3 in playing_session.roster

    def test_simultaneous_votes_capture_once(self, game_config):
        """Votes released together from many threads resolve exactly once."""
        names = ["Alice", "Bob", "Claire", "David", "Emma", "Frank", "Gina", "Hugo"]
        roles = FORCED_ROLES + [Role.INVESTIGATOR] * (len(names) - len(FORCED_ROLES))

        for _ in range(25):
            session = GameSession(game_config)
            for name in names:
                session.join(name)
            session.start()
            for participant, role in zip(session.roster, roles):
                participant.role = role
                participant.zone = Zone.LAB

            captured = []

            def on_event(event):
                if event.kind == EventKind.CAPTURED:
                    captured.append(event)

            session.subscribe(on_event)
            barrier = threading.Barrier(len(names))
            errors = []

            def cast(voter_id):
                barrier.wait()
                try:
                    session.apply(voter_id, Vote(INVESTIGATOR))
                except Exception as e:
                    errors.append(e)

            threads = [threading.Thread(target=cast, args=(pid,)) for pid in session.roster.ids]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join(timeout=5)

            assert errors == []
            assert len(captured) == 1
            assert captured[0].target_id == INVESTIGATOR
            assert session.state.round == 2
            assert session.state.votes == {}
            assert session.phase == GamePhase.PLAYING
            assert len(session.roster) == len(names) - 1
            assert INVESTIGATOR not in session.roster

    def test_ended_game_rejects_actions(self, playing_session):
        vote_all(playing_session, SABOTEUR)
        with pytest.raises(SessionNotActiveError):
            playing_session.apply(DECOY, Move(Zone.LAB))
        with pytest.raises(SessionNotActiveError):
            playing_session.apply(DECOY, Vote(DECOY))

    def test_no_capture_tie_policy(self):
        session = GameSession(GameConfig(seed=1, tie_break_method="no_capture"))
        for name in ["A", "B", "C", "D"]:
            session.join(name)
        session.start()
        for voter, target in [(0, 2), (1, 2), (2, 3), (3, 3)]:
            session.apply(voter, Vote(target))
        assert len(session.roster) == 4
        assert session.state.round == 2
        assert session.events.recent(1)[0].kind == EventKind.VOTE_TIED


class TestSnapshotsAndEvents:
    """Tests for the read side."""

    def test_snapshot_hides_roles(self, playing_session):
        snapshot = playing_session.snapshot()
        assert "self" not in snapshot
        assert all("role" not in p for p in snapshot["participants"])
        assert snapshot["phase"] == "playing"
        assert snapshot["round"] == 1
        assert snapshot["sabotageUnitsRequired"] == 5

    def test_snapshot_shows_own_role_only(self, playing_session):
        snapshot = playing_session.snapshot(viewer_id=SABOTEUR)
        assert snapshot["self"] == {"id": SABOTEUR, "name": "Alice", "role": "saboteur"}
        assert all("role" not in p for p in snapshot["participants"])

    def test_events_never_carry_roles(self, playing_session):
        vote_all(playing_session, INVESTIGATOR)
        for event in playing_session.recent_events():
            assert "role" not in event

    def test_listeners_receive_events_in_order(self, playing_session):
        received = []
        unsubscribe = playing_session.subscribe(received.append)
        vote_all(playing_session, SABOTEUR)
        kinds = [e.kind for e in received]
        assert kinds[-2:] == [EventKind.CAPTURED, EventKind.GAME_ENDED]
        assert [e.seq for e in received] == sorted(e.seq for e in received)

        unsubscribe()
        playing_session.reset()
        assert received[-1].kind == EventKind.GAME_ENDED

    def test_failing_listener_does_not_break_apply(self, playing_session):
        def broken(event):
            raise RuntimeError("view crashed")

        playing_session.subscribe(broken)
        event = playing_session.apply(DECOY, Move(Zone.LAB))
        assert event.kind == EventKind.MOVED
