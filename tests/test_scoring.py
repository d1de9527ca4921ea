"""
Unit tests for the ScoreEngine.

Tests cover classic game scoring, tie-breaks, set and match completion,
reset, rendering, and signal emissions.
"""

import dataclasses
import random

import pytest
from unittest.mock import MagicMock

from engine.rules import MatchRules
from engine.scoring import ScoreEngine, MatchPhase
from engine.state import (
    DecidedByTieBreak,
    MatchSnapshot,
    NO_TIE_BREAK,
    PointScore,
    SetRecord,
    Side,
    SideScore,
)


def win_game(engine: ScoreEngine, side: Side) -> None:
    """Win a classic game from love-all."""
    for _ in range(4):
        engine.point_to(side)


def play_games(engine: ScoreEngine, winners: str) -> None:
    """Play one game per character: "L" for left, "R" for right."""
    for ch in winners:
        win_game(engine, Side.LEFT if ch == "L" else Side.RIGHT)


class TestClassicGame:
    """Tests for 0-15-30-40-Advantage scoring."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules())

    def test_initial_state(self):
        """A new engine starts at love-all, left serving, in a game."""
        state = self.engine.state
        assert state == MatchSnapshot()
        assert state.server_left
        assert self.engine.phase == MatchPhase.IN_GAME

    def test_points_climb_to_forty(self):
        """Points should go 0 -> 15 -> 30 -> 40."""
        expected = [PointScore.FIFTEEN, PointScore.THIRTY, PointScore.FORTY]
        for points in expected:
            self.engine.point_left()
            assert self.engine.state.left.points == points
            assert self.engine.state.right.points == PointScore.LOVE

    def test_forty_against_thirty_wins_game(self):
        """40 against less than 40 takes the game."""
        for _ in range(3):
            self.engine.point_left()
        for _ in range(2):
            self.engine.point_right()

        self.engine.point_left()

        state = self.engine.state
        assert state.left.games == 1
        assert state.left.points == PointScore.LOVE
        assert state.right.points == PointScore.LOVE

    def test_deuce_cycle(self):
        """Advantage then a point to the other side returns to deuce."""
        for _ in range(3):
            self.engine.point_left()
        for _ in range(3):
            self.engine.point_right()
        assert self.engine.state.left.points == PointScore.FORTY
        assert self.engine.state.right.points == PointScore.FORTY

        self.engine.point_right()
        assert self.engine.state.right.points == PointScore.ADVANTAGE
        assert self.engine.state.left.points == PointScore.FORTY

        self.engine.point_left()
        assert self.engine.state.left.points == PointScore.FORTY
        assert self.engine.state.right.points == PointScore.FORTY
        assert self.engine.state.left.games == 0

    def test_game_win_from_advantage(self):
        """Scoring from Advantage wins the game, clears points, and switches server."""
        self.engine.restore(MatchSnapshot(
            left=SideScore(points=PointScore.ADVANTAGE),
            right=SideScore(points=PointScore.FORTY),
            server_left=True,
        ))

        self.engine.point_left()

        state = self.engine.state
        assert state.left.games == 1
        assert state.right.games == 0
        assert state.left.points == PointScore.LOVE
        assert state.right.points == PointScore.LOVE
        assert not state.server_left

    def test_server_toggles_after_every_game(self):
        """The server should alternate after each classic game."""
        play_games(self.engine, "L")
        assert not self.engine.state.server_left
        play_games(self.engine, "R")
        assert self.engine.state.server_left

    def test_toggle_server_does_not_touch_scores(self):
        """toggle_server only flips the server."""
        self.engine.point_left()
        before = self.engine.state

        self.engine.toggle_server()

        after = self.engine.state
        assert not after.server_left
        assert dataclasses.replace(after, server_left=True) == before

    def test_point_accepts_raw_side_value(self):
        """point_to should accept "left"/"right" as well as Side members."""
        self.engine.point_to("right")
        assert self.engine.state.right.points == PointScore.FIFTEEN


class TestSetCompletion:
    """Tests for set progression without a tie-break."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules(sets_to_win=3))

    def test_six_four_completes_set(self):
        """Six games with a two-game lead closes the set."""
        play_games(self.engine, "LRLRLRLR" + "LL")

        state = self.engine.state
        assert state.completed_sets == (SetRecord(6, 4),)
        assert state.completed_sets[0].tie_break == NO_TIE_BREAK
        assert state.left.sets == 1
        assert state.left.games == 0
        assert state.right.games == 0

    def test_six_five_does_not_complete_set(self):
        """A one-game lead at six is not enough."""
        play_games(self.engine, "LR" * 5 + "L")

        state = self.engine.state
        assert state.left.games == 6
        assert state.right.games == 5
        assert state.completed_sets == ()

    def test_seven_five_completes_set(self):
        """From 6-5, the leader winning again closes the set 7-5."""
        play_games(self.engine, "LR" * 5 + "LL")

        assert self.engine.state.completed_sets == (SetRecord(7, 5),)

    def test_right_side_takes_set(self):
        """The set winner is credited on the right as well."""
        play_games(self.engine, "R" * 6)

        state = self.engine.state
        assert state.right.sets == 1
        assert state.completed_sets[0].winner == Side.RIGHT


class TestTieBreak:
    """Tests for tie-break entry, scoring, and completion."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules(sets_to_win=3))

    def _tie_break_at(self, left: int, right: int, server_left: bool = True) -> None:
        self.engine.restore(MatchSnapshot(
            left=SideScore(games=6),
            right=SideScore(games=6),
            server_left=server_left,
            in_tie_break=True,
            tie_break_left=left,
            tie_break_right=right,
        ))

    def test_six_all_starts_tie_break(self):
        """Reaching 6-6 switches to tie-break scoring with zeroed counters."""
        play_games(self.engine, "LR" * 6)

        state = self.engine.state
        assert state.in_tie_break
        assert state.tie_break_left == 0
        assert state.tie_break_right == 0
        assert state.left.games == 6
        assert state.right.games == 6
        assert self.engine.phase == MatchPhase.IN_TIE_BREAK

    def test_tie_break_points_count_raw(self):
        """Points in a tie-break go to the raw counters, not the game score."""
        self._tie_break_at(0, 0)

        self.engine.point_left()
        self.engine.point_right()
        self.engine.point_right()

        state = self.engine.state
        assert state.tie_break_left == 1
        assert state.tie_break_right == 2
        assert state.left.points == PointScore.LOVE
        assert state.right.points == PointScore.LOVE

    def test_tie_break_win_records_set(self):
        """From 6-5, a point to the left ends the tie-break 7-5."""
        self._tie_break_at(6, 5)

        self.engine.point_left()

        state = self.engine.state
        record = state.completed_sets[-1]
        assert record == SetRecord(7, 6, DecidedByTieBreak(winner_points=7, loser_points=5))
        assert record.decided_by_tie_break
        assert record.display() == "7-6(5)"
        assert state.left.sets == 1
        assert not state.in_tie_break
        assert state.tie_break_left == 0
        assert state.tie_break_right == 0
        assert state.left.games == 0
        assert state.right.games == 0
        assert self.engine.phase == MatchPhase.IN_GAME

    def test_tie_break_win_for_right(self):
        """A right-side tie-break win is recorded as 6-7 with winner's points first."""
        self._tie_break_at(3, 6)

        self.engine.point_right()

        record = self.engine.state.completed_sets[-1]
        assert record == SetRecord(6, 7, DecidedByTieBreak(winner_points=7, loser_points=3))
        assert record.display() == "6-7(3)"
        assert self.engine.state.right.sets == 1

    def test_tie_break_needs_two_point_lead(self):
        """At 6-6 in the tie-break, 7-6 is not enough; 8-6 is."""
        self._tie_break_at(6, 6)

        self.engine.point_left()
        assert self.engine.state.in_tie_break
        assert self.engine.state.tie_break_left == 7

        self.engine.point_left()
        state = self.engine.state
        assert not state.in_tie_break
        assert state.completed_sets[-1].tie_break == DecidedByTieBreak(8, 6)

    def test_server_unchanged_after_tie_break_set(self):
        """Known quirk: the server does not switch when a tie-break ends the set."""
        self._tie_break_at(6, 0, server_left=False)

        self.engine.point_left()

        assert not self.engine.state.server_left

    def test_tie_break_threshold_independent_of_trigger(self):
        """With tie_break_at=4 the tie-break starts at 4-4 but is still played to 7."""
        engine = ScoreEngine(MatchRules(tie_break_at=4))
        play_games(engine, "LR" * 4)
        assert engine.state.in_tie_break

        for _ in range(6):
            engine.point_left()
        assert engine.state.in_tie_break

        engine.point_left()
        assert engine.state.completed_sets == (SetRecord(7, 6, DecidedByTieBreak(7, 0)),)


class TestMatchCompletion:
    """Tests for the end of the match and the finished state."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules(sets_to_win=2))

    def test_match_finishes_at_sets_to_win(self):
        """The second set for one side ends the match."""
        play_games(self.engine, "L" * 6)
        assert not self.engine.state.finished

        play_games(self.engine, "L" * 6)

        state = self.engine.state
        assert state.finished
        assert state.left.sets == 2
        assert state.completed_sets == (SetRecord(6, 0), SetRecord(6, 0))
        assert state.winner == Side.LEFT
        assert self.engine.phase == MatchPhase.FINISHED

    def test_points_after_finish_are_ignored(self):
        """Once finished, pointTo changes nothing."""
        play_games(self.engine, "L" * 12)
        before = self.engine.state

        self.engine.point_right()
        self.engine.point_left()

        assert self.engine.state == before

    def test_match_finishes_on_tie_break(self):
        """A set won in a tie-break can end the match."""
        self.engine.restore(MatchSnapshot(
            left=SideScore(games=6, sets=1),
            right=SideScore(games=6),
            in_tie_break=True,
            tie_break_left=6,
            completed_sets=(SetRecord(6, 2),),
        ))

        self.engine.point_left()

        state = self.engine.state
        assert state.finished
        assert not state.in_tie_break
        assert self.engine.set_summary() == "6-2 7-6(0)"

    def test_toggle_server_allowed_after_finish(self):
        play_games(self.engine, "L" * 12)
        server_left = self.engine.state.server_left

        self.engine.toggle_server()

        assert self.engine.state.server_left != server_left

    def test_end_match_marks_finished_without_changing_counters(self):
        """end_match concludes early and leaves the score as it was."""
        play_games(self.engine, "LLR")
        self.engine.point_left()
        before = self.engine.state

        self.engine.end_match()

        after = self.engine.state
        assert after.finished
        assert dataclasses.replace(after, finished=False) == before


class TestResetAndInvariants:
    """Tests for reset and properties that hold for any sequence of points."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules(sets_to_win=3))

    def test_reset_restores_new_match(self):
        """reset clears every counter, history, and flag."""
        play_games(self.engine, "LR" * 6)
        self.engine.point_left()
        self.engine.toggle_server()

        self.engine.reset()

        assert self.engine.state == MatchSnapshot()
        assert self.engine.phase == MatchPhase.IN_GAME

    def test_reset_is_idempotent(self):
        """Two resets in a row equal one."""
        play_games(self.engine, "L" * 8)
        self.engine.reset()
        once = self.engine.state

        self.engine.reset()

        assert self.engine.state == once

    def test_reset_reopens_finished_match(self):
        engine = ScoreEngine(MatchRules(sets_to_win=1))
        play_games(engine, "R" * 6)
        assert engine.state.finished

        engine.reset()
        engine.point_left()

        assert engine.state.left.points == PointScore.FIFTEEN

    @pytest.mark.parametrize("seed", [1, 7, 42, 2024])
    def test_history_matches_sets_won(self, seed):
        """completed_sets always has one record per set won."""
        rng = random.Random(seed)
        for _ in range(1500):
            roll = rng.random()
            if roll < 0.002:
                self.engine.reset()
            elif roll < 0.01:
                self.engine.toggle_server()
            else:
                self.engine.point_to(rng.choice([Side.LEFT, Side.RIGHT]))

            state = self.engine.state
            assert len(state.completed_sets) == state.left.sets + state.right.sets
            if not state.in_tie_break:
                assert state.tie_break_left == 0
                assert state.tie_break_right == 0

    def test_snapshot_cannot_be_mutated(self):
        """Snapshots handed out are frozen."""
        state = self.engine.state
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.left.games = 5  # type: ignore[misc]

    def test_restore_round_trip(self):
        """restore(snapshot()) leaves the engine in the captured state."""
        play_games(self.engine, "LRL")
        self.engine.point_right()
        saved = self.engine.snapshot()
        play_games(self.engine, "RR")

        self.engine.restore(saved)

        assert self.engine.state == saved


class TestRendering:
    """Tests for render_compact and set_summary."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules(sets_to_win=3))

    def test_render_compact_with_left_serving(self):
        self.engine.restore(MatchSnapshot(
            left=SideScore(games=3, sets=1),
            right=SideScore(games=2),
            server_left=True,
            completed_sets=(SetRecord(6, 3),),
        ))

        assert self.engine.render_compact() == "1-0 3-2*"

    def test_render_compact_with_right_serving(self):
        self.engine.toggle_server()
        assert self.engine.render_compact() == "0-0 0-0"

    def test_set_summary_lists_sets_and_current_games(self):
        self.engine.restore(MatchSnapshot(
            left=SideScore(games=2, sets=1),
            right=SideScore(games=1, sets=1),
            completed_sets=(SetRecord(6, 0), SetRecord(6, 7, DecidedByTieBreak(7, 5))),
        ))

        assert self.engine.set_summary() == "6-0 6-7(5) 2-1"

    def test_set_summary_empty_at_start(self):
        assert self.engine.set_summary() == ""


class TestScoreEngineSignals:
    """Tests for signal emissions."""

    def setup_method(self):
        self.engine = ScoreEngine(MatchRules(sets_to_win=1))

        self.score_updated_mock = MagicMock()
        self.game_won_mock = MagicMock()
        self.set_completed_mock = MagicMock()
        self.tie_break_mock = MagicMock()
        self.match_completed_mock = MagicMock()
        self.phase_mock = MagicMock()
        self.server_mock = MagicMock()

        self.engine.score_updated.connect(self.score_updated_mock)
        self.engine.game_won.connect(self.game_won_mock)
        self.engine.set_completed.connect(self.set_completed_mock)
        self.engine.tie_break_started.connect(self.tie_break_mock)
        self.engine.match_completed.connect(self.match_completed_mock)
        self.engine.phase_changed.connect(self.phase_mock)
        self.engine.server_changed.connect(self.server_mock)

    def test_score_updated_emitted_on_point(self):
        self.engine.point_left()

        assert self.score_updated_mock.called
        snapshot = self.score_updated_mock.call_args[0][0]
        assert isinstance(snapshot, MatchSnapshot)
        assert snapshot.left.points == PointScore.FIFTEEN

    def test_game_won_emitted(self):
        play_games(self.engine, "R")

        self.game_won_mock.assert_called_once_with("right")

    def test_tie_break_started_emitted(self):
        play_games(self.engine, "LR" * 6)

        self.tie_break_mock.assert_called_once()

    def test_set_and_match_completed_emitted(self):
        play_games(self.engine, "L" * 6)

        self.set_completed_mock.assert_called_once_with(SetRecord(6, 0))
        self.match_completed_mock.assert_called_once_with({
            "winner": "left",
            "left_sets": 1,
            "right_sets": 0,
            "sets": ["6-0"],
        })

    def test_no_signal_for_ignored_point(self):
        play_games(self.engine, "L" * 6)
        self.score_updated_mock.reset_mock()

        self.engine.point_right()

        self.score_updated_mock.assert_not_called()

    def test_phase_changed_on_tie_break_start(self):
        play_games(self.engine, "LR" * 6)

        self.phase_mock.assert_called_once_with("in_tie_break")

    def test_phase_changed_when_tie_break_ends_mid_match(self):
        engine = ScoreEngine(MatchRules(sets_to_win=2))
        engine.restore(MatchSnapshot(
            left=SideScore(games=6),
            right=SideScore(games=6),
            in_tie_break=True,
            tie_break_left=6,
        ))
        phase_mock = MagicMock()
        engine.phase_changed.connect(phase_mock)

        engine.point_left()

        phase_mock.assert_called_once_with("in_game")
        assert engine.phase == MatchPhase.IN_GAME

    def test_phase_changed_once_when_tie_break_ends_match(self):
        self.engine.restore(MatchSnapshot(
            left=SideScore(games=6),
            right=SideScore(games=6),
            in_tie_break=True,
            tie_break_right=6,
        ))
        self.phase_mock.reset_mock()

        self.engine.point_right()

        self.phase_mock.assert_called_once_with("finished")

    def test_phase_changed_on_match_end(self):
        play_games(self.engine, "L" * 6)

        self.phase_mock.assert_called_once_with("finished")

    def test_reset_from_finished_returns_to_in_game(self):
        play_games(self.engine, "L" * 6)
        self.phase_mock.reset_mock()

        self.engine.reset()

        self.phase_mock.assert_called_once_with("in_game")

    def test_reset_in_game_keeps_phase_quiet(self):
        self.engine.point_left()

        self.engine.reset()

        self.phase_mock.assert_not_called()

    def test_server_changed_after_game(self):
        play_games(self.engine, "L")
        self.server_mock.assert_called_once_with("right")

        play_games(self.engine, "L")
        self.server_mock.assert_called_with("left")

    def test_server_changed_on_toggle(self):
        self.engine.toggle_server()

        self.server_mock.assert_called_once_with("right")
