"""
Scoring Engine - Core point-by-point logic for racquet-sport matches.

The ScoreEngine runs independently of any GUI. It owns the MatchState,
advances it one point at a time, and emits Qt Signals with immutable
snapshots so presentation layers can react without polling.
"""

import enum
import logging

from PySide6.QtCore import QObject, Signal

from engine.rules import MatchRules, RulesEngine
from engine.state import (
    DecidedByTieBreak,
    MatchSnapshot,
    MatchState,
    NO_TIE_BREAK,
    SetRecord,
    Side,
    SideState,
    TieBreakResult,
)

logger = logging.getLogger(__name__)


class MatchPhase(enum.Enum):
    """State machine states for point scoring."""
    IN_GAME = "in_game"
    IN_TIE_BREAK = "in_tie_break"
    FINISHED = "finished"


class ScoreEngine(QObject):
    """
    Scoring state machine for one match.

    Every public operation is synchronous and never raises for any
    reachable state. Points scored after the match has finished are
    ignored. The engine does NOT persist anything.
    """

    # Signals
    score_updated = Signal(object)      # MatchSnapshot
    game_won = Signal(str)              # winning side
    tie_break_started = Signal()
    set_completed = Signal(object)      # SetRecord
    match_completed = Signal(dict)      # final results
    server_changed = Signal(str)        # serving side
    phase_changed = Signal(str)         # new phase name

    def __init__(self, rules: MatchRules):
        """
        Initialize the scoring engine.

        Args:
            rules: Rule configuration, read-only for the engine's lifetime
        """
        super().__init__()
        self.rules = rules
        self._rules_engine = RulesEngine(rules)
        self._state = MatchState()

    # ============ Query Methods ============

    @property
    def state(self) -> MatchSnapshot:
        """Read-only snapshot of the current match state."""
        return MatchSnapshot.of(self._state)

    @property
    def phase(self) -> MatchPhase:
        if self._state.finished:
            return MatchPhase.FINISHED
        if self._state.in_tie_break:
            return MatchPhase.IN_TIE_BREAK
        return MatchPhase.IN_GAME

    @property
    def is_match_complete(self) -> bool:
        return self._state.finished

    def render_compact(self) -> str:
        """Minimal "sets games" line, e.g. "1-0 3-2*" (asterisk when left serves)."""
        s = self._state
        server_mark = "*" if s.server_left else ""
        return f"{s.left.sets}-{s.right.sets} {s.left.games}-{s.right.games}{server_mark}"

    def set_summary(self) -> str:
        """
        Completed sets followed by the set in progress, e.g. "6-0 7-6(5) 2-1".

        The in-progress pair is omitted while both sides are on zero games.
        """
        s = self._state
        parts = [record.display() for record in s.completed_sets]
        if s.left.games or s.right.games:
            parts.append(f"{s.left.games}-{s.right.games}")
        return " ".join(parts)

    # ============ Commands ============

    def point_to(self, side: Side) -> None:
        """
        Register one point for a side.

        Args:
            side: Side.LEFT or Side.RIGHT (raw "left"/"right" values accepted)
        """
        side = Side(side)
        if self._state.finished:
            return

        if self._state.in_tie_break:
            self._tie_break_point(side)
        else:
            self._classic_point(side)

        self._emit_score_update()

    def point_left(self) -> None:
        self.point_to(Side.LEFT)

    def point_right(self) -> None:
        self.point_to(Side.RIGHT)

    def toggle_server(self) -> None:
        """Flip the serving side. Allowed at any time, including after the match."""
        self._state.server_left = not self._state.server_left
        self.server_changed.emit(self._server().value)
        self._emit_score_update()

    def reset(self) -> None:
        """Start a brand-new match under the same rules."""
        previous_phase = self.phase
        s = self._state
        s.left.clear()
        s.right.clear()
        s.clear_tie_break()
        s.server_left = True
        s.finished = False
        s.completed_sets.clear()

        logger.debug("Match reset")
        if previous_phase != MatchPhase.IN_GAME:
            self.phase_changed.emit(MatchPhase.IN_GAME.value)
        self._emit_score_update()

    def end_match(self) -> None:
        """Conclude the match early. Counters are left as they are."""
        if self._state.finished:
            return
        self._state.finished = True
        self._complete_match()
        self._emit_score_update()

    def snapshot(self) -> MatchSnapshot:
        """Capture the full state for a later restore()."""
        return self.state

    def restore(self, snapshot: MatchSnapshot) -> None:
        """Replace the owned state with a previously captured snapshot."""
        previous_phase = self.phase
        self._state = MatchState(
            left=SideState(snapshot.left.points, snapshot.left.games, snapshot.left.sets),
            right=SideState(snapshot.right.points, snapshot.right.games, snapshot.right.sets),
            server_left=snapshot.server_left,
            in_tie_break=snapshot.in_tie_break,
            tie_break_left=snapshot.tie_break_left,
            tie_break_right=snapshot.tie_break_right,
            finished=snapshot.finished,
            completed_sets=list(snapshot.completed_sets),
        )
        if self.phase != previous_phase:
            self.phase_changed.emit(self.phase.value)
        self._emit_score_update()

    # ============ Internals ============

    def _server(self) -> Side:
        return Side.LEFT if self._state.server_left else Side.RIGHT

    def _classic_point(self, side: Side) -> None:
        scorer = self._state.side(side)
        opponent = self._state.side(side.opponent)

        outcome = RulesEngine.next_point(scorer.points, opponent.points)
        if not outcome.game_won:
            scorer.points = outcome.p_for
            opponent.points = outcome.p_against
            return

        scorer.games += 1
        self._state.clear_points()
        self._state.server_left = not self._state.server_left
        logger.debug("Game %s (%s)", side.value, self.render_compact())
        self.game_won.emit(side.value)
        self.server_changed.emit(self._server().value)
        self._end_game()

    def _end_game(self) -> None:
        """Start a tie-break or close the set after a classic game."""
        s = self._state
        if self._rules_engine.starts_tie_break(s.left.games, s.right.games):
            s.clear_tie_break()
            s.in_tie_break = True
            logger.debug("Tie-break at %d-%d", s.left.games, s.right.games)
            self.tie_break_started.emit()
            self.phase_changed.emit(MatchPhase.IN_TIE_BREAK.value)
            return

        winner = self._rules_engine.set_winner(s.left.games, s.right.games)
        if winner is not None:
            self._finish_set(winner, s.left.games, s.right.games, NO_TIE_BREAK)

    def _tie_break_point(self, side: Side) -> None:
        s = self._state
        if side is Side.LEFT:
            s.tie_break_left += 1
        else:
            s.tie_break_right += 1

        winner = self._rules_engine.tie_break_winner(s.tie_break_left, s.tie_break_right)
        if winner is None:
            return

        if winner is Side.LEFT:
            points = DecidedByTieBreak(s.tie_break_left, s.tie_break_right)
            left_games, right_games = 7, 6
        else:
            points = DecidedByTieBreak(s.tie_break_right, s.tie_break_left)
            left_games, right_games = 6, 7

        # Server carries over into the next set unchanged
        s.clear_tie_break()
        if not self._finish_set(winner, left_games, right_games, points):
            self.phase_changed.emit(MatchPhase.IN_GAME.value)

    def _finish_set(self, winner: Side, left_games: int, right_games: int,
                    tie_break: TieBreakResult) -> bool:
        """
        Record a completed set and check for the end of the match.

        Returns:
            True if the match is now finished
        """
        s = self._state
        record = SetRecord(left_games, right_games, tie_break)
        s.completed_sets.append(record)
        s.side(winner).sets += 1
        s.clear_games()
        s.clear_points()

        logger.debug("Set %d to %s: %s", len(s.completed_sets), winner.value, record.display())
        self.set_completed.emit(record)

        if self._rules_engine.match_winner(s.left.sets, s.right.sets) is None:
            return False

        s.finished = True
        self._complete_match()
        return True

    def _complete_match(self) -> None:
        snapshot = self.state
        winner = snapshot.winner
        logger.info("Match complete: %s (%s)", self.set_summary() or "no sets",
                    winner.value if winner else "no winner")
        self.phase_changed.emit(MatchPhase.FINISHED.value)
        self.match_completed.emit({
            "winner": winner.value if winner else None,
            "left_sets": snapshot.left.sets,
            "right_sets": snapshot.right.sets,
            "sets": [record.display() for record in snapshot.completed_sets],
        })

    def _emit_score_update(self) -> None:
        self.score_updated.emit(self.state)
