"""
Rules Engine - Match rule configuration and the scoring decisions it drives.

MatchRules is the immutable per-match configuration. RulesEngine answers
the questions the ScoreEngine asks after each point: who won the game,
does a tie-break start, who took the set, is the match over.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from engine.state import PointOutcome, PointScore, Side


class SportType(enum.Enum):
    """Sports sharing the classic 15-30-40 scoring. Informational only."""
    TENNIS = "tennis"
    PADEL = "padel"


class InvalidRulesError(ValueError):
    """Raised when a MatchRules value cannot describe a playable match."""


@dataclass(frozen=True)
class MatchRules:
    """
    Immutable rule configuration for one match.

    super_tie_break_final_set and golden_point are carried for the UI
    but not consulted by the scoring engine.
    """
    sport: SportType = SportType.TENNIS
    sets_to_win: int = 2
    games_per_set: int = 6
    tie_break_at: int = 6
    super_tie_break_final_set: bool = False
    golden_point: bool = False

    def __post_init__(self):
        for name in ("sets_to_win", "games_per_set", "tie_break_at"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise InvalidRulesError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def for_sport(cls, sport: SportType) -> "MatchRules":
        """Standard best-of-three, six-game sets with a tie-break at 6-6."""
        return cls(sport=sport)


class RulesEngine:
    """
    Pure scoring decisions for a given MatchRules.

    Holds no match state; every method is a function of its arguments
    and the configured rules.
    """

    # Tie-break length, fixed regardless of tie_break_at
    TIE_BREAK_POINTS = 7

    # Lead required to close a game, set, or tie-break
    MIN_LEAD = 2

    def __init__(self, rules: MatchRules):
        self.rules = rules

    @staticmethod
    def next_point(p_for: PointScore, p_against: PointScore) -> PointOutcome:
        """
        Advance a classic game by one point for the scoring side.

        Args:
            p_for: Current score of the side that won the point
            p_against: Current score of the opponent

        Returns:
            PointOutcome with the new scores, or game_won set
        """
        if p_for < PointScore.FORTY:
            return PointOutcome(PointScore(p_for + 1), p_against)

        if p_for == PointScore.ADVANTAGE:
            return PointOutcome(p_for, p_against, game_won=True)

        # p_for is 40
        if p_against < PointScore.FORTY:
            return PointOutcome(p_for, p_against, game_won=True)
        if p_against == PointScore.FORTY:
            return PointOutcome(PointScore.ADVANTAGE, PointScore.FORTY)

        # Opponent had advantage: back to deuce
        return PointOutcome(PointScore.FORTY, PointScore.FORTY)

    def starts_tie_break(self, left_games: int, right_games: int) -> bool:
        """Check if the game score calls for a tie-break."""
        return left_games == right_games == self.rules.tie_break_at

    def set_winner(self, left_games: int, right_games: int) -> Optional[Side]:
        """
        Determine the set winner after a classic game.

        Returns:
            The side holding games_per_set or more with a two-game lead, or None
        """
        return self._leader(left_games, right_games, self.rules.games_per_set)

    def tie_break_winner(self, left_points: int, right_points: int) -> Optional[Side]:
        """Determine the tie-break winner: first to 7 with a two-point lead."""
        return self._leader(left_points, right_points, self.TIE_BREAK_POINTS)

    def match_winner(self, left_sets: int, right_sets: int) -> Optional[Side]:
        """Determine the match winner once a side reaches sets_to_win."""
        if left_sets >= self.rules.sets_to_win:
            return Side.LEFT
        if right_sets >= self.rules.sets_to_win:
            return Side.RIGHT
        return None

    def _leader(self, left: int, right: int, target: int) -> Optional[Side]:
        if max(left, right) < target or abs(left - right) < self.MIN_LEAD:
            return None
        return Side.LEFT if left > right else Side.RIGHT
