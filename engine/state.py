"""
Match state model - sides, point scores, completed sets, and snapshots.

MatchState is the mutable aggregate owned by the ScoreEngine.
Everything handed out to collaborators is a frozen MatchSnapshot.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


class Side(enum.Enum):
    """The two competitors, named by where they appear on screen."""
    LEFT = "left"
    RIGHT = "right"

    @property
    def opponent(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


class PointScore(enum.IntEnum):
    """
    Ordered score within a classic game.

    Winning the game is not a member: the transition reports it
    separately through PointOutcome.game_won.
    """
    LOVE = 0
    FIFTEEN = 1
    THIRTY = 2
    FORTY = 3
    ADVANTAGE = 4

    @property
    def label(self) -> str:
        return _POINT_LABELS[self]


_POINT_LABELS = {
    PointScore.LOVE: "0",
    PointScore.FIFTEEN: "15",
    PointScore.THIRTY: "30",
    PointScore.FORTY: "40",
    PointScore.ADVANTAGE: "AD",
}


@dataclass(frozen=True)
class PointOutcome:
    """Result of one classic point: new scores, and whether the scorer took the game."""
    p_for: PointScore
    p_against: PointScore
    game_won: bool = False


@dataclass
class SideState:
    """Per-competitor counters."""
    points: PointScore = PointScore.LOVE
    games: int = 0  # in the current set
    sets: int = 0

    def clear(self) -> None:
        self.points = PointScore.LOVE
        self.games = 0
        self.sets = 0


# ============ Completed Sets ============

@dataclass(frozen=True)
class NoTieBreak:
    """The set ended on a normal game."""


@dataclass(frozen=True)
class DecidedByTieBreak:
    """The set was decided by a tie-break; raw points kept for display."""
    winner_points: int
    loser_points: int


NO_TIE_BREAK = NoTieBreak()

TieBreakResult = Union[NoTieBreak, DecidedByTieBreak]


@dataclass(frozen=True)
class SetRecord:
    """Immutable record of one completed set."""
    left_games: int
    right_games: int
    tie_break: TieBreakResult = NO_TIE_BREAK

    @property
    def winner(self) -> Side:
        return Side.LEFT if self.left_games > self.right_games else Side.RIGHT

    @property
    def decided_by_tie_break(self) -> bool:
        return isinstance(self.tie_break, DecidedByTieBreak)

    def display(self) -> str:
        """Format as "6-4", or "7-6(5)" with the loser's tie-break points."""
        games = f"{self.left_games}-{self.right_games}"
        if isinstance(self.tie_break, DecidedByTieBreak):
            return f"{games}({self.tie_break.loser_points})"
        return games


# ============ Match State ============

@dataclass
class MatchState:
    """
    Mutable runtime state for one match.

    Only the ScoreEngine mutates this. tie_break_left/right are only
    meaningful while in_tie_break is set.
    """
    left: SideState = field(default_factory=SideState)
    right: SideState = field(default_factory=SideState)
    server_left: bool = True
    in_tie_break: bool = False
    tie_break_left: int = 0
    tie_break_right: int = 0
    finished: bool = False
    completed_sets: list[SetRecord] = field(default_factory=list)

    def side(self, side: Side) -> SideState:
        return self.left if side is Side.LEFT else self.right

    def clear_points(self) -> None:
        self.left.points = PointScore.LOVE
        self.right.points = PointScore.LOVE

    def clear_games(self) -> None:
        self.left.games = 0
        self.right.games = 0

    def clear_tie_break(self) -> None:
        self.in_tie_break = False
        self.tie_break_left = 0
        self.tie_break_right = 0


@dataclass(frozen=True)
class SideScore:
    """Read-only view of one side's counters."""
    points: PointScore = PointScore.LOVE
    games: int = 0
    sets: int = 0


@dataclass(frozen=True)
class MatchSnapshot:
    """
    Immutable snapshot of the match state.
    Emitted after every scoring event and used as the undo memento.
    """
    left: SideScore = SideScore()
    right: SideScore = SideScore()
    server_left: bool = True
    in_tie_break: bool = False
    tie_break_left: int = 0
    tie_break_right: int = 0
    finished: bool = False
    completed_sets: tuple[SetRecord, ...] = ()

    @classmethod
    def of(cls, state: MatchState) -> "MatchSnapshot":
        return cls(
            left=SideScore(state.left.points, state.left.games, state.left.sets),
            right=SideScore(state.right.points, state.right.games, state.right.sets),
            server_left=state.server_left,
            in_tie_break=state.in_tie_break,
            tie_break_left=state.tie_break_left,
            tie_break_right=state.tie_break_right,
            finished=state.finished,
            completed_sets=tuple(state.completed_sets),
        )

    @property
    def winner(self) -> Optional[Side]:
        """The side with more sets once finished, else None."""
        if not self.finished or self.left.sets == self.right.sets:
            return None
        return Side.LEFT if self.left.sets > self.right.sets else Side.RIGHT
