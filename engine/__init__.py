"""
ScoreKeeper Scoring Engine

Core point/game/set logic for racquet-sport matches.
This module contains no GUI dependencies.
"""

from engine.scoring import ScoreEngine, MatchPhase
from engine.rules import MatchRules, RulesEngine, SportType, InvalidRulesError
from engine.state import (
    Side,
    PointScore,
    PointOutcome,
    SideState,
    SideScore,
    SetRecord,
    NoTieBreak,
    DecidedByTieBreak,
    NO_TIE_BREAK,
    MatchState,
    MatchSnapshot,
)

__all__ = [
    "ScoreEngine",
    "MatchPhase",
    "MatchRules",
    "RulesEngine",
    "SportType",
    "InvalidRulesError",
    "Side",
    "PointScore",
    "PointOutcome",
    "SideState",
    "SideScore",
    "SetRecord",
    "NoTieBreak",
    "DecidedByTieBreak",
    "NO_TIE_BREAK",
    "MatchState",
    "MatchSnapshot",
]
