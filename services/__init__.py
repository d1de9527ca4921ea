"""
ScoreKeeper Services

Application services for event handling, match history, and the scoreboard session.
"""

from services.event_bus import EventBus
from services.history import MatchHistoryService
from services.session import ScoreSession, ScoreUiState

__all__ = ["EventBus", "MatchHistoryService", "ScoreSession", "ScoreUiState"]
