"""
Event Bus - Central signal hub for inter-module communication.

All modules connect to this single object rather than directly to each other,
enabling loose coupling between the scoring engine, session, and any UI.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for ScoreKeeper.

    The EventBus acts as a mediator between all application components:
    - ScoreSession forwards scoring events from the active ScoreEngine
    - Display layers listen and refresh
    - History changes are broadcast after every save or clear

    Usage:
        # In ScoreSession
        self.event_bus.set_completed.emit(record)

        # In a scoreboard view
        self.event_bus.score_updated.connect(self._on_score_updated)
    """

    # ============ Match Lifecycle ============
    match_started = Signal(dict)        # {sport, left_name, right_name}
    match_completed = Signal(dict)      # Final results dict
    match_saved = Signal(object)        # MatchRecordResponse

    # ============ Scoring Events ============
    score_updated = Signal(object)      # ScoreUiState
    game_won = Signal(str)              # winning side
    set_completed = Signal(object)      # SetRecord
    tie_break_started = Signal()

    # ============ History ============
    history_changed = Signal(list)      # list[MatchRecordResponse]

    # ============ System Events ============
    database_error = Signal(str)        # Database error message
    system_message = Signal(str, str)   # (level, message) - e.g., ("info", "Match saved")

    def __init__(self):
        super().__init__()

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
