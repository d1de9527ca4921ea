"""
Score Session - The scoreboard's view-model.

Owns the active ScoreEngine together with everything the engine does not
care about: player names, sport, undo history, and saving finished
matches. Presentation layers call the action methods and render
ScoreUiState.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError
from PySide6.QtCore import QObject, Signal
from sqlalchemy.exc import SQLAlchemyError

from config import MATCH_DEFAULTS
from engine.rules import MatchRules, SportType
from engine.scoring import ScoreEngine
from engine.state import MatchSnapshot
from models.schemas import MatchRecordCreate, MatchRecordResponse, NewMatchRequest
from services.event_bus import EventBus
from services.history import MatchHistoryService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreUiState:
    """Everything a scoreboard needs to draw itself."""
    left_points: str = "0"
    right_points: str = "0"
    left_games: int = 0
    right_games: int = 0
    left_sets: int = 0
    right_sets: int = 0
    server_left: bool = True
    in_tie_break: bool = False
    finished: bool = False
    left_name: str = MATCH_DEFAULTS.left_name
    right_name: str = MATCH_DEFAULTS.right_name
    sport: SportType = SportType.TENNIS
    set_summary: str = ""
    # Live tie-break counters, only meaningful while in_tie_break
    tb_left: int = 0
    tb_right: int = 0


class ScoreSession(QObject):
    """
    View-model around one ScoreEngine at a time.

    Every scoring action is undoable. When an action finishes the match,
    the result is saved to history automatically.
    """

    state_changed = Signal(object)      # ScoreUiState
    history_changed = Signal(list)      # list[MatchRecordResponse]

    def __init__(self, history: Optional[MatchHistoryService] = None,
                 event_bus: Optional[EventBus] = None,
                 rules: Optional[MatchRules] = None,
                 max_undo: int = MATCH_DEFAULTS.max_undo):
        super().__init__()
        self.history_service = history
        self.event_bus = event_bus
        self._undo_stack: deque[MatchSnapshot] = deque(maxlen=max_undo)
        self._left_name = MATCH_DEFAULTS.left_name
        self._right_name = MATCH_DEFAULTS.right_name
        self._engine: Optional[ScoreEngine] = None
        self._attach_engine(ScoreEngine(rules or MatchRules.for_sport(SportType.TENNIS)))

        self._history: list[MatchRecordResponse] = []
        if self.history_service is not None:
            self._history = self.history_service.list_records()

    # ============ Queries ============

    @property
    def engine(self) -> ScoreEngine:
        return self._engine

    @property
    def sport(self) -> SportType:
        return self._engine.rules.sport

    @property
    def history(self) -> list[MatchRecordResponse]:
        return list(self._history)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def ui_state(self) -> ScoreUiState:
        s = self._engine.state
        return ScoreUiState(
            left_points=s.left.points.label,
            right_points=s.right.points.label,
            left_games=s.left.games,
            right_games=s.right.games,
            left_sets=s.left.sets,
            right_sets=s.right.sets,
            server_left=s.server_left,
            in_tie_break=s.in_tie_break,
            finished=s.finished,
            left_name=self._left_name,
            right_name=self._right_name,
            sport=self.sport,
            set_summary=self._engine.set_summary(),
            tb_left=s.tie_break_left,
            tb_right=s.tie_break_right,
        )

    # ============ Actions ============

    def start_new_match(self, sport: SportType = SportType.TENNIS,
                        left_name: str = "", right_name: str = "",
                        rules: Optional[MatchRules] = None) -> None:
        """
        Start a fresh match, discarding the current one and its undo history.

        Args:
            sport: The sport being played
            left_name: Display name for the left side (blank for the default)
            right_name: Display name for the right side (blank for the default)
            rules: Full rule configuration; defaults for the sport if omitted

        Raises:
            pydantic.ValidationError: If the names are too long
        """
        request = NewMatchRequest(sport=sport, left_name=left_name, right_name=right_name)
        self._left_name = request.left_name
        self._right_name = request.right_name
        self._attach_engine(ScoreEngine(rules or MatchRules.for_sport(request.sport)))
        self._undo_stack.clear()

        logger.info("New %s match: %s vs %s", request.sport.value,
                    request.left_name, request.right_name)
        if self.event_bus is not None:
            self.event_bus.match_started.emit({
                "sport": request.sport.value,
                "left_name": request.left_name,
                "right_name": request.right_name,
            })
        self._emit()

    def add_point_left(self) -> None:
        self._update_and_maybe_save(self._engine.point_left)

    def add_point_right(self) -> None:
        self._update_and_maybe_save(self._engine.point_right)

    def toggle_server(self) -> None:
        self._update_and_maybe_save(self._engine.toggle_server)

    def undo(self) -> bool:
        """
        Step back to the state before the last action.

        Returns:
            False if there was nothing to undo
        """
        if not self._undo_stack:
            return False
        self._engine.restore(self._undo_stack.pop())
        logger.debug("Undo (%d left)", len(self._undo_stack))
        self._emit()
        return True

    def reset(self) -> None:
        """Restart the current match with the same rules and names."""
        self._engine.reset()
        self._undo_stack.clear()
        self._emit()

    def end_match_and_save(self) -> None:
        """Manually end the match and save it. Undoable."""
        self._push_undo()
        if not self._engine.is_match_complete:
            self._engine.end_match()
            self._save_to_history()
        self._emit()

    def clear_history(self) -> None:
        if self.history_service is not None:
            self.history_service.clear()
        self._history = []
        self._emit_history()

    # ============ Internals ============

    def _attach_engine(self, engine: ScoreEngine) -> None:
        if self._engine is not None and self.event_bus is not None:
            self._engine.game_won.disconnect(self.event_bus.game_won)
            self._engine.set_completed.disconnect(self.event_bus.set_completed)
            self._engine.tie_break_started.disconnect(self.event_bus.tie_break_started)
            self._engine.match_completed.disconnect(self.event_bus.match_completed)

        self._engine = engine
        if self.event_bus is not None:
            engine.game_won.connect(self.event_bus.game_won)
            engine.set_completed.connect(self.event_bus.set_completed)
            engine.tie_break_started.connect(self.event_bus.tie_break_started)
            engine.match_completed.connect(self.event_bus.match_completed)

    def _push_undo(self) -> None:
        self._undo_stack.append(self._engine.snapshot())

    def _update_and_maybe_save(self, action) -> None:
        self._push_undo()
        was_finished = self._engine.is_match_complete
        action()
        if not was_finished and self._engine.is_match_complete:
            self._save_to_history()
        self._emit()

    def _save_to_history(self) -> None:
        if self.history_service is None:
            return

        s = self._engine.state
        try:
            data = MatchRecordCreate(
                sport=self.sport,
                left_name=self._left_name,
                right_name=self._right_name,
                set_summary=self._engine.set_summary(),
                left_sets=s.left.sets,
                right_sets=s.right.sets,
                left_games=s.left.games,
                right_games=s.right.games,
            )
            saved = self.history_service.add(data)
        except (SQLAlchemyError, ValidationError) as e:
            logger.exception("Could not save match to history")
            if self.event_bus is not None:
                self.event_bus.database_error.emit(str(e))
            return

        self._history.insert(0, saved)
        if self.event_bus is not None:
            self.event_bus.match_saved.emit(saved)
            self.event_bus.emit_message("info", "Match saved")
        self._emit_history()

    def _emit(self) -> None:
        ui_state = self.ui_state
        self.state_changed.emit(ui_state)
        if self.event_bus is not None:
            self.event_bus.score_updated.emit(ui_state)

    def _emit_history(self) -> None:
        self.history_changed.emit(self.history)
        if self.event_bus is not None:
            self.event_bus.history_changed.emit(self.history)
