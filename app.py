"""
ScoreKeeper Application Controller

Top-level controller that wires together all application components.
"""

from typing import Optional

from PySide6.QtCore import QObject

from models.schemas import RulesCreate
from services.event_bus import EventBus
from services.history import MatchHistoryService
from services.session import ScoreSession, ScoreUiState


HELP_TEXT = """Commands:
  l  point to left        r  point to right
  s  toggle server        u  undo last action
  n  new match            e  end match and save
  h  show match history   q  quit"""


class ScoreKeeperApp(QObject):
    """
    Top-level application controller.
    Wires together all application components and maps console
    commands onto session actions.
    """

    def __init__(self, history: Optional[MatchHistoryService] = None):
        super().__init__()

        # Core services
        self.event_bus = EventBus()
        self.history_service = history or MatchHistoryService()
        self.session = ScoreSession(self.history_service, self.event_bus)

        self._messages: list[str] = []
        self.event_bus.system_message.connect(self._on_system_message)
        self.event_bus.database_error.connect(self._on_database_error)

        self._actions = {
            "l": self.session.add_point_left,
            "r": self.session.add_point_right,
            "s": self.session.toggle_server,
            "u": self.session.undo,
            "e": self.session.end_match_and_save,
        }

    def new_match(self, settings: Optional[RulesCreate] = None,
                  left_name: str = "", right_name: str = "") -> str:
        """
        Start a new match and return the first scoreboard line.

        Args:
            settings: Validated rule settings; standard tennis rules if omitted
            left_name: Display name for the left side
            right_name: Display name for the right side
        """
        settings = settings or RulesCreate()
        self.session.start_new_match(settings.sport, left_name, right_name,
                                     rules=settings.to_rules())
        return self.render()

    def handle_command(self, command: str) -> str:
        """
        Apply one console command.

        Args:
            command: A single-letter command (see HELP_TEXT)

        Returns:
            The text to display afterwards
        """
        command = command.strip().lower()
        if command == "h":
            return self.render_history()
        if command == "n":
            self.session.reset()
        elif command in self._actions:
            self._actions[command]()
        else:
            return HELP_TEXT

        output = self.render()
        if self._messages:
            output = "\n".join([output, *self._messages])
            self._messages.clear()
        return output

    def render(self) -> str:
        """One-line scoreboard: names, set summary, current game."""
        ui = self.session.ui_state
        return format_scoreboard(ui)

    def render_history(self) -> str:
        records = self.session.history
        if not records:
            return "No matches saved yet."
        return "\n".join(
            f"{r.created_at:%Y-%m-%d %H:%M}  {r.left_name} vs {r.right_name}  "
            f"{r.left_sets}-{r.right_sets}  {r.set_summary}"
            for r in records
        )

    def _on_system_message(self, level: str, message: str) -> None:
        self._messages.append(f"[{level}] {message}")

    def _on_database_error(self, message: str) -> None:
        self._messages.append(f"[error] History not saved: {message}")


def format_scoreboard(ui: ScoreUiState) -> str:
    """Render a ScoreUiState as a single line of text."""
    left_serve = "*" if ui.server_left else " "
    right_serve = " " if ui.server_left else "*"

    if ui.finished:
        game = "final"
    elif ui.in_tie_break:
        game = f"TB {ui.tb_left}-{ui.tb_right}"
    else:
        game = f"{ui.left_points}-{ui.right_points}"

    sets = ui.set_summary or "0-0"
    return (f"{left_serve}{ui.left_name} vs {ui.right_name}{right_serve}  "
            f"sets {ui.left_sets}-{ui.right_sets}  [{sets}]  {game}")
