"""
ScoreKeeper Configuration

Centralized settings, paths, and constants for the application.
"""

import logging
from pathlib import Path
from dataclasses import dataclass
import appdirs


# Application info
APP_NAME = "ScoreKeeper"
APP_AUTHOR = "ScoreKeeper"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores the match history database)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def database(self) -> Path:
        return self.data_dir / "scorekeeper.db"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "scorekeeper.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.log_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class MatchDefaults:
    """Defaults used when a new match is started."""
    sets_to_win: int = 2
    games_per_set: int = 6
    tie_break_at: int = 6

    # Names shown when the user leaves a side blank
    left_name: str = "Left"
    right_name: str = "Right"

    # Undo history depth; the oldest snapshot is dropped beyond this
    max_undo: int = 50


@dataclass(frozen=True)
class LogSettings:
    """Logging settings."""
    level: int = logging.INFO
    file_level: int = logging.DEBUG
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# Singleton instances
PATHS = Paths()
MATCH_DEFAULTS = MatchDefaults()
LOG_SETTINGS = LogSettings()


def init_config() -> None:
    """Initialize configuration and create required directories."""
    PATHS.ensure_directories()


def init_logging(log_to_file: bool = True) -> None:
    """Configure the root logger with a console and (optionally) a file handler."""
    root = logging.getLogger()
    root.setLevel(min(LOG_SETTINGS.level, LOG_SETTINGS.file_level))
    formatter = logging.Formatter(LOG_SETTINGS.format)

    console = logging.StreamHandler()
    console.setLevel(LOG_SETTINGS.level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_to_file:
        PATHS.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(PATHS.log_file, encoding="utf-8")
        file_handler.setLevel(LOG_SETTINGS.file_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
