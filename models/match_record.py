"""
Summary of a finished match, kept for the history screen.
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from engine.rules import SportType
from models.base import Base


class MatchRecord(Base):
    """
    One completed (or manually ended) match.

    Only the final summary is stored; a live match is never persisted.
    """
    __tablename__ = "match_records"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc)
    )
    sport: Mapped[SportType] = mapped_column(SAEnum(SportType), nullable=False)

    left_name: Mapped[str] = mapped_column(String(100), nullable=False)
    right_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # What the scoreboard showed, e.g. "6-0 7-6(5)"
    set_summary: Mapped[str] = mapped_column(String(200), default="")

    left_sets: Mapped[int] = mapped_column(Integer, default=0)
    right_sets: Mapped[int] = mapped_column(Integer, default=0)
    left_games: Mapped[int] = mapped_column(Integer, default=0)
    right_games: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return (f"<MatchRecord(id={self.id}, {self.left_name} vs {self.right_name}, "
                f"sets={self.left_sets}-{self.right_sets})>")
