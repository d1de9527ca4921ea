"""
Pydantic schemas for data validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import MATCH_DEFAULTS
from engine.rules import MatchRules, SportType


# ============ Match Setup Schemas ============

class RulesCreate(BaseModel):
    """Schema for user-supplied rule settings."""
    sport: SportType = SportType.TENNIS
    sets_to_win: int = Field(MATCH_DEFAULTS.sets_to_win, ge=1, le=5)
    games_per_set: int = Field(MATCH_DEFAULTS.games_per_set, ge=1, le=12)
    tie_break_at: int = Field(MATCH_DEFAULTS.tie_break_at, ge=1, le=12)
    super_tie_break_final_set: bool = False
    golden_point: bool = False

    def to_rules(self) -> MatchRules:
        return MatchRules(**self.model_dump())


class NewMatchRequest(BaseModel):
    """Schema for starting a new match."""
    sport: SportType = SportType.TENNIS
    left_name: str = Field(MATCH_DEFAULTS.left_name, max_length=100)
    right_name: str = Field(MATCH_DEFAULTS.right_name, max_length=100)

    @field_validator("left_name")
    @classmethod
    def default_left_name(cls, v: str) -> str:
        return v.strip() or MATCH_DEFAULTS.left_name

    @field_validator("right_name")
    @classmethod
    def default_right_name(cls, v: str) -> str:
        return v.strip() or MATCH_DEFAULTS.right_name


# ============ History Schemas ============

class MatchRecordCreate(BaseModel):
    """Schema for saving a finished match."""
    sport: SportType
    left_name: str = Field(..., min_length=1, max_length=100)
    right_name: str = Field(..., min_length=1, max_length=100)
    set_summary: str = Field("", max_length=200)
    left_sets: int = Field(0, ge=0)
    right_sets: int = Field(0, ge=0)
    left_games: int = Field(0, ge=0)
    right_games: int = Field(0, ge=0)


class MatchRecordResponse(BaseModel):
    """Schema for a stored match."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    sport: SportType
    left_name: str
    right_name: str
    set_summary: str
    left_sets: int
    right_sets: int
    left_games: int
    right_games: int
