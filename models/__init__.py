"""
ScoreKeeper Database Models

SQLAlchemy ORM models and pydantic schemas for match history.
"""

from models.base import (
    Base,
    engine,
    SessionLocal,
    create_db_engine,
    create_session_factory,
    get_session,
    init_db,
)
from models.match_record import MatchRecord
from models.schemas import (
    RulesCreate,
    NewMatchRequest,
    MatchRecordCreate,
    MatchRecordResponse,
)

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "create_db_engine",
    "create_session_factory",
    "get_session",
    "init_db",
    "MatchRecord",
    "RulesCreate",
    "NewMatchRequest",
    "MatchRecordCreate",
    "MatchRecordResponse",
]
