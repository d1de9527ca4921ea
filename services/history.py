"""
Match History

Stores summaries of finished matches in the local SQLite database.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from models.base import SessionLocal, get_session
from models.match_record import MatchRecord
from models.schemas import MatchRecordCreate, MatchRecordResponse

logger = logging.getLogger(__name__)


class MatchHistoryService:
    """
    Reads and writes finished-match summaries.

    Database errors propagate to the caller after the session is
    rolled back.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    def add(self, data: MatchRecordCreate) -> MatchRecordResponse:
        """
        Save a finished match.

        Args:
            data: Validated summary of the match

        Returns:
            The stored record, including its id and timestamp
        """
        with get_session(self._session_factory) as session:
            record = MatchRecord(**data.model_dump())
            session.add(record)
            session.flush()
            response = MatchRecordResponse.model_validate(record)

        logger.info("Saved match %d: %s vs %s %s", response.id,
                    response.left_name, response.right_name, response.set_summary)
        return response

    def list_records(self, limit: Optional[int] = None) -> list[MatchRecordResponse]:
        """Get stored matches, newest first."""
        query = select(MatchRecord).order_by(MatchRecord.created_at.desc(), MatchRecord.id.desc())
        if limit is not None:
            query = query.limit(limit)

        with get_session(self._session_factory) as session:
            records = session.scalars(query).all()
            return [MatchRecordResponse.model_validate(r) for r in records]

    def clear(self) -> int:
        """
        Delete all stored matches.

        Returns:
            The number of records removed
        """
        with get_session(self._session_factory) as session:
            result = session.execute(delete(MatchRecord))
            removed = result.rowcount

        logger.info("Cleared %d history records", removed)
        return removed
