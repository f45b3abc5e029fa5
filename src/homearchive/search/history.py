"""Search history tracking.

Recorded by callers after a search completes; the search engine itself never
writes history.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select

from ..db.models import SearchHistory
from ..db.sqlite import Database, get_db
from .normalizer import MAX_QUERY_LENGTH
from .schemas import PopularQuery, SearchHistoryItem

logger = logging.getLogger(__name__)


class SearchHistoryManager:
    """Manages search history, popular queries and suggestions."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize history manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def record(
        self, query: str, result_count: int, user_id: Optional[str] = None
    ) -> Optional[SearchHistoryItem]:
        """Record a search.

        Blank queries are not recorded.

        Args:
            query: Query as echoed in the search response
            result_count: Total matches the search found
            user_id: Searching user, None for anonymous

        Returns:
            Recorded item, or None when nothing was recorded
        """
        text = " ".join((query or "").split())[:MAX_QUERY_LENGTH]
        if not text:
            return None

        with self.db.get_session() as session:
            entry = SearchHistory(query=text, user_id=user_id, result_count=result_count)
            session.add(entry)
            session.flush()
            item = self._to_item(entry)

        logger.debug(
            "Recorded search history: query='%s', results=%d, user=%s",
            text,
            result_count,
            user_id or "anonymous",
        )
        return item

    def popular_queries(self, limit: int = 10) -> list[PopularQuery]:
        """Most frequently searched queries, case-insensitive."""
        normalized = func.lower(SearchHistory.query)
        hits = func.count(SearchHistory.id)
        stmt = (
            select(normalized, hits)
            .group_by(normalized)
            .order_by(hits.desc(), normalized)
            .limit(limit)
        )
        with self.db.get_session() as session:
            rows = session.execute(stmt).all()
        return [PopularQuery(query=q, count=c) for q, c in rows]

    def suggestions(self, partial: Optional[str], limit: int = 10) -> list[str]:
        """Previously searched queries starting with the partial text.

        Falls back to popular queries when partial is blank.
        """
        if partial is None or not partial.strip():
            return [p.query for p in self.popular_queries(limit)]

        prefix = partial.strip().lower()
        normalized = func.lower(SearchHistory.query)
        hits = func.count(SearchHistory.id)
        stmt = (
            select(normalized)
            .where(normalized.startswith(prefix, autoescape=True))
            .group_by(normalized)
            .order_by(hits.desc(), normalized)
            .limit(limit)
        )
        with self.db.get_session() as session:
            return list(session.execute(stmt).scalars().all())

    def recent_for_user(self, user_id: str, limit: int = 10) -> list[SearchHistoryItem]:
        """A user's most recent searches, newest first."""
        stmt = (
            select(SearchHistory)
            .where(SearchHistory.user_id == user_id)
            .order_by(SearchHistory.searched_at.desc(), SearchHistory.id)
            .limit(limit)
        )
        with self.db.get_session() as session:
            return [self._to_item(e) for e in session.execute(stmt).scalars().all()]

    def clear_for_user(self, user_id: str) -> int:
        """Delete a user's history.

        Returns:
            Number of entries removed
        """
        with self.db.get_session() as session:
            result = session.execute(
                delete(SearchHistory).where(SearchHistory.user_id == user_id)
            )
            removed = result.rowcount or 0

        logger.info("Cleared %d search history entries for user %s", removed, user_id)
        return removed

    def _to_item(self, entry: SearchHistory) -> SearchHistoryItem:
        return SearchHistoryItem(
            query=entry.query,
            user_id=entry.user_id,
            result_count=entry.result_count,
            searched_at=datetime.fromisoformat(entry.searched_at),
        )
