"""Tests for SearchHistoryManager."""

import pytest

from homearchive.db.models import SearchHistory
from homearchive.db.sqlite import Database
from homearchive.search.history import SearchHistoryManager


@pytest.fixture
def history(db: Database) -> SearchHistoryManager:
    """Create a SearchHistoryManager with test database."""
    return SearchHistoryManager(db)


def _insert(db: Database, query: str, user_id: str, searched_at: str) -> None:
    with db.get_session() as session:
        session.add(
            SearchHistory(query=query, user_id=user_id, result_count=1, searched_at=searched_at)
        )


class TestRecord:
    """Tests for recording searches."""

    def test_record(self, history):
        """Test recording a search."""
        item = history.record("Gatsby", 1, user_id="alice")

        assert item is not None
        assert item.query == "Gatsby"
        assert item.result_count == 1
        assert item.user_id == "alice"
        assert item.searched_at is not None

    def test_anonymous(self, history):
        """Test anonymous searches are recorded without a user."""
        item = history.record("dune", 3)
        assert item.user_id is None

    def test_blank_not_recorded(self, history):
        """Test blank queries are skipped."""
        assert history.record("   ", 5) is None
        assert history.record("", 5) is None
        assert history.popular_queries() == []

    def test_collapses_whitespace(self, history):
        """Test whitespace is collapsed before storing."""
        item = history.record("  great   gatsby ", 1)
        assert item.query == "great gatsby"

    def test_truncates_long_queries(self, history):
        """Test stored queries never exceed 100 characters."""
        item = history.record("a" * 150, 0)
        assert len(item.query) == 100


class TestPopularQueries:
    """Tests for popular queries."""

    def test_orders_by_count(self, history):
        """Test the most searched query comes first."""
        for q in ["dune", "gatsby", "Dune", "DUNE", "gatsby", "emma"]:
            history.record(q, 1)

        popular = history.popular_queries()

        assert [(p.query, p.count) for p in popular] == [
            ("dune", 3),
            ("gatsby", 2),
            ("emma", 1),
        ]

    def test_limit(self, history):
        """Test the limit is applied."""
        for q in ["a1", "b2", "c3"]:
            history.record(q, 1)
        assert len(history.popular_queries(limit=2)) == 2


class TestSuggestions:
    """Tests for query suggestions."""

    def test_prefix_match(self, history):
        """Test suggestions start with the partial text."""
        for q in ["harry potter", "harry potter", "hard times", "the hobbit"]:
            history.record(q, 1)

        assert history.suggestions("har") == ["harry potter", "hard times"]

    def test_case_insensitive(self, history):
        """Test prefix matching ignores case."""
        history.record("Dune Messiah", 1)
        assert history.suggestions("DUNE") == ["dune messiah"]

    def test_wildcards_are_literal(self, history):
        """Test LIKE wildcards in the partial text match literally."""
        history.record("100% pure", 1)
        history.record("100 years", 1)
        assert history.suggestions("100%") == ["100% pure"]

    def test_blank_falls_back_to_popular(self, history):
        """Test a blank partial returns popular queries."""
        for q in ["emma", "dune", "dune"]:
            history.record(q, 1)
        assert history.suggestions("") == ["dune", "emma"]
        assert history.suggestions(None) == ["dune", "emma"]


class TestUserHistory:
    """Tests for per-user history."""

    def test_recent_newest_first(self, db, history):
        """Test recent searches are ordered newest first."""
        _insert(db, "first", "alice", "2026-01-01T10:00:00+00:00")
        _insert(db, "third", "alice", "2026-01-03T10:00:00+00:00")
        _insert(db, "second", "alice", "2026-01-02T10:00:00+00:00")
        _insert(db, "other", "bob", "2026-01-04T10:00:00+00:00")

        recent = history.recent_for_user("alice")
        assert [item.query for item in recent] == ["third", "second", "first"]

    def test_recent_limit(self, db, history):
        """Test the limit is applied."""
        for day in range(1, 6):
            _insert(db, f"q{day}", "alice", f"2026-01-0{day}T10:00:00+00:00")
        assert [i.query for i in history.recent_for_user("alice", limit=2)] == ["q5", "q4"]

    def test_clear(self, history):
        """Test clearing a user's history leaves other users alone."""
        history.record("dune", 1, user_id="alice")
        history.record("emma", 1, user_id="alice")
        history.record("gatsby", 1, user_id="bob")

        assert history.clear_for_user("alice") == 2
        assert history.recent_for_user("alice") == []
        assert len(history.recent_for_user("bob")) == 1

    def test_clear_nothing(self, history):
        """Test clearing an empty history."""
        assert history.clear_for_user("nobody") == 0
