"""Library membership annotation.

Marks results the requesting user already owns. Runs on the final page only,
after ranking and truncation, and never affects order.
"""

import logging
from typing import Collection, Iterable, Optional, Protocol

from .errors import DependencyError, SearchError
from .records import BookRecord
from .schemas import BookSearchItem

logger = logging.getLogger(__name__)


class MembershipOracle(Protocol):
    """Answers which books a user owns."""

    def owned_book_ids(
        self, user_id: str, book_ids: Optional[Collection[str]] = None
    ) -> set[str]:
        """Ids the user owns, restricted to book_ids when given."""
        ...


def to_search_item(record: BookRecord, in_user_library: Optional[bool] = None) -> BookSearchItem:
    """Project a record onto the response shape."""
    return BookSearchItem(
        id=record.id,
        title=record.title,
        author=record.author,
        genre=record.genre,
        publication_year=record.publication_year,
        isbn=record.isbn,
        publisher=record.publisher,
        physical_location=record.physical_location,
        in_user_library=in_user_library,
    )


def annotate_membership(
    records: Iterable[BookRecord],
    user_id: Optional[str],
    oracle: Optional[MembershipOracle],
) -> list[BookSearchItem]:
    """Build response items flagged with library membership.

    Args:
        records: Ranked, truncated records
        user_id: Requesting user, or None for anonymous callers
        oracle: Membership lookup; unused for anonymous callers

    Returns:
        Items in the same order as records

    Raises:
        DependencyError: If the oracle fails.
    """
    records = list(records)
    if user_id is None or oracle is None or not records:
        return [to_search_item(r, in_user_library=False) for r in records]

    try:
        owned = oracle.owned_book_ids(user_id, [r.id for r in records])
    except SearchError:
        raise
    except Exception as e:
        logger.exception("Membership lookup failed for user %s", user_id)
        raise DependencyError("membership oracle", str(e)) from e

    return [to_search_item(r, in_user_library=r.id in owned) for r in records]
