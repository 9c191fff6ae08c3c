"""
Domain enums and the Redis key layout for the article board.

The key names are shared with any other client of the same Redis
database, so they must not change:

- ``articles:id:last``       INCR counter handing out article ids
- ``articles:<id>``          article hash
- ``articles:<id>:voters``   users who voted, expires with the vote window
- ``category:<name>``        article keys in a category
- ``timeline`` / ``scores``  sorted sets of article keys
"""
import enum

ARTICLE_ID_COUNTER = "articles:id:last"
TIMELINE_KEY = "timeline"
SCORES_KEY = "scores"

_ARTICLE_PREFIX = "articles:"
_CATEGORY_PREFIX = "category:"


class TimeRange(str, enum.Enum):
    """Granularity of the voting window."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"

    @property
    def seconds(self) -> int:
        return _TIME_RANGE_SECONDS[self]


_TIME_RANGE_SECONDS: dict[TimeRange, int] = {
    TimeRange.SECOND: 1,
    TimeRange.MINUTE: 60,
    TimeRange.HOUR: 60 * 60,
    TimeRange.DAY: 60 * 60 * 24,
    TimeRange.WEEK: 60 * 60 * 24 * 7,
}


class VoteStatus(str, enum.Enum):
    CLOSED_FOR_VOTING = "closed_for_voting"
    ALREADY_VOTED = "already_voted"
    VOTED = "voted"


def article_key(article_id: int) -> str:
    if article_id < 0:
        raise ValueError(f"article id must be non-negative, got {article_id}")
    return f"{_ARTICLE_PREFIX}{article_id}"


def voters_key(article_id: int) -> str:
    return f"{article_key(article_id)}:voters"


def category_key(category: str) -> str:
    if not category:
        raise ValueError("category name must not be empty")
    return f"{_CATEGORY_PREFIX}{category}"


def article_id_from_key(key: str) -> int:
    """Inverse of :func:`article_key`."""
    prefix, _, raw_id = key.partition(_ARTICLE_PREFIX)
    if prefix or not raw_id.isdigit():
        raise ValueError(f"not an article key: {key!r}")
    return int(raw_id)
