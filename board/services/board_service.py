"""
Article board service — voting, categories and ranked listings on Redis.

Design notes
------------
- Redis does all the indexing: two sorted sets (``timeline`` and
  ``scores``) rank article keys, and every listing is a ``ZREVRANGE``
  followed by one pipelined batch of ``HGETALL`` calls.  Pipeline
  replies come back in request order, so the ranking is preserved.
- Submission is a plain sequence of commands with no rollback.  A crash
  halfway through can leave an article in one index but not the other;
  listings skip index entries whose record is missing.
- A vote watches the voter set while checking it, then commits the four
  mutations in one MULTI/EXEC.  If the set changes in between (another
  vote, or the window expiring) EXEC aborts and the checks are re-run
  against the new state, so each user is counted at most once.
- ``increment_roundtrip_count()`` is called once per network round trip
  so the ``TimingMiddleware`` can surface the total in the
  ``X-Store-Roundtrips`` response header.
"""
import itertools
import logging
import time
import uuid

import redis.asyncio as redis
from redis.exceptions import WatchError

from board.config import settings
from board.middleware import increment_roundtrip_count
from board.models import (
    ARTICLE_ID_COUNTER,
    SCORES_KEY,
    TIMELINE_KEY,
    TimeRange,
    VoteStatus,
    article_id_from_key,
    article_key,
    category_key,
    voters_key,
)
from board.schemas import Article

logger = logging.getLogger(__name__)

_WORKING_KEY_PREFIX = "work"


class ArticleBoard:
    """
    Orchestrates the board operations against a ``redis.asyncio`` client
    created with ``decode_responses=True``.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        vote_window: TimeRange = TimeRange.WEEK,
        vote_increment: int = 457,
        working_key_ttl: int = 60,
    ) -> None:
        self._redis = redis_client
        self.vote_window_seconds = vote_window.seconds
        self.vote_increment = vote_increment
        self.working_key_ttl = working_key_ttl
        # Working-key names: random per instance, monotonic within it.
        self._token = uuid.uuid4().hex[:12]
        self._working_ids = itertools.count()

    @classmethod
    def from_settings(cls, redis_client: redis.Redis) -> "ArticleBoard":
        return cls(
            redis_client,
            vote_window=settings.VOTE_WINDOW,
            vote_increment=settings.VOTE_INCREMENT,
            working_key_ttl=settings.WORKING_KEY_TTL,
        )

    def set_vote_window(self, time_range: TimeRange) -> int:
        """
        Change the vote window applied to articles submitted from now on.
        Returns the window length in seconds.
        """
        self.vote_window_seconds = time_range.seconds
        return self.vote_window_seconds

    def _working_key(self) -> str:
        return f"{_WORKING_KEY_PREFIX}:{self._token}:{next(self._working_ids)}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def submit_article(self, author: str, title: str, link: str) -> int:
        """
        Store a new article and return its id.

        The author is registered as the first voter, so the article
        starts with one vote and a score of ``timestamp + vote_increment``.
        The voter set expires after the vote window whether or not anyone
        else votes.
        """
        increment_roundtrip_count()
        article_id = await self._redis.incr(ARTICLE_ID_COUNTER)
        key = article_key(article_id)

        now = int(time.time())
        score = now + self.vote_increment

        increment_roundtrip_count()
        await self._redis.hset(
            key,
            mapping={
                "title": title,
                "link": link,
                "user": author,
                "timestamp": now,
                "nbVotes": 1,
                "score": score,
            },
        )

        increment_roundtrip_count()
        await self._redis.zadd(TIMELINE_KEY, {key: now})
        increment_roundtrip_count()
        await self._redis.zadd(SCORES_KEY, {key: score})

        voters = voters_key(article_id)
        increment_roundtrip_count()
        await self._redis.sadd(voters, author)
        increment_roundtrip_count()
        await self._redis.expire(voters, self.vote_window_seconds)

        logger.info("Article %d submitted by %r", article_id, author)
        return article_id

    async def vote(self, article_id: int, user: str) -> VoteStatus:
        """
        Cast *user*'s vote for *article_id*.

        Returns ``CLOSED_FOR_VOTING`` when the voter set no longer exists,
        ``ALREADY_VOTED`` when *user* is in it, otherwise records the vote
        and returns ``VOTED``.
        """
        key = article_key(article_id)
        voters = voters_key(article_id)

        async with self._redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    increment_roundtrip_count()
                    await pipe.watch(voters)

                    increment_roundtrip_count()
                    if not await pipe.exists(voters):
                        status = VoteStatus.CLOSED_FOR_VOTING
                    else:
                        increment_roundtrip_count()
                        if await pipe.sismember(voters, user):
                            status = VoteStatus.ALREADY_VOTED
                        else:
                            status = None

                    if status is not None:
                        # EXEC clears the watch; without one, UNWATCH explicitly.
                        increment_roundtrip_count()
                        await pipe.unwatch()
                        break

                    pipe.multi()
                    pipe.sadd(voters, user)
                    pipe.hincrby(key, "nbVotes", 1)
                    pipe.hincrby(key, "score", self.vote_increment)
                    pipe.zincrby(SCORES_KEY, self.vote_increment, key)
                    increment_roundtrip_count()
                    await pipe.execute()
                    status = VoteStatus.VOTED
                    break
                except WatchError:
                    logger.debug("Voter set %s changed during vote by %r; re-checking", voters, user)

        logger.debug("Vote by %r on article %d: %s", user, article_id, status.value)
        return status

    async def assign_category(self, category: str, article_id: int) -> bool:
        """
        Add the article to *category*.  Returns False when it was already
        a member, in which case nothing is written.
        """
        cat_key = category_key(category)
        key = article_key(article_id)

        increment_roundtrip_count()
        if await self._redis.sismember(cat_key, key):
            return False
        increment_roundtrip_count()
        await self._redis.sadd(cat_key, key)
        logger.debug("Article %d added to category %r", article_id, category)
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_article(self, article_id: int) -> Article | None:
        increment_roundtrip_count()
        record = await self._redis.hgetall(article_key(article_id))
        if not record:
            return None
        return Article.from_record(article_id, record)

    async def list_latest(self, n: int) -> list[Article]:
        """Return the *n* most recently submitted articles, newest first."""
        return await self._list_top(TIMELINE_KEY, n)

    async def list_most_upvoted(self, n: int) -> list[Article]:
        """Return the *n* highest-scored articles, best first."""
        return await self._list_top(SCORES_KEY, n)

    async def list_all(self) -> list[Article]:
        """Return every article, newest first."""
        increment_roundtrip_count()
        keys = await self._redis.zrevrange(TIMELINE_KEY, 0, -1)
        return await self._fetch_articles(keys)

    async def list_by_category(self, category: str) -> list[Article]:
        """
        Return the articles of *category* ordered by descending score.

        The category set is intersected with ``scores`` into a working
        sorted set that is deleted before returning.  It also carries a
        short TTL so a crash before the delete cannot leak it.
        """
        cat_key = category_key(category)
        working_key = self._working_key()
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.zinterstore(working_key, [cat_key, SCORES_KEY])
                pipe.expire(working_key, self.working_key_ttl)
                increment_roundtrip_count()
                await pipe.execute()

            increment_roundtrip_count()
            keys = await self._redis.zrevrange(working_key, 0, -1)
            return await self._fetch_articles(keys)
        finally:
            increment_roundtrip_count()
            await self._redis.delete(working_key)

    async def stats(self) -> dict:
        """Return board-wide counters for the metrics endpoint."""
        async with self._redis.pipeline(transaction=False) as pipe:
            pipe.zcard(TIMELINE_KEY)
            pipe.get(ARTICLE_ID_COUNTER)
            increment_roundtrip_count()
            total, last_id = await pipe.execute()
        return {
            "total_articles": total,
            "last_article_id": int(last_id) if last_id is not None else 0,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _list_top(self, index_key: str, n: int) -> list[Article]:
        if n <= 0:
            return []
        increment_roundtrip_count()
        keys = await self._redis.zrevrange(index_key, 0, n - 1)
        return await self._fetch_articles(keys)

    async def _fetch_articles(self, keys: list[str]) -> list[Article]:
        """
        Load the hashes behind *keys* in a single pipelined round trip,
        keeping the order of *keys*.
        """
        if not keys:
            return []

        async with self._redis.pipeline(transaction=False) as pipe:
            for key in keys:
                pipe.hgetall(key)
            increment_roundtrip_count()
            records = await pipe.execute()

        articles: list[Article] = []
        for key, record in zip(keys, records):
            if not record:
                logger.warning("Index entry %s has no article record; skipping", key)
                continue
            articles.append(Article.from_record(article_id_from_key(key), record))
        return articles
