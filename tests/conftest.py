"""
Test infrastructure for the article board.

Strategy
--------
- fakeredis' ``FakeAsyncRedis`` stands in for Redis, so the suite needs
  no running server while still exercising real command semantics
  (sorted sets, WATCH/MULTI/EXEC, key expiry).
- Each test gets a freshly flushed fake server, giving it a clean
  isolated state.
- The app's ``get_board`` dependency is overridden so every test-time
  request uses a board wrapping the fake client.  The ASGI transport
  does not run the lifespan, so the real Redis is never contacted.
"""
import fakeredis
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from board.dependencies import get_board
from board.main import app
from board.services.board_service import ArticleBoard


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def redis_client():
    """Yield a decode_responses fake Redis client, flushed before and after."""
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    await client.flushall()
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def board(redis_client) -> ArticleBoard:
    """An ArticleBoard with the default week-long vote window."""
    return ArticleBoard(redis_client)


@pytest_asyncio.fixture
async def async_client(board: ArticleBoard) -> AsyncClient:
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport,
    with ``get_board`` resolved to the fake-Redis board.
    """
    app.dependency_overrides[get_board] = lambda: board
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_board, None)
