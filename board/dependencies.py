from fastapi import HTTPException, Query, Request

from board.config import settings
from board.services.board_service import ArticleBoard


def get_board(request: Request) -> ArticleBoard:
    """
    Return the ArticleBoard built by the application lifespan.

    Tests override this dependency with a board wrapping an in-process
    fake Redis.
    """
    board = getattr(request.app.state, "board", None)
    if board is None:
        raise HTTPException(status_code=503, detail="Article board not initialised")
    return board


class ListParams:
    """
    Reusable FastAPI dependency that parses the listing query parameters.

    Attributes
    ----------
    order:
        ``"latest"`` ranks by submission time, ``"score"`` by score.
    limit:
        Number of articles to return, at most ``settings.MAX_LIST_SIZE``.
        The ceiling is read per request, so it follows the live setting
        rather than the value at import time.
    """

    def __init__(
        self,
        order: str = Query(
            "latest",
            pattern="^(latest|score)$",
            description="Ranking: 'latest' or 'score'.",
        ),
        limit: int = Query(
            settings.DEFAULT_LIST_SIZE,
            ge=1,
            description="Number of articles to return (at most MAX_LIST_SIZE).",
        ),
    ) -> None:
        if limit > settings.MAX_LIST_SIZE:
            raise HTTPException(
                status_code=422,
                detail=f"limit must be at most {settings.MAX_LIST_SIZE}",
            )
        self.order = order
        self.limit = limit
