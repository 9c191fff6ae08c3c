from fastapi import APIRouter, Depends

from board.dependencies import get_board
from board.schemas import MetricsResponse
from board.services.board_service import ArticleBoard

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(board: ArticleBoard = Depends(get_board)):
    return MetricsResponse(**await board.stats())
