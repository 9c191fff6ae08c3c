from fastapi import APIRouter, Depends, HTTPException, Path

from board.dependencies import get_board
from board.schemas import Article, CategoryAssignment
from board.services.board_service import ArticleBoard

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])

@router.get("/{category}/articles", response_model=list[Article])
async def list_category(
    category: str = Path(min_length=1, max_length=100),
    board: ArticleBoard = Depends(get_board),
):
    return await board.list_by_category(category)

@router.put("/{category}/articles/{article_id}", response_model=CategoryAssignment)
async def assign_category(
    category: str = Path(min_length=1, max_length=100),
    article_id: int = Path(ge=0),
    board: ArticleBoard = Depends(get_board),
):
    if await board.get_article(article_id) is None:
        raise HTTPException(status_code=404, detail="Article not found")
    assigned = await board.assign_category(category, article_id)
    return CategoryAssignment(category=category, article_id=article_id, assigned=assigned)
