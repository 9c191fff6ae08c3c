from fastapi import APIRouter, Depends, HTTPException, Path

from board.dependencies import ListParams, get_board
from board.models import VoteStatus
from board.schemas import Article, ArticleCreate, VoteCreate, VoteResponse
from board.services.board_service import ArticleBoard

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])

_VOTE_REJECTIONS = {
    VoteStatus.ALREADY_VOTED: (409, "User has already voted for this article"),
    VoteStatus.CLOSED_FOR_VOTING: (410, "Voting is closed for this article"),
}

@router.get("", response_model=list[Article])
async def list_articles(
    params: ListParams = Depends(),
    board: ArticleBoard = Depends(get_board),
):
    if params.order == "score":
        return await board.list_most_upvoted(params.limit)
    return await board.list_latest(params.limit)

@router.get("/all", response_model=list[Article])
async def list_all_articles(board: ArticleBoard = Depends(get_board)):
    return await board.list_all()

@router.get("/{article_id}", response_model=Article)
async def get_article(article_id: int = Path(ge=0), board: ArticleBoard = Depends(get_board)):
    article = await board.get_article(article_id)
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")
    return article

@router.post("", status_code=201, response_model=Article)
async def submit_article(data: ArticleCreate, board: ArticleBoard = Depends(get_board)):
    article_id = await board.submit_article(data.author, data.title, data.link)
    return await board.get_article(article_id)

@router.post("/{article_id}/votes", response_model=VoteResponse)
async def vote(
    data: VoteCreate,
    article_id: int = Path(ge=0),
    board: ArticleBoard = Depends(get_board),
):
    if await board.get_article(article_id) is None:
        raise HTTPException(status_code=404, detail="Article not found")
    status = await board.vote(article_id, data.user)
    if status in _VOTE_REJECTIONS:
        code, detail = _VOTE_REJECTIONS[status]
        raise HTTPException(status_code=code, detail=detail)
    return VoteResponse(article_id=article_id, status=status)
