from pydantic import BaseModel, ConfigDict, Field

from board.models import VoteStatus


# --- Article ---

class ArticleCreate(BaseModel):
    author: str = Field(min_length=1, max_length=100)
    title: str = Field(min_length=1, max_length=200)
    link: str = Field(min_length=1, max_length=2048)


class Article(BaseModel):
    """
    An article as stored in its Redis hash, plus the id derived from
    its key.  ``votes`` is stored under the ``nbVotes`` field name.

    ``id`` is not a hash field: listings return it so clients can vote
    and categorise, and ``to_record`` drops it to give back exactly the
    fields written at submission.
    """

    id: int
    title: str
    link: str
    user: str
    timestamp: int
    votes: int = Field(alias="nbVotes")
    score: int
    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, article_id: int, record: dict[str, str]) -> "Article":
        return cls(id=article_id, **record)

    def to_record(self) -> dict[str, str]:
        """Return the hash fields exactly as written to Redis."""
        data = self.model_dump(by_alias=True, exclude={"id"})
        return {field: str(value) for field, value in data.items()}


# --- Voting ---

class VoteCreate(BaseModel):
    user: str = Field(min_length=1, max_length=100)


class VoteResponse(BaseModel):
    article_id: int
    status: VoteStatus


# --- Categories ---

class CategoryAssignment(BaseModel):
    category: str
    article_id: int
    assigned: bool


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_articles: int
    last_article_id: int
