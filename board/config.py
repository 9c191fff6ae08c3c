from pydantic_settings import BaseSettings

from board.models import TimeRange


class Settings(BaseSettings):
    REDIS_URL: str = "redis://localhost:6379/0"
    APP_ENV: str = "development"
    DEBUG: bool = True

    # Voting
    VOTE_WINDOW: TimeRange = TimeRange.WEEK
    VOTE_INCREMENT: int = 457

    # Safety-net TTL for working keys built by category listings
    WORKING_KEY_TTL: int = 60

    # Listing sizes
    DEFAULT_LIST_SIZE: int = 25
    MAX_LIST_SIZE: int = 100

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
