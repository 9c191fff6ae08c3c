from contextlib import asynccontextmanager
from fastapi import FastAPI
from board.store import store
from board.middleware import TimingMiddleware
from board.routers import articles, categories, metrics
from board.services.board_service import ArticleBoard

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Redis is the system of record, so a failed connect aborts.
    await store.connect()
    app.state.board = ArticleBoard.from_settings(store.client)
    yield
    # Shutdown
    app.state.board = None
    await store.disconnect()

app = FastAPI(
    title="Article Vote Board",
    description="Submit, vote on, categorise and rank articles stored in Redis",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)

# Routers
app.include_router(articles.router)
app.include_router(categories.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
