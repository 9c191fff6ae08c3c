"""Redis seeder for article board benchmark testing."""
import asyncio
import argparse
import random
import time

from board.config import settings
from board.models import VoteStatus
from board.services.board_service import ArticleBoard
from board.store import store

CATEGORIES = ["python", "redis", "fastapi", "docker", "kubernetes",
              "react", "typescript", "aws", "devops", "testing",
              "performance", "security"]


async def seed(small: bool = False, flush: bool = False):
    num_users = 10 if small else 200
    num_articles = 100 if small else 5000
    max_votes_per_article = 5 if small else 40

    print(f"Seeding: {num_users} users, {num_articles} articles, up to {max_votes_per_article} votes each")
    start = time.perf_counter()

    await store.connect()
    try:
        if flush:
            await store.client.flushdb()
            print(f"  Flushed {settings.REDIS_URL}")

        board = ArticleBoard.from_settings(store.client)
        users = [f"user:{i:04d}" for i in range(num_users)]

        total_votes = 0
        for i in range(num_articles):
            topic = random.choice(CATEGORIES)
            article_id = await board.submit_article(
                random.choice(users),
                f"Article {i}: How to optimize {topic} applications",
                f"https://example.com/articles/{i}",
            )
            for category in random.sample(CATEGORIES, k=random.randint(1, 3)):
                await board.assign_category(category, article_id)

            for voter in random.sample(users, k=random.randint(0, max_votes_per_article)):
                if await board.vote(article_id, voter) == VoteStatus.VOTED:
                    total_votes += 1

            if (i + 1) % 500 == 0:
                print(f"  {i + 1} articles created")

        stats = await board.stats()
    finally:
        await store.disconnect()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Articles on board: {stats['total_articles']}")
    print(f"  Votes cast: {total_votes}")
    print(f"  Categories: {len(CATEGORIES)}")


def main():
    parser = argparse.ArgumentParser(description="Seed the article board")
    parser.add_argument("--small", action="store_true", help="Use small dataset (100 articles)")
    parser.add_argument("--flush", action="store_true", help="FLUSHDB before seeding")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, flush=args.flush))


if __name__ == "__main__":
    main()
