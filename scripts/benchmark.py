"""
Load benchmark for the article board API.

Runs a write phase (submit articles, then cast votes from many users
concurrently) followed by a read phase over the ranked listings, and
reports latency alongside the ``X-Store-Roundtrips`` header so that
pipelining regressions show up as a round-trip count that grows with
the result size.
"""
import asyncio
import argparse
import statistics
import time
import uuid

import httpx

DEFAULT_BASE_URL = "http://localhost:8000"

READ_PATHS = [
    "/api/v1/articles?order=latest&limit=25",
    "/api/v1/articles?order=score&limit=100",
    "/api/v1/articles/all",
    "/api/v1/categories/benchmark/articles",
]


async def _timed(request) -> tuple[httpx.Response, float]:
    start = time.perf_counter()
    resp = await request
    return resp, (time.perf_counter() - start) * 1000


def _summary(label: str, samples: list[float], trips: list[int], failures: int) -> str:
    if not samples:
        return f"{label:<42} all requests failed"
    ordered = sorted(samples)
    p95 = ordered[min(len(ordered) - 1, int(len(ordered) * 0.95))]
    trip_text = f"{statistics.mean(trips):.1f}" if trips else "-"
    return (
        f"{label:<42} n={len(samples):<5} mean={statistics.mean(samples):6.1f}ms "
        f"p95={p95:6.1f}ms trips={trip_text:<5} failed={failures}"
    )


async def write_phase(client: httpx.AsyncClient, articles: int, voters: int) -> list[int]:
    """Submit *articles* articles, file them under a category and vote on them."""
    run = uuid.uuid4().hex[:8]
    submit_times, vote_times = [], []
    failures = 0
    ids: list[int] = []

    for i in range(articles):
        resp, ms = await _timed(client.post("/api/v1/articles", json={
            "author": f"bench-{run}-author",
            "title": f"Benchmark article {i}",
            "link": f"https://example.com/bench/{run}/{i}",
        }))
        if resp.status_code != 201:
            failures += 1
            continue
        submit_times.append(ms)
        ids.append(resp.json()["id"])
        await client.put(f"/api/v1/categories/benchmark/articles/{ids[-1]}")
    print(_summary("POST /api/v1/articles", submit_times, [], failures))

    failures = 0
    votes = [
        client.post(f"/api/v1/articles/{article_id}/votes", json={"user": f"bench-{run}-{n}"})
        for article_id in ids
        for n in range(voters)
    ]
    for resp, ms in await asyncio.gather(*(_timed(v) for v in votes)):
        if resp.status_code == 200:
            vote_times.append(ms)
        else:
            failures += 1
    print(_summary("POST /api/v1/articles/{id}/votes", vote_times, [], failures))
    return ids


async def read_phase(client: httpx.AsyncClient, iterations: int) -> None:
    for path in READ_PATHS:
        samples, trips = [], []
        failures = 0
        for _ in range(iterations):
            resp, ms = await _timed(client.get(path))
            if resp.status_code != 200:
                failures += 1
                continue
            samples.append(ms)
            if "x-store-roundtrips" in resp.headers:
                trips.append(int(resp.headers["x-store-roundtrips"]))
        print(_summary(f"GET {path}", samples, trips, failures))


async def run_benchmark(base_url: str, iterations: int, articles: int, voters: int) -> None:
    async with httpx.AsyncClient(base_url=base_url, timeout=10) as client:
        try:
            health = (await client.get("/health")).json()
        except httpx.HTTPError as exc:
            print(f"ERROR: cannot reach {base_url}: {exc}")
            return
        print(f"Target {base_url} ({health})")

        print("\n-- write phase --")
        await write_phase(client, articles, voters)
        print("\n-- read phase --")
        await read_phase(client, iterations)


def main():
    parser = argparse.ArgumentParser(description="Benchmark the article board API")
    parser.add_argument("-n", "--iterations", type=int, default=50, help="Requests per read endpoint")
    parser.add_argument("--articles", type=int, default=20, help="Articles submitted in the write phase")
    parser.add_argument("--voters", type=int, default=10, help="Distinct voters per article")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    args = parser.parse_args()
    asyncio.run(run_benchmark(args.base_url, args.iterations, args.articles, args.voters))


if __name__ == "__main__":
    main()
