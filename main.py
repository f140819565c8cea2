"""Dive - answer a query from a list of candidate pages.

Simple CLI for running one Dive pipeline.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dive.models.interfaces import Candidate
from dive.services.errors import PipelineError
from dive.services.pipeline import DivePipeline


def load_candidates(path: str | None, urls: list[str]) -> list[Candidate]:
    """Read candidates from a JSON file (list of {url, title, snippet}) and/or --url flags."""
    candidates: list[Candidate] = []
    if path:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            raw = raw.get("pages", [])
        for item in raw:
            candidates.append(
                Candidate(
                    url=item.get("url", ""),
                    title=item.get("title", ""),
                    snippet=item.get("snippet"),
                )
            )
    candidates.extend(Candidate(url=url, title=url) for url in urls)
    return candidates


async def run_dive(query: str, candidates: list[Candidate]) -> int:
    """Run the pipeline and print the answer with its sources."""
    print(f"Dive query: {query}")
    print(f"Candidates: {len(candidates)}")
    print("-" * 50)

    pipeline = DivePipeline()
    try:
        result = await pipeline.run(query, candidates)
    except PipelineError as e:
        print(f"\n[!] Error ({e.status_code}): {e.message}")
        return 1

    print(result.answer_text)
    print(f"\n{'='*50}")
    print("SOURCES:")
    for i, source in enumerate(result.sources, 1):
        print(f"  {i}. {source.title or source.url}")
        print(f"     {source.url}")

    meta = result.metadata
    print(f"\n[*] Fetched {meta.pages_acquired}/{meta.candidates_offered} pages")
    print(f"   Fetch: {meta.fetch_duration_ms}ms")
    print(f"   AI: {meta.synthesis_duration_ms}ms")
    print(f"   Total: {meta.total_duration_ms}ms")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Dive answer synthesis")
    parser.add_argument("--query", "-q", required=True, help="Question to answer")
    parser.add_argument("--pages", "-p", help="JSON file with candidate pages")
    parser.add_argument("--url", "-u", action="append", default=[], help="Candidate URL (repeatable)")

    args = parser.parse_args()
    candidates = load_candidates(args.pages, args.url)

    sys.exit(asyncio.run(run_dive(args.query, candidates)))


if __name__ == "__main__":
    main()
