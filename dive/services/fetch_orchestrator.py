"""Two-phase bounded acquisition of candidate page content."""
from __future__ import annotations

import asyncio
from typing import Protocol, Sequence

from dive.config import settings
from dive.models.interfaces import (
    AcquiredPage,
    AcquisitionResult,
    Candidate,
    FetchOutcome,
)
from dive.services.logger import get_logger


class Fetcher(Protocol):
    async def fetch(self, candidate: Candidate, timeout_ms: int) -> FetchOutcome: ...


def _successes(outcomes: Sequence[FetchOutcome]) -> list[AcquiredPage]:
    """Stable filter: keeps the batch (input) order of successful outcomes."""
    return [
        AcquiredPage(candidate=o.candidate, content=o.content)
        for o in outcomes
        if o.succeeded and o.content
    ]


class FetchOrchestrator:
    """Acquire usable pages in at most two concurrent rounds.

    Phase 1 fetches the first ``max_concurrency`` candidates as one batch. If that
    yields fewer than ``target_count`` pages, phase 2 fetches up to
    ``needed * overfetch_factor`` of the remaining candidates. Each batch is
    awaited as a whole; there is no retry and no third phase.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        timeout_ms: int | None = None,
        overfetch_factor: int | None = None,
        logger=None,
    ):
        self.fetcher = fetcher
        self.timeout_ms = (
            int(timeout_ms) if timeout_ms is not None else int(settings.fetch_timeout_ms)
        )
        self.overfetch_factor = (
            int(overfetch_factor)
            if overfetch_factor is not None
            else int(settings.overfetch_factor)
        )
        if self.overfetch_factor < 1:
            raise ValueError("overfetch_factor must be >= 1")
        self._log = logger or get_logger("fetch_orchestrator")

    async def _fetch_batch(self, batch: Sequence[Candidate]) -> list[FetchOutcome]:
        if not batch:
            return []
        return list(
            await asyncio.gather(
                *(self.fetcher.fetch(candidate, self.timeout_ms) for candidate in batch)
            )
        )

    async def acquire(
        self,
        candidates: Sequence[Candidate],
        target_count: int = 2,
        max_concurrency: int = 4,
    ) -> AcquisitionResult:
        if target_count < 1:
            raise ValueError("target_count must be >= 1")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")

        candidates = list(candidates)
        self._log.debug(f"Starting fetch for {len(candidates)} candidate pages")

        # Phase 1
        first_batch = candidates[:max_concurrency]
        pages = _successes(await self._fetch_batch(first_batch))
        result = AcquisitionResult(attempted=len(first_batch), phases_run=1)

        if len(pages) >= target_count:
            self._log.debug(f"Got {len(pages)} pages from first batch")
            result.pages = pages[:target_count]
            return result

        # Phase 2
        remaining = candidates[max_concurrency:]
        if remaining:
            needed = target_count - len(pages)
            second_batch = remaining[: needed * self.overfetch_factor]
            self._log.debug(
                f"Need {needed} more pages, trying {len(second_batch)} remaining candidates"
            )
            fallback_pages = _successes(await self._fetch_batch(second_batch))
            pages.extend(fallback_pages[:needed])
            result.attempted += len(second_batch)
            result.phases_run = 2

        self._log.debug(f"Final result: {len(pages)} pages successfully fetched")
        result.pages = pages
        return result
