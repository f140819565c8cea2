from __future__ import annotations

import asyncio
import time

import httpx

from dive.config import settings
from dive.models.interfaces import Candidate, FetchOutcome
from dive.services.logger import get_logger
from dive.tools import content_extractor, web_utils


class PageFetcher:
    """Fetch a single candidate page under a hard deadline.

    Every failure mode (bad status, network error, deadline, unusable content)
    comes back as a ``FetchOutcome`` with ``succeeded=False``; ``fetch`` does not
    raise for per-page problems.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = None,
        min_content_chars: int | None = None,
        extractor_max_chars: int | None = None,
        logger=None,
    ):
        self._client = client
        self.user_agent = user_agent or settings.fetch_user_agent
        self.min_content_chars = (
            int(min_content_chars)
            if min_content_chars is not None
            else int(settings.min_content_chars)
        )
        self.extractor_max_chars = (
            int(extractor_max_chars)
            if extractor_max_chars is not None
            else int(settings.extractor_max_chars)
        )
        self._log = logger or get_logger("page_fetcher")

    async def fetch(self, candidate: Candidate, timeout_ms: int) -> FetchOutcome:
        started = time.monotonic()
        content: str | None = None
        reason = ""

        if not web_utils.is_valid_url(candidate.url):
            reason = "invalid url"
        else:
            try:
                html = await asyncio.wait_for(
                    self._get(candidate.url, timeout_ms),
                    timeout=max(timeout_ms, 1) / 1000.0,
                )
                content = content_extractor.extract(
                    html, max_chars=self.extractor_max_chars
                )
            except asyncio.TimeoutError:
                reason = f"timed out after {timeout_ms}ms"
            except httpx.HTTPStatusError as exc:
                reason = f"HTTP {exc.response.status_code}"
            except httpx.HTTPError as exc:
                reason = f"{type(exc).__name__}: {exc}"
            except Exception as exc:
                reason = f"processing failed: {type(exc).__name__}: {exc}"

        duration_ms = int((time.monotonic() - started) * 1000)

        if content is not None and len(content.strip()) <= self.min_content_chars:
            reason = f"content too short ({len(content.strip())} chars)"
            content = None

        if content is None:
            self._log.debug(
                f"Failed to fetch: {candidate.title or candidate.url} ({duration_ms}ms) - {reason}"
            )
            return FetchOutcome(
                candidate=candidate,
                content=None,
                succeeded=False,
                duration_ms=duration_ms,
            )

        self._log.debug(
            f"Successfully fetched: {candidate.title or candidate.url} "
            f"({web_utils.extract_domain(candidate.url)}, {len(content)} chars, {duration_ms}ms)"
        )
        return FetchOutcome(
            candidate=candidate,
            content=content,
            succeeded=True,
            duration_ms=duration_ms,
        )

    async def _get(self, url: str, timeout_ms: int) -> str:
        headers = {"User-Agent": self.user_agent}
        if self._client is not None:
            response = await self._client.get(url, headers=headers)
            response.raise_for_status()
            return response.text

        timeout_seconds = max(timeout_ms / 1000.0, 0.001)
        async with httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
        ) as client:
            response = await client.get(url, headers=headers)
            response.raise_for_status()
            return response.text
