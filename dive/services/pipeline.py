"""Dive pipeline controller: validate, acquire, synthesize, respond."""
from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from dive.config import settings
from dive.models.events import PipelineEvent
from dive.models.interfaces import (
    AcquisitionResult,
    Candidate,
    CompletionResult,
    ModelParams,
    PipelineMetadata,
    PipelineResponse,
    SourceRef,
)
from dive.services import event_sink, synthesis
from dive.services.errors import AcquisitionError, SynthesisError, ValidationError
from dive.services.event_sink import EventSink, LoggingEventSink
from dive.services.fetch_orchestrator import FetchOrchestrator
from dive.services.logger import get_logger
from dive.services.prompt_builder import PromptBuilder
from dive.services.synthesis import SynthesisClient
from dive.tools.page_fetcher import PageFetcher

MISSING_INPUT_MESSAGE = "Missing query or pages for Dive mode."
NO_CONTENT_MESSAGE = "Could not fetch meaningful content from any of the provided URLs."
FALLBACK_ANSWER = "The AI could not generate a response based on the provided content."


class PipelineState(str, Enum):
    VALIDATING = "validating"
    ACQUIRING = "acquiring"
    SYNTHESIZING = "synthesizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    target_count: int = 2
    max_concurrency: int = 4
    overfetch_factor: int = 2
    timeout_ms: int = 3000
    min_content_chars: int = 100
    extractor_max_chars: int = 2000
    prompt_source_chars: int = 1000
    max_tokens: int = 400
    temperature: float = 0.3
    model: str | None = None

    @classmethod
    def from_settings(cls) -> "PipelineConfig":
        return cls(
            target_count=settings.target_pages,
            max_concurrency=settings.max_concurrent_fetches,
            overfetch_factor=settings.overfetch_factor,
            timeout_ms=settings.fetch_timeout_ms,
            min_content_chars=settings.min_content_chars,
            extractor_max_chars=settings.extractor_max_chars,
            prompt_source_chars=settings.prompt_source_chars,
            max_tokens=settings.synthesis_max_tokens,
            temperature=settings.synthesis_temperature,
            model=settings.dive_model,
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class DivePipeline:
    """Runs one Dive request end to end.

    The controller walks ``validating -> acquiring -> synthesizing -> done``.
    Zero acquired pages and completion failures end in ``failed`` and raise a
    ``PipelineError`` subclass; per-page fetch failures never surface here.
    """

    def __init__(
        self,
        *,
        config: PipelineConfig | None = None,
        orchestrator: FetchOrchestrator | None = None,
        prompt_builder: PromptBuilder | None = None,
        synthesis_client: SynthesisClient | None = None,
        sink: EventSink | None = None,
        logger=None,
    ):
        self.config = config or PipelineConfig.from_settings()
        self._log = logger or get_logger("pipeline")
        self.orchestrator = orchestrator or FetchOrchestrator(
            PageFetcher(
                min_content_chars=self.config.min_content_chars,
                extractor_max_chars=self.config.extractor_max_chars,
                logger=self._log,
            ),
            timeout_ms=self.config.timeout_ms,
            overfetch_factor=self.config.overfetch_factor,
            logger=self._log,
        )
        self.prompt_builder = prompt_builder or PromptBuilder(
            source_chars=self.config.prompt_source_chars,
            extractor_max_chars=self.config.extractor_max_chars,
        )
        self._synthesis_client = synthesis_client
        self.sink = sink or LoggingEventSink()
        self.state = PipelineState.VALIDATING

    @property
    def synthesis_client(self) -> SynthesisClient:
        if self._synthesis_client is None:
            self._synthesis_client = synthesis.client(self.config.model)
        return self._synthesis_client

    def _model_name(self) -> str:
        model = getattr(self._synthesis_client, "model", None)
        if isinstance(model, str):
            return model
        return self.config.model or settings.dive_model

    def _emit(self, event: PipelineEvent) -> None:
        try:
            self.sink.emit(event)
        except Exception as exc:
            self._log.warning(f"Failed to emit {event.event.value} event: {exc}")

    def _validate(self, query: str, candidates: Sequence[Candidate]) -> None:
        self.state = PipelineState.VALIDATING
        if not query or not query.strip() or not candidates:
            raise ValidationError(MISSING_INPUT_MESSAGE)
        if any(not c.url or not c.url.strip() for c in candidates):
            raise ValidationError("Every page must include a url.")

    async def _acquire(self, candidates: Sequence[Candidate]) -> AcquisitionResult:
        self.state = PipelineState.ACQUIRING
        result = await self.orchestrator.acquire(
            candidates,
            target_count=self.config.target_count,
            max_concurrency=self.config.max_concurrency,
        )
        if not result.pages:
            raise AcquisitionError(NO_CONTENT_MESSAGE)
        return result

    async def _synthesize(self, query: str, acquisition: AcquisitionResult) -> CompletionResult:
        self.state = PipelineState.SYNTHESIZING
        request = self.prompt_builder.build_request(
            query,
            acquisition.pages,
            ModelParams(
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            ),
        )
        try:
            completion = await self.synthesis_client.complete(
                request.system_prompt,
                request.prompt,
                request.model_params.max_tokens,
                request.model_params.temperature,
            )
        except SynthesisError:
            raise
        except Exception as exc:
            raise SynthesisError(str(exc) or "Synthesis failed") from exc

        if not isinstance(completion, CompletionResult):
            raise SynthesisError("Completion service returned a malformed response")
        if completion.text is not None and not isinstance(completion.text, str):
            raise SynthesisError("Completion service returned a malformed response")
        return completion

    async def run(self, query: str, candidates: Sequence[Candidate]) -> PipelineResponse:
        candidates = list(candidates)
        self._validate(query, candidates)

        started = time.monotonic()
        self._log.debug(f"Processing query with {len(candidates)} candidate pages")
        self._emit(
            event_sink.dive_started(
                query_length=len(query),
                candidates_offered=len(candidates),
            )
        )

        try:
            fetch_started = time.monotonic()
            acquisition = await self._acquire(candidates)
            fetch_ms = _elapsed_ms(fetch_started)
            self._log.debug(
                f"Page fetching completed: {len(acquisition.pages)}/{len(candidates)} pages in {fetch_ms}ms"
            )
            self._emit(
                event_sink.acquisition_completed(
                    pages_acquired=len(acquisition.pages),
                    pages_attempted=acquisition.attempted,
                    phases_run=acquisition.phases_run,
                    fetch_duration_ms=fetch_ms,
                )
            )

            synthesis_started = time.monotonic()
            completion = await self._synthesize(query, acquisition)
            synthesis_ms = _elapsed_ms(synthesis_started)
        except Exception as exc:
            stage = self.state.value
            self.state = PipelineState.FAILED
            self._log.warning(
                f"Dive failed during {stage} after {_elapsed_ms(started)}ms: {exc}"
            )
            self._emit(
                event_sink.dive_failed(
                    error_type=type(exc).__name__,
                    stage=stage,
                    model=self._model_name(),
                )
            )
            raise

        answer = completion.text or ""
        if not answer.strip():
            answer = FALLBACK_ANSWER

        total_ms = fetch_ms + synthesis_ms
        self._log.debug(f"AI completed in {synthesis_ms}ms, total {total_ms}ms")
        self._emit(
            event_sink.synthesis_completed(
                model=self._model_name(),
                query_length=len(query),
                response_length=len(answer),
                response_time_ms=total_ms,
                sources_count=len(acquisition.pages),
                input_tokens=completion.token_usage.input_tokens,
                output_tokens=completion.token_usage.output_tokens,
            )
        )

        self.state = PipelineState.DONE
        return PipelineResponse(
            answer_text=answer,
            sources=[
                SourceRef(
                    url=page.candidate.url,
                    title=page.candidate.title,
                    description=page.candidate.snippet,
                )
                for page in acquisition.pages
            ],
            metadata=PipelineMetadata(
                total_duration_ms=total_ms,
                fetch_duration_ms=fetch_ms,
                synthesis_duration_ms=synthesis_ms,
                candidates_offered=len(candidates),
                pages_acquired=len(acquisition.pages),
            ),
        )
