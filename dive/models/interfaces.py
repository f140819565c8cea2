from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Candidate:
    url: str
    title: str = ""
    snippet: str | None = None


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    candidate: Candidate
    content: str | None
    succeeded: bool
    duration_ms: int


@dataclass(frozen=True, slots=True)
class AcquiredPage:
    candidate: Candidate
    content: str


@dataclass(slots=True)
class AcquisitionResult:
    pages: list[AcquiredPage] = field(default_factory=list)
    attempted: int = 0
    phases_run: int = 0


@dataclass(frozen=True, slots=True)
class ModelParams:
    max_tokens: int = 400
    temperature: float = 0.3


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    query: str
    prompt: str
    system_prompt: str
    model_params: ModelParams


@dataclass(frozen=True, slots=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True, slots=True)
class CompletionResult:
    text: str | None
    token_usage: TokenUsage = field(default_factory=TokenUsage)


@dataclass(frozen=True, slots=True)
class SourceRef:
    url: str
    title: str
    description: str | None


@dataclass(frozen=True, slots=True)
class PipelineMetadata:
    total_duration_ms: int
    fetch_duration_ms: int
    synthesis_duration_ms: int
    candidates_offered: int
    pages_acquired: int


@dataclass(frozen=True, slots=True)
class PipelineResponse:
    answer_text: str
    sources: list[SourceRef]
    metadata: PipelineMetadata
