from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dive.models.interfaces import Candidate, PipelineResponse


# --- Requests ---


class PageCandidate(BaseModel):
    url: str
    title: str = ""
    snippet: str | None = None

    def to_candidate(self) -> Candidate:
        return Candidate(url=self.url, title=self.title, snippet=self.snippet)


class DiveRequest(BaseModel):
    # Missing fields are rejected by the pipeline with a 400, not by FastAPI with a 422.
    query: str = ""
    pages: list[PageCandidate] = Field(default_factory=list)


# --- Responses ---


class SourceInfo(BaseModel):
    # Dropped from the JSON body when the candidate had no snippet.
    url: str
    title: str
    description: str | None = None


class DiveMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_duration: int = Field(serialization_alias="totalDuration")
    fetch_duration: int = Field(serialization_alias="fetchDuration")
    ai_duration: int = Field(serialization_alias="aiDuration")
    pages_attempted: int = Field(serialization_alias="pagesAttempted")
    pages_successful: int = Field(serialization_alias="pagesSuccessful")


class DiveResponse(BaseModel):
    response: str
    sources: list[SourceInfo]
    metadata: DiveMetadata

    @classmethod
    def from_pipeline(cls, result: PipelineResponse) -> "DiveResponse":
        meta = result.metadata
        return cls(
            response=result.answer_text,
            sources=[
                SourceInfo(url=s.url, title=s.title, description=s.description)
                for s in result.sources
            ],
            metadata=DiveMetadata(
                total_duration=meta.total_duration_ms,
                fetch_duration=meta.fetch_duration_ms,
                ai_duration=meta.synthesis_duration_ms,
                pages_attempted=meta.candidates_offered,
                pages_successful=meta.pages_acquired,
            ),
        )


class ErrorResponse(BaseModel):
    error: str
