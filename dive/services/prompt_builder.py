from __future__ import annotations

from typing import Sequence

from dive.config import settings
from dive.models.interfaces import AcquiredPage, ModelParams, SynthesisRequest

SYSTEM_PROMPT = (
    "You are an AI assistant for Tekir Dive mode. Provide concise, accurate answers "
    "based on web sources. Be direct and helpful. Do not use markdown, do not offer "
    "to answer a second question. Keep the answer short and understandable."
)

ANSWER_INSTRUCTION = "Provide a concise, accurate answer based on the above sources."


class PromptBuilder:
    def __init__(
        self,
        *,
        source_chars: int | None = None,
        extractor_max_chars: int | None = None,
    ):
        self.source_chars = (
            int(source_chars)
            if source_chars is not None
            else int(settings.prompt_source_chars)
        )
        extractor_cap = (
            int(extractor_max_chars)
            if extractor_max_chars is not None
            else int(settings.extractor_max_chars)
        )
        if self.source_chars <= 0:
            raise ValueError("source_chars must be positive")
        if self.source_chars >= extractor_cap:
            raise ValueError(
                f"source_chars ({self.source_chars}) must be smaller than the "
                f"extractor cap ({extractor_cap})"
            )

    def build(self, query: str, pages: Sequence[AcquiredPage]) -> str:
        context = "".join(
            f"Source {index}: {page.content[: self.source_chars]}\n\n"
            for index, page in enumerate(pages, 1)
        )
        return f'Query: "{query}"\n\nContent:\n{context}\n\n{ANSWER_INSTRUCTION}'

    def build_request(
        self,
        query: str,
        pages: Sequence[AcquiredPage],
        model_params: ModelParams,
    ) -> SynthesisRequest:
        return SynthesisRequest(
            query=query,
            prompt=self.build(query, pages),
            system_prompt=SYSTEM_PROMPT,
            model_params=model_params,
        )
