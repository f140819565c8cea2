from __future__ import annotations

import pytest

from dive.models.interfaces import AcquiredPage, Candidate, ModelParams
from dive.services.prompt_builder import ANSWER_INSTRUCTION, SYSTEM_PROMPT, PromptBuilder


def _page(i: int, content: str) -> AcquiredPage:
    return AcquiredPage(candidate=Candidate(url=f"https://example.com/{i}", title=f"P{i}"), content=content)


def test_build_numbers_sources_in_order():
    builder = PromptBuilder(source_chars=1000, extractor_max_chars=2000)

    prompt = builder.build("what is dive?", [_page(1, "alpha"), _page(2, "beta")])

    assert prompt == (
        'Query: "what is dive?"\n\n'
        "Content:\n"
        "Source 1: alpha\n\n"
        "Source 2: beta\n\n"
        "\n\n" + ANSWER_INSTRUCTION
    )


def test_build_truncates_each_source():
    builder = PromptBuilder(source_chars=10, extractor_max_chars=2000)

    prompt = builder.build("q", [_page(1, "a" * 50), _page(2, "b" * 5)])

    assert "Source 1: " + "a" * 10 + "\n\n" in prompt
    assert "a" * 11 not in prompt
    assert "Source 2: bbbbb\n\n" in prompt


def test_build_is_deterministic():
    builder = PromptBuilder(source_chars=1000, extractor_max_chars=2000)
    pages = [_page(1, "alpha"), _page(2, "beta")]

    assert builder.build("q", pages) == builder.build("q", pages)


def test_prompt_cap_must_be_smaller_than_extractor_cap():
    with pytest.raises(ValueError):
        PromptBuilder(source_chars=2000, extractor_max_chars=2000)
    with pytest.raises(ValueError):
        PromptBuilder(source_chars=0, extractor_max_chars=2000)


def test_default_caps_keep_prompt_cap_below_extractor_cap():
    builder = PromptBuilder()

    assert builder.source_chars == 1000


def test_build_request_carries_model_params_and_system_prompt():
    builder = PromptBuilder(source_chars=1000, extractor_max_chars=2000)
    params = ModelParams(max_tokens=400, temperature=0.3)

    request = builder.build_request("q", [_page(1, "alpha")], params)

    assert request.query == "q"
    assert request.system_prompt == SYSTEM_PROMPT
    assert request.model_params == params
    assert "Source 1: alpha" in request.prompt
