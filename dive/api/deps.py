from __future__ import annotations

from functools import lru_cache

from dive.config import settings
from dive.services.pipeline import DivePipeline
from dive.services.session_gate import AllowAllSessionGate, InMemorySessionGate, SessionGate


def get_pipeline() -> DivePipeline:
    """Build a fresh pipeline per request; no state is shared across runs."""
    return DivePipeline()


@lru_cache(maxsize=1)
def get_session_gate() -> SessionGate:
    if not settings.session_gate_enabled:
        return AllowAllSessionGate()
    gate = InMemorySessionGate()
    for token in settings.session_tokens.split(","):
        if token.strip():
            gate.register(token.strip())
    return gate
