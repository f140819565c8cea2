from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    DIVE_STARTED = "dive_started"
    ACQUISITION_COMPLETED = "acquisition_completed"
    SYNTHESIS_COMPLETED = "synthesis_completed"
    DIVE_FAILED = "dive_failed"


@dataclass
class PipelineEvent:
    event: EventType
    data: dict[str, Any] = field(default_factory=dict)
