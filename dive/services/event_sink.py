from __future__ import annotations

from typing import Any, Protocol

from dive.models.events import EventType, PipelineEvent
from dive.services import logger as log_service


class EventSink(Protocol):
    def emit(self, event: PipelineEvent) -> None: ...


class LoggingEventSink:
    """Writes pipeline analytics events through the structured event log."""

    def emit(self, event: PipelineEvent) -> None:
        log_service.log_event(
            event_type=event.event.value,
            message=f"Dive {event.event.value.replace('_', ' ')}",
            **event.data,
        )


class NullEventSink:
    def emit(self, event: PipelineEvent) -> None:
        return None


class MemoryEventSink:
    """Keeps emitted events in order; handy for inspection in tests and scripts."""

    def __init__(self) -> None:
        self.events: list[PipelineEvent] = []

    def emit(self, event: PipelineEvent) -> None:
        self.events.append(event)

    def types(self) -> list[EventType]:
        return [e.event for e in self.events]


def dive_started(**kwargs: Any) -> PipelineEvent:
    return PipelineEvent(event=EventType.DIVE_STARTED, data=kwargs)


def acquisition_completed(**kwargs: Any) -> PipelineEvent:
    return PipelineEvent(event=EventType.ACQUISITION_COMPLETED, data=kwargs)


def synthesis_completed(**kwargs: Any) -> PipelineEvent:
    return PipelineEvent(event=EventType.SYNTHESIS_COMPLETED, data=kwargs)


def dive_failed(error_type: str, stage: str, **kwargs: Any) -> PipelineEvent:
    return PipelineEvent(
        event=EventType.DIVE_FAILED,
        data={"error_type": error_type, "stage": stage, **kwargs},
    )
