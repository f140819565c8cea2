from __future__ import annotations

from unittest.mock import patch

from dive.models.events import EventType
from dive.services import event_sink


def test_logging_sink_writes_event_log():
    sink = event_sink.LoggingEventSink()

    with patch("dive.services.event_sink.log_service.log_event") as log_event:
        sink.emit(event_sink.acquisition_completed(pages_acquired=2, phases_run=1))

    log_event.assert_called_once_with(
        event_type="acquisition_completed",
        message="Dive acquisition completed",
        pages_acquired=2,
        phases_run=1,
    )


def test_dive_failed_carries_error_type_and_stage():
    event = event_sink.dive_failed(error_type="SynthesisError", stage="synthesizing", model="m")

    assert event.event == EventType.DIVE_FAILED
    assert event.data == {"error_type": "SynthesisError", "stage": "synthesizing", "model": "m"}


def test_memory_sink_keeps_order():
    sink = event_sink.MemoryEventSink()
    sink.emit(event_sink.dive_started(query_length=3))
    sink.emit(event_sink.synthesis_completed(sources_count=1))

    assert sink.types() == [EventType.DIVE_STARTED, EventType.SYNTHESIS_COMPLETED]


def test_null_sink_ignores_events():
    assert event_sink.NullEventSink().emit(event_sink.dive_started()) is None
