from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline-level failures that become user-visible errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PipelineError):
    status_code = 400


class AcquisitionError(PipelineError):
    status_code = 500


class SynthesisError(PipelineError):
    status_code = 500
