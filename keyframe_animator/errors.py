"""
Exception types raised by the pipeline steps.

Every error carries the name of the stage that raised it once it has
passed through ``PipelineStep.execute``.
"""

from typing import Optional


class PipelineError(RuntimeError):
    """Base class for all pipeline failures."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class TransportError(PipelineError):
    """Network failure or non-2xx response from a remote API."""

    def __init__(self, message: str, stage: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, stage)
        self.status_code = status_code


class ProviderError(PipelineError):
    """The remote provider reported the job as failed or returned an unusable payload."""

    def __init__(self, message: str, stage: Optional[str] = None, reason: Optional[str] = None):
        super().__init__(message, stage)
        self.reason = reason


class JobTimeoutError(PipelineError):
    """A job stayed pending for longer than the allowed number of polls."""

    def __init__(self, message: str, stage: Optional[str] = None, attempts: int = 0):
        super().__init__(message, stage)
        self.attempts = attempts


class FilesystemError(PipelineError):
    """Writing, creating or moving a local file failed."""


class CompositionError(PipelineError):
    """The external transcoder failed or produced no output."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message, stage)
        self.returncode = returncode
        self.stderr = stderr
