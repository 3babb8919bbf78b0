"""
Remote generation job tracking.

A ``GenerationJob`` mirrors one job on a remote generative API. It is
created on submission, mutated only by poll results and lives for the
duration of the process.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class JobKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class JobStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PENDING


@dataclass(frozen=True)
class JobState:
    """Result of a single status poll."""

    status: JobStatus
    assets: Tuple[str, ...] = ()
    failure_reason: Optional[str] = None
    raw_status: Optional[str] = None


@dataclass
class GenerationJob:
    """
    Tracks the status of a remote generation job.

    ``result_assets`` is only readable once the job has been observed
    as complete.
    """

    id: str
    kind: JobKind
    status: JobStatus = JobStatus.PENDING
    failure_reason: Optional[str] = None
    polls: int = 0
    _assets: Tuple[str, ...] = field(default=(), repr=False)

    def update(self, state: JobState) -> "GenerationJob":
        """Apply a poll result. Returns self for chaining."""
        if self.status.is_terminal:
            raise RuntimeError(f"Job {self.id} is already {self.status.value}")
        self.polls += 1
        self.status = state.status
        if state.status is JobStatus.COMPLETE:
            self._assets = tuple(state.assets)
        elif state.status is JobStatus.FAILED:
            self.failure_reason = state.failure_reason
        return self

    @property
    def result_assets(self) -> Tuple[str, ...]:
        if self.status is not JobStatus.COMPLETE:
            raise RuntimeError(
                f"Job {self.id} has no assets while {self.status.value}"
            )
        return self._assets

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def __repr__(self) -> str:
        return f"GenerationJob(id='{self.id}', kind='{self.kind.value}', status='{self.status.value}')"
