"""
In-memory record of a single pipeline invocation.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .job import GenerationJob


class RunState(str, Enum):
    START = "start"
    IMAGE_SUBMITTED = "image_submitted"
    IMAGE_POLLING = "image_polling"
    IMAGES_DOWNLOADED = "images_downloaded"
    VIDEO_SUBMITTED = "video_submitted"
    VIDEO_POLLING = "video_polling"
    VIDEO_DOWNLOADED = "video_downloaded"
    COMPOSED = "composed"
    RELOCATED = "relocated"
    DONE = "done"
    FAILED = "failed"


# Linear order of the happy path; FAILED is reachable from any of these but DONE.
RUN_ORDER = [
    RunState.START,
    RunState.IMAGE_SUBMITTED,
    RunState.IMAGE_POLLING,
    RunState.IMAGES_DOWNLOADED,
    RunState.VIDEO_SUBMITTED,
    RunState.VIDEO_POLLING,
    RunState.VIDEO_DOWNLOADED,
    RunState.COMPOSED,
    RunState.RELOCATED,
    RunState.DONE,
]


@dataclass
class PipelineRun:
    """
    Aggregate of one image job, one video job, one composition and one
    final path.

    Attributes:
        state: Current state of the run
        history: Every state the run has entered, in order
        error: The error that stopped the run, if any
    """

    state: RunState = RunState.START
    history: List[RunState] = field(default_factory=lambda: [RunState.START])
    image_job: Optional[GenerationJob] = None
    video_job: Optional[GenerationJob] = None
    image_paths: List[Path] = field(default_factory=list)
    video_path: Optional[Path] = None
    composed_path: Optional[Path] = None
    final_path: Optional[Path] = None
    error: Optional[BaseException] = None

    def advance(self, state: RunState) -> "PipelineRun":
        """Move to the next state of the linear order. Returns self for chaining."""
        if self.state not in RUN_ORDER or self.state is RunState.DONE:
            raise RuntimeError(f"Cannot advance a run that is {self.state.value}")
        expected = RUN_ORDER[RUN_ORDER.index(self.state) + 1]
        if state is not expected:
            raise RuntimeError(
                f"Invalid transition {self.state.value} -> {state.value} "
                f"(expected {expected.value})"
            )
        self.state = state
        self.history.append(state)
        return self

    def fail(self, error: BaseException) -> "PipelineRun":
        """Mark the run as failed. Returns self for chaining."""
        if self.is_finished:
            raise RuntimeError(f"Cannot fail a run that is {self.state.value}")
        self.error = error
        self.state = RunState.FAILED
        self.history.append(RunState.FAILED)
        return self

    @property
    def is_finished(self) -> bool:
        return self.state in (RunState.DONE, RunState.FAILED)

    def __repr__(self) -> str:
        return f"PipelineRun(state='{self.state.value}')"
