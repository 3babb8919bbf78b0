"""
Core data model for the Keyframe Animator pipeline.
"""

from .job import GenerationJob, JobKind, JobState, JobStatus
from .run import PipelineRun, RunState

__all__ = [
    "GenerationJob",
    "JobKind",
    "JobState",
    "JobStatus",
    "PipelineRun",
    "RunState",
]
