"""
Fixed-interval polling of remote generation jobs.
"""

import time
from typing import Callable

from ..core.job import GenerationJob, JobState, JobStatus
from ..errors import JobTimeoutError, ProviderError


def poll_until_terminal(
    job: GenerationJob,
    poll: Callable[[str], JobState],
    interval_sec: float,
    max_attempts: int,
    label: str = "Generation",
) -> GenerationJob:
    """
    Poll a job until the provider reports it complete or failed.

    Args:
        job: Freshly submitted job; updated in place on every poll
        poll: One synchronous status request for a job id
        interval_sec: Wait between two polls
        max_attempts: Hard cap on the number of polls
        label: Prefix for progress messages

    Returns:
        The completed job; its ``result_assets`` are readable

    Raises:
        ProviderError: The provider reported the job as failed
        JobTimeoutError: The job was still pending after ``max_attempts`` polls
    """
    for attempt in range(1, max_attempts + 1):
        state = poll(job.id)
        job.update(state)
        print(f"{label} status: {state.raw_status or state.status.value}")

        if state.status is JobStatus.COMPLETE:
            return job
        if state.status is JobStatus.FAILED:
            reason = state.failure_reason or "no reason given"
            raise ProviderError(f"{label} failed: {reason}", reason=state.failure_reason)

        if attempt < max_attempts:
            time.sleep(interval_sec)

    raise JobTimeoutError(
        f"{label} exceeded maximum attempts ({max_attempts})",
        attempts=max_attempts,
    )
