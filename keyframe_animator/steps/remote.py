"""
Shared plumbing for steps backed by a job-based remote API.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Dict, Optional

import requests

from .base import PipelineStep, InputT, OutputT
from .polling import poll_until_terminal
from ..config import PipelineConfig
from ..core.job import GenerationJob, JobKind, JobState
from ..errors import ProviderError, TransportError


class RemoteJobStep(PipelineStep[InputT, OutputT]):
    """
    A step that submits one job to a remote API and polls it to completion.

    Subclasses provide ``poll`` and a ``submit`` that returns a
    ``GenerationJob``; ``wait`` runs the shared polling loop with the
    subclass's interval and attempt cap.

    Attributes:
        on_submitted: Called with the job right after submission
    """

    kind: JobKind = JobKind.IMAGE
    label: str = "Generation"
    api_key_env: str = ""

    def __init__(self, config: PipelineConfig, session: Optional[requests.Session] = None):
        super().__init__(config)
        self.session = session or requests.Session()
        self.on_submitted: Optional[Callable[[GenerationJob], None]] = None

    @property
    @abstractmethod
    def api_key(self) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def poll_interval_sec(self) -> float:
        pass

    @property
    @abstractmethod
    def max_attempts(self) -> int:
        pass

    @abstractmethod
    def poll(self, job_id: str) -> JobState:
        """Fetch the current state of a job with a single request."""
        pass

    def wait(self, job: GenerationJob) -> GenerationJob:
        return poll_until_terminal(
            job,
            self.poll,
            interval_sec=self.poll_interval_sec,
            max_attempts=self.max_attempts,
            label=self.label,
        )

    def _submitted(self, job_id: str) -> GenerationJob:
        job = GenerationJob(id=job_id, kind=self.kind)
        if self.on_submitted is not None:
            self.on_submitted(job)
        return job

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ProviderError(
                f"{self.api_key_env} is not set. Add it to the environment or a .env file."
            )
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Perform one request and decode its JSON body."""
        headers = self._headers()
        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.config.request_timeout_sec,
                **kwargs,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise TransportError(
                f"{method} {url} returned {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(f"{method} {url} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(f"{method} {url} returned unexpected payload: {data!r}")
        return data
