"""
Image generation step using Leonardo AI (remote diffusion).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .remote import RemoteJobStep
from ..core.job import GenerationJob, JobKind, JobState, JobStatus
from ..errors import ProviderError


class LeonardoImageGeneratorStep(RemoteJobStep[str, List[str]]):
    """
    Generates a set of images from one prompt with Leonardo's hosted API.

    Input: Image prompt
    Output: URLs of the generated images, in the order Leonardo lists them
    """

    name = "image_generation"
    description = "Generate images using Leonardo AI"

    kind = JobKind.IMAGE
    label = "Image generation"
    api_key_env = "LEONARDOAI_API_KEY"

    _GENERATIONS_URL = "https://cloud.leonardo.ai/api/rest/v1/generations"
    _GENERATION_URL = "https://cloud.leonardo.ai/api/rest/v1/generations/{job_id}"

    @property
    def api_key(self) -> Optional[str]:
        return self.config.leonardo_api_key

    @property
    def poll_interval_sec(self) -> float:
        return self.config.image_poll_interval_sec

    @property
    def max_attempts(self) -> int:
        return self.config.image_max_attempts

    def run(self, prompt: str) -> List[str]:
        job = self.submit(prompt)
        job = self.wait(job)
        urls = list(job.result_assets)
        print(f"Generated {len(urls)} images (Leonardo)")
        return urls

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        width, height = self.config.image_size
        return {
            "modelId": self.config.leonardo_model_id,
            "prompt": prompt,
            "width": width,
            "height": height,
            "num_images": self.config.num_images,
        }

    def submit(self, prompt: str) -> GenerationJob:
        data = self._request_json("POST", self._GENERATIONS_URL, json=self.build_payload(prompt))
        job_id = (data.get("sdGenerationJob") or {}).get("generationId")
        if not job_id:
            raise ProviderError(f"Leonardo response missing generation id: {data}")
        print(f"Generated image ID: {job_id}")
        return self._submitted(job_id)

    def poll(self, job_id: str) -> JobState:
        data = self._request_json("GET", self._GENERATION_URL.format(job_id=job_id))
        generation = data.get("generations_by_pk")
        if not isinstance(generation, dict):
            raise ProviderError(f"Leonardo response missing generation {job_id}: {data}")

        raw_status = str(generation.get("status") or "")
        status = raw_status.upper()

        if status == "FAILED":
            return JobState(
                JobStatus.FAILED,
                failure_reason="Image generation failed",
                raw_status=raw_status,
            )
        if status == "COMPLETE":
            urls = [
                image["url"]
                for image in generation.get("generated_images") or []
                if isinstance(image, dict) and image.get("url")
            ]
            # COMPLETE with no images yet counts as pending
            if urls:
                return JobState(JobStatus.COMPLETE, assets=tuple(urls), raw_status=raw_status)

        return JobState(JobStatus.PENDING, raw_status=raw_status or "unknown")
