"""
Video generation step using Luma Dream Machine, keyed on previously
generated images.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from .remote import RemoteJobStep
from ..core.job import GenerationJob, JobKind, JobState, JobStatus
from ..errors import ProviderError


def build_keyframes(image_urls: Sequence[str]) -> Dict[str, Dict[str, str]]:
    """
    Map image URLs to Luma keyframes.

    One entry per URL, labelled ``frame0``, ``frame1``, ... in input order.
    """
    return {
        f"frame{index}": {"type": "image", "url": url}
        for index, url in enumerate(image_urls)
    }


class LumaVideoGeneratorStep(RemoteJobStep[Tuple[str, List[str]], str]):
    """
    Animates a set of images into a video with Luma's generations API.

    Input: Tuple of (video prompt, image URLs to use as keyframes)
    Output: URL of the generated video
    """

    name = "video_generation"
    description = "Generate video using Luma AI"

    kind = JobKind.VIDEO
    label = "Video generation"
    api_key_env = "LUMAAI_API_KEY"

    _GENERATIONS_URL = "https://api.lumalabs.ai/dream-machine/v1/generations"
    _GENERATION_URL = "https://api.lumalabs.ai/dream-machine/v1/generations/{job_id}"

    @property
    def api_key(self) -> Optional[str]:
        return self.config.luma_api_key

    @property
    def poll_interval_sec(self) -> float:
        return self.config.video_poll_interval_sec

    @property
    def max_attempts(self) -> int:
        return self.config.video_max_attempts

    def run(self, input_data: Tuple[str, List[str]]) -> str:
        prompt, image_urls = input_data
        print(f"Generating video with Luma AI using {len(image_urls)} images")
        job = self.submit(prompt, image_urls)
        job = self.wait(job)
        print("Video generation completed successfully.")
        return job.result_assets[0]

    def build_payload(self, prompt: str, image_urls: Sequence[str]) -> Dict[str, Any]:
        return {
            "prompt": prompt,
            "keyframes": build_keyframes(image_urls),
            "aspect_ratio": self.config.aspect_ratio,
            "loop": self.config.loop,
        }

    def submit(self, prompt: str, image_urls: Sequence[str]) -> GenerationJob:
        if not image_urls:
            raise ProviderError("Video generation needs at least one keyframe image")
        data = self._request_json(
            "POST", self._GENERATIONS_URL, json=self.build_payload(prompt, image_urls)
        )
        job_id = data.get("id")
        if not job_id:
            raise ProviderError(f"Luma response missing generation id: {data}")
        print(f"Generated video ID: {job_id}")
        return self._submitted(job_id)

    def poll(self, job_id: str) -> JobState:
        data = self._request_json("GET", self._GENERATION_URL.format(job_id=job_id))
        state = str(data.get("state") or "").lower()

        if state == "failed":
            return JobState(
                JobStatus.FAILED,
                failure_reason=data.get("failure_reason"),
                raw_status=state,
            )
        if state == "completed":
            video_url = (data.get("assets") or {}).get("video")
            if not video_url:
                raise ProviderError(f"Luma generation {job_id} completed without a video")
            return JobState(JobStatus.COMPLETE, assets=(video_url,), raw_status=state)

        return JobState(JobStatus.PENDING, raw_status=state or "unknown")
