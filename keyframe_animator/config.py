"""
Configuration dataclass for the Keyframe Animator pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import os


DEFAULT_IMAGE_PROMPT = (
    "A scene depicting Thanos selecting fruits at a bustling market. "
    "The first image shows Thanos examining a ripe apple, his expression thoughtful. "
    "The second image captures him choosing a bunch of bananas, smiling slightly. "
    "The third image features Thanos inspecting a watermelon, appearing pleased. "
    "The fourth image portrays him placing the selected fruits into a basket, content with his choices. "
    "Each image should be detailed, showcasing Thanos's distinctive features and the vibrant market surroundings."
)

DEFAULT_VIDEO_PROMPT = (
    "A short video featuring Thanos at a lively market. "
    "The video begins with Thanos thoughtfully examining a ripe apple, then transitions to him "
    "selecting a bunch of bananas with a slight smile. Next, it shows him inspecting a watermelon, "
    "appearing pleased. Finally, the video concludes with Thanos placing the selected fruits into a "
    "basket, content with his choices. The video should capture the essence of each moment, "
    "highlighting Thanos's expressions and the dynamic market environment."
)


def default_destination_dir() -> Path:
    """The user's Desktop directory."""
    return Path.home() / "Desktop"


@dataclass
class PipelineConfig:
    """
    Configuration for the Keyframe Animator pipeline.

    All settings can be overridden via CLI arguments or by passing
    values directly when instantiating. API keys fall back to the
    ``LEONARDOAI_API_KEY`` and ``LUMAAI_API_KEY`` environment variables.
    """

    # Credentials
    leonardo_api_key: Optional[str] = None
    luma_api_key: Optional[str] = None

    # Prompts
    image_prompt: str = DEFAULT_IMAGE_PROMPT
    video_prompt: str = DEFAULT_VIDEO_PROMPT

    # Image generation (Leonardo)
    leonardo_model_id: str = "1e60896f-3c26-4296-8ecc-53e2afecc132"
    image_size: Tuple[int, int] = (512, 512)  # width, height
    num_images: int = 4
    image_poll_interval_sec: float = 10.0
    image_max_attempts: int = 50

    # Video generation (Luma)
    aspect_ratio: str = "16:9"
    loop: bool = False
    video_poll_interval_sec: float = 3.0
    video_max_attempts: int = 200

    # Input/Output paths
    work_dir: Path = field(default_factory=lambda: Path("output"))
    captions_file: Path = field(default_factory=lambda: Path("captions.srt"))
    voiceover_file: Path = field(default_factory=lambda: Path("voiceover.mp3"))
    destination_dir: Path = field(default_factory=default_destination_dir)
    image_file_template: str = "image_{number}.png"
    video_file_name: str = "generated_video.mp4"
    composed_file_name: str = "generated_video_with_captions_and_voiceover.mp4"
    final_video_name: str = "final_video.mp4"

    # Transcoding
    ffmpeg_path: str = "ffmpeg"
    video_codec: str = "libx264"
    audio_codec: str = "aac"

    # Network
    request_timeout_sec: float = 30.0
    download_timeout_sec: float = 120.0

    def __post_init__(self):
        """Convert string paths to Path objects and resolve them."""
        for name in ("work_dir", "captions_file", "voiceover_file", "destination_dir"):
            value = getattr(self, name)
            if isinstance(value, str):
                value = Path(value)
            setattr(self, name, value.expanduser().resolve())

        if self.leonardo_api_key is None:
            self.leonardo_api_key = os.environ.get("LEONARDOAI_API_KEY")

        if self.luma_api_key is None:
            self.luma_api_key = os.environ.get("LUMAAI_API_KEY")

        if self.image_max_attempts < 1 or self.video_max_attempts < 1:
            raise ValueError("Max poll attempts must be at least 1")

        if self.image_poll_interval_sec < 0 or self.video_poll_interval_sec < 0:
            raise ValueError("Poll intervals must not be negative")

        if self.num_images < 1:
            raise ValueError("Number of images must be at least 1")

    def image_path(self, index: int) -> Path:
        """Local path for the image at ``index`` (0-based) of the image job."""
        return self.work_dir / self.image_file_template.format(number=index + 1)

    @property
    def video_path(self) -> Path:
        """Path of the downloaded, uncaptioned video."""
        return self.work_dir / self.video_file_name

    @property
    def composed_path(self) -> Path:
        """Path of the video with captions and voice-over."""
        return self.work_dir / self.composed_file_name

    @property
    def final_path(self) -> Path:
        """Where the finished video ends up."""
        return self.destination_dir / self.final_video_name

    def to_dict(self) -> dict:
        """Convert config to dictionary (for display). API keys are redacted."""
        return {
            "leonardo_api_key": "***" if self.leonardo_api_key else None,
            "luma_api_key": "***" if self.luma_api_key else None,
            "image_prompt": self.image_prompt,
            "video_prompt": self.video_prompt,
            "leonardo_model_id": self.leonardo_model_id,
            "image_size": self.image_size,
            "num_images": self.num_images,
            "image_poll_interval_sec": self.image_poll_interval_sec,
            "image_max_attempts": self.image_max_attempts,
            "aspect_ratio": self.aspect_ratio,
            "loop": self.loop,
            "video_poll_interval_sec": self.video_poll_interval_sec,
            "video_max_attempts": self.video_max_attempts,
            "work_dir": str(self.work_dir),
            "captions_file": str(self.captions_file),
            "voiceover_file": str(self.voiceover_file),
            "destination_dir": str(self.destination_dir),
            "final_video_name": self.final_video_name,
            "ffmpeg_path": self.ffmpeg_path,
        }
