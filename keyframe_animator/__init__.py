"""
Keyframe Animator - Automated keyframe video generation.

This package generates a set of images from a prompt, animates them into
a video using the images as keyframes, and burns in captions and a
voice-over track.
"""

__version__ = "0.1.0"

from .config import PipelineConfig
from .pipeline import KeyframeAnimatorPipeline
from .core.job import GenerationJob
from .core.run import PipelineRun

__all__ = [
    "PipelineConfig",
    "KeyframeAnimatorPipeline",
    "GenerationJob",
    "PipelineRun",
]
