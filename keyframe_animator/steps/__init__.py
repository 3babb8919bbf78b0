"""
Pipeline steps for the Keyframe Animator workflow.
"""

from .base import PipelineStep
from .remote import RemoteJobStep
from .image_generator import LeonardoImageGeneratorStep
from .video_generator import LumaVideoGeneratorStep, build_keyframes
from .asset_fetcher import AssetFetcherStep
from .media_composer import MediaComposerStep, CompositionRequest

__all__ = [
    "PipelineStep",
    "RemoteJobStep",
    "LeonardoImageGeneratorStep",
    "LumaVideoGeneratorStep",
    "build_keyframes",
    "AssetFetcherStep",
    "MediaComposerStep",
    "CompositionRequest",
]
