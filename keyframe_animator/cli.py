"""
Command-line interface for the Keyframe Animator pipeline.
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config import PipelineConfig, DEFAULT_IMAGE_PROMPT, DEFAULT_VIDEO_PROMPT


def check_dependencies(ffmpeg_path: str = "ffmpeg") -> bool:
    """Check that required external tools are available."""
    try:
        result = subprocess.run([ffmpeg_path, "-version"], capture_output=True, text=True)
        if result.returncode != 0:
            print("ERROR: ffmpeg is not working correctly!")
            return False
    except FileNotFoundError:
        print("ERROR: ffmpeg is not installed! Please install it with your package manager.")
        return False
    return True


def validate_input_file(path: Path, label: str) -> bool:
    """Validate that a pre-made input file (captions, voice-over) exists and is non-empty."""
    if not path.exists():
        print(f"ERROR: {label} '{path}' does not exist!")
        return False

    if not path.is_file():
        print(f"ERROR: '{path}' is not a file!")
        return False

    if path.stat().st_size == 0:
        print(f"ERROR: {label} '{path}' is empty!")
        return False

    return True


def validate_api_keys(config: PipelineConfig) -> bool:
    ok = True
    if not config.leonardo_api_key:
        print("ERROR: LEONARDOAI_API_KEY is not set!")
        ok = False
    if not config.luma_api_key:
        print("ERROR: LUMAAI_API_KEY is not set!")
        ok = False
    return ok


def parse_image_size(value: str) -> tuple:
    """Parse a WxH string into a (width, height) tuple."""
    try:
        w, h = value.lower().split("x")
        size = (int(w), int(h))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Image size must look like 512x512, got '{value}'")
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"Image size must be positive, got '{value}'")
    return size


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="keyframe-animator",
        description="Keyframe Animator: generate images, animate them into a video, add captions and voice-over",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m keyframe_animator
  python -m keyframe_animator --captions subs.srt --voiceover narration.mp3
  python -m keyframe_animator --image-prompt "..." --video-prompt "..." --final-name market.mp4
  python -m keyframe_animator --destination ~/Videos --loop

API keys are read from LEONARDOAI_API_KEY and LUMAAI_API_KEY (a .env file works too).
        """
    )

    # Prompts
    parser.add_argument(
        "--image-prompt",
        type=str,
        default=DEFAULT_IMAGE_PROMPT,
        help="Prompt for the image generation job"
    )
    parser.add_argument(
        "--video-prompt",
        type=str,
        default=DEFAULT_VIDEO_PROMPT,
        help="Prompt for the video generation job"
    )

    # Input/Output
    parser.add_argument(
        "-o", "--work-dir",
        type=Path,
        default=Path("output"),
        help="Directory for downloaded and intermediate files (default: output/)"
    )
    parser.add_argument(
        "--captions",
        type=Path,
        default=Path("captions.srt"),
        help="Subtitle file to burn in (default: captions.srt)"
    )
    parser.add_argument(
        "--voiceover",
        type=Path,
        default=Path("voiceover.mp3"),
        help="Voice-over audio track (default: voiceover.mp3)"
    )
    parser.add_argument(
        "--destination",
        type=Path,
        default=None,
        help="Directory for the final video (default: ~/Desktop)"
    )
    parser.add_argument(
        "--final-name",
        type=str,
        default="final_video.mp4",
        help="File name of the final video (default: final_video.mp4)"
    )

    # Image options
    parser.add_argument(
        "--model-id",
        type=str,
        default="1e60896f-3c26-4296-8ecc-53e2afecc132",
        help="Leonardo model id"
    )
    parser.add_argument(
        "--image-size",
        type=parse_image_size,
        default=(512, 512),
        help="Generated image size as WxH (default: 512x512)"
    )
    parser.add_argument(
        "--num-images",
        type=int,
        default=4,
        help="Number of images (and keyframes) to generate (default: 4)"
    )

    # Video options
    parser.add_argument(
        "--aspect-ratio",
        type=str,
        default="16:9",
        help="Video aspect ratio (default: 16:9)"
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Ask Luma for a looping video"
    )

    # Polling options
    parser.add_argument(
        "--image-poll-interval",
        type=float,
        default=10.0,
        help="Seconds between image job polls (default: 10.0)"
    )
    parser.add_argument(
        "--image-max-attempts",
        type=int,
        default=50,
        help="Maximum image job polls (default: 50)"
    )
    parser.add_argument(
        "--video-poll-interval",
        type=float,
        default=3.0,
        help="Seconds between video job polls (default: 3.0)"
    )
    parser.add_argument(
        "--video-max-attempts",
        type=int,
        default=200,
        help="Maximum video job polls (default: 200)"
    )

    # Misc options
    parser.add_argument(
        "--ffmpeg",
        type=str,
        default="ffmpeg",
        help="Path to the ffmpeg binary (default: ffmpeg on PATH)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser.parse_args(argv)


def args_to_config(args: argparse.Namespace) -> PipelineConfig:
    """Convert parsed arguments to PipelineConfig."""
    extra = {}
    if args.destination is not None:
        extra["destination_dir"] = args.destination

    return PipelineConfig(
        image_prompt=args.image_prompt,
        video_prompt=args.video_prompt,
        work_dir=args.work_dir,
        captions_file=args.captions,
        voiceover_file=args.voiceover,
        final_video_name=args.final_name,
        leonardo_model_id=args.model_id,
        image_size=args.image_size,
        num_images=args.num_images,
        aspect_ratio=args.aspect_ratio,
        loop=args.loop,
        image_poll_interval_sec=args.image_poll_interval,
        image_max_attempts=args.image_max_attempts,
        video_poll_interval_sec=args.video_poll_interval,
        video_max_attempts=args.video_max_attempts,
        ffmpeg_path=args.ffmpeg,
        **extra,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    load_dotenv()

    try:
        config = args_to_config(args)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    # Validate dependencies and inputs before spending API credits
    if not check_dependencies(config.ffmpeg_path):
        return 1
    if not validate_input_file(config.captions_file, "Captions file"):
        return 1
    if not validate_input_file(config.voiceover_file, "Voice-over file"):
        return 1
    if not validate_api_keys(config):
        return 1

    from .pipeline import KeyframeAnimatorPipeline

    try:
        pipeline = KeyframeAnimatorPipeline(config)
        pipeline.run()
        return 0
    except Exception as e:
        print(f"ERROR: Pipeline failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
