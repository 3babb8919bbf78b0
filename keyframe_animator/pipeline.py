"""
Main pipeline orchestrator for the Keyframe Animator workflow.
"""

from pathlib import Path
import shutil
from typing import Any, Optional

from .config import PipelineConfig
from .core.job import GenerationJob
from .core.run import PipelineRun, RunState
from .errors import FilesystemError
from .steps import (
    LeonardoImageGeneratorStep,
    LumaVideoGeneratorStep,
    AssetFetcherStep,
    MediaComposerStep,
    CompositionRequest,
)


class KeyframeAnimatorPipeline:
    """
    Main pipeline orchestrator that coordinates all processing steps.

    The pipeline turns two prompts into a captioned, voiced video:
    1. Image generation (Leonardo AI)
    2. Image download
    3. Keyframe video generation (Luma AI)
    4. Video download
    5. Captions and voice-over (FFmpeg)
    6. Move to the destination directory

    Nothing is retried or rolled back. The first error stops the run and
    everything downloaded so far stays in the work directory.

    Example:
        ```python
        config = PipelineConfig(work_dir="output")
        pipeline = KeyframeAnimatorPipeline(config)
        final_video = pipeline.run()
        print(f"Video created: {final_video}")
        ```
    """

    def __init__(self, config: PipelineConfig):
        """
        Initialize the pipeline with configuration.

        Args:
            config: Pipeline configuration object
        """
        self.config = config
        self.last_run: Optional[PipelineRun] = None

        self._init_output_dirs()
        self._init_steps()

    def _init_output_dirs(self) -> None:
        try:
            self.config.work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create work directory {self.config.work_dir}: {e}") from e

    def _init_steps(self) -> None:
        """Initialize all pipeline steps."""
        self.image_generator = LeonardoImageGeneratorStep(self.config)
        self.video_generator = LumaVideoGeneratorStep(self.config)
        self.fetcher = AssetFetcherStep(self.config)
        self.media_composer = MediaComposerStep(self.config)

    def run(self) -> Path:
        """
        Execute the full pipeline.

        Returns:
            Path to the final video file

        Raises:
            PipelineError: If any pipeline step fails
        """
        run = PipelineRun()
        self.last_run = run

        print(f"Work directory: {self.config.work_dir}")
        print(f"Destination: {self.config.final_path}")
        print("-" * 50)

        try:
            final_video = self._run(run)
        except Exception as e:
            run.fail(e)
            raise
        finally:
            self.image_generator.on_submitted = None
            self.video_generator.on_submitted = None

        print("-" * 50)
        print(f"Pipeline complete! Output: {final_video}")
        return final_video

    def _run(self, run: PipelineRun) -> Path:
        # Step 1: Generate images
        def image_submitted(job: GenerationJob) -> None:
            run.image_job = job
            run.advance(RunState.IMAGE_SUBMITTED)
            run.advance(RunState.IMAGE_POLLING)

        print("Starting image generation...")
        self.image_generator.on_submitted = image_submitted
        image_urls = self.image_generator.execute(self.config.image_prompt)

        # Step 2: Download images
        image_paths = [self.config.image_path(idx) for idx in range(len(image_urls))]
        run.image_paths = self.fetcher.execute(list(zip(image_urls, image_paths)))
        for path in run.image_paths:
            size = self.fetcher.describe_image(path)
            if size:
                print(f"  {path.name}: {size[0]}x{size[1]}")
        run.advance(RunState.IMAGES_DOWNLOADED)

        # Step 3: Generate video keyed on the image URLs
        def video_submitted(job: GenerationJob) -> None:
            run.video_job = job
            run.advance(RunState.VIDEO_SUBMITTED)
            run.advance(RunState.VIDEO_POLLING)

        print("Starting video generation...")
        self.video_generator.on_submitted = video_submitted
        video_url = self.video_generator.execute((self.config.video_prompt, image_urls))

        # Step 4: Download video
        run.video_path = self.fetcher.execute([(video_url, self.config.video_path)])[0]
        run.advance(RunState.VIDEO_DOWNLOADED)

        # Step 5: Captions and voice-over
        run.composed_path = self.media_composer.execute(CompositionRequest(
            video_path=run.video_path,
            captions_path=self.config.captions_file,
            voiceover_path=self.config.voiceover_file,
            output_path=self.config.composed_path,
        ))
        run.advance(RunState.COMPOSED)

        # Step 6: Move to destination
        run.final_path = self.relocate(run.composed_path, self.config.final_path)
        run.advance(RunState.RELOCATED)

        run.advance(RunState.DONE)
        return run.final_path

    def relocate(self, source: Path, destination: Path) -> Path:
        """
        Move the composed video to its final location.

        Raises:
            FilesystemError: If the destination cannot be created or written
        """
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(destination))
        except OSError as e:
            raise FilesystemError(f"Failed to move {source} to {destination}: {e}", stage="relocation") from e
        print(f"Moved final video to: {destination}")
        return destination

    def run_step(self, step_name: str, input_data: Any) -> Any:
        """
        Run a single pipeline step (useful for testing/debugging).

        Args:
            step_name: Name of the step to run
            input_data: Input data for the step

        Returns:
            Output from the step
        """
        steps = {
            'generate_images': self.image_generator,
            'generate_video': self.video_generator,
            'download': self.fetcher,
            'compose': self.media_composer,
        }

        if step_name not in steps:
            raise ValueError(f"Unknown step: {step_name}. Available: {list(steps.keys())}")

        return steps[step_name].execute(input_data)
