"""
Tests for configuration and the command-line entry point.
"""

import subprocess
from pathlib import Path

import pytest

from keyframe_animator import cli
from keyframe_animator.config import PipelineConfig
from keyframe_animator.errors import TransportError


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)


@pytest.fixture
def ffmpeg_ok(monkeypatch):
    monkeypatch.setattr(
        cli.subprocess, "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, stdout="ffmpeg version 6", stderr=""),
    )


@pytest.fixture
def input_files(tmp_path):
    captions = tmp_path / "captions.srt"
    captions.write_text("1\n00:00:00,000 --> 00:00:01,000\nHi\n")
    voiceover = tmp_path / "voiceover.mp3"
    voiceover.write_bytes(b"ID3")
    return ["--captions", str(captions), "--voiceover", str(voiceover),
            "-o", str(tmp_path / "work"), "--destination", str(tmp_path / "Desktop")]


class TestPipelineConfig:

    def test_keys_fall_back_to_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEONARDOAI_API_KEY", "env-leo")
        monkeypatch.setenv("LUMAAI_API_KEY", "env-luma")

        config = PipelineConfig(work_dir=tmp_path)

        assert config.leonardo_api_key == "env-leo"
        assert config.luma_api_key == "env-luma"

    def test_derived_paths(self, tmp_path):
        config = PipelineConfig(work_dir=str(tmp_path / "w"), destination_dir=str(tmp_path / "d"))

        assert config.image_path(0) == tmp_path / "w" / "image_1.png"
        assert config.image_path(3) == tmp_path / "w" / "image_4.png"
        assert config.video_path == tmp_path / "w" / "generated_video.mp4"
        assert config.final_path == tmp_path / "d" / "final_video.mp4"

    def test_default_destination_is_desktop(self):
        assert PipelineConfig().destination_dir == (Path.home() / "Desktop").resolve()

    def test_to_dict_redacts_keys(self):
        data = PipelineConfig(leonardo_api_key="secret", luma_api_key=None).to_dict()
        assert data["leonardo_api_key"] == "***"
        assert "secret" not in str(data)

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            PipelineConfig(video_max_attempts=0)

    @pytest.mark.parametrize("field", ["image_poll_interval_sec", "video_poll_interval_sec"])
    def test_rejects_negative_poll_interval(self, field):
        with pytest.raises(ValueError):
            PipelineConfig(**{field: -1})

    def test_zero_poll_interval_is_allowed(self):
        assert PipelineConfig(image_poll_interval_sec=0).image_poll_interval_sec == 0

    def test_rejects_zero_images(self):
        with pytest.raises(ValueError):
            PipelineConfig(num_images=0)


class TestArgs:

    def test_args_map_onto_config(self, tmp_path):
        args = cli.parse_args([
            "--image-size", "768x432", "--num-images", "2", "--loop",
            "--final-name", "market.mp4", "--destination", str(tmp_path),
            "--video-max-attempts", "30",
        ])
        config = cli.args_to_config(args)

        assert config.image_size == (768, 432)
        assert config.num_images == 2
        assert config.loop is True
        assert config.final_path == tmp_path / "market.mp4"
        assert config.video_max_attempts == 30

    def test_bad_image_size_exits(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["--image-size", "big"])


class TestMain:

    def test_negative_poll_interval_returns_1_before_any_work(self, monkeypatch, input_files, capsys):
        calls = []
        monkeypatch.setattr(cli.subprocess, "run", lambda cmd, **kwargs: calls.append(cmd))

        assert cli.main(input_files + ["--image-poll-interval", "-1"]) == 1
        assert calls == []
        assert "Poll intervals must not be negative" in capsys.readouterr().out

    def test_missing_ffmpeg_returns_1(self, monkeypatch, input_files):
        def missing(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(cli.subprocess, "run", missing)
        assert cli.main(input_files) == 1

    def test_missing_captions_returns_1(self, ffmpeg_ok, tmp_path, capsys):
        code = cli.main(["--captions", str(tmp_path / "nope.srt")])
        assert code == 1
        assert "does not exist" in capsys.readouterr().out

    def test_missing_api_keys_returns_1(self, ffmpeg_ok, input_files, monkeypatch, capsys):
        monkeypatch.delenv("LEONARDOAI_API_KEY", raising=False)
        monkeypatch.delenv("LUMAAI_API_KEY", raising=False)

        assert cli.main(input_files) == 1
        assert "LEONARDOAI_API_KEY" in capsys.readouterr().out

    def test_pipeline_failure_prints_one_error_and_returns_1(
        self, ffmpeg_ok, input_files, monkeypatch, capsys
    ):
        monkeypatch.setenv("LEONARDOAI_API_KEY", "k1")
        monkeypatch.setenv("LUMAAI_API_KEY", "k2")

        def failing_run(self):
            raise TransportError("POST failed: connection refused", stage="image_generation")

        monkeypatch.setattr("keyframe_animator.pipeline.KeyframeAnimatorPipeline.run", failing_run)

        assert cli.main(input_files) == 1
        out = capsys.readouterr().out
        assert "ERROR: Pipeline failed: [image_generation] POST failed: connection refused" in out

    def test_success_returns_0(self, ffmpeg_ok, input_files, monkeypatch, tmp_path):
        monkeypatch.setenv("LEONARDOAI_API_KEY", "k1")
        monkeypatch.setenv("LUMAAI_API_KEY", "k2")
        monkeypatch.setattr(
            "keyframe_animator.pipeline.KeyframeAnimatorPipeline.run",
            lambda self: tmp_path / "Desktop" / "final_video.mp4",
        )

        assert cli.main(input_files) == 0
