"""
Tests for keyframe construction and the Luma video generation step.
"""

import pytest

from keyframe_animator.errors import JobTimeoutError, ProviderError
from keyframe_animator.steps.video_generator import LumaVideoGeneratorStep, build_keyframes

SUBMIT_URL = "https://api.lumalabs.ai/dream-machine/v1/generations"
STATUS_URL = "https://api.lumalabs.ai/dream-machine/v1/generations/vid-9"


@pytest.fixture
def step(config, fake_session):
    return LumaVideoGeneratorStep(config, session=fake_session)


class TestBuildKeyframes:

    def test_one_entry_per_url_in_order(self):
        urls = ["https://img/a.png", "https://img/b.png", "https://img/c.png"]

        keyframes = build_keyframes(urls)

        assert list(keyframes) == ["frame0", "frame1", "frame2"]
        for idx, url in enumerate(urls):
            assert keyframes[f"frame{idx}"] == {"type": "image", "url": url}

    def test_duplicate_urls_keep_their_own_frames(self):
        keyframes = build_keyframes(["u", "u"])
        assert len(keyframes) == 2

    def test_empty_input(self):
        assert build_keyframes([]) == {}


def test_submit_payload_carries_keyframes(step, fake_session, response, sleeps):
    fake_session.add("POST", SUBMIT_URL, response(201, {"id": "vid-9", "state": "queued"}))
    fake_session.add("GET", STATUS_URL, response(200, {
        "id": "vid-9", "state": "completed", "assets": {"video": "https://cdn/v1.mp4"},
    }))

    video_url = step.execute(("animate", ["u1", "u2"]))

    assert video_url == "https://cdn/v1.mp4"
    _, _, kwargs = fake_session.calls_to("POST", SUBMIT_URL)[0]
    assert kwargs["json"] == {
        "prompt": "animate",
        "keyframes": {
            "frame0": {"type": "image", "url": "u1"},
            "frame1": {"type": "image", "url": "u2"},
        },
        "aspect_ratio": "16:9",
        "loop": False,
    }
    assert kwargs["headers"]["Authorization"] == "Bearer luma-key"


def test_polls_through_pending_states(step, fake_session, response, sleeps):
    fake_session.add("POST", SUBMIT_URL, response(201, {"id": "vid-9"}))
    fake_session.add(
        "GET", STATUS_URL,
        response(200, {"state": "queued"}),
        response(200, {"state": "dreaming"}),
        response(200, {"state": "completed", "assets": {"video": "v1"}}),
    )

    assert step.execute(("animate", ["u1"])) == "v1"
    assert sleeps == [3.0, 3.0]


def test_failure_reason_is_reported(step, fake_session, response, sleeps):
    fake_session.add("POST", SUBMIT_URL, response(201, {"id": "vid-9"}))
    fake_session.add("GET", STATUS_URL, response(200, {
        "state": "failed", "failure_reason": "keyframe could not be fetched",
    }))

    with pytest.raises(ProviderError) as exc_info:
        step.execute(("animate", ["u1"]))

    assert exc_info.value.reason == "keyframe could not be fetched"
    assert exc_info.value.stage == "video_generation"


def test_video_polling_is_bounded(step, fake_session, response, sleeps):
    fake_session.add("POST", SUBMIT_URL, response(201, {"id": "vid-9"}))
    fake_session.add("GET", STATUS_URL, response(200, {"state": "dreaming"}))

    with pytest.raises(JobTimeoutError):
        step.execute(("animate", ["u1"]))

    assert len(fake_session.calls_to("GET", STATUS_URL)) == 4


def test_requires_at_least_one_image(step, fake_session):
    with pytest.raises(ProviderError):
        step.execute(("animate", []))
    assert fake_session.calls == []
