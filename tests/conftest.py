"""
Shared fixtures: scripted HTTP sessions and a config rooted in tmp_path.
"""

import json
from collections import defaultdict, deque

import pytest

from keyframe_animator.config import PipelineConfig
from keyframe_animator.steps import polling


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content
        self.closed = False

    @property
    def text(self):
        if self._payload is not None:
            return json.dumps(self._payload)
        return self.content.decode("utf-8", errors="replace")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """
    Replays queued responses per (method, url).

    A queued exception instance is raised instead of returned.
    """

    def __init__(self):
        self.queues = defaultdict(deque)
        self.calls = []

    def add(self, method, url, *responses):
        self.queues[(method.upper(), url)].extend(responses)

    def request(self, method, url, **kwargs):
        self.calls.append((method.upper(), url, kwargs))
        queue = self.queues[(method.upper(), url)]
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def calls_to(self, method, url):
        return [c for c in self.calls if c[0] == method.upper() and c[1] == url]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def sleeps(monkeypatch):
    """Record poll waits instead of sleeping."""
    recorded = []
    monkeypatch.setattr(polling.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def config(tmp_path):
    captions = tmp_path / "captions.srt"
    captions.write_text("1\n00:00:00,000 --> 00:00:02,000\nHello\n")
    voiceover = tmp_path / "voiceover.mp3"
    voiceover.write_bytes(b"ID3fake-mp3")
    return PipelineConfig(
        leonardo_api_key="leo-key",
        luma_api_key="luma-key",
        image_prompt="four fruit pictures",
        video_prompt="animate the fruit",
        work_dir=tmp_path / "work",
        captions_file=captions,
        voiceover_file=voiceover,
        destination_dir=tmp_path / "Desktop",
        image_max_attempts=5,
        video_max_attempts=4,
    )


@pytest.fixture
def response():
    """Factory for canned HTTP responses."""
    return FakeResponse
