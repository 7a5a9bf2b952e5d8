"""Shared fixtures and in-memory collaborators for podcast producer tests."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from podcast_producer.config import Settings
from podcast_producer.errors import NotFound, PersistenceError
from podcast_producer.models import PodcastRecord, Speaker
from podcast_producer.storage import BlobStore, PodcastRepository, PodcastStore

SAMPLE_SCRIPT = """ALEX: Welcome to Brainwaves! Today we're diving into ocean conservation.
EVAN: Great topic, Alex. The oceans cover most of the planet.
[Sound of waves]
ALEX: Thank you for riding the Brainwaves with me and Evan!"""


class InMemoryRepository(PodcastRepository):
    """Dict-backed repository with a controllable clock."""

    def __init__(self):
        self.records = {}
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def create(self, topic, script):
        now = self._tick()
        record = PodcastRecord(
            id=f"pod-{next(self._ids)}", topic=topic, script=script,
            created_at=now, updated_at=now,
        )
        self.records[record.id] = record
        return record

    def get(self, record_id):
        if record_id not in self.records:
            raise NotFound(record_id)
        return self.records[record_id]

    def list(self, limit=10):
        ordered = sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)
        return ordered[:limit]

    def update(self, record_id, **fields):
        record = self.get(record_id)
        for name, value in fields.items():
            setattr(record, name, value)
        record.updated_at = self._tick()
        return record

    def delete(self, record_id):
        self.records.pop(record_id, None)


class InMemoryBlobStore(BlobStore):
    def __init__(self, fail_delete=False):
        self.blobs = {}
        self.fail_delete = fail_delete

    def put(self, key, data, content_type):
        self.blobs[key] = (data, content_type)
        return f"memory://podcast-audio/{key}"

    def delete(self, key):
        if self.fail_delete:
            raise PersistenceError(f"Storage offline, could not delete {key}")
        self.blobs.pop(key, None)


class FakeScriptClient:
    def __init__(self, script=SAMPLE_SCRIPT, error=None):
        self.script = script
        self.error = error
        self.topics = []

    def generate(self, topic):
        self.topics.append(topic)
        if self.error is not None:
            raise self.error
        return self.script


class FakeSynthesizer:
    """Returns distinct bytes per call; fail_on maps a 1-based call number to an error."""

    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on or {}

    def synthesize(self, text, voice_id):
        self.calls.append((text, voice_id))
        n = len(self.calls)
        if n in self.fail_on:
            raise self.fail_on[n]
        return f"<{voice_id}:{n}:{text}>".encode()


class FakeSummaryClient:
    def __init__(self, summary="Two hosts talk about the sea."):
        self.summary = summary
        self.calls = []

    def summarize(self, script, topic):
        self.calls.append((script, topic))
        return self.summary


@pytest.fixture
def sample_script():
    return SAMPLE_SCRIPT


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def blobs():
    return InMemoryBlobStore()


@pytest.fixture
def store(repository, blobs):
    return PodcastStore(repository, blobs)


@pytest.fixture
def voices():
    return {Speaker.ALEX: "voice-alex", Speaker.EVAN: "voice-evan"}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        completion_api_key="sk-test",
        speech_api_key="xi-test",
        speaker_a_voice_id="voice-alex",
        speaker_b_voice_id="voice-evan",
        request_timeout=5.0,
        output_dir=str(tmp_path / "output"),
    )
