"""Data models for podcast production."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from podcast_producer.constants import HOST_A, HOST_B


class Speaker(Enum):
    """The two fixed hosts. The value is the script tag without its colon."""

    ALEX = HOST_A
    EVAN = HOST_B

    @property
    def tag(self) -> str:
        return f"{self.value}:"

    @property
    def display_name(self) -> str:
        return self.value.title()


@dataclass(frozen=True)
class Segment:
    speaker: Speaker
    text: str


@dataclass
class ScriptBreakdown:
    segments: list[Segment]
    ignored_lines: int = 0   # non-blank lines without a usable speaker tag


@dataclass
class PodcastRecord:
    id: str
    topic: str
    script: str
    created_at: datetime
    updated_at: datetime
    summary: str | None = None
    audio_location: str | None = None


class PipelineState(Enum):
    IDLE = "idle"
    SCRIPT_PENDING = "script_pending"
    SCRIPT_READY = "script_ready"
    AUDIO_PENDING = "audio_pending"
    COMPLETE = "complete"
    FAILED = "failed"


class Stage(Enum):
    SCRIPT = "script"
    AUDIO = "audio"


@dataclass
class Failure:
    stage: Stage
    error: Exception   # always a PodcastError subclass

    @property
    def reason(self):
        return self.error.reason

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class GenerationResult:
    """Outcome of one pipeline run.

    A FAILED result with a record is a partial success: the script was saved
    and stays retrievable even though no audio was produced.
    """

    topic: str
    state: PipelineState = PipelineState.IDLE
    record: PodcastRecord | None = None
    failure: Failure | None = None
    segment_count: int = 0
    ignored_lines: int = 0
    chunk_sizes: list[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.state is PipelineState.COMPLETE

    @property
    def partial(self) -> bool:
        return self.state is PipelineState.FAILED and self.record is not None
