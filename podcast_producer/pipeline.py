"""Topic-to-podcast orchestration.

One run moves through IDLE → SCRIPT_PENDING → SCRIPT_READY → AUDIO_PENDING →
COMPLETE, or stops in FAILED with the stage that failed. The record is saved
as soon as the script exists, so a FAILED run in the audio stage still leaves
a usable script behind. Audio is only ever persisted from a complete set of
chunks.
"""

import asyncio
import logging

from podcast_producer import segmenter
from podcast_producer.assembly import assemble, get_assembler
from podcast_producer.completion import (
    CompletionProvider,
    ScriptGenerationClient,
    SummaryGenerationClient,
)
from podcast_producer.config import Settings
from podcast_producer.errors import (
    Cancelled,
    ConfigurationMissing,
    NoDialogueFound,
    PodcastError,
    ValidationError,
)
from podcast_producer.models import (
    Failure,
    GenerationResult,
    PipelineState,
    Segment,
    Speaker,
    Stage,
)
from podcast_producer.speech import build_synthesizer
from podcast_producer.storage import PodcastStore

logger = logging.getLogger(__name__)

VOICE_ENV_NAMES = {
    Speaker.ALEX: "SPEAKER_A_VOICE_ID",
    Speaker.EVAN: "SPEAKER_B_VOICE_ID",
}


class PodcastPipeline:
    """Sequences script generation, persistence, synthesis and assembly.

    Collaborators are injected: anything with generate(topic),
    synthesize(text, voice_id) and summarize(script, topic) works, which is
    how the tests run it against in-memory fakes. Blocking calls run in a
    worker thread so the event loop stays free while a provider is busy.
    """

    def __init__(
        self,
        script_client,
        synthesizer,
        store: PodcastStore,
        voices: dict[Speaker, str],
        summary_client=None,
        assembler=assemble,
        on_progress=None,
    ):
        self.script_client = script_client
        self.synthesizer = synthesizer
        self.store = store
        self.voices = voices
        self.summary_client = summary_client
        self.assembler = assembler
        self.on_progress = on_progress

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: PodcastStore,
        summarize: bool = True,
        on_progress=None,
    ) -> "PodcastPipeline":
        provider = CompletionProvider(settings)
        return cls(
            script_client=ScriptGenerationClient(provider),
            synthesizer=build_synthesizer(settings),
            store=store,
            voices=settings.voice_map(),
            summary_client=SummaryGenerationClient(provider) if summarize else None,
            assembler=get_assembler(settings.audio_assembly),
            on_progress=on_progress,
        )

    def _notify(self, result: GenerationResult, detail: str = "") -> None:
        if self.on_progress is not None:
            self.on_progress(result.state, detail)

    def _transition(self, result: GenerationResult, state: PipelineState, detail: str = "") -> None:
        logger.info("[%s] %s → %s", result.topic, result.state.value, state.value)
        result.state = state
        self._notify(result, detail)

    def _fail(self, result: GenerationResult, stage: Stage, error: PodcastError) -> GenerationResult:
        result.failure = Failure(stage=stage, error=error)
        logger.warning(
            "[%s] %s stage failed (%s): %s", result.topic, stage.value, error.reason.value, error
        )
        self._transition(result, PipelineState.FAILED, str(error))
        return result

    @staticmethod
    def _checkpoint(cancel: asyncio.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            raise Cancelled("Generation cancelled")

    def _resolve_voices(self, segments: list[Segment]) -> dict[Speaker, str]:
        missing = sorted(
            {VOICE_ENV_NAMES[seg.speaker] for seg in segments if not self.voices.get(seg.speaker)}
        )
        if missing:
            raise ConfigurationMissing(missing)
        return self.voices

    async def generate(self, topic: str, cancel: asyncio.Event | None = None) -> GenerationResult:
        """Run the whole pipeline for one topic.

        Raises ValidationError for an empty topic before anything starts.
        Every other classified failure is reported on the returned result.
        """
        topic = (topic or "").strip()
        if not topic:
            raise ValidationError("Topic is required")

        result = GenerationResult(topic=topic)
        self._transition(result, PipelineState.SCRIPT_PENDING, "Writing script")

        try:
            self._checkpoint(cancel)
            script = await asyncio.to_thread(self.script_client.generate, topic)
            self._checkpoint(cancel)
            result.record = await asyncio.to_thread(self.store.create, topic, script)
        except PodcastError as e:
            return self._fail(result, Stage.SCRIPT, e)

        self._transition(result, PipelineState.SCRIPT_READY, result.record.id)

        try:
            await self._summarize(result, cancel)
            await self._produce_audio(result, cancel)
        except PodcastError as e:
            return self._fail(result, Stage.AUDIO, e)

        self._transition(result, PipelineState.COMPLETE, result.record.audio_location or "")
        return result

    async def _summarize(self, result: GenerationResult, cancel: asyncio.Event | None) -> None:
        if self.summary_client is None:
            return
        self._checkpoint(cancel)
        record = result.record
        summary = await asyncio.to_thread(self.summary_client.summarize, record.script, record.topic)
        self._checkpoint(cancel)
        try:
            result.record = await asyncio.to_thread(self.store.update_summary, record.id, summary)
        except PodcastError as e:
            logger.warning("Could not save summary for %s: %s", record.id, e)

    async def _produce_audio(self, result: GenerationResult, cancel: asyncio.Event | None) -> None:
        record = result.record
        parsed = segmenter.breakdown(record.script)
        result.segment_count = len(parsed.segments)
        result.ignored_lines = parsed.ignored_lines
        if parsed.ignored_lines:
            logger.info("Ignored %d non-dialogue lines in script %s", parsed.ignored_lines, record.id)

        if not parsed.segments:
            raise NoDialogueFound(
                "No dialogue found in script. Lines must start with "
                + " or ".join(speaker.tag for speaker in Speaker)
            )

        voices = self._resolve_voices(parsed.segments)
        total = len(parsed.segments)
        self._transition(result, PipelineState.AUDIO_PENDING, f"0/{total}")

        # Strictly one request at a time, in script order
        chunks = []
        for i, seg in enumerate(parsed.segments, start=1):
            self._checkpoint(cancel)
            logger.info("Generating segment %d/%d: %s", i, total, seg.speaker.value)
            chunk = await asyncio.to_thread(self.synthesizer.synthesize, seg.text, voices[seg.speaker])
            chunks.append(chunk)
            result.chunk_sizes.append(len(chunk))
            self._notify(result, f"{i}/{total}")

        audio = await asyncio.to_thread(self.assembler, chunks)
        self._checkpoint(cancel)
        result.record = await asyncio.to_thread(self.store.save_audio, record.id, audio)
