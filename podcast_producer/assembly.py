"""Assemble per-segment audio chunks into one deliverable stream."""

import io
import logging

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from podcast_producer.constants import AUDIO_EXTENSION, OUTPUT_BITRATE
from podcast_producer.errors import AssemblyError, EmptyInput, InvalidSetting

logger = logging.getLogger(__name__)


def assemble(chunks: list[bytes]) -> bytes:
    """Concatenate encoded chunks byte-for-byte, in order.

    Assumes every chunk comes from the same provider and model so that the
    result decodes as one sequential MP3 stream. No gaps, no mixing.
    """
    if not chunks:
        raise EmptyInput("No audio chunks to assemble")
    return b"".join(chunks)


def stitch(chunks: list[bytes], fmt: str = AUDIO_EXTENSION, bitrate: str = OUTPUT_BITRATE) -> bytes:
    """Decode every chunk and re-encode them as a single stream.

    Slower than assemble() and needs ffmpeg, but tolerates chunks whose
    encoding parameters differ.
    """
    if not chunks:
        raise EmptyInput("No audio chunks to assemble")

    try:
        result = AudioSegment.empty()
        for i, chunk in enumerate(chunks, start=1):
            try:
                result += AudioSegment.from_file(io.BytesIO(chunk), format=fmt)
            except CouldntDecodeError as e:
                raise AssemblyError(f"Could not decode audio chunk {i}/{len(chunks)}: {e}") from e

        out = io.BytesIO()
        result.export(out, format=fmt, bitrate=bitrate)
    except OSError as e:
        # ffmpeg/ffprobe missing or not runnable
        raise AssemblyError(f"Audio re-encoding failed: {e}") from e
    logger.debug("Re-encoded %d chunks into %d ms of audio", len(chunks), len(result))
    return out.getvalue()


ASSEMBLERS = {
    "concat": assemble,
    "reencode": stitch,
}


def get_assembler(policy: str):
    """Look up an assembly function by policy name."""
    try:
        return ASSEMBLERS[policy]
    except KeyError:
        raise InvalidSetting(
            f"Unknown audio assembly policy: {policy} (expected one of {', '.join(ASSEMBLERS)})"
        ) from None
