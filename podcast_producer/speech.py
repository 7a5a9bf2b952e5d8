"""Text-to-speech adapters: ElevenLabs over HTTPS, edge-tts for local use."""

import asyncio
import logging

import edge_tts
from edge_tts.exceptions import NoAudioReceived
import requests

from podcast_producer.config import Settings
from podcast_producer.constants import (
    AUDIO_CONTENT_TYPE,
    EDGE_TTS_RATE,
    VOICE_SIMILARITY_BOOST,
    VOICE_STABILITY,
    VOICE_STYLE,
)
from podcast_producer.errors import (
    InvalidSetting,
    InvalidVoiceIdentity,
    ProviderAuthError,
    ProviderEmptyResult,
    ProviderUnavailable,
    RateLimited,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _check_text(text: str) -> None:
    if not text or not text.strip():
        raise ValidationError("Cannot synthesize empty text")


class VoiceSynthesisClient:
    """One POST per utterance to the ElevenLabs text-to-speech endpoint."""

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def synthesize(self, text: str, voice_id: str) -> bytes:
        """Return encoded audio for text spoken by voice_id.

        Status mapping: 401/403 auth, 422 voice, 429 rate limit, anything
        else (including timeouts) provider unavailable.
        """
        _check_text(text)
        self.settings.require_speech()

        url = f"{self.settings.speech_api_url.rstrip('/')}/{voice_id}"
        headers = {
            "Accept": AUDIO_CONTENT_TYPE,
            "Content-Type": "application/json",
            "xi-api-key": self.settings.speech_api_key,
        }
        payload = {
            "text": text,
            "model_id": self.settings.speech_model,
            "voice_settings": {
                "stability": VOICE_STABILITY,
                "similarity_boost": VOICE_SIMILARITY_BOOST,
                "style": VOICE_STYLE,
                "use_speaker_boost": True,
            },
        }

        logger.debug("Synthesizing %r with voice %s", text[:50], voice_id)
        try:
            response = self.session.post(
                url, json=payload, headers=headers, timeout=self.settings.request_timeout,
            )
        except requests.Timeout as e:
            raise ProviderUnavailable(
                f"Speech provider timed out after {self.settings.request_timeout}s"
            ) from e
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Network error reaching speech provider: {e}") from e

        if not response.ok:
            _raise_for_status(response, voice_id)

        audio = response.content
        if not audio:
            raise ProviderEmptyResult(f"Speech provider returned no audio for: {text[:50]}...")
        return audio


def _raise_for_status(response: requests.Response, voice_id: str) -> None:
    status = response.status_code
    body = response.text[:500]
    logger.debug("Speech error %s body: %s", status, body)

    if status in (401, 403):
        raise ProviderAuthError("Invalid speech API key. Check SPEECH_API_KEY.")
    if status == 422:
        raise InvalidVoiceIdentity(voice_id)
    if status in (400, 404) and "voice" in body.lower():
        raise InvalidVoiceIdentity(voice_id)
    if status == 429:
        raise RateLimited("Speech provider rate limit exceeded. Try again later.")
    raise ProviderUnavailable(f"Speech provider error: {status} {response.reason}")


class EdgeVoiceSynthesisClient:
    """Synthesis through edge-tts. Needs no API key; voice IDs are edge voice names.

    Sync wrapper around edge_tts.Communicate(), like the HTTP client, so the
    pipeline treats both the same way.
    """

    def __init__(self, settings: Settings, rate: str = EDGE_TTS_RATE):
        self.settings = settings
        self.rate = rate

    async def _collect(self, text: str, voice_id: str) -> bytes:
        communicate = edge_tts.Communicate(text, voice_id, rate=self.rate)
        audio = bytearray()
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                audio.extend(chunk["data"])
        return bytes(audio)

    def synthesize(self, text: str, voice_id: str) -> bytes:
        _check_text(text)
        self.settings.require_speech()

        try:
            audio = asyncio.run(
                asyncio.wait_for(self._collect(text, voice_id), self.settings.request_timeout)
            )
        except ValueError as e:
            # edge-tts validates the voice name before connecting
            raise InvalidVoiceIdentity(voice_id) from e
        except asyncio.TimeoutError as e:
            raise ProviderUnavailable(
                f"edge-tts timed out after {self.settings.request_timeout}s"
            ) from e
        except NoAudioReceived as e:
            raise ProviderEmptyResult(f"edge-tts returned no audio for: {text[:50]}...") from e
        except Exception as e:
            raise ProviderUnavailable(f"edge-tts request failed: {e}") from e

        if not audio:
            raise ProviderEmptyResult(f"edge-tts returned no audio for: {text[:50]}...")
        return audio


def build_synthesizer(settings: Settings):
    """Pick the synthesis backend named by settings.speech_provider."""
    if settings.speech_provider == "edge":
        return EdgeVoiceSynthesisClient(settings)
    if settings.speech_provider == "elevenlabs":
        return VoiceSynthesisClient(settings)
    raise InvalidSetting(f"Unknown speech provider: {settings.speech_provider}")
