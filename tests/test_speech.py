"""Tests for the text-to-speech adapters."""

from unittest.mock import patch, MagicMock

import pytest
import requests
from edge_tts.exceptions import NoAudioReceived

from podcast_producer.errors import (
    ConfigurationMissing,
    InvalidSetting,
    InvalidVoiceIdentity,
    ProviderAuthError,
    ProviderEmptyResult,
    ProviderUnavailable,
    RateLimited,
    ValidationError,
)
from podcast_producer.speech import (
    EdgeVoiceSynthesisClient,
    VoiceSynthesisClient,
    build_synthesizer,
)


def _response(status=200, content=b"ID3audio", text="", reason="OK"):
    response = MagicMock()
    response.status_code = status
    response.ok = status < 400
    response.content = content
    response.text = text
    response.reason = reason
    return response


def _client(settings, response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return VoiceSynthesisClient(settings, session=session), session


# --- ElevenLabs HTTP client ---

def test_synthesize_returns_audio(settings):
    client, _ = _client(settings, _response(content=b"\xff\xfbMP3"))
    assert client.synthesize("Hello there", "voice-alex") == b"\xff\xfbMP3"


def test_synthesize_request_shape(settings):
    """Voice ID in the path, key in the header, bounded timeout."""
    client, session = _client(settings, _response())
    client.synthesize("Hello there", "voice-alex")

    args, kwargs = session.post.call_args
    assert args[0] == f"{settings.speech_api_url}/voice-alex"
    assert kwargs["headers"]["xi-api-key"] == "xi-test"
    assert kwargs["headers"]["Accept"] == "audio/mpeg"
    assert kwargs["json"]["text"] == "Hello there"
    assert kwargs["json"]["model_id"] == settings.speech_model
    assert kwargs["timeout"] == settings.request_timeout


@pytest.mark.parametrize("status,error", [
    (401, ProviderAuthError),
    (403, ProviderAuthError),
    (422, InvalidVoiceIdentity),
    (429, RateLimited),
    (500, ProviderUnavailable),
    (502, ProviderUnavailable),
])
def test_status_classification(settings, status, error):
    client, _ = _client(settings, _response(status=status))
    with pytest.raises(error):
        client.synthesize("Hello", "voice-alex")


def test_not_found_voice_is_invalid_voice(settings):
    body = '{"detail": {"status": "voice_not_found", "message": "A voice with that ID does not exist"}}'
    client, _ = _client(settings, _response(status=404, text=body))
    with pytest.raises(InvalidVoiceIdentity) as exc:
        client.synthesize("Hello", "bogus")
    assert exc.value.voice_id == "bogus"


def test_not_found_without_voice_is_unavailable(settings):
    client, _ = _client(settings, _response(status=404, text="no such route"))
    with pytest.raises(ProviderUnavailable):
        client.synthesize("Hello", "voice-alex")


def test_timeout_is_unavailable(settings):
    client, _ = _client(settings, error=requests.Timeout("read timed out"))
    with pytest.raises(ProviderUnavailable, match="timed out"):
        client.synthesize("Hello", "voice-alex")


def test_connection_error_is_unavailable(settings):
    client, _ = _client(settings, error=requests.ConnectionError("unreachable"))
    with pytest.raises(ProviderUnavailable):
        client.synthesize("Hello", "voice-alex")


def test_empty_audio(settings):
    client, _ = _client(settings, _response(content=b""))
    with pytest.raises(ProviderEmptyResult):
        client.synthesize("Hello", "voice-alex")


def test_missing_key_checked_before_request(settings):
    settings.speech_api_key = ""
    client, session = _client(settings, _response())
    with pytest.raises(ConfigurationMissing):
        client.synthesize("Hello", "voice-alex")
    session.post.assert_not_called()


def test_empty_text_rejected(settings):
    client, session = _client(settings, _response())
    with pytest.raises(ValidationError):
        client.synthesize("   ", "voice-alex")
    session.post.assert_not_called()


# --- edge-tts client ---

def _mock_communicate(chunks=None, error=None):
    """Create a mock edge_tts.Communicate factory streaming the given chunks."""
    def factory(text, voice, **kwargs):
        if error is not None and isinstance(error, ValueError):
            raise error
        mock = MagicMock()
        async def stream():
            if error is not None:
                raise error
            for chunk in chunks or []:
                yield chunk
        mock.stream = stream
        return mock
    return factory


@patch("podcast_producer.speech.edge_tts.Communicate")
def test_edge_collects_audio_chunks(mock_comm, settings):
    settings.speech_provider = "edge"
    mock_comm.side_effect = _mock_communicate([
        {"type": "audio", "data": b"ab"},
        {"type": "WordBoundary", "offset": 0},
        {"type": "audio", "data": b"cd"},
    ])
    audio = EdgeVoiceSynthesisClient(settings).synthesize("Hello", "en-US-AriaNeural")
    assert audio == b"abcd"


@patch("podcast_producer.speech.edge_tts.Communicate")
def test_edge_invalid_voice(mock_comm, settings):
    mock_comm.side_effect = _mock_communicate(error=ValueError("Invalid voice 'nope'"))
    with pytest.raises(InvalidVoiceIdentity):
        EdgeVoiceSynthesisClient(settings).synthesize("Hello", "nope")


@patch("podcast_producer.speech.edge_tts.Communicate")
def test_edge_no_audio(mock_comm, settings):
    mock_comm.side_effect = _mock_communicate(error=NoAudioReceived("nothing"))
    with pytest.raises(ProviderEmptyResult):
        EdgeVoiceSynthesisClient(settings).synthesize("Hello", "en-US-AriaNeural")


@patch("podcast_producer.speech.edge_tts.Communicate")
def test_edge_network_failure(mock_comm, settings):
    mock_comm.side_effect = _mock_communicate(error=OSError("connection reset"))
    with pytest.raises(ProviderUnavailable):
        EdgeVoiceSynthesisClient(settings).synthesize("Hello", "en-US-AriaNeural")


@patch("podcast_producer.speech.edge_tts.Communicate")
def test_edge_empty_stream(mock_comm, settings):
    mock_comm.side_effect = _mock_communicate([{"type": "WordBoundary"}])
    with pytest.raises(ProviderEmptyResult):
        EdgeVoiceSynthesisClient(settings).synthesize("Hello", "en-US-AriaNeural")


def test_build_synthesizer(settings):
    assert isinstance(build_synthesizer(settings), VoiceSynthesisClient)
    settings.speech_provider = "edge"
    assert isinstance(build_synthesizer(settings), EdgeVoiceSynthesisClient)
    settings.speech_provider = "other"
    with pytest.raises(InvalidSetting, match="Unknown speech provider"):
        build_synthesizer(settings)
