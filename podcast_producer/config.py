"""Environment-backed settings for the providers and the local store."""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from podcast_producer.constants import (
    AUDIO_ASSEMBLY,
    COMPLETION_API_URL,
    COMPLETION_MODEL,
    OUTPUT_DIR,
    DB_FILENAME,
    REQUEST_TIMEOUT,
    SPEECH_API_URL,
    SPEECH_MODEL,
    SPEECH_PROVIDER,
)
from podcast_producer.errors import ConfigurationMissing, InvalidSetting
from podcast_producer.models import Speaker

# Canonical name → names accepted as a fallback (first hit wins)
ENV_ALIASES = {
    "COMPLETION_API_KEY": ["OPENAI_API_KEY"],
    "SPEECH_API_KEY": ["ELEVENLABS_API_KEY"],
    "SPEAKER_A_VOICE_ID": ["ALEX_VOICE_ID"],
    "SPEAKER_B_VOICE_ID": ["EVAN_VOICE_ID"],
}


def _env(environ, name: str, default: str = "") -> str:
    for key in [name] + ENV_ALIASES.get(name, []):
        value = environ.get(key, "").strip()
        if value:
            return value
    return default


@dataclass
class Settings:
    completion_api_key: str = ""
    speech_api_key: str = ""
    speaker_a_voice_id: str = ""
    speaker_b_voice_id: str = ""
    completion_api_url: str = COMPLETION_API_URL
    completion_model: str = COMPLETION_MODEL
    speech_api_url: str = SPEECH_API_URL
    speech_model: str = SPEECH_MODEL
    speech_provider: str = SPEECH_PROVIDER
    request_timeout: float = REQUEST_TIMEOUT
    output_dir: str = OUTPUT_DIR
    db_path: str = ""
    audio_assembly: str = AUDIO_ASSEMBLY

    def __post_init__(self):
        if not self.db_path:
            self.db_path = os.path.join(self.output_dir, DB_FILENAME)

    @classmethod
    def from_env(cls, environ=None, dotenv: bool = True) -> "Settings":
        """Build settings from the process environment.

        A .env file in the working directory is loaded first unless dotenv is
        False. Missing credentials are not an error here; they are reported
        when a capability that needs them is first used.
        """
        if environ is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True))
            environ = os.environ

        timeout_raw = _env(environ, "REQUEST_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else REQUEST_TIMEOUT
        except ValueError:
            raise InvalidSetting(f"REQUEST_TIMEOUT must be a number of seconds, got {timeout_raw!r}") from None

        output_dir = _env(environ, "PODCAST_OUTPUT_DIR", OUTPUT_DIR)
        return cls(
            completion_api_key=_env(environ, "COMPLETION_API_KEY"),
            speech_api_key=_env(environ, "SPEECH_API_KEY"),
            speaker_a_voice_id=_env(environ, "SPEAKER_A_VOICE_ID"),
            speaker_b_voice_id=_env(environ, "SPEAKER_B_VOICE_ID"),
            completion_api_url=_env(environ, "COMPLETION_API_URL", COMPLETION_API_URL),
            completion_model=_env(environ, "COMPLETION_MODEL", COMPLETION_MODEL),
            speech_api_url=_env(environ, "SPEECH_API_URL", SPEECH_API_URL),
            speech_model=_env(environ, "SPEECH_MODEL", SPEECH_MODEL),
            speech_provider=_env(environ, "SPEECH_PROVIDER", SPEECH_PROVIDER).lower(),
            request_timeout=timeout,
            output_dir=output_dir,
            db_path=_env(environ, "PODCAST_DB_PATH"),
            audio_assembly=_env(environ, "AUDIO_ASSEMBLY", AUDIO_ASSEMBLY).lower(),
        )

    def require_completion(self) -> None:
        if not self.completion_api_key:
            raise ConfigurationMissing(["COMPLETION_API_KEY"])

    def require_speech(self) -> None:
        """Check the speech credential and both voice IDs, reporting all gaps at once."""
        missing = []
        if self.speech_provider != "edge" and not self.speech_api_key:
            missing.append("SPEECH_API_KEY")
        if not self.speaker_a_voice_id:
            missing.append("SPEAKER_A_VOICE_ID")
        if not self.speaker_b_voice_id:
            missing.append("SPEAKER_B_VOICE_ID")
        if missing:
            raise ConfigurationMissing(missing)

    def voice_map(self) -> dict[Speaker, str]:
        return {
            Speaker.ALEX: self.speaker_a_voice_id,
            Speaker.EVAN: self.speaker_b_voice_id,
        }
