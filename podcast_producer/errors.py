"""Error taxonomy shared by the providers, the store and the pipeline.

Every error carries a ``reason`` from a fixed enumeration so callers can
render actionable guidance without inspecting provider responses.
"""

from enum import Enum


class FailureReason(Enum):
    CONFIGURATION_MISSING = "configuration missing"
    AUTHENTICATION_INVALID = "authentication invalid"
    RATE_LIMITED = "rate limited"
    NETWORK_UNREACHABLE = "network unreachable"
    MALFORMED_INPUT = "malformed input"
    STORAGE_FAILURE = "storage failure"
    CANCELLED = "cancelled"


class PodcastError(Exception):
    reason = FailureReason.MALFORMED_INPUT


class ValidationError(PodcastError):
    reason = FailureReason.MALFORMED_INPUT


class ConfigurationMissing(PodcastError):
    reason = FailureReason.CONFIGURATION_MISSING

    def __init__(self, names: list[str]):
        self.names = list(names)
        super().__init__(f"Missing configuration: {', '.join(self.names)}")


class ProviderAuthError(PodcastError):
    reason = FailureReason.AUTHENTICATION_INVALID


class ProviderUnavailable(PodcastError):
    reason = FailureReason.NETWORK_UNREACHABLE


class RateLimited(PodcastError):
    reason = FailureReason.RATE_LIMITED


class InvalidVoiceIdentity(PodcastError):
    reason = FailureReason.CONFIGURATION_MISSING

    def __init__(self, voice_id: str):
        self.voice_id = voice_id
        super().__init__(f"Invalid voice ID: {voice_id}")


class ProviderEmptyResult(PodcastError):
    reason = FailureReason.MALFORMED_INPUT


class NoDialogueFound(PodcastError):
    reason = FailureReason.MALFORMED_INPUT


class EmptyInput(PodcastError):
    reason = FailureReason.MALFORMED_INPUT


class PersistenceError(PodcastError):
    reason = FailureReason.STORAGE_FAILURE


class NotFound(PodcastError):
    reason = FailureReason.MALFORMED_INPUT

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Podcast not found: {record_id}")


class Cancelled(PodcastError):
    reason = FailureReason.CANCELLED


class InvalidSetting(PodcastError, ValueError):
    """A configured value is present but unusable."""

    reason = FailureReason.CONFIGURATION_MISSING


class AssemblyError(PodcastError):
    reason = FailureReason.MALFORMED_INPUT
