"""Script and summary generation via a chat-completion provider."""

import logging

import requests

from podcast_producer import prompts
from podcast_producer.config import Settings
from podcast_producer.constants import (
    COMPLETION_TEMPERATURE,
    SCRIPT_MAX_TOKENS,
    SUMMARY_MAX_TOKENS,
)
from podcast_producer.errors import (
    PodcastError,
    ProviderAuthError,
    ProviderEmptyResult,
    ProviderUnavailable,
    RateLimited,
)

logger = logging.getLogger(__name__)


class CompletionProvider:
    """Thin adapter over an OpenAI-compatible /chat/completions endpoint.

    Owns credential checks and the mapping from HTTP outcomes to the error
    taxonomy; callers only see classified PodcastErrors.
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def complete(self, system: str, prompt: str, max_tokens: int) -> str:
        self.settings.require_completion()

        payload = {
            "model": self.settings.completion_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": COMPLETION_TEMPERATURE,
        }
        headers = {
            "Authorization": f"Bearer {self.settings.completion_api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(
                self.settings.completion_api_url,
                json=payload,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
        except requests.Timeout as e:
            raise ProviderUnavailable(
                f"Completion provider timed out after {self.settings.request_timeout}s"
            ) from e
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Network error reaching completion provider: {e}") from e

        if not response.ok:
            logger.debug("Completion error body: %s", response.text[:500])
            if response.status_code in (401, 403):
                raise ProviderAuthError("Invalid completion API key. Check COMPLETION_API_KEY.")
            if response.status_code == 429:
                raise RateLimited("Completion provider rate limit exceeded. Try again later.")
            raise ProviderUnavailable(
                f"Completion provider error: {response.status_code} {response.reason}"
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderEmptyResult("Completion provider returned no usable text") from e

        if not content or not content.strip():
            raise ProviderEmptyResult("Completion provider returned no usable text")
        return content


class ScriptGenerationClient:
    def __init__(self, provider: CompletionProvider):
        self.provider = provider

    def generate(self, topic: str) -> str:
        """Generate a two-host script for topic. Raises classified PodcastErrors."""
        logger.info("Generating script for topic: %s", topic)
        script = self.provider.complete(
            prompts.SCRIPT_SYSTEM_PROMPT,
            prompts.script_prompt(topic),
            SCRIPT_MAX_TOKENS,
        )
        return script.strip()


class SummaryGenerationClient:
    def __init__(self, provider: CompletionProvider):
        self.provider = provider

    def summarize(self, script: str, topic: str) -> str:
        """Return a short summary, or the templated fallback if the call fails.

        Summaries are decoration: no provider failure escapes this method.
        """
        try:
            summary = self.provider.complete(
                prompts.SUMMARY_SYSTEM_PROMPT,
                prompts.summary_prompt(script, topic),
                SUMMARY_MAX_TOKENS,
            )
        except PodcastError as e:
            logger.warning("Summary generation failed (%s), using fallback", e)
            return prompts.fallback_summary(topic)
        return summary.strip()
