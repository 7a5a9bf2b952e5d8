"""Prompt templates for script and summary generation.

Host names come from the Speaker enum so the prompt and the segmenter always
agree on the speaker tags.
"""

from podcast_producer.constants import PODCAST_NAME, SIGN_OFF
from podcast_producer.models import Speaker

_A = Speaker.ALEX
_B = Speaker.EVAN

SCRIPT_SYSTEM_PROMPT = (
    "You are a podcast script writer who creates natural, engaging conversations "
    "between two hosts. Focus on making the dialogue feel authentic and "
    "conversational, not scripted."
)

SCRIPT_PROMPT_TEMPLATE = f"""Create a natural, conversational 3-5 minute podcast script for "{PODCAST_NAME}" with hosts {_A.display_name} and {_B.display_name} discussing: {{topic}}

Requirements:
- {_A.display_name} starts with opening introduction mentioning "{PODCAST_NAME}"
- Natural, engaging dialogue with balanced contributions
- Clear speaker labels ({_A.tag} and {_B.tag}) at the start of every spoken line
- Casual, friendly tone between hosts
- Include natural transitions and conversational elements
- {_A.display_name} closes with "{SIGN_OFF}"
- Format for text-to-speech with proper pacing and natural pauses

Structure:
1. Opening ({_A.display_name} introduces the podcast)
2. Topic introduction and discussion
3. Main conversation with back-and-forth dialogue
4. Closing remarks ({_A.display_name} with signature sign-off)

Make it sound like two friends having an interesting conversation, not a formal interview."""

SUMMARY_SYSTEM_PROMPT = (
    "You are a podcast summary writer who creates compelling, concise episode "
    "descriptions that entice listeners while accurately representing the content."
)

SUMMARY_PROMPT_TEMPLATE = f"""Create a concise, engaging 2-3 sentence summary of this {PODCAST_NAME} podcast episode about "{{topic}}".

The summary should:
- Capture the main points discussed by hosts {_A.display_name} and {_B.display_name}
- Be engaging and make people want to listen
- Highlight what makes this episode interesting or unique
- Use an enthusiastic but professional tone
- Be around 40-60 words total

Podcast Script:
{{script}}

Write only the summary, no additional text or formatting."""

FALLBACK_SUMMARY_TEMPLATE = (
    f"A fascinating discussion between {_A.display_name} and {_B.display_name} "
    "exploring {topic}. The hosts dive deep into the topic, sharing insights and "
    "perspectives that make complex ideas accessible and engaging."
)


def script_prompt(topic: str) -> str:
    return SCRIPT_PROMPT_TEMPLATE.format(topic=topic)


def summary_prompt(script: str, topic: str) -> str:
    return SUMMARY_PROMPT_TEMPLATE.format(script=script, topic=topic)


def fallback_summary(topic: str) -> str:
    return FALLBACK_SUMMARY_TEMPLATE.format(topic=topic.lower())
