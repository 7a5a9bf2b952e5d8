"""Topic text helpers: title casing and random topic suggestions."""

import random

from podcast_producer.constants import TOPIC_SUGGESTION_COUNT

# Kept lower-case in titles unless first or last
MINOR_WORDS = {
    "a", "an", "and", "as", "at", "but", "by", "for", "if", "in", "nor", "of",
    "on", "or", "so", "the", "to", "up", "yet", "with", "from", "into", "onto",
    "upon", "over", "under", "above", "below", "across", "through", "during",
    "before", "after", "until", "while", "since",
}

SUGGESTED_TOPICS = [
    "Future of Artificial Intelligence",
    "Climate Change Solutions",
    "Space Exploration",
    "Mental Health Awareness",
    "Renewable Energy",
    "Digital Privacy Rights",
    "Ocean Conservation",
    "Quantum Computing",
    "Gene Therapy Advances",
    "Virtual Reality Evolution",
    "Sustainable Agriculture",
    "Cryptocurrency Impact",
    "Brain-Computer Interfaces",
    "Mars Colonization",
    "Social Media Psychology",
    "Electric Vehicle Revolution",
    "Personalized Medicine",
    "Smart City Development",
    "Biodiversity Crisis",
    "Automation and Jobs",
    "Nuclear Fusion Energy",
    "Memory Enhancement",
    "Vertical Farming",
    "Deepfake Technology",
    "Longevity Research",
    "Microplastic Pollution",
    "Augmented Reality",
    "Carbon Capture Methods",
    "Synthetic Biology",
    "Digital Detox Benefits",
]


def title_case(text: str) -> str:
    """Title-case a topic.

    "the future of ai" → "The Future of Ai"
    """
    words = text.lower().split()
    result = []
    for i, word in enumerate(words):
        if 0 < i < len(words) - 1 and word in MINOR_WORDS:
            result.append(word)
        else:
            result.append(word[:1].upper() + word[1:])
    return " ".join(result)


def topic_suggestions(count: int = TOPIC_SUGGESTION_COUNT, rng: random.Random | None = None) -> list[str]:
    """Pick count distinct topics from the suggestion pool."""
    rng = rng or random
    return rng.sample(SUGGESTED_TOPICS, min(count, len(SUGGESTED_TOPICS)))
