"""Split a generated script into attributed dialogue segments."""

from podcast_producer.models import ScriptBreakdown, Segment, Speaker

# Tag → speaker, the one place the text convention is decoded
SPEAKER_TAGS = {speaker.tag: speaker for speaker in Speaker}


def _match_speaker(line: str) -> tuple[Speaker | None, str]:
    """Return (speaker, remainder) for a tagged line, (None, line) otherwise.

    Tags are matched case-sensitively at the very start of the trimmed line.
    """
    for tag, speaker in SPEAKER_TAGS.items():
        if line.startswith(tag):
            return speaker, line[len(tag):].strip()
    return None, line


def breakdown(script: str) -> ScriptBreakdown:
    """Parse script text into segments and count the lines that were dropped.

    Blank lines are not counted as ignored; stage directions, narrator asides
    and tagged lines with nothing after the tag are.
    """
    segments = []
    ignored = 0

    for raw_line in script.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        speaker, text = _match_speaker(line)
        if speaker is None or not text:
            ignored += 1
            continue

        segments.append(Segment(speaker=speaker, text=text))

    return ScriptBreakdown(segments=segments, ignored_lines=ignored)


def segment(script: str) -> list[Segment]:
    """Parse script text into an ordered list of Segments.

    Order follows the script exactly. An empty result is not an error here;
    the pipeline reports it as NoDialogueFound.
    """
    return breakdown(script).segments
