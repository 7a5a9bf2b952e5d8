"""CLI interface with subcommand routing."""

import argparse
import asyncio
import logging
import sys

from podcast_producer.config import Settings
from podcast_producer.constants import DEFAULT_LIST_LIMIT, PODCAST_NAME, TOPIC_SUGGESTION_COUNT, VERSION
from podcast_producer.errors import FailureReason, NotFound, PodcastError
from podcast_producer.models import PipelineState
from podcast_producer.pipeline import PodcastPipeline
from podcast_producer.storage import PodcastStore
from podcast_producer.topics import title_case, topic_suggestions

# Caller-facing guidance per failure reason
GUIDANCE = {
    FailureReason.CONFIGURATION_MISSING: "Check your API keys and SPEAKER_A_VOICE_ID / SPEAKER_B_VOICE_ID settings.",
    FailureReason.AUTHENTICATION_INVALID: "Check that your API keys are valid.",
    FailureReason.RATE_LIMITED: "The provider is rate limiting requests. Wait a moment and try again.",
    FailureReason.NETWORK_UNREACHABLE: "Check your internet connection and try again.",
    FailureReason.MALFORMED_INPUT: "Check the topic and the script format (lines must start with ALEX: or EVAN:).",
    FailureReason.STORAGE_FAILURE: "Check that the output directory and database are writable.",
    FailureReason.CANCELLED: "Generation was cancelled.",
}

STEP_LABELS = {
    PipelineState.SCRIPT_PENDING: "Writing script",
    PipelineState.SCRIPT_READY: "Script saved",
    PipelineState.AUDIO_PENDING: "Generating audio",
    PipelineState.COMPLETE: "Done",
}


def _open_store(settings: Settings) -> PodcastStore:
    return PodcastStore.local(settings.db_path, settings.output_dir)


def _print_progress(state: PipelineState, detail: str) -> None:
    label = STEP_LABELS.get(state)
    if label is None:
        return
    if state is PipelineState.AUDIO_PENDING:
        print(f"  {label} {detail}")
    else:
        print(f"  {label}...")


def _report_error(error: PodcastError) -> None:
    print(f"Error: {error}", file=sys.stderr)
    print(GUIDANCE[error.reason], file=sys.stderr)


def cmd_generate(args, settings: Settings):
    """Generate a podcast for a topic."""
    topic = " ".join(args.topic).strip()
    if not topic:
        print("Error: Topic is required.", file=sys.stderr)
        raise SystemExit(1)

    store = _open_store(settings)
    pipeline = PodcastPipeline.from_settings(
        settings, store, summarize=not args.no_summary, on_progress=_print_progress,
    )

    print(f"Generating {PODCAST_NAME} episode: {title_case(topic)}")
    result = asyncio.run(pipeline.generate(topic))

    if result.record is not None:
        print()
        print(result.record.script)
        print()
        print(f"Podcast ID: {result.record.id}")
        if result.record.summary:
            print(f"Summary: {result.record.summary}")
    if result.ignored_lines:
        print(f"Note: {result.ignored_lines} non-dialogue lines were skipped.")

    if result.complete:
        print(f"Audio: {result.record.audio_location}")
        return

    failure = result.failure
    if result.partial:
        print(f"Script saved, but audio generation failed ({failure.reason.value}).", file=sys.stderr)
    _report_error(failure.error)
    raise SystemExit(1)


def cmd_list(args, settings: Settings):
    """List saved podcasts, newest first."""
    records = _open_store(settings).list(limit=args.limit)
    if not records:
        print("No podcasts found.")
        return
    print("Podcasts:")
    for record in records:
        marker = "[audio]" if record.audio_location else "[-----]"
        created = record.created_at.strftime("%Y-%m-%d %H:%M")
        print(f"  {marker} {record.id}  {created}  {title_case(record.topic)}")


def cmd_show(args, settings: Settings):
    """Show one podcast."""
    try:
        record = _open_store(settings).get(args.id)
    except NotFound:
        print(f"Error: Podcast '{args.id}' not found.", file=sys.stderr)
        raise SystemExit(1)

    print(f"Podcast: {record.id}")
    print(f"Topic:   {title_case(record.topic)}")
    print(f"Created: {record.created_at.isoformat()}")
    print(f"Audio:   {record.audio_location or 'not generated'}")
    if record.summary:
        print(f"Summary: {record.summary}")
    if args.script:
        print()
        print(record.script)


def cmd_delete(args, settings: Settings):
    """Delete a podcast and its audio."""
    store = _open_store(settings)
    try:
        record = store.get(args.id)
    except NotFound:
        print(f"Error: Podcast '{args.id}' not found.", file=sys.stderr)
        raise SystemExit(1)
    store.delete(record.id)
    print(f"Deleted: {title_case(record.topic)} ({record.id})")


def cmd_topics(args, settings: Settings):
    """Print a few random topic ideas."""
    print("Topic ideas:")
    for topic in topic_suggestions(args.count):
        print(f"  {topic}")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="podcast-producer",
        description=f"{PODCAST_NAME} — turn a topic into a two-host podcast episode",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate
    gen_parser = subparsers.add_parser("generate", help="Generate a podcast episode for a topic")
    gen_parser.add_argument("topic", nargs="+", help="Episode topic")
    gen_parser.add_argument("--no-summary", action="store_true", help="Skip summary generation")
    gen_parser.set_defaults(func=cmd_generate)

    # list
    list_parser = subparsers.add_parser("list", help="List saved podcasts")
    list_parser.add_argument("--limit", type=int, default=DEFAULT_LIST_LIMIT, help="Maximum number to show")
    list_parser.set_defaults(func=cmd_list)

    # show
    show_parser = subparsers.add_parser("show", help="Show a saved podcast")
    show_parser.add_argument("id", help="Podcast ID")
    show_parser.add_argument("--script", action="store_true", help="Print the full script")
    show_parser.set_defaults(func=cmd_show)

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete a podcast and its audio")
    delete_parser.add_argument("id", help="Podcast ID")
    delete_parser.set_defaults(func=cmd_delete)

    # topics
    topics_parser = subparsers.add_parser("topics", help="Suggest topics")
    topics_parser.add_argument("--count", type=int, default=TOPIC_SUGGESTION_COUNT, help="Number of suggestions")
    topics_parser.set_defaults(func=cmd_topics)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    try:
        settings = Settings.from_env()
        args.func(args, settings)
    except PodcastError as e:
        _report_error(e)
        raise SystemExit(1)
