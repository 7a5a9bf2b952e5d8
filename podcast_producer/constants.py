"""All magic numbers and configuration constants."""

PODCAST_NAME = "Brainwaves"
HOST_A = "ALEX"                              # opens and closes every episode
HOST_B = "EVAN"
SIGN_OFF = "Thank you for riding the Brainwaves with me and Evan!"

COMPLETION_API_URL = "https://api.openai.com/v1/chat/completions"
COMPLETION_MODEL = "gpt-4"
SCRIPT_MAX_TOKENS = 2000
SUMMARY_MAX_TOKENS = 150
COMPLETION_TEMPERATURE = 0.7

SPEECH_API_URL = "https://api.elevenlabs.io/v1/text-to-speech"
SPEECH_MODEL = "eleven_monolingual_v1"
SPEECH_PROVIDER = "elevenlabs"               # "elevenlabs" or "edge"
VOICE_STABILITY = 0.5
VOICE_SIMILARITY_BOOST = 0.5
VOICE_STYLE = 0.5
EDGE_TTS_RATE = "+0%"                        # edge-tts relative speech rate

REQUEST_TIMEOUT = 60.0                       # seconds per outbound provider call
AUDIO_CONTENT_TYPE = "audio/mpeg"
AUDIO_EXTENSION = "mp3"
AUDIO_ASSEMBLY = "concat"                    # "concat" or "reencode"
OUTPUT_BITRATE = "128k"                      # used by the reencode policy only

OUTPUT_DIR = "output"
DB_FILENAME = "podcasts.db"
AUDIO_SUBDIR = "audio"
DEFAULT_LIST_LIMIT = 10
TOPIC_SUGGESTION_COUNT = 6
VERSION = "0.1.0"
