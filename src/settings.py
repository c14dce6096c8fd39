"""Static settings for taskbar-twitch.

User-editable settings (credentials, channels, player) live in a single JSON
file that is re-read while the app runs; the values here are the fixed
timings and endpoints the loops are built with.
"""

import os

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# The channels file can live anywhere; the env var lets a shortcut point at it.
CONFIG_PATH = os.getenv("TASKBAR_TWITCH_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))

# Credentials may be kept out of the channels file via .env.
ENV_CLIENT_ID = "TWITCH_CLIENT_ID"
ENV_CLIENT_SECRET = "TWITCH_CLIENT_SECRET"

# Status poller timings.
# - UPDATE_CHANNELS_INTERVAL: idle wait between two status queries
# - MAX_RETRIES: extra attempts after a transport failure
# - RETRY_DELAY: fixed pause between attempts
UPDATE_CHANNELS_INTERVAL = 60
MAX_RETRIES = 3
RETRY_DELAY = 1

# Config watcher re-read interval.
READ_CONFIG_INTERVAL = 3

# Per-request timeout for both Twitch endpoints.
HTTP_TIMEOUT = 10

# Helix accepts at most 100 user_login filters per request.
STREAMS_CHUNK_SIZE = 100

TOKEN_URL = "https://id.twitch.tv/oauth2/token"
STREAMS_URL = "https://api.twitch.tv/helix/streams"

LOG_PATH = os.path.join(PROJECT_ROOT, "logs", "taskbar-twitch.log")
