# constants.py
# Defaults consumed by the tracker pipeline. TrackerConfig copies these; change them there per deployment.

CLOSE_GAME_THRESHOLD = 5  # points
REFRESH_INTERVAL_MINUTES = 5
RECENT_LIMIT = 5
UPCOMING_LIMIT = 5
TOP_N = 5
MAX_LIST_LIMIT = 10

# Seeds and rounds
MIN_SEED = 1
MAX_SEED = 16

# Formatting
AVG_PLACES = 1
TITLE = "NCAA Tournament Tracker 2025"
TIME_ZONE_LABEL = "ET"  # provider DateTime values are US/Eastern wall-clock

STATUS_SCHEDULED = "Scheduled"
STATUS_IN_PROGRESS = "InProgress"
STATUS_FINAL = "Final"

EMOJI_FINAL = "🏁"
EMOJI_LIVE = "🏀"
EMOJI_SCHEDULED = "📅"
UPSET_MARKER = "🚨 UPSET! 🚨"
CLOSE_ALERT_TITLE = "🔥 *CLOSE GAME ALERT* 🔥"

# Throttling defaults
DEFAULT_MIN_INTERVAL_SEC = 0.10
DEFAULT_TIMEOUT_SEC = 20.0
