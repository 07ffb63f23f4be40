"""Constants and configuration for the liked albums viewer."""

import logging
import sys

# --- Album matching ---
SAME_ARTIST_SIMILARITY_THRESHOLD = 0.8
# Only consulted when the primary artists differ, which never reaches scoring.
CROSS_ARTIST_SIMILARITY_THRESHOLD = 0.9

# --- Sorting ---
DEFAULT_SORT = "count-desc"
ALBUM_SORT_CHOICES = ("count-desc", "count-asc", "name-asc", "name-desc", "artist-asc", "artist-desc")
ARTIST_SORT_CHOICES = ("count-desc", "count-asc", "name-asc", "name-desc", "albums-desc")

# --- Spotify API ---
SPOTIFY_SCOPE = "user-library-read"
SPOTIFY_DEFAULT_REDIRECT_URI = "http://127.0.0.1:8080/callback"
SAVED_TRACKS_PAGE_LIMIT = 50  # Maximum allowed by the Web API
SPOTIFY_REQUEST_TIMEOUT_SEC = 30

# --- UI ---
ALBUM_NAME_MAX_LEN = 48
VARIANTS_DISPLAY_MAX = 3

# --- Retry ---
RETRY_MAX_ATTEMPTS = 3
RETRY_BASE_DELAY_SEC = 1.0
RETRY_MAX_DELAY_SEC = 10.0

# --- File permissions (octal) ---
CONFIG_FILE_MODE = 0o600  # Owner read/write only
CONFIG_DIR_MODE = 0o700   # Owner read/write/execute only

# --- Logging ---
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.WARNING

    # Configure root logger
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Create app logger
    logger = logging.getLogger("likedalbums")
    logger.setLevel(level)

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("spotipy").setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module."""
    return logging.getLogger(f"likedalbums.{name}")
