"""Configuration management with secure file storage."""

import json
import os
import stat
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from likedalbums.constants import CONFIG_FILE_MODE, CONFIG_DIR_MODE, SPOTIFY_DEFAULT_REDIRECT_URI, get_logger

logger = get_logger("config")

CONFIG_DIR = Path.home() / ".config" / "liked-albums"
CONFIG_FILE = CONFIG_DIR / "config.json"
TOKEN_CACHE_FILE = CONFIG_DIR / "spotify_token.json"


def _secure_mkdir(path: Path) -> None:
    """Create directory with secure permissions."""
    path.mkdir(parents=True, exist_ok=True)
    try:
        os.chmod(path, CONFIG_DIR_MODE)
    except OSError as e:
        logger.warning(f"Could not restrict permissions on directory {path}: {e}")


def _secure_write(path: Path, data: dict) -> None:
    """Write JSON file with secure permissions."""
    _secure_mkdir(path.parent)

    with open(path, "w") as f:
        json.dump(data, f, indent=2)

    try:
        os.chmod(path, CONFIG_FILE_MODE)
    except OSError as e:
        logger.warning(f"Could not restrict permissions on file {path}: {e}")


def _check_permissions(path: Path) -> None:
    """Warn if file has insecure permissions."""
    if not path.exists():
        return

    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
        if mode & (stat.S_IRWXG | stat.S_IRWXO):  # Group or other has access
            logger.warning(
                f"File {path} has insecure permissions ({oct(mode)}). "
                f"Recommended: chmod 600 {path}"
            )
    except OSError:
        pass


@dataclass
class Config:
    spotify_client_id: Optional[str] = None
    redirect_uri: str = SPOTIFY_DEFAULT_REDIRECT_URI

    def save(self) -> None:
        """Save config with secure file permissions."""
        _secure_write(CONFIG_FILE, asdict(self))
        logger.debug(f"Config saved to {CONFIG_FILE}")

    @classmethod
    def load(cls) -> "Config":
        """Load config from file, then apply environment overrides."""
        config = cls._load_file()
        client_id = os.environ.get("SPOTIFY_CLIENT_ID")
        if client_id:
            config.spotify_client_id = client_id
        redirect_uri = os.environ.get("SPOTIFY_REDIRECT_URI")
        if redirect_uri:
            config.redirect_uri = redirect_uri
        return config

    @classmethod
    def _load_file(cls) -> "Config":
        if not CONFIG_FILE.exists():
            return cls()

        _check_permissions(CONFIG_FILE)

        try:
            with open(CONFIG_FILE) as f:
                data = json.load(f)
            logger.debug(f"Config loaded from {CONFIG_FILE}")
            return cls(**data)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Could not read config: {e}")
            return cls()


def token_cache_path() -> Path:
    """Location of the cached Spotify token; the directory is created owner-only."""
    _secure_mkdir(TOKEN_CACHE_FILE.parent)
    _check_permissions(TOKEN_CACHE_FILE)
    return TOKEN_CACHE_FILE


def clear_token_cache() -> bool:
    """Forget the stored Spotify login. Returns True if a token was removed."""
    try:
        TOKEN_CACHE_FILE.unlink()
    except FileNotFoundError:
        return False
    logger.debug("Spotify token removed")
    return True
