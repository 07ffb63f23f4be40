from pathlib import Path
from typing import Callable, Optional

import spotipy
from spotipy.cache_handler import CacheFileHandler
from spotipy.oauth2 import SpotifyPKCE

from likedalbums.constants import (
    SAVED_TRACKS_PAGE_LIMIT,
    SPOTIFY_DEFAULT_REDIRECT_URI,
    SPOTIFY_REQUEST_TIMEOUT_SEC,
    SPOTIFY_SCOPE,
    get_logger,
)
from likedalbums.models import SavedTrack
from likedalbums.retry import retry_with_backoff

logger = get_logger("spotify")

ProgressCallback = Callable[[int, int], None]


class SpotifyFetchError(RuntimeError):
    pass


class SpotifyClient:
    """Read-only access to the user's Spotify library, authorized with PKCE."""

    def __init__(
        self,
        client_id: Optional[str] = None,
        redirect_uri: str = SPOTIFY_DEFAULT_REDIRECT_URI,
        token_cache: Optional[Path] = None,
        client: Optional[spotipy.Spotify] = None,
    ):
        if client is not None:
            self.client = client
            return
        if not client_id:
            raise ValueError("A Spotify client ID is required")

        cache_handler = CacheFileHandler(cache_path=str(token_cache)) if token_cache else None
        self.client = spotipy.Spotify(
            auth_manager=SpotifyPKCE(
                client_id=client_id,
                redirect_uri=redirect_uri,
                scope=SPOTIFY_SCOPE,
                cache_handler=cache_handler,
                open_browser=True,
            ),
            requests_timeout=SPOTIFY_REQUEST_TIMEOUT_SEC,
        )

    def get_current_user(self) -> dict:
        return self.client.current_user()

    def get_saved_tracks(self, progress_callback: Optional[ProgressCallback] = None) -> list[SavedTrack]:
        """Fetch the whole saved tracks library, one page of `/me/tracks` at a time."""
        offset = 0
        raw_items: list[dict] = []

        while True:
            page = self._fetch_page(offset)
            if page is None:
                raise SpotifyFetchError(f"Could not fetch saved tracks at offset {offset}")

            items = page.get("items") or []
            raw_items.extend(items)
            total = page.get("total") or len(raw_items)
            if progress_callback:
                progress_callback(len(raw_items), total)

            offset += SAVED_TRACKS_PAGE_LIMIT
            if not items or not page.get("next") or offset >= total:
                break

        tracks = self._extract_tracks(raw_items)
        logger.info(f"Fetched {len(tracks)} saved tracks")
        return tracks

    @retry_with_backoff()
    def _fetch_page(self, offset: int) -> dict:
        return self.client.current_user_saved_tracks(limit=SAVED_TRACKS_PAGE_LIMIT, offset=offset)

    @staticmethod
    def _extract_tracks(items: list[dict]) -> list[SavedTrack]:
        extracted: list[SavedTrack] = []
        for item in items:
            track = SavedTrack.from_api(item)
            if track is None:
                continue
            extracted.append(track)

        skipped = len(items) - len(extracted)
        if skipped:
            logger.debug(f"Skipped {skipped} saved items without a track or album id")
        return extracted
