from typing import Optional, Sequence

from likedalbums.clients.spotify_client import ProgressCallback, SpotifyClient
from likedalbums.constants import DEFAULT_SORT, get_logger
from likedalbums.models import ArtistStats, ArtistSummary, LibraryStats, MergedAlbum, SavedTrack
from likedalbums.processor import (
    album_stats,
    artist_stats,
    process_artists,
    process_tracks,
    search_albums,
    search_artists,
    sort_albums,
    sort_artists,
)

logger = get_logger("service")


class LibraryCache:
    """Saved tracks fetched once and reused until invalidated by the owner."""

    def __init__(self) -> None:
        self._tracks: Optional[list[SavedTrack]] = None

    @property
    def is_empty(self) -> bool:
        return self._tracks is None

    def get(self) -> Optional[list[SavedTrack]]:
        return self._tracks

    def store(self, tracks: Sequence[SavedTrack]) -> None:
        self._tracks = list(tracks)

    def invalidate(self) -> None:
        self._tracks = None


class LibraryService:
    def __init__(self, spotify_client: SpotifyClient, cache: Optional[LibraryCache] = None):
        self.spotify = spotify_client
        self.cache = cache if cache is not None else LibraryCache()

    def load_saved_tracks(
        self,
        refresh: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> list[SavedTrack]:
        if refresh:
            self.cache.invalidate()

        cached = self.cache.get()
        if cached is not None:
            logger.debug(f"Using {len(cached)} cached saved tracks")
            return cached

        tracks = self.spotify.get_saved_tracks(progress_callback=progress_callback)
        self.cache.store(tracks)
        return tracks

    def albums(
        self,
        sort_by: str = DEFAULT_SORT,
        query: Optional[str] = None,
        refresh: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> list[MergedAlbum]:
        tracks = self.load_saved_tracks(refresh=refresh, progress_callback=progress_callback)
        albums = process_tracks(tracks)
        if sort_by != DEFAULT_SORT:
            albums = sort_albums(albums, sort_by)
        return list(search_albums(albums, query))

    def artists(
        self,
        sort_by: str = DEFAULT_SORT,
        query: Optional[str] = None,
        refresh: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> list[ArtistSummary]:
        tracks = self.load_saved_tracks(refresh=refresh, progress_callback=progress_callback)
        artists = process_artists(tracks)
        if sort_by != DEFAULT_SORT:
            artists = sort_artists(artists, sort_by)
        return list(search_artists(artists, query))

    @staticmethod
    def stats(albums: Sequence[MergedAlbum]) -> LibraryStats:
        return album_stats(albums)

    @staticmethod
    def artist_stats(artists: Sequence[ArtistSummary]) -> ArtistStats:
        return artist_stats(artists)

    def reset(self) -> None:
        self.cache.invalidate()
