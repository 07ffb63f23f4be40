"""Turn a flat list of saved tracks into consolidated album and artist views."""

import unicodedata
from typing import Iterable, Optional, Sequence

from likedalbums.constants import (
    CROSS_ARTIST_SIMILARITY_THRESHOLD,
    DEFAULT_SORT,
    SAME_ARTIST_SIMILARITY_THRESHOLD,
    get_logger,
)
from likedalbums.models import (
    AlbumAggregate,
    ArtistStats,
    ArtistSummary,
    LibraryStats,
    MergedAlbum,
    SavedTrack,
    Track,
)
from likedalbums.normalize import normalize_album_name
from likedalbums.similarity import string_similarity

logger = get_logger("processor")

remove_duplicate_tracks = Track.deduplicate


def process_tracks(saved_tracks: Sequence[SavedTrack], sort_by: str = DEFAULT_SORT) -> list[MergedAlbum]:
    """Group saved tracks by album, merge release variants and sort the result."""
    if not saved_tracks:
        return []

    album_groups = group_tracks_by_album(saved_tracks)
    merged = merge_albums(album_groups)
    return sort_albums(merged, sort_by)


def group_tracks_by_album(saved_tracks: Iterable[SavedTrack]) -> dict[str, AlbumAggregate]:
    """
    Bucket tracks by album id, keeping first-seen order of albums and tracks.

    Entries without an album id are skipped with a warning rather than failing
    the whole library. Albums without artists get no primary artist.
    """
    albums: dict[str, AlbumAggregate] = {}
    skipped = 0

    for saved in saved_tracks:
        album_ref = saved.album
        if album_ref is None or not album_ref.id:
            skipped += 1
            continue

        album = albums.get(album_ref.id)
        if album is None:
            album = AlbumAggregate(
                id=album_ref.id,
                name=album_ref.name,
                normalized_name=normalize_album_name(album_ref.name),
                artists=album_ref.artists,
                images=album_ref.images,
            )
            albums[album_ref.id] = album

        album.tracks.append(Track.from_saved(saved))

    if skipped:
        logger.warning(f"Skipped {skipped} saved tracks without an album id")
    return albums


def albums_are_similar(
    album1: AlbumAggregate,
    album2: AlbumAggregate,
    threshold: float = SAME_ARTIST_SIMILARITY_THRESHOLD,
) -> bool:
    """Same primary artist and close enough normalized names."""
    same_artist = album1.primary_artist_id == album2.primary_artist_id
    if not same_artist:
        return False

    similarity = string_similarity(album1.normalized_name, album2.normalized_name)
    required = threshold if same_artist else CROSS_ARTIST_SIMILARITY_THRESHOLD
    return similarity >= required


def merge_albums(
    album_groups: dict[str, AlbumAggregate],
    threshold: float = SAME_ARTIST_SIMILARITY_THRESHOLD,
) -> list[MergedAlbum]:
    """
    Fold release variants of the same album into one entry.

    Single greedy pass: each album not yet absorbed seeds a cluster and pulls in
    every other unabsorbed album that is similar to the seed itself. The
    displayed name and cover come from a variant with strictly more tracks than
    the seed. Aggregates are never modified.
    """
    albums = list(album_groups.values())
    absorbed: set[str] = set()
    merged_albums: list[MergedAlbum] = []

    for i, album in enumerate(albums):
        if album.id in absorbed:
            continue
        absorbed.add(album.id)

        merged = MergedAlbum.seed(album)

        for j, other in enumerate(albums):
            if i == j or other.id in absorbed:
                continue
            if not albums_are_similar(album, other, threshold):
                continue

            absorbed.add(other.id)
            merged.absorb(other)

            if other.track_count > album.track_count:
                merged.name = other.name
                merged.images = other.images

        merged.tracks = remove_duplicate_tracks(merged.tracks)

        if len(merged.variants) > 1:
            logger.debug(f"Merged {len(merged.variants)} variants into '{merged.name}': {merged.variants}")
        merged_albums.append(merged)

    logger.debug(f"Merged {len(albums)} albums into {len(merged_albums)}")
    return merged_albums


def _collation_key(text: Optional[str]) -> tuple[str, str]:
    """Approximate locale-aware ordering: accents and case only break ties."""
    text = text or ""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


def sort_albums(albums: Sequence[MergedAlbum], sort_by: str = DEFAULT_SORT) -> list[MergedAlbum]:
    """Return a new, stably sorted list. Unknown criteria sort by track count descending."""
    if sort_by == "count-asc":
        return sorted(albums, key=lambda a: a.track_count)
    if sort_by == "name-asc":
        return sorted(albums, key=lambda a: _collation_key(a.name))
    if sort_by == "name-desc":
        return sorted(albums, key=lambda a: _collation_key(a.name), reverse=True)
    if sort_by == "artist-asc":
        return sorted(albums, key=lambda a: _collation_key(a.primary_artist_name))
    if sort_by == "artist-desc":
        return sorted(albums, key=lambda a: _collation_key(a.primary_artist_name), reverse=True)
    if sort_by != "count-desc":
        logger.debug(f"Unknown album sort '{sort_by}', using count-desc")
    return sorted(albums, key=lambda a: a.track_count, reverse=True)


def search_albums(albums: Sequence[MergedAlbum], query: Optional[str]) -> Sequence[MergedAlbum]:
    """Case-insensitive substring match on album or primary artist name."""
    if not query or not query.strip():
        return albums

    needle = query.strip().lower()
    return [
        album
        for album in albums
        if needle in album.name.lower() or needle in (album.primary_artist_name or "").lower()
    ]


def album_stats(albums: Iterable[MergedAlbum]) -> LibraryStats:
    albums = list(albums)
    return LibraryStats(
        total_albums=len(albums),
        total_songs=sum(album.track_count for album in albums),
    )


# --- Artist view ---


def process_artists(saved_tracks: Sequence[SavedTrack], sort_by: str = DEFAULT_SORT) -> list[ArtistSummary]:
    if not saved_tracks:
        return []
    return sort_artists(group_tracks_by_artist(saved_tracks), sort_by)


def group_tracks_by_artist(saved_tracks: Iterable[SavedTrack]) -> list[ArtistSummary]:
    """
    One summary per primary track artist, in first-seen order.

    Artists are keyed by id, or by name for local files that have none. Track
    lists go through the same deduplication as merged albums.
    """
    artists: dict[str, ArtistSummary] = {}
    skipped = 0

    for saved in saved_tracks:
        if not saved.artists:
            skipped += 1
            continue

        primary = saved.artists[0]
        key = primary.id or f"name:{primary.name}"
        summary = artists.get(key)
        if summary is None:
            summary = ArtistSummary(id=primary.id, name=primary.name)
            artists[key] = summary

        summary.tracks.append(Track.from_saved(saved))
        album_id = saved.album.id if saved.album else None
        if album_id and album_id not in summary.album_ids:
            summary.album_ids.append(album_id)

    if skipped:
        logger.warning(f"Skipped {skipped} saved tracks without artists")

    for summary in artists.values():
        summary.tracks = remove_duplicate_tracks(summary.tracks)
    return list(artists.values())


def sort_artists(artists: Sequence[ArtistSummary], sort_by: str = DEFAULT_SORT) -> list[ArtistSummary]:
    if sort_by == "count-asc":
        return sorted(artists, key=lambda a: a.track_count)
    if sort_by == "name-asc":
        return sorted(artists, key=lambda a: _collation_key(a.name))
    if sort_by == "name-desc":
        return sorted(artists, key=lambda a: _collation_key(a.name), reverse=True)
    if sort_by == "albums-desc":
        return sorted(artists, key=lambda a: a.album_count, reverse=True)
    return sorted(artists, key=lambda a: a.track_count, reverse=True)


def search_artists(artists: Sequence[ArtistSummary], query: Optional[str]) -> Sequence[ArtistSummary]:
    if not query or not query.strip():
        return artists

    needle = query.strip().lower()
    return [artist for artist in artists if needle in artist.name.lower()]


def artist_stats(artists: Iterable[ArtistSummary]) -> ArtistStats:
    artists = list(artists)
    return ArtistStats(
        total_artists=len(artists),
        total_songs=sum(artist.track_count for artist in artists),
    )
