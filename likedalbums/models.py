from dataclasses import dataclass, field
from typing import Iterable, Optional

from likedalbums.normalize import normalize_track_name


@dataclass(frozen=True)
class ArtistRef:
    id: Optional[str]
    name: str


@dataclass(frozen=True)
class AlbumRef:
    """Album as it is denormalized onto every saved track."""

    id: Optional[str]
    name: str
    artists: tuple[ArtistRef, ...] = ()
    images: tuple[dict, ...] = ()
    release_date: Optional[str] = None


@dataclass(frozen=True)
class SavedTrack:
    """One entry of the user's saved tracks library."""

    id: str
    name: str
    artists: tuple[ArtistRef, ...]
    album: AlbumRef
    added_at: Optional[str] = None

    @classmethod
    def from_api(cls, item: dict) -> Optional["SavedTrack"]:
        """Build from a raw ``/me/tracks`` item. Returns None when the item is unusable."""
        track = item.get("track")
        if not track or not track.get("id"):
            return None
        album = track.get("album") or {}
        if not album.get("id"):
            return None

        return cls(
            id=track["id"],
            name=track.get("name") or "",
            artists=_artist_refs(track.get("artists")),
            album=AlbumRef(
                id=album["id"],
                name=album.get("name") or "",
                artists=_artist_refs(album.get("artists")),
                images=tuple(album.get("images") or ()),
                release_date=album.get("release_date"),
            ),
            added_at=item.get("added_at"),
        )


def _artist_refs(artists: Optional[list]) -> tuple[ArtistRef, ...]:
    return tuple(ArtistRef(id=a.get("id"), name=a.get("name") or "") for a in artists or ())


@dataclass(frozen=True)
class Track:
    """Track as listed inside an album or artist view."""

    id: str
    name: str
    artist_names: tuple[str, ...] = ()

    @property
    def artists(self) -> str:
        return ", ".join(self.artist_names)

    @property
    def dedup_name(self) -> str:
        """Key used to catch the same song released under different ids."""

        return normalize_track_name(self.name)

    @classmethod
    def from_saved(cls, saved: SavedTrack) -> "Track":
        return cls(id=saved.id, name=saved.name, artist_names=tuple(a.name for a in saved.artists))

    @classmethod
    def deduplicate(cls, tracks: Iterable["Track"]) -> list["Track"]:
        """Drop repeated ids, then repeated names. The first occurrence always wins."""
        seen_ids: set[str] = set()
        by_id: list[Track] = []
        for track in tracks:
            if track.id in seen_ids:
                continue
            seen_ids.add(track.id)
            by_id.append(track)

        seen_names: set[str] = set()
        unique: list[Track] = []
        for track in by_id:
            if track.dedup_name in seen_names:
                continue
            seen_names.add(track.dedup_name)
            unique.append(track)
        return unique


@dataclass
class AlbumAggregate:
    """All saved tracks sharing one album id, before fuzzy merging."""

    id: str
    name: str
    normalized_name: str
    artists: tuple[ArtistRef, ...]
    images: tuple[dict, ...]
    tracks: list[Track] = field(default_factory=list)

    @property
    def primary_artist_id(self) -> Optional[str]:
        return self.artists[0].id if self.artists else None

    @property
    def primary_artist_name(self) -> Optional[str]:
        return self.artists[0].name if self.artists else None

    @property
    def track_count(self) -> int:
        return len(self.tracks)


@dataclass
class MergedAlbum(AlbumAggregate):
    original_albums: list[AlbumAggregate] = field(default_factory=list)
    variants: list[str] = field(default_factory=list)

    @classmethod
    def seed(cls, album: AlbumAggregate) -> "MergedAlbum":
        """Open a merged album from its first variant without sharing its track list."""
        return cls(
            id=album.id,
            name=album.name,
            normalized_name=album.normalized_name,
            artists=album.artists,
            images=album.images,
            tracks=list(album.tracks),
            original_albums=[album],
            variants=[album.name],
        )

    def absorb(self, album: AlbumAggregate) -> None:
        self.tracks.extend(album.tracks)
        self.original_albums.append(album)
        self.variants.append(album.name)

    @property
    def cover_url(self) -> Optional[str]:
        if not self.images:
            return None
        return self.images[0].get("url")


@dataclass
class ArtistSummary:
    id: Optional[str]
    name: str
    tracks: list[Track] = field(default_factory=list)
    album_ids: list[str] = field(default_factory=list)

    @property
    def track_count(self) -> int:
        return len(self.tracks)

    @property
    def album_count(self) -> int:
        return len(self.album_ids)


@dataclass(frozen=True)
class LibraryStats:
    total_albums: int
    total_songs: int


@dataclass(frozen=True)
class ArtistStats:
    total_artists: int
    total_songs: int
