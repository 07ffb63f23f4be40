import pytest

from likedalbums.models import AlbumRef, ArtistRef, MergedAlbum, SavedTrack, Track
from likedalbums.normalize import normalize_album_name


@pytest.fixture
def make_saved():
    def _make(
        track_id: str,
        name: str,
        album_id: str | None = "A1",
        album_name: str = "Album",
        artist_id: str | None = "X",
        artist_name: str = "Artist X",
        track_artists: tuple[str, ...] = ("Artist X",),
        images: tuple[dict, ...] = (),
    ) -> SavedTrack:
        album_artists = (ArtistRef(id=artist_id, name=artist_name),) if artist_id or artist_name else ()
        return SavedTrack(
            id=track_id,
            name=name,
            artists=tuple(ArtistRef(id=f"id-{n}", name=n) for n in track_artists),
            album=AlbumRef(id=album_id, name=album_name, artists=album_artists, images=images),
        )

    return _make


@pytest.fixture
def make_album():
    def _make(name: str, count: int, artist: str | None = "Artist", album_id: str | None = None) -> MergedAlbum:
        album_id = album_id or name
        return MergedAlbum(
            id=album_id,
            name=name,
            normalized_name=normalize_album_name(name),
            artists=(ArtistRef(id=artist, name=artist),) if artist else (),
            images=(),
            tracks=[Track(id=f"{album_id}-{i}", name=f"{album_id} song {i}") for i in range(count)],
        )

    return _make


def spotify_item(track_id, name, album_id="A1", album_name="Album", artists=("Artist X",)):
    """Raw ``/me/tracks`` item as returned by the Web API."""
    return {
        "added_at": "2024-01-01T00:00:00Z",
        "track": {
            "id": track_id,
            "name": name,
            "artists": [{"id": f"id-{a}", "name": a} for a in artists],
            "album": {
                "id": album_id,
                "name": album_name,
                "images": [{"url": f"https://i.scdn.co/image/{album_id}", "height": 640, "width": 640}],
                "artists": [{"id": f"id-{a}", "name": a} for a in artists],
                "release_date": "1991-09-24",
            },
        },
    }


@pytest.fixture
def make_item():
    return spotify_item
