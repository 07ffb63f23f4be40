from likedalbums.models import AlbumAggregate, MergedAlbum, SavedTrack, Track


def test_from_api(make_item):
    saved = SavedTrack.from_api(make_item("t1", "Lithium", album_id="A1", album_name="Nevermind", artists=("Nirvana",)))

    assert saved.id == "t1"
    assert saved.name == "Lithium"
    assert saved.album.id == "A1"
    assert saved.album.name == "Nevermind"
    assert saved.album.artists[0].id == "id-Nirvana"
    assert saved.album.images[0]["url"] == "https://i.scdn.co/image/A1"
    assert saved.album.release_date == "1991-09-24"
    assert saved.added_at == "2024-01-01T00:00:00Z"


def test_from_api_rejects_unusable_items(make_item):
    assert SavedTrack.from_api({"track": None}) is None
    assert SavedTrack.from_api({}) is None
    assert SavedTrack.from_api(make_item(None, "Untitled")) is None
    assert SavedTrack.from_api(make_item("t1", "Untitled", album_id=None)) is None


def test_from_api_without_artists(make_item):
    item = make_item("t1", "Intro")
    item["track"]["artists"] = None
    item["track"]["album"]["artists"] = []

    saved = SavedTrack.from_api(item)

    assert saved.artists == ()
    assert saved.album.artists == ()


def test_track_projection_joins_artists(make_saved):
    track = Track.from_saved(make_saved("t1", "Song", track_artists=("Jay-Z", "Kanye West")))
    assert track.artists == "Jay-Z, Kanye West"
    assert track.artist_names == ("Jay-Z", "Kanye West")


def test_deduplicate_by_id_then_name():
    tracks = [
        Track("1", "Smells Like Teen Spirit"),
        Track("2", "In Bloom"),
        Track("1", "Smells Like Teen Spirit (dup id)"),
        Track("3", "  smells like teen spirit "),
        Track("4", "Polly"),
    ]

    unique = Track.deduplicate(tracks)

    assert [t.id for t in unique] == ["1", "2", "4"]


def test_deduplicate_empty():
    assert Track.deduplicate([]) == []


def test_album_without_artists_has_no_primary_artist():
    album = AlbumAggregate(id="A1", name="Untitled", normalized_name="untitled", artists=(), images=())
    assert album.primary_artist_id is None
    assert album.primary_artist_name is None
    assert album.track_count == 0


def test_merged_album_seed_copies_tracks():
    album = AlbumAggregate(
        id="A1", name="Blue", normalized_name="blue", artists=(), images=(), tracks=[Track("1", "River")]
    )

    merged = MergedAlbum.seed(album)
    merged.tracks.append(Track("2", "California"))

    assert album.track_count == 1
    assert merged.track_count == 2
    assert merged.original_albums == [album]
    assert merged.variants == ["Blue"]
    assert merged.cover_url is None
