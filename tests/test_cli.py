import pytest
from rich.console import Console

import albums
from likedalbums import config
from likedalbums.clients.spotify_client import SpotifyFetchError
from likedalbums.processor import process_tracks


class FakeSpotifyClient:
    tracks = []
    error = None

    def __init__(self, client_id=None, redirect_uri=None, token_cache=None):
        self.client_id = client_id

    def get_saved_tracks(self, progress_callback=None):
        if self.error:
            raise self.error
        if progress_callback:
            progress_callback(len(self.tracks), len(self.tracks))
        return list(self.tracks)


@pytest.fixture
def cli_env(tmp_path, monkeypatch, make_saved):
    directory = tmp_path / "liked-albums"
    monkeypatch.setattr(config, "CONFIG_FILE", directory / "config.json")
    monkeypatch.setattr(config, "TOKEN_CACHE_FILE", directory / "spotify_token.json")
    monkeypatch.setenv("SPOTIFY_CLIENT_ID", "client-123")
    FakeSpotifyClient.tracks = [
        make_saved("t1", "Lithium", album_id="A1", album_name="Nevermind"),
        make_saved("t2", "Polly", album_id="A2", album_name="Nevermind (Deluxe Edition)"),
        make_saved("t3", "Drain You", album_id="A2", album_name="Nevermind (Deluxe Edition)"),
    ]
    FakeSpotifyClient.error = None
    monkeypatch.setattr(albums, "SpotifyClient", FakeSpotifyClient)
    monkeypatch.setattr(albums, "setup_logging", lambda verbose=False: None)
    return ["--env-file", str(tmp_path / "missing.env")]


def test_parse_args_defaults():
    args = albums.parse_args([])
    assert args.view == "albums"
    assert args.sort == "count-desc"
    assert args.search is None
    assert not args.logout


def test_albums_view(cli_env, capsys):
    assert albums.main(cli_env + ["--show-variants"]) == 0

    out = capsys.readouterr().out
    assert "Nevermind (Deluxe Edition)" in out
    assert "1 albums, 3 songs" in out


def test_artists_view(cli_env, capsys):
    assert albums.main(cli_env + ["--view", "artists", "--sort", "name-asc"]) == 0

    assert "1 artists, 3 songs" in capsys.readouterr().out


def test_fetch_error_exits_with_1(cli_env, capsys):
    FakeSpotifyClient.error = SpotifyFetchError("boom")

    assert albums.main(cli_env) == 1
    assert "boom" in capsys.readouterr().out


def test_logout(monkeypatch, capsys, tmp_path):
    monkeypatch.setattr(albums, "setup_logging", lambda verbose=False: None)
    monkeypatch.setattr(albums, "clear_token_cache", lambda: True)

    assert albums.main(["--logout", "--env-file", str(tmp_path / "missing.env")]) == 0
    assert "Logged out" in capsys.readouterr().out


def test_client_id_prompt_is_saved(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.setattr("builtins.input", lambda _prompt: " typed-id ")

    assert albums.resolve_client_id(config.Config()) == "typed-id"
    assert config.Config._load_file().spotify_client_id == "typed-id"


def test_empty_client_id_exits(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _prompt: "")

    with pytest.raises(SystemExit):
        albums.resolve_client_id(config.Config())


def test_render_albums_shows_merged_variants(make_saved):
    merged = process_tracks(
        [
            make_saved("t1", "One", album_id="A1", album_name="Blue"),
            make_saved("t2", "Two", album_id="A2", album_name="Blue [Remastered]"),
        ]
    )
    console = Console(record=True, width=200)

    albums.render_albums(console, merged, show_variants=True)

    text = console.export_text()
    assert "Blue" in text
    assert "Blue [Remastered]" in text


@pytest.mark.parametrize("limit", ["0", "-3", "two"])
def test_limit_must_be_positive(limit):
    with pytest.raises(SystemExit):
        albums.parse_args(["--limit", limit])


def test_limit_parses_positive_int():
    assert albums.parse_args(["--limit", "2"]).limit == 2


@pytest.mark.parametrize(
    "argv",
    [
        ["--view", "artists", "--sort", "artist-asc"],
        ["--view", "artists", "--sort", "artist-desc"],
        ["--sort", "albums-desc"],
    ],
)
def test_sort_must_fit_the_view(argv, capsys):
    with pytest.raises(SystemExit):
        albums.parse_args(argv)

    assert "does not apply" in capsys.readouterr().err


def test_sort_accepted_for_its_view():
    assert albums.parse_args(["--view", "artists", "--sort", "albums-desc"]).sort == "albums-desc"
    assert albums.parse_args(["--sort", "artist-desc"]).sort == "artist-desc"


def test_show_songs_lists_deduplicated_tracks(cli_env, capsys, make_saved):
    FakeSpotifyClient.tracks.append(make_saved("t4", "POLLY", album_id="A1", album_name="Nevermind"))

    assert albums.main(cli_env + ["--show-songs"]) == 0

    out = capsys.readouterr().out
    for song in ("Lithium", "POLLY", "Drain You"):
        assert song in out
    assert "Polly" not in out
    assert "1 albums, 3 songs" in out
    assert "Loaded 4 liked songs" in out


def test_render_albums_song_rows(make_saved):
    merged = process_tracks(
        [
            make_saved("t1", "One", album_id="A1", album_name="Blue", track_artists=("Joni", "Guest")),
            make_saved("t2", "one", album_id="A2", album_name="Blue [Remastered]"),
            make_saved("t3", "Two", album_id="A2", album_name="Blue [Remastered]"),
        ]
    )
    console = Console(record=True, width=200)

    albums.render_albums(console, merged, show_variants=True, show_songs=True)

    text = console.export_text()
    one_line = next(line for line in text.splitlines() if "One" in line)
    two_line = next(line for line in text.splitlines() if "Two" in line)
    assert "Joni, Guest" in one_line
    assert "Artist X" in two_line
    assert " one " not in text
