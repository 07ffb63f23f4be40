import argparse
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from likedalbums.clients.spotify_client import SpotifyClient, SpotifyFetchError
from likedalbums.config import Config, clear_token_cache, token_cache_path
from likedalbums.constants import (
    ALBUM_NAME_MAX_LEN,
    ALBUM_SORT_CHOICES,
    ARTIST_SORT_CHOICES,
    DEFAULT_SORT,
    VARIANTS_DISPLAY_MAX,
    setup_logging,
)
from likedalbums.models import ArtistSummary, MergedAlbum
from likedalbums.service import LibraryService


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show your Spotify liked songs grouped by album or artist")
    parser.add_argument("--view", choices=["albums", "artists"], default="albums", help="Group by album or artist")
    parser.add_argument(
        "--sort",
        choices=sorted(set(ALBUM_SORT_CHOICES) | set(ARTIST_SORT_CHOICES)),
        default=DEFAULT_SORT,
        help="Sort order (artist-* applies to albums, albums-desc to artists)",
    )
    parser.add_argument("--search", default=None, help="Only show entries whose name or artist contains this text")
    parser.add_argument("--limit", type=positive_int, default=None, help="Show at most this many rows")
    parser.add_argument("--show-variants", action="store_true", help="List the releases merged into each album")
    parser.add_argument("--show-songs", action="store_true", help="List the liked songs under each album")
    parser.add_argument("--env-file", default=".env", help="Path to .env file with credentials")
    parser.add_argument("--logout", action="store_true", help="Forget the stored Spotify login and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    view_choices = ARTIST_SORT_CHOICES if args.view == "artists" else ALBUM_SORT_CHOICES
    if args.sort not in view_choices:
        parser.error(f"--sort {args.sort} does not apply to the {args.view} view (choose from {', '.join(view_choices)})")
    return args


def load_environment(env_file: str) -> None:
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)


def resolve_client_id(config: Config) -> str:
    """Client ID from env or config, asking once and remembering the answer otherwise."""
    if config.spotify_client_id:
        return config.spotify_client_id

    client_id = input(
        "Enter your Spotify Client ID (create one at https://developer.spotify.com/dashboard/): "
    ).strip()
    if not client_id:
        raise SystemExit("A Spotify Client ID is required")

    config.spotify_client_id = client_id
    config.save()
    return client_id


def _truncate(text: str, max_len: int = ALBUM_NAME_MAX_LEN) -> str:
    return text if len(text) <= max_len else text[: max_len - 1] + "…"


def render_albums(
    console: Console,
    albums: Sequence[MergedAlbum],
    show_variants: bool = False,
    show_songs: bool = False,
) -> None:
    table = Table(title="Favorite albums")
    table.add_column("#", justify="right")
    table.add_column("Album")
    table.add_column("Artist")
    table.add_column("Songs", justify="right")
    if show_variants:
        table.add_column("Variants")

    for idx, album in enumerate(albums, start=1):
        row = [str(idx), _truncate(album.name), album.primary_artist_name or "", str(album.track_count)]
        if show_variants:
            variants = [v for v in album.variants if v != album.name]
            shown = ", ".join(variants[:VARIANTS_DISPLAY_MAX])
            if len(variants) > VARIANTS_DISPLAY_MAX:
                shown += f" (+{len(variants) - VARIANTS_DISPLAY_MAX})"
            row.append(shown)
        table.add_row(*row, end_section=not show_songs)

        if show_songs:
            for track in album.tracks:
                song_row = ["", f"  {_truncate(track.name)}", track.artists, ""]
                if show_variants:
                    song_row.append("")
                table.add_row(*song_row, style="dim")
            table.add_section()

    console.print(table)


def render_artists(console: Console, artists: Sequence[ArtistSummary]) -> None:
    table = Table(title="Favorite artists")
    table.add_column("#", justify="right")
    table.add_column("Artist")
    table.add_column("Songs", justify="right")
    table.add_column("Albums", justify="right")

    for idx, artist in enumerate(artists, start=1):
        table.add_row(str(idx), _truncate(artist.name), str(artist.track_count), str(artist.album_count))

    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    load_environment(args.env_file)
    setup_logging(args.verbose)
    console = Console()

    if args.logout:
        if clear_token_cache():
            console.print("Logged out of Spotify")
        else:
            console.print("No stored Spotify login")
        return 0

    config = Config.load()
    spotify = SpotifyClient(
        client_id=resolve_client_id(config),
        redirect_uri=config.redirect_uri,
        token_cache=token_cache_path(),
    )
    service = LibraryService(spotify)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            transient=True,
            console=console,
        ) as progress:
            task = progress.add_task("Fetching your liked songs...", total=None)

            def on_progress(current: int, total: int) -> None:
                progress.update(task, completed=current, total=total)

            tracks = service.load_saved_tracks(progress_callback=on_progress)
    except SpotifyFetchError as e:
        console.print(f"[red]Error fetching data: {e}[/red]")
        return 1

    if args.view == "artists":
        artists = service.artists(sort_by=args.sort, query=args.search)
        render_artists(console, artists[: args.limit])
        stats = service.artist_stats(artists)
        console.print(f"{stats.total_artists} artists, {stats.total_songs} songs")
    else:
        albums = service.albums(sort_by=args.sort, query=args.search)
        render_albums(
            console,
            albums[: args.limit],
            show_variants=args.show_variants,
            show_songs=args.show_songs,
        )
        stats = service.stats(albums)
        console.print(f"{stats.total_albums} albums, {stats.total_songs} songs")

    console.print(f"Loaded {len(tracks)} liked songs")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
