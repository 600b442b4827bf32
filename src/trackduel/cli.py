"""
trackduel CLI - Entry point

Runs pairwise battles between the tracks of a playlist stored in a JSON
export file, and prints the resulting rankings.
"""

import argparse
import random
import sys
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from trackduel.core import (
    Config,
    ensure_directories,
    get_console,
    load_config,
    log,
    safe_print,
    setup_from_config,
)
from trackduel.domain.playlists import (
    export_all_filename,
    export_filename,
    load_export,
    load_tracks_csv,
    write_export,
)
from trackduel.domain.tournament import (
    BattleSession,
    ImportFormatError,
    InconsistentStateError,
    PlaylistLibrary,
    Tournament,
    TournamentError,
    create_tournament,
    standings,
)


class PlaylistFile:
    """An export file loaded into a PlaylistLibrary, with one playlist selected."""

    def __init__(self, path: Path, library: PlaylistLibrary):
        self.path = path
        self.library = library

    @property
    def selected(self) -> Tournament:
        return self.library.current

    @classmethod
    def open(cls, path: Path, playlist_id: Optional[str], strict: bool) -> "PlaylistFile":
        playlists = load_export(path, strict=strict)
        if not playlists:
            raise ImportFormatError(f"{path} holds no playlists")

        library = PlaylistLibrary(playlists)
        if playlist_id is None:
            if len(library) > 1:
                ids = ", ".join(p.id for p in library.all())
                raise TournamentError(
                    f"{path} holds {len(library)} playlists, pick one with --playlist ({ids})"
                )
            playlist_id = playlists[0].id
        library.set_current(playlist_id)
        return cls(path, library)

    def write(self, indent: int) -> None:
        playlists = self.library.all()
        write_export(self.path, playlists, indent=indent, single=len(playlists) == 1)

    def save(self, playlist: Tournament, indent: int) -> None:
        self.library.update(playlist)
        self.write(indent)


def render_rankings(playlist: Tournament) -> Table:
    """Build a rich table of the current standings."""
    done = len(playlist.battles)
    status = "complete" if playlist.is_complete else f"{done}/{playlist.total_battles} battles"
    table = Table(title=f"{escape(playlist.name)} ({status})")
    table.add_column("#", justify="right")
    table.add_column("Track")
    table.add_column("Artist")
    table.add_column("W", justify="right")
    table.add_column("L", justify="right")
    table.add_column("Battles", justify="right")
    table.add_column("Score", justify="right")

    for standing in standings(playlist):
        track = standing.track
        table.add_row(
            str(standing.position),
            escape(track.name),
            escape(track.artist),
            str(track.wins),
            str(track.losses),
            str(track.battles),
            f"{track.score:.0%}",
        )
    return table


def run_create(name: str, tracks_csv: Path, output: Optional[Path], config: Config) -> int:
    tracks = load_tracks_csv(tracks_csv)
    playlist = create_tournament(name, tracks)
    output = output or Path(config.export.directory).expanduser() / export_filename(playlist.name)
    write_export(output, [playlist], indent=config.export.indent)
    log(f"Created \"{playlist.name}\" with {len(tracks)} tracks: {output}", "success")
    return 0


def run_battle(
    playlist_file: PlaylistFile,
    config: Config,
    ask: Optional[Callable[[str], str]] = None,
) -> int:
    """
    Interactive duel loop. Each vote is saved immediately.

    Args:
        playlist_file: Loaded export file
        config: Application config
        ask: Prompt function returning "1", "2", "s" or "q" (default: rich Prompt)

    Returns:
        Exit code (0 for success)
    """
    console = get_console()
    ask = ask or (
        lambda question: Prompt.ask(question, choices=["1", "2", "s", "q"], default="s")
    )

    playlist = playlist_file.selected
    if playlist.is_complete and config.tournament.restart_when_complete:
        playlist = playlist_file.library.reset(playlist.id)
        playlist_file.write(config.export.indent)
        log(f"\"{playlist.name}\" was complete, battle progress reset", "warning")

    seed = config.tournament.seed
    session = BattleSession(playlist, rng=random.Random(seed) if seed is not None else None)

    while True:
        battle = session.next()
        if battle is None:
            break

        done, total = session.progress
        console.print(f"\n[bold]Battle {done + 1}/{total}[/bold]")
        for key, track in (("1", battle.track_a), ("2", battle.track_b)):
            console.print(f"  [cyan]{key}[/cyan]  {escape(track.name)} - {escape(track.artist)}")

        choice = ask("Winner (1/2, s=skip, q=quit)").strip().lower()
        if choice == "q":
            session.cancel()
            log(f"Stopped after {done} of {total} battles")
            return 0
        if choice == "s":
            session.cancel()
            continue
        if choice not in ("1", "2"):
            log(f"Unknown choice: {choice!r}", "warning")
            continue

        winner = battle.track_a if choice == "1" else battle.track_b
        playlist_file.save(session.choose(winner.id), config.export.indent)

    if not session.is_complete:
        log(
            f"\"{session.tournament.name}\" has {len(session.tournament.tracks)} track(s), "
            "at least 2 are needed to battle",
            "warning",
        )
        return 1

    log(f"\"{session.tournament.name}\" is complete!", "success")
    console.print(render_rankings(session.tournament))
    return 0


def run_rankings(playlist_file: PlaylistFile) -> int:
    get_console().print(render_rankings(playlist_file.selected))
    return 0


def run_edit(
    playlist_file: PlaylistFile, tracks_csv: Path, name: Optional[str], config: Config
) -> int:
    old = playlist_file.selected
    playlist = playlist_file.library.edit_tracks(old.id, load_tracks_csv(tracks_csv), name)
    playlist_file.write(config.export.indent)
    log(
        f"Playlist updated: {len(playlist.tracks)} tracks, "
        f"{len(playlist.battles)} of {len(old.battles)} battles preserved",
        "success",
    )
    return 0


def run_reset(playlist_file: PlaylistFile, config: Config) -> int:
    playlist = playlist_file.library.reset(playlist_file.selected.id)
    playlist_file.write(config.export.indent)
    log(f"Battle progress reset for \"{playlist.name}\"", "success")
    return 0


def run_export(
    files: list[Path], output: Optional[Path], config: Config, strict: bool
) -> int:
    """
    Merge the playlists of several export files into one multi-playlist file.

    Playlists whose id is already taken get a fresh id, so nothing is overwritten.
    """
    library = PlaylistLibrary()
    for path in files:
        library.import_playlists(load_export(path, strict=strict))
    if not len(library):
        raise ImportFormatError("No playlists to export")

    output = output or Path(config.export.directory).expanduser() / export_all_filename()
    count = write_export(output, library.all(), indent=config.export.indent, single=False)
    log(f"Exported {count} playlist(s) to {output}", "success")
    return 0


def run_validate(path: Path, playlist_id: Optional[str]) -> int:
    """Load a file strictly and report every statistic that disagrees with its battles."""
    try:
        playlist_file = PlaylistFile.open(path, playlist_id, strict=True)
    except InconsistentStateError as e:
        for problem in e.problems:
            log(problem, "error")
        return 1
    log(f"\"{playlist_file.selected.name}\" is consistent", "success")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trackduel",
        description="trackduel - Rank tracks through head-to-head battles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument(
        "--playlist", help="Playlist id to use when a file holds several playlists"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Repair imported playlists whose stats disagree with their battles",
    )

    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    create_parser = subparsers.add_parser("create", help="Create a playlist from a tracks CSV")
    create_parser.add_argument("name", help="Playlist name")
    create_parser.add_argument("tracks", type=Path, help="CSV with id,name[,artist,...] columns")
    create_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    battle_parser = subparsers.add_parser("battle", help="Battle the tracks of a playlist")
    battle_parser.add_argument("file", type=Path)

    rankings_parser = subparsers.add_parser("rankings", help="Show current rankings")
    rankings_parser.add_argument("file", type=Path)

    edit_parser = subparsers.add_parser(
        "edit", help="Replace the track list, keeping valid battle history"
    )
    edit_parser.add_argument("file", type=Path)
    edit_parser.add_argument("tracks", type=Path, help="CSV with the new track list")
    edit_parser.add_argument("--name", help="Rename the playlist")

    reset_parser = subparsers.add_parser("reset", help="Clear all battle progress")
    reset_parser.add_argument("file", type=Path)

    validate_parser = subparsers.add_parser(
        "validate", help="Check stats against battle history"
    )
    validate_parser.add_argument("file", type=Path)

    export_parser = subparsers.add_parser(
        "export", help="Merge playlists from several files into one export"
    )
    export_parser.add_argument("files", type=Path, nargs="+")
    export_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    return parser


def run(argv: Optional[list[str]] = None, config: Optional[Config] = None) -> int:
    """Parse arguments and run a command, returning the exit code."""
    args = build_parser().parse_args(argv)

    if config is None:
        config = load_config(args.config)
        ensure_directories(config)
        setup_from_config(config.logging)

    strict = config.export.strict_import and not args.lenient

    try:
        if args.subcommand == "create":
            return run_create(args.name, args.tracks, args.output, config)

        if args.subcommand == "validate":
            return run_validate(args.file, args.playlist)

        if args.subcommand == "export":
            return run_export(args.files, args.output, config, strict)

        playlist_file = PlaylistFile.open(args.file, args.playlist, strict=strict)

        if args.subcommand == "battle":
            return run_battle(playlist_file, config)
        elif args.subcommand == "rankings":
            return run_rankings(playlist_file)
        elif args.subcommand == "edit":
            return run_edit(playlist_file, args.tracks, args.name, config)
        elif args.subcommand == "reset":
            return run_reset(playlist_file, config)

    except TournamentError as e:
        logger.error(str(e))
        safe_print(f"Error: {e}", style="red")
        return 1

    return 1


def main() -> None:
    """Main entry point for the trackduel command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
