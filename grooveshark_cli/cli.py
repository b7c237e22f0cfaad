"""
Grooveshark CLI - Opinionated command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty formatting for human output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

from grooveshark_cli.core.client import DEFAULT_TIMEOUT, GroovesharkError, ValidationError
from grooveshark_cli.sdk import GroovesharkClient

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any) -> None:
    """Print JSON output."""
    indent = 2 if is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: GroovesharkError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def parse_json_object(value: str, option: str) -> dict[str, Any]:
    """Parse a JSON object from an argument, or from stdin when it is ``-``."""
    try:
        data = json.load(sys.stdin) if value == "-" else json.loads(value)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {option}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"{option} must be a JSON object")
    return data


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_ping(client: GroovesharkClient, _args: argparse.Namespace) -> None:
    """Ping the service."""
    try:
        message = client.session.ping()
        if is_tty():
            print(message)
        else:
            success_output({"result": message})
    except GroovesharkError as e:
        error_output(e)


def cmd_session_start(client: GroovesharkClient, _args: argparse.Namespace) -> None:
    """Start a new session."""
    try:
        session_id = client.session.start()
        success_output({"session_id": session_id})
    except GroovesharkError as e:
        error_output(e)


def cmd_auth(client: GroovesharkClient, args: argparse.Namespace) -> None:
    """Authenticate and show the user."""
    try:
        if not args.login or not args.password:
            raise ValidationError("--login and --password are required (or GROOVESHARK_LOGIN / GROOVESHARK_PASSWORD)")

        user = client.session.authenticate(args.login, args.password)
        success_output(
            {
                "user_id": user.user_id,
                "email": user.email,
                "name": user.name,
                "is_plus": user.is_plus,
                "is_anywhere": user.is_anywhere,
                "is_premium": user.is_premium,
                "session_id": client.session_id,
            }
        )
    except GroovesharkError as e:
        error_output(e)


def cmd_playlist_get(client: GroovesharkClient, args: argparse.Namespace) -> None:
    """Get a playlist and its songs."""
    try:
        playlist = client.playlists.get(args.playlist_id, limit=args.limit)

        if is_tty():
            print(f"Playlist: {playlist.playlist_name}")
            if playlist.playlist_description:
                print(f"Description: {playlist.playlist_description}")
            print(f"User ID: {playlist.user_id}")
            if not playlist.songs:
                print("\nNo songs in playlist.")
                return

            print()
            table_output(
                ["ID", "Song", "Artist", "Album"],
                [[s.song_id, s.song_name, s.artist_name, s.album_name] for s in playlist.songs],
                [10, 35, 25, 25],
            )
        else:
            success_output(playlist.to_dict())
    except GroovesharkError as e:
        error_output(e)


def cmd_playlist_create(client: GroovesharkClient, args: argparse.Namespace) -> None:
    """Create a playlist."""
    try:
        response = client.playlists.create(args.name, args.song_ids)
        success_output(
            {
                "success": response.success,
                "playlist_id": response.playlist_id,
                "playlists_ts_modified": response.playlists_ts_modified,
            }
        )
    except GroovesharkError as e:
        error_output(e)


def cmd_playlist_delete(client: GroovesharkClient, args: argparse.Namespace) -> None:
    """Delete a playlist."""
    try:
        response = client.playlists.delete(args.playlist_id)
        success_output(
            {
                "success": response.success,
                "playlists_ts_modified": response.playlists_ts_modified,
                "message": f"Playlist {args.playlist_id} deleted",
            }
        )
    except GroovesharkError as e:
        error_output(e)


def cmd_favorite_add(client: GroovesharkClient, args: argparse.Namespace) -> None:
    """Add a song to the user's favorites."""
    try:
        client.favorites.add_song(args.song_id)
        success_output({"success": True, "message": f"Song {args.song_id} added to favorites"})
    except GroovesharkError as e:
        error_output(e)


def cmd_call(client: GroovesharkClient, args: argparse.Namespace) -> None:
    """Call any remote method and print its result."""
    try:
        params = parse_json_object(args.params, "--params") if args.params else None
        result = client.call(args.method, params, secure=args.secure)
        success_output({"result": result})
    except GroovesharkError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="grooveshark",
        description="Grooveshark CLI - Command-line interface for the Grooveshark public API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Plain text and tables
  Pipe:         JSON

Examples:
  grooveshark ping
  grooveshark --login me --password secret playlist create "Road trip" 30717514
  grooveshark playlist get 52262304 --limit 10
  grooveshark call getPlaylist --params '{"playlistID": 52262304}'
""",
    )
    parser.add_argument(
        "--login",
        default=os.environ.get("GROOVESHARK_LOGIN"),
        help="Authenticate as this user before running the command (or GROOVESHARK_LOGIN)",
    )
    parser.add_argument(
        "--password",
        default=os.environ.get("GROOVESHARK_PASSWORD"),
        help="Password for --login (or GROOVESHARK_PASSWORD)",
    )
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Service ==========
    ping = subparsers.add_parser("ping", help="Ping the service")
    ping.set_defaults(func=cmd_ping)

    auth = subparsers.add_parser("auth", help="Authenticate with --login/--password and show the user")
    auth.set_defaults(func=cmd_auth, skip_login=True)

    # ========== Session ==========
    session = subparsers.add_parser("session", help="Manage sessions")
    session.set_defaults(func=lambda _c, _a: session.print_help())
    session_sub = session.add_subparsers(dest="subcommand")

    s_start = session_sub.add_parser("start", help="Start a new session")
    # A new session would replace the logged-in one
    s_start.set_defaults(func=cmd_session_start, skip_login=True)

    # ========== Playlists ==========
    playlist = subparsers.add_parser("playlist", help="Manage playlists")
    playlist.set_defaults(func=lambda _c, _a: playlist.print_help())
    playlist_sub = playlist.add_subparsers(dest="subcommand")

    p_get = playlist_sub.add_parser("get", help="Get a playlist and its songs")
    p_get.add_argument("playlist_id", help="Playlist ID")
    p_get.add_argument("--limit", "-l", type=int, help="Max songs to return")
    p_get.set_defaults(func=cmd_playlist_get)

    p_create = playlist_sub.add_parser("create", help="Create a playlist (requires --login)")
    p_create.add_argument("name", help="Playlist name")
    p_create.add_argument("song_ids", type=int, nargs="+", help="Song IDs to add")
    p_create.set_defaults(func=cmd_playlist_create)

    p_delete = playlist_sub.add_parser("delete", help="Delete a playlist (requires --login)")
    p_delete.add_argument("playlist_id", type=int, help="Playlist ID")
    p_delete.set_defaults(func=cmd_playlist_delete)

    # ========== Favorites ==========
    favorite = subparsers.add_parser("favorite", help="Manage favorites")
    favorite.set_defaults(func=lambda _c, _a: favorite.print_help())
    favorite_sub = favorite.add_subparsers(dest="subcommand")

    f_add = favorite_sub.add_parser("add", help="Add a song to favorites (requires --login)")
    f_add.add_argument("song_id", type=int, help="Song ID")
    f_add.set_defaults(func=cmd_favorite_add)

    # ========== Raw call ==========
    call = subparsers.add_parser("call", help="Call any API method")
    call.add_argument("method", help="Method name (e.g., getPlaylist)")
    call.add_argument("--params", "-p", help="JSON object with parameters (or - for stdin)")
    call.add_argument("--secure", "-s", action="store_true", help="Send over https")
    call.set_defaults(func=cmd_call)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        )

    client = GroovesharkClient(timeout=args.timeout)

    # Log in up front so session-scoped commands run as the user
    if args.login and not getattr(args, "skip_login", False):
        if not args.password:
            error_output(ValidationError("--password is required with --login"))
        try:
            client.session.authenticate(args.login, args.password)
        except GroovesharkError as e:
            error_output(e)

    # Run command (all subparsers have default funcs that print help)
    args.func(client, args)


if __name__ == "__main__":
    main()
