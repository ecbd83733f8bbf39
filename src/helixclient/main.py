import argparse
import sys
from typing import Sequence

import humanize
from loguru import logger
from rich.console import Console
from rich.table import Table

from helixclient.auth import authenticate
from helixclient.errors import HelixError
from helixclient.schemas.twitch import Channel, Stream
from helixclient.settings import Settings
from helixclient.twitch import TwitchAPI

console = Console()


def setup_logging(level: str) -> None:
    logger.remove()  # All default handlers are removed
    logger.add(sys.stderr, diagnose=False, level=level.upper())


def format_stream(stream: Stream) -> str:
    """One line candidate for the completion front end."""
    viewers = f"{humanize.intcomma(stream.viewers)} viewers" if stream.viewers is not None else "live"
    game = f" [{stream.game}]" if stream.game else ""
    return f"{stream.name} ({viewers}){game} {stream.status}".rstrip()


def format_channel(channel: Channel) -> str:
    game = f" [{channel.game}]" if channel.game else ""
    return f"{channel.name}{game} {channel.url}"


def render_streams(streams: list[Stream], title: str = "Live streams") -> Table:
    """Builds a table of `streams`, most watched first."""
    table = Table(title=title)
    table.add_column("Channel", style="cyan", no_wrap=True)
    table.add_column("Viewers", justify="right", style="yellow")
    table.add_column("Game", style="magenta")
    table.add_column("Title")

    for stream in sorted(streams, key=lambda s: s.viewers or 0, reverse=True):
        viewers = humanize.intcomma(stream.viewers) if stream.viewers is not None else "-"
        table.add_row(stream.name, viewers, stream.game, stream.status)
    return table


def list_top_streams(api: TwitchAPI, limit: int | None = None) -> Table:
    streams = api.get_top_streams(limit)
    title = f"Top {api.session.game} streams" if api.session.game else "Top streams"
    return render_streams(streams, title=title)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="helix-client", description="Browse Twitch streams from the terminal.")
    parser.add_argument("--client-id", help="Twitch application client ID (TWITCH_CLIENT_ID)")
    parser.add_argument("--token", help="Twitch OAuth token (TWITCH_OAUTH_TOKEN)")
    parser.add_argument("--username", help="User whose follows are listed (TWITCH_USERNAME)")
    parser.add_argument("--game", help="Only show streams of this game (TWITCH_GAME)")
    parser.add_argument("--transport", choices=["httpx", "curl"], help="How requests are sent (TWITCH_TRANSPORT)")
    parser.add_argument("--curl-path", help="curl binary used by the curl transport (TWITCH_CURL_PATH)")
    parser.add_argument("--log-level", help="Log level (LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("auth", help="Authorize the application and print the OAuth token")

    streams_parser = subparsers.add_parser("streams", help="Search live streams")
    streams_parser.add_argument("term")
    streams_parser.add_argument("--limit", type=int)

    channels_parser = subparsers.add_parser("channels", help="Search channels")
    channels_parser.add_argument("term")
    channels_parser.add_argument("--limit", type=int)

    followed_parser = subparsers.add_parser("followed", help="List live streams you follow")
    followed_parser.add_argument("--limit", type=int)

    top_parser = subparsers.add_parser("top", help="Show the most watched live streams")
    top_parser.add_argument("--limit", type=int)
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {
        "client_id": args.client_id,
        "oauth_token": args.token,
        "username": args.username,
        "game": args.game,
        "transport": args.transport,
        "curl_path": args.curl_path,
        "log_level": args.log_level,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def run(api: TwitchAPI, args: argparse.Namespace) -> None:
    if args.command == "auth":
        authenticate(api.session)
        console.print(f"export TWITCH_OAUTH_TOKEN={api.session.oauth_token}")
    elif args.command == "streams":
        for stream in api.search_streams(args.term, args.limit):
            console.print(format_stream(stream), markup=False)
    elif args.command == "channels":
        for channel in api.search_channels(args.term, args.limit):
            console.print(format_channel(channel), markup=False)
    elif args.command == "followed":
        console.print(render_streams(api.get_followed_streams(args.limit), title="Followed streams"))
    elif args.command == "top":
        console.print(list_top_streams(api, args.limit))


def main(argv: Sequence[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    settings = load_settings(args)
    setup_logging(settings.log_level)

    with TwitchAPI.from_settings(settings) as api:
        try:
            run(api, args)
        except HelixError as e:
            logger.debug(f"{args.command} failed: {e!r}")
            console.print(f"Error: {e}", style="red", markup=False)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
