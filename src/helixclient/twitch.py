from typing import Any

from loguru import logger

from helixclient.constants import MAX_PAGE_SIZE, TWITCH_API_BASE_URL, USER_AGENT
from helixclient.decoder import decode_response, parse_rows
from helixclient.errors import AuthorizationError, ConfigurationError, PreconditionError
from helixclient.params import Params, encode_params
from helixclient.schemas.twitch import Channel, Game, SearchChannelResult, Stream, StreamResult, User
from helixclient.session import Session
from helixclient.settings import Settings
from helixclient.transport import CurlTransport, HttpxTransport, RawResponse, Transport


def _check_limit(limit: int | None) -> None:
    if limit is not None and not 1 <= limit <= MAX_PAGE_SIZE:
        raise PreconditionError(f"limit must be between 1 and {MAX_PAGE_SIZE}, got {limit}")


def _check_term(term: str) -> None:
    if not term:
        raise PreconditionError("Search term must not be empty")


class TwitchAPI:
    """A class for handling Twitch API requests"""

    def __init__(self, session: Session, transport: Transport | None = None) -> None:
        self.session = session
        self._transport: Transport = transport or HttpxTransport()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TwitchAPI":
        if settings.transport == "curl":
            transport: Transport = CurlTransport(settings.curl_path, timeout=settings.http_timeout)
        else:
            transport = HttpxTransport(timeout=settings.http_timeout)
        return cls(Session.from_settings(settings), transport)

    def __enter__(self) -> "TwitchAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    def _headers(self) -> dict[str, str]:
        if not self.session.client_id:
            raise ConfigurationError("Twitch client ID is not set")
        if not self.session.oauth_token:
            raise ConfigurationError("Twitch OAuth token is not set")
        return {
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {self.session.oauth_token}",
            "Client-ID": self.session.client_id,
            "Accept": "application/json",
        }

    def request(self, path: str, params: Params | None = None, method: str = "GET") -> RawResponse:
        """Makes an authenticated request to the Twitch API and returns the raw response"""
        headers = self._headers()
        query = encode_params(params)
        url = f"{TWITCH_API_BASE_URL}{path}?{query}" if query else f"{TWITCH_API_BASE_URL}{path}"

        logger.debug(f"Making {method} request to {url} with Client-ID {headers['Client-ID']}")
        response = self._transport.send(method, url, headers)
        logger.debug(f"{method} request to {url} returned status {response.status_code}")
        return response

    def get(self, path: str, params: Params | None = None) -> Any:
        """Makes an authenticated GET request to the Twitch API and decodes the JSON body"""
        return decode_response(self.request(path, params))

    def get_user(self, login: str | None = None) -> User:
        """Fetches a user by login, or the owner of the OAuth token when no login is given."""
        logger.debug(f"Fetching user {login or '(token owner)'} from API")
        params = [("login", login)] if login else None
        if users := parse_rows(self.get("users", params), User):
            return users[0]
        raise PreconditionError(f"Unknown Twitch user {login!r}" if login else "Could not resolve the token's user")

    def get_game(self, name: str) -> Game:
        logger.debug(f"Fetching game {name!r} from API")
        if games := parse_rows(self.get("games", [("name", name)]), Game):
            return games[0]
        raise PreconditionError(f"Unknown Twitch game {name!r}")

    def get_user_id(self) -> str:
        """Returns the ID of the session's user, looking it up the first time.

        With no username set, the owner of the OAuth token is used and their login
        becomes the session's username.
        """
        if self.session.user_id:
            logger.debug(f"User ID cache hit for {self.session.username!r}")
            return self.session.user_id

        if not self.session.username and not self.session.oauth_token:
            raise PreconditionError("No username set and no OAuth token to look it up")

        logger.debug(f"User ID cache miss for {self.session.username!r}")
        user = self.get_user(self.session.username)
        self.session.remember_user(user.login, user.id)
        return user.id

    def get_game_id(self) -> str:
        """Returns the ID of the session's game filter, looking it up the first time."""
        if self.session.game_id:
            logger.debug(f"Game ID cache hit for {self.session.game!r}")
            return self.session.game_id

        if not self.session.game:
            raise PreconditionError("No game filter set")

        logger.debug(f"Game ID cache miss for {self.session.game!r}")
        game = self.get_game(self.session.game)
        self.session.remember_game(game.id)
        return game.id

    def search_streams(self, term: str, limit: int | None = None) -> list[Stream]:
        """Searches live channels matching `term`, restricted to the game filter if one is set."""
        _check_term(term)
        _check_limit(limit)

        params: list[tuple[str, Any]] = []
        if self.session.game:
            params.append(("game_id", self.get_game_id()))
        params += [("first", limit), ("query", term), ("live_only", True)]

        rows = parse_rows(self.get("search/channels", params), SearchChannelResult)
        logger.debug(f"Found {len(rows)} live channels for {term!r}")
        return [row.to_stream() for row in rows]

    def search_channels(self, term: str, limit: int | None = None) -> list[Channel]:
        """Searches channels matching `term`, live or not."""
        _check_term(term)
        _check_limit(limit)

        rows = parse_rows(self.get("search/channels", [("first", limit), ("query", term)]), SearchChannelResult)
        logger.debug(f"Found {len(rows)} channels for {term!r}")
        return [row.to_channel() for row in rows]

    def get_followed_streams(self, limit: int | None = None) -> list[Stream]:
        """Fetches the live streams followed by the session's user."""
        _check_limit(limit)
        if not self.session.oauth_token:
            raise AuthorizationError("Listing followed streams requires an OAuth token")

        user_id = self.get_user_id()
        rows = parse_rows(self.get("streams/followed", [("user_id", user_id), ("first", limit)]), StreamResult)
        return [row.to_stream() for row in rows]

    def get_top_streams(self, limit: int | None = None) -> list[Stream]:
        """Fetches the most watched live streams, restricted to the game filter if one is set."""
        _check_limit(limit)

        params: list[tuple[str, Any]] = []
        if self.session.game:
            params.append(("game_id", self.get_game_id()))
        params.append(("first", limit))

        rows = parse_rows(self.get("streams", params), StreamResult)
        return [row.to_stream() for row in rows]
