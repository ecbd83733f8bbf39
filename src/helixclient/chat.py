import threading
from concurrent.futures import Future
from enum import Enum
from typing import Callable, Protocol

from loguru import logger

from helixclient.constants import CHAT_HOST, CHAT_PORT, CHAT_SERVER_NAMES
from helixclient.errors import AuthorizationError
from helixclient.twitch import TwitchAPI

CONNECTED_EVENT = "connected"
# Twitch answers RPL_MYINFO with ":tmi.twitch.tv 004 <nick> :-", which lacks the
# server name and version fields IRC clients expect.
MYINFO_EVENT = "004"


class ChatClient(Protocol):
    """The parts of an IRC client the launcher relies on.

    `connected` hooks are called with `(server, nickname)` once registration
    completes. `004` hooks are called with `(server, params)` and return True to
    stop the client from processing the message further.
    """

    def add_hook(self, event: str, callback: Callable) -> None:
        ...

    def remove_hook(self, event: str, callback: Callable) -> None:
        ...

    def connect(self, host: str, port: int, nickname: str, password: str) -> None:
        ...

    def join(self, channel: str) -> None:
        ...


class ChatState(str, Enum):
    IDLE = "idle"
    AWAITING_IDENTITY = "awaiting-identity"
    AWAITING_CONNECT = "awaiting-connect"
    JOINED = "joined"


def suppress_twitch_myinfo(server: str, params: list[str]) -> bool:
    """Swallows the malformed 004 reply sent by the Twitch chat server."""
    if server in CHAT_SERVER_NAMES:
        logger.debug(f"Ignoring 004 reply from {server}: {params}")
        return True
    return False


class ChatJoin:
    """Joins one channel the first time the Twitch chat server reports a connection.

    Registered as a `connected` hook. The join happens at most once and the hook
    removes itself whether the join succeeds or not. `joined` resolves with the
    joined channel name, or with the join's exception.
    """

    def __init__(self, client: ChatClient, channel: str) -> None:
        self.client = client
        self.channel = f"#{channel.lower()}"
        self.state = ChatState.IDLE
        self.joined: Future[str] = Future()
        self._lock = threading.Lock()

    def __call__(self, server: str, nickname: str | None = None) -> None:
        if server not in CHAT_SERVER_NAMES:
            logger.debug(f"Connected to {server}, still waiting for the Twitch chat server")
            return

        with self._lock:
            if self.joined.done():
                return
            try:
                logger.info(f"Connected to {server}, joining {self.channel}")
                self.client.join(self.channel)
            except Exception as e:
                logger.exception(f"Could not join {self.channel}")
                self.joined.set_exception(e)
                raise
            else:
                self.state = ChatState.JOINED
                self.joined.set_result(self.channel)
            finally:
                self.client.remove_hook(CONNECTED_EVENT, self)

    def cancel(self) -> bool:
        """Stops waiting for the connection. Returns False if the hook already fired."""
        with self._lock:
            if self.joined.done():
                return False
            self.joined.cancel()
            self.client.remove_hook(CONNECTED_EVENT, self)
            self.state = ChatState.IDLE
            logger.info(f"No longer waiting to join {self.channel}")
            return True


class ChatLauncher:
    """Opens Twitch chat for a channel through an IRC client"""

    def __init__(self, api: TwitchAPI, client: ChatClient) -> None:
        self.api = api
        self.client = client
        self._myinfo_filter_added = False

    def open_chat(self, channel: str) -> ChatJoin:
        """Connects to Twitch chat and joins `channel` once the connection is up."""
        chat_join = ChatJoin(self.client, channel)
        session = self.api.session
        if not session.oauth_token:
            raise AuthorizationError("Opening chat requires an OAuth token")

        chat_join.state = ChatState.AWAITING_IDENTITY
        if not session.username:
            self.api.get_user_id()
        nickname = session.username.lower()  # type: ignore

        if not self._myinfo_filter_added:
            self.client.add_hook(MYINFO_EVENT, suppress_twitch_myinfo)
            self._myinfo_filter_added = True
        self.client.add_hook(CONNECTED_EVENT, chat_join)
        chat_join.state = ChatState.AWAITING_CONNECT

        logger.info(f"Connecting to {CHAT_HOST}:{CHAT_PORT} as {nickname} to join {chat_join.channel}")
        try:
            self.client.connect(CHAT_HOST, CHAT_PORT, nickname, f"oauth:{session.oauth_token}")
        except BaseException:
            logger.error(f"Could not connect to {CHAT_HOST}:{CHAT_PORT}, dropping the join of {chat_join.channel}")
            chat_join.cancel()
            raise
        return chat_join
