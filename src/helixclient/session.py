from loguru import logger

from helixclient.settings import Settings


class Session:
    """Credentials and identifiers shared by every call of a `TwitchAPI`.

    The user ID and game ID are cached next to the name they were resolved for.
    Changing the username or the game filter drops the matching cached ID in the
    same assignment, so a cached ID never outlives its name.
    """

    def __init__(
        self,
        client_id: str | None = None,
        oauth_token: str | None = None,
        username: str | None = None,
        game: str | None = None,
    ) -> None:
        self.client_id = client_id
        self.oauth_token = oauth_token
        self._username: str | None = username or None
        self._user_id: str | None = None
        self._game: str | None = game or None
        self._game_id: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Session":
        return cls(
            client_id=settings.client_id,
            oauth_token=settings.oauth_token,
            username=settings.username,
            game=settings.game,
        )

    @property
    def username(self) -> str | None:
        return self._username

    @username.setter
    def username(self, value: str | None) -> None:
        value = value or None
        if value != self._username and self._username is not None:
            logger.debug(f"Username changed from {self._username!r} to {value!r}, dropping cached user ID")
            self._user_id = None
        self._username = value

    @property
    def user_id(self) -> str | None:
        return self._user_id

    def remember_user(self, login: str, user_id: str) -> None:
        """Stores `user_id` as the resolved ID of `login`, which becomes the username."""
        self.username = login
        self._user_id = user_id

    @property
    def game(self) -> str | None:
        return self._game

    @game.setter
    def game(self, value: str | None) -> None:
        value = value or None
        if value != self._game and self._game is not None:
            logger.debug(f"Game filter changed from {self._game!r} to {value!r}, dropping cached game ID")
            self._game_id = None
        self._game = value

    @property
    def game_id(self) -> str | None:
        return self._game_id

    def remember_game(self, game_id: str) -> None:
        self._game_id = game_id
