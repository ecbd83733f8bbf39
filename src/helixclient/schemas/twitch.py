import unicodedata

from pydantic import BaseModel, ConfigDict, field_validator

from helixclient.constants import TWITCH_WEB_URL


def channel_url(login: str) -> str:
    return f"{TWITCH_WEB_URL}{login}"


class Stream(BaseModel):
    """A live broadcast, as shown to the user"""

    model_config = ConfigDict(frozen=True)

    name: str
    viewers: int | None = None
    status: str = ""
    game: str = ""
    url: str

    @field_validator("status")
    @classmethod
    def strip_control_characters(cls, value: str) -> str:
        return "".join(c for c in value if unicodedata.category(c) != "Cc")


class Channel(BaseModel):
    """A broadcaster's profile, as shown to the user"""

    model_config = ConfigDict(frozen=True)

    name: str
    followers: int | None = None
    game: str = ""
    url: str


class User(BaseModel):
    """Model for a Twitch User"""

    id: str
    login: str
    display_name: str


class Game(BaseModel):
    """Model for a Twitch Game"""

    id: str
    name: str
    box_art_url: str = ""


class SearchChannelResult(BaseModel):
    """Row of the search/channels endpoint"""

    id: str
    broadcaster_login: str
    display_name: str
    game_id: str
    game_name: str
    title: str
    is_live: bool
    broadcaster_language: str = ""

    def to_stream(self) -> Stream:
        # search results carry no viewer count
        return Stream(
            name=self.broadcaster_login,
            status=self.title,
            game=self.game_name,
            url=channel_url(self.broadcaster_login),
        )

    def to_channel(self) -> Channel:
        return Channel(name=self.display_name, game=self.game_name, url=channel_url(self.broadcaster_login))


class StreamResult(BaseModel):
    """Row of the streams and streams/followed endpoints"""

    id: str
    user_id: str
    user_login: str
    user_name: str
    game_id: str
    game_name: str
    title: str
    viewer_count: int
    type: str = "live"
    language: str = ""

    def to_stream(self) -> Stream:
        return Stream(
            name=self.user_login,
            viewers=self.viewer_count,
            status=self.title,
            game=self.game_name,
            url=channel_url(self.user_login),
        )
