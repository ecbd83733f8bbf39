import logging

import pytest
from loguru import logger
from utils import FakeTransport, json_response

from helixclient.schemas.twitch import Game, User
from helixclient.session import Session
from helixclient.twitch import TwitchAPI

CLIENT_ID = "test_client_id"
ACCESS_TOKEN = "test_access_token"

FELPS_USER = User(id="30672329", login="felps", display_name="Felps")

STARCRAFT_GAME = Game(
    id="490422",
    name="StarCraft II",
    box_art_url="https://static-cdn.jtvnw.net/ttv-boxart/490422-{width}x{height}.jpg",
)


@pytest.fixture
def caplog(caplog):
    class PropogateHandler(logging.Handler):
        def emit(self, record):
            logging.getLogger(record.name).handle(record)

    handler_id = logger.add(PropogateHandler(), format="{message}")
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("TWITCH_CLIENT_ID", "TWITCH_OAUTH_TOKEN", "TWITCH_USERNAME", "TWITCH_GAME", "TWITCH_TRANSPORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def session() -> Session:
    return Session(client_id=CLIENT_ID, oauth_token=ACCESS_TOKEN)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(
        {
            "users": json_response({"data": [FELPS_USER.model_dump()]}),
            "games": json_response({"data": [STARCRAFT_GAME.model_dump()]}),
        }
    )


@pytest.fixture
def twitch(session, transport) -> TwitchAPI:
    return TwitchAPI(session, transport)
