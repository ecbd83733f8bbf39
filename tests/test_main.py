from unittest import mock

import pytest
from conftest import ACCESS_TOKEN, CLIENT_ID
from rich.console import Console
from utils import FakeTransport, json_response

from helixclient import main
from helixclient.schemas.twitch import Channel, Stream
from helixclient.session import Session
from helixclient.twitch import TwitchAPI


def make_stream(name: str, viewers: int | None) -> Stream:
    return Stream(
        name=name, viewers=viewers, status=f"{name} live", game="StarCraft II", url=f"https://www.twitch.tv/{name}"
    )


def rendered(table) -> str:
    console = Console(width=200, record=True)
    console.print(table)
    return console.export_text()


def test_format_stream():
    assert main.format_stream(make_stream("harstem", 12345)) == "harstem (12,345 viewers) [StarCraft II] harstem live"
    assert main.format_stream(make_stream("winter", None)) == "winter (live) [StarCraft II] winter live"


def test_format_channel():
    channel = Channel(name="Felps", game="Just Chatting", url="https://www.twitch.tv/felps")
    assert main.format_channel(channel) == "Felps [Just Chatting] https://www.twitch.tv/felps"


def test_render_streams_sorted_by_viewers():
    table = main.render_streams([make_stream("pig", 300), make_stream("harstem", 12345), make_stream("winter", None)])

    text = rendered(table)
    assert text.index("harstem") < text.index("pig") < text.index("winter")
    assert "12,345" in text


def test_list_top_streams_title():
    transport = FakeTransport(
        {
            "games": json_response({"data": [{"id": "490422", "name": "StarCraft II"}]}),
            "streams": json_response({"data": []}),
        }
    )
    twitch = TwitchAPI(Session(client_id=CLIENT_ID, oauth_token=ACCESS_TOKEN, game="StarCraft II"), transport)

    table = main.list_top_streams(twitch, 10)

    assert table.title == "Top StarCraft II streams"
    assert transport.paths == ["games", "streams"]


def test_load_settings_overrides_environment(monkeypatch):
    monkeypatch.setenv("TWITCH_CLIENT_ID", "from_env")
    monkeypatch.setenv("TWITCH_GAME", "Just Chatting")
    args = main.create_parser().parse_args(["--client-id", CLIENT_ID, "top"])

    settings = main.load_settings(args)

    assert settings.client_id == CLIENT_ID
    assert settings.game == "Just Chatting"


@pytest.fixture
def fake_api(transport):
    twitch = TwitchAPI(Session(client_id=CLIENT_ID, oauth_token=ACCESS_TOKEN), transport)
    with mock.patch.object(main.TwitchAPI, "from_settings", return_value=twitch):
        yield twitch


def test_main_channels(fake_api, transport, capsys):
    transport.routes["search/channels"] = json_response(
        {
            "data": [
                {
                    "id": "1",
                    "broadcaster_login": "felps",
                    "display_name": "Felps",
                    "game_id": "509658",
                    "game_name": "Just Chatting",
                    "title": "",
                    "is_live": False,
                }
            ]
        }
    )

    assert main.main(["--log-level", "ERROR", "channels", "felps", "--limit", "3"]) == 0

    assert "Felps [Just Chatting] https://www.twitch.tv/felps" in capsys.readouterr().out
    assert transport.query() == [("first", "3"), ("query", "felps")]
    assert transport.closed


def test_main_reports_errors(fake_api, transport, capsys):
    assert main.main(["--log-level", "ERROR", "streams", "felps", "--limit", "500"]) == 1

    assert "Error: limit must be between 1 and 100, got 500" in capsys.readouterr().out
    assert transport.requests == []


def test_main_auth(fake_api, capsys):
    with mock.patch.object(main, "authenticate") as mock_authenticate:
        assert main.main(["--log-level", "ERROR", "auth"]) == 0

    mock_authenticate.assert_called_once_with(fake_api.session)
    assert f"export TWITCH_OAUTH_TOKEN={ACCESS_TOKEN}" in capsys.readouterr().out
