from urllib.parse import parse_qsl, urlsplit

import orjson

from helixclient.transport import RawResponse


def json_response(payload, status_code: int = 200) -> RawResponse:
    return RawResponse(status_code, orjson.dumps(payload))


class FakeTransport:
    """Transport double that answers from a route table and records every request."""

    def __init__(self, routes: dict[str, RawResponse] | None = None) -> None:
        self.routes = routes or {}
        self.requests: list[tuple[str, str, dict[str, str]]] = []
        self.closed = False

    def send(self, method: str, url: str, headers: dict[str, str]) -> RawResponse:
        self.requests.append((method, url, headers))
        path = urlsplit(url).path.removeprefix("/helix/")
        return self.routes.get(path, json_response({"data": []}))

    def close(self) -> None:
        self.closed = True

    @property
    def paths(self) -> list[str]:
        return [urlsplit(url).path.removeprefix("/helix/") for _, url, _ in self.requests]

    def query(self, index: int = -1) -> list[tuple[str, str]]:
        return parse_qsl(urlsplit(self.requests[index][1]).query)


class FakeChatClient:
    """IRC client double that keeps hooks in plain lists, duplicates included."""

    def __init__(self, fail_join: bool = False, fail_connect: bool = False) -> None:
        self.hooks: dict[str, list] = {}
        self.joins: list[str] = []
        self.connections: list[tuple[str, int, str, str]] = []
        self.fail_join = fail_join
        self.fail_connect = fail_connect

    def add_hook(self, event, callback) -> None:
        self.hooks.setdefault(event, []).append(callback)

    def remove_hook(self, event, callback) -> None:
        if callback in self.hooks.get(event, []):
            self.hooks[event].remove(callback)

    def connect(self, host, port, nickname, password) -> None:
        if self.fail_connect:
            self.fail_connect = False
            raise ConnectionError("Connection refused")
        self.connections.append((host, port, nickname, password))

    def join(self, channel) -> None:
        if self.fail_join:
            raise ConnectionError("Connection reset while joining")
        self.joins.append(channel)

    def fire(self, event, *args):
        # copy, hooks may remove themselves while being called
        return [callback(*args) for callback in list(self.hooks.get(event, []))]
