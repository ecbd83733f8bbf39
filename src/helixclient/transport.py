import subprocess
from dataclasses import dataclass
from typing import Protocol

import httpx
from loguru import logger

from helixclient.errors import TransportError

# curl appends this line after the body so the status code can be split off
STATUS_MARKER = "\n__HELIX_STATUS__:"


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: bytes = b""


class Transport(Protocol):
    def send(self, method: str, url: str, headers: dict[str, str]) -> RawResponse:
        ...

    def close(self) -> None:
        ...


class HttpxTransport:
    """Sends requests in-process with a synchronous HTTPX client"""

    def __init__(self, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self._httpx_client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        logger.info("Shutting down HTTPX Twitch client")
        self._httpx_client.close()

    def send(self, method: str, url: str, headers: dict[str, str]) -> RawResponse:
        try:
            response = self._httpx_client.request(method, url, headers=headers)
        except httpx.RequestError as e:
            logger.exception(f"{method} request to {url} failed")
            raise TransportError(f"{method} request to {url} failed: {e}") from e

        # elapsed is only set once the response stream is closed
        response.close()
        logger.debug(f"{method} request to {url} took {response.elapsed}. Status code: {response.status_code}")
        return RawResponse(response.status_code, response.content)


class CurlTransport:
    """Sends requests by running the curl binary in a subprocess"""

    def __init__(self, curl_path: str = "curl", timeout: float = 10.0) -> None:
        self._curl_path = curl_path
        self._timeout = timeout

    def close(self) -> None:
        pass

    def build_command(self, method: str, url: str, headers: dict[str, str]) -> list[str]:
        command = [self._curl_path, "--silent", "--show-error", "--request", method]
        command += ["--max-time", str(self._timeout)]
        for name, value in headers.items():
            command += ["--header", f"{name}: {value}"]
        command += ["--write-out", STATUS_MARKER + "%{http_code}", url]
        return command

    def send(self, method: str, url: str, headers: dict[str, str]) -> RawResponse:
        command = self.build_command(method, url, headers)
        try:
            result = subprocess.run(command, capture_output=True, check=False)
        except OSError as e:
            logger.error(f"Could not run {self._curl_path!r}: {e}")
            raise TransportError(f"Could not run {self._curl_path!r}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"curl exited with status {result.returncode} for {method} {url}: {stderr}")
            raise TransportError(f"curl exited with status {result.returncode}: {stderr}")

        return parse_curl_output(result.stdout)


def parse_curl_output(output: bytes) -> RawResponse:
    """Splits curl's stdout into the response body and the status code written after it."""
    body, marker, status = output.rpartition(STATUS_MARKER.encode())
    if not marker:
        raise TransportError("curl output is missing the status code")
    try:
        status_code = int(status.strip())
    except ValueError:
        raise TransportError(f"curl reported an invalid status code {status!r}")
    return RawResponse(status_code, body)
