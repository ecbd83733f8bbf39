from typing import Any, TypeVar

import httpx
import orjson
from loguru import logger
from pydantic import BaseModel, ValidationError

from helixclient.errors import DecodeError, PlatformError
from helixclient.transport import RawResponse

Model = TypeVar("Model", bound=BaseModel)


def decode_response(response: RawResponse) -> Any:
    """Parses the JSON body of `response`.

    Returns None for a 204 or an empty body. Raises `PlatformError` when Twitch
    reports an error and `DecodeError` when the body is not JSON.
    """
    if response.status_code == httpx.codes.NO_CONTENT or not response.body.strip():
        if response.status_code >= 400:
            raise PlatformError(response.status_code, httpx.codes.get_reason_phrase(response.status_code))
        return None

    try:
        payload = orjson.loads(response.body)
    except orjson.JSONDecodeError as e:
        logger.error(f"Could not decode JSON response with status {response.status_code}")
        raise DecodeError(f"Invalid JSON in response with status {response.status_code}: {e}") from e

    if isinstance(payload, dict) and "error" in payload:
        status = payload.get("status", response.status_code)
        error = PlatformError(
            int(status) if isinstance(status, int) else response.status_code,
            str(payload["error"]),
            payload.get("message") or None,
        )
        logger.error(f"Twitch API error: {error}")
        raise error

    if response.status_code >= 400:
        message = payload.get("message") if isinstance(payload, dict) else None
        error = PlatformError(response.status_code, httpx.codes.get_reason_phrase(response.status_code), message)
        logger.error(f"Twitch API error: {error}")
        raise error

    return payload


def parse_rows(payload: Any, model: type[Model]) -> list[Model]:
    """Validates every element of the `data` array of a list response as `model`."""
    if payload is None:
        return []
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise DecodeError(f"Expected an object with a 'data' array, got {type(payload).__name__}")

    try:
        return [model.model_validate(row) for row in payload["data"]]
    except ValidationError as e:
        logger.error(f"Response rows do not match {model.__name__}")
        raise DecodeError(f"Invalid {model.__name__} row: {e}") from e
