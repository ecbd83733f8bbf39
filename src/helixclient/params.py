from typing import Any, Iterable, Mapping
from urllib.parse import quote_plus

Params = Mapping[str, Any] | Iterable[tuple[str, Any]]


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return quote_plus(str(value))


def encode_params(params: Params | None) -> str:
    """Encodes `params` as a query string, keeping the order they were given in.

    Pairs whose value is None are left out, repeated keys are kept as they are.
    """
    if not params:
        return ""
    pairs = params.items() if isinstance(params, Mapping) else params
    return "&".join(f"{quote_plus(str(key))}={_encode_value(value)}" for key, value in pairs if value is not None)
