import urllib.parse
import webbrowser
from typing import Callable

from loguru import logger

from helixclient.constants import OAUTH_REDIRECT_URI, OAUTH_SCOPES, TWITCH_AUTHORIZE_URL
from helixclient.errors import PreconditionError
from helixclient.session import Session


def build_authorization_url(client_id: str | None) -> str:
    """Builds the URL of the implicit grant flow for `client_id`."""
    if not client_id:
        raise PreconditionError("A Twitch client ID is required to authenticate")
    query = urllib.parse.urlencode(
        {
            "client_id": client_id,
            "redirect_uri": OAUTH_REDIRECT_URI,
            "response_type": "token",
            "scope": " ".join(OAUTH_SCOPES),
        }
    )
    return f"{TWITCH_AUTHORIZE_URL}?{query}"


def authenticate(
    session: Session,
    open_url: Callable[[str], object] = webbrowser.open,
    read_token: Callable[[str], str] = input,
) -> None:
    """Opens the authorization page and stores the token the user pastes back.

    The redirect is not captured, the user copies `access_token` from the URL
    they land on.
    """
    url = build_authorization_url(session.client_id)
    logger.info(f"Opening Twitch authorization page {url}")
    open_url(url)

    token = read_token("Paste the access_token from the redirect URL: ").strip()
    token = token.removeprefix("oauth:")
    if not token:
        raise PreconditionError("No OAuth token was given")

    session.oauth_token = token
    logger.info("Twitch OAuth token set")
