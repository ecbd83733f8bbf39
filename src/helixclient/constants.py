TWITCH_API_BASE_URL = "https://api.twitch.tv/helix/"
TWITCH_AUTHORIZE_URL = "https://id.twitch.tv/oauth2/authorize"
TWITCH_WEB_URL = "https://www.twitch.tv/"

OAUTH_REDIRECT_URI = "http://localhost"
OAUTH_SCOPES = ("user:read:follows", "chat:read", "chat:edit")

USER_AGENT = "helix-client/0.1.0"

CHAT_HOST = "irc.chat.twitch.tv"
CHAT_PORT = 6667
# Name the chat gateway reports for itself once connected
CHAT_SERVER_NAMES = frozenset({CHAT_HOST, "tmi.twitch.tv"})

MAX_PAGE_SIZE = 100
