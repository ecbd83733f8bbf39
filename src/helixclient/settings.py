from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="twitch_", env_file=".env", extra="ignore")

    client_id: str | None = None
    oauth_token: str | None = None
    username: str | None = None
    game: str | None = None

    transport: Literal["httpx", "curl"] = "httpx"
    curl_path: str = "curl"
    http_timeout: float = 10.0

    log_level: str = Field(default="INFO", validation_alias="log_level")
