"""
Bangumi client configuration.
Defaults mirror the public API host; caller options are merged over them.
"""

import os
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

VERSION = "1.0.0"

DEFAULT_REST_BASE = "api.bgm.tv"

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "*/*",
    "Content-Type": "application/x-www-form-urlencoded",
    "Connection": "close",
    "User-Agent": f"bangumi-py/{VERSION}",
}


def load_env() -> None:
    """Load environment variables from env file.

    Defaults to config/local.env for local development.
    Set ENV_FILE environment variable to override.
    """
    env = os.getenv("ENV_FILE", "config/local.env")
    load_dotenv(env)


class BangumiConfig(BaseModel):
    """Immutable client options. Use ``merged`` to derive a reconfigured copy."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    headers: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    rest_base: str = DEFAULT_REST_BASE
    protocol: Literal["http", "https"] = "https"
    app_id: str | None = None
    access_token: str | None = None
    callback_url: str | None = None
    # cookie settings are accepted for compatibility; requests never read them
    cookie_options: dict[str, Any] = Field(default_factory=dict)
    cookie_secret: str | None = None

    @classmethod
    def from_options(cls, options: dict[str, Any] | None = None) -> "BangumiConfig":
        """Build a config from a plain options mapping, merging headers over the defaults."""
        return cls().merged(**(options or {}))

    def merged(self, **options: Any) -> "BangumiConfig":
        """Return a new config with ``options`` applied on top of this one."""
        values = self.model_dump()
        headers = dict(values["headers"])
        if options.get("headers"):
            headers.update({str(k): str(v) for k, v in options["headers"].items()})
        values.update({k: v for k, v in options.items() if k != "headers"})
        values["headers"] = headers
        return type(self).model_validate(values)

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.rest_base}"
