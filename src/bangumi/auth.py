"""
Bangumi Auth Service - Centralized credential loading for the Bangumi client.
Provides the application identifier and access token used to build client options.
"""

import os
from typing import Any

from bangumi.config import load_env
from bangumi.utils.get_logger import get_logger

logger = get_logger(__name__)


class BangumiAuth:
    """
    Reads Bangumi credentials from environment variables (optionally via a dotenv file).
    Values are loaded once and cached on the instance.
    """

    def __init__(self):
        self._app_id: str | None = None
        self._access_token: str | None = None
        self._env_loaded = False

    def _ensure_env(self) -> None:
        if not self._env_loaded:
            load_env()
            self._env_loaded = True

    @property
    def app_id(self) -> str | None:
        """Lazy-load the application identifier from BANGUMI_APP_ID."""
        if self._app_id is None:
            self._ensure_env()
            self._app_id = os.getenv("BANGUMI_APP_ID") or None
            if self._app_id:
                logger.info("Loaded Bangumi app id via env var")
        return self._app_id

    @property
    def access_token(self) -> str | None:
        """Lazy-load the OAuth access token from BANGUMI_ACCESS_TOKEN."""
        if self._access_token is None:
            self._ensure_env()
            self._access_token = os.getenv("BANGUMI_ACCESS_TOKEN") or None
            if self._access_token:
                logger.info("Loaded Bangumi access token via env var")
        return self._access_token

    def reset(self) -> None:
        """Forget cached credentials so the next access re-reads the environment."""
        self._app_id = None
        self._access_token = None

    def get_credential_status(self) -> dict:
        """
        Get status information about the configured credentials.
        Useful for debugging; never exposes the full token.

        Returns:
            Dictionary with:
            - has_app_id: bool
            - has_token: bool
            - token_prefix: str | None - First 4 characters of the token (if available)
        """
        token = self.access_token
        return {
            "has_app_id": self.app_id is not None,
            "has_token": token is not None,
            "token_prefix": token[:4] if token and len(token) >= 4 else None,
        }

    def get_client_options(self, additional_options: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Get client options with credentials included.

        Args:
            additional_options: Optional options merged over the credentials

        Returns:
            Dictionary suitable for ``BangumiService(options)``
        """
        options: dict[str, Any] = {}
        if self.app_id:
            options["app_id"] = self.app_id
        if self.access_token:
            options["access_token"] = self.access_token
        options.update(additional_options or {})
        return options


# Singleton instance for use across the application
bangumi_auth = BangumiAuth()
