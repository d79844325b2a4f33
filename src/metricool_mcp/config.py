"""Metricool credentials and server settings.

A complete keyring entry (``metricool-mcp`` / ``api-credentials``, stored by
``metricool-mcp --save-credentials``) takes precedence. Otherwise the
``METRICOOL_*`` variables are read, after merging in any ``.env`` file found
from the working directory. Server settings always come from the environment.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

import keyring
from dotenv import find_dotenv, load_dotenv
from keyring.errors import KeyringError
from pydantic import BaseModel, ConfigDict, SecretStr

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

SERVICE_NAME = "metricool-mcp"
ACCOUNT_NAME = "api-credentials"

DEFAULT_BASE_URL = "https://app.metricool.com/api"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8123


class Credentials(BaseModel):
    """Account id, auth token and optional default brand (blog) id.

    Immutable once built. The token is a ``SecretStr`` so it never shows up in
    reprs or log lines.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = ""
    user_token: SecretStr = SecretStr("")
    default_blog_id: str | None = None

    @property
    def token(self) -> str:
        return self.user_token.get_secret_value()

    def require(self) -> "Credentials":
        """Raise ConfigurationError unless both user id and token are set."""
        if not self.user_id:
            raise ConfigurationError("METRICOOL_USER_ID is required")
        if not self.token:
            raise ConfigurationError("METRICOOL_USER_TOKEN is required")
        return self


class Settings(BaseModel):
    """Process-wide server settings, read once at startup."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None
    log_level: str = "INFO"


def _from_keychain() -> dict[str, Any] | None:
    try:
        data = keyring.get_password(SERVICE_NAME, ACCOUNT_NAME)
    except KeyringError as exc:
        logger.debug("Keychain unavailable (%s), falling back to env vars", exc)
        return None
    if not data:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed keychain entry %s/%s", SERVICE_NAME, ACCOUNT_NAME)
        return None


def get_credentials() -> Credentials:
    """Retrieve Metricool credentials from OS keychain, falling back to env vars.

    Never raises for missing values; call ``Credentials.require()`` where they
    are mandatory.
    """
    stored = _from_keychain()
    if stored and stored.get("userId") and stored.get("userToken"):
        return Credentials(
            user_id=str(stored["userId"]),
            user_token=SecretStr(str(stored["userToken"])),
            default_blog_id=str(stored["blogId"]) if stored.get("blogId") else None,
        )

    load_dotenv(find_dotenv(usecwd=True), override=False)
    return Credentials(
        user_id=os.environ.get("METRICOOL_USER_ID", "").strip(),
        user_token=SecretStr(os.environ.get("METRICOOL_USER_TOKEN", "").strip()),
        default_blog_id=os.environ.get("METRICOOL_BLOG_ID", "").strip() or None,
    )


def save_credentials(credentials: Credentials) -> None:
    """Store credentials in the OS keychain for later runs."""
    payload = {
        "userId": credentials.user_id,
        "userToken": credentials.token,
        "blogId": credentials.default_blog_id,
    }
    keyring.set_password(SERVICE_NAME, ACCOUNT_NAME, json.dumps(payload))


def get_settings() -> Settings:
    """Read server settings from env vars (after loading ``.env``)."""
    load_dotenv(find_dotenv(usecwd=True), override=False)
    timeout = os.environ.get("METRICOOL_TIMEOUT")
    try:
        port = int(os.environ.get("PORT", str(DEFAULT_PORT)))
        return Settings(
            host=os.environ.get("HOST", DEFAULT_HOST),
            port=port,
            base_url=os.environ.get("METRICOOL_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout=float(timeout) if timeout else None,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
    except ValueError as exc:
        raise ConfigurationError(f"Invalid server setting: {exc}") from exc
