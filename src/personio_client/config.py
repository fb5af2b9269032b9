"""Credentials and client settings.

The client never reads the environment on its own. Callers either build
Credentials/ClientSettings directly or use the load_* helpers, which read
PERSONIO_* variables after loading an optional .env file.

A stored credentials document in the camel-case form also validates directly:

    Credentials.model_validate_json('{"clientId": "...", "clientSecret": "..."}')
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://api.personio.de/v1"

# Upstream maximum for the "limit" query parameter on listing endpoints.
DEFAULT_PAGE_SIZE = 200

DEFAULT_TIMEOUT = 40.0


class Credentials(BaseModel):
    """Client-credential pair, plus an optional access token to start with."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientId")
    client_secret: str = Field(alias="clientSecret")
    access_token: str = Field(default="", alias="accessToken")


class ClientSettings(BaseModel):
    """Connection settings for a PersonioClient."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)


def _load_env(env_file: str | None) -> None:
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()


def load_credentials(env_file: str | None = None) -> Credentials:
    """Read PERSONIO_CLIENT_ID / PERSONIO_CLIENT_SECRET from the environment."""
    _load_env(env_file)

    client_id = os.environ.get("PERSONIO_CLIENT_ID", "")
    client_secret = os.environ.get("PERSONIO_CLIENT_SECRET", "")
    if not client_id:
        raise ValueError("Environment variable 'PERSONIO_CLIENT_ID' is not set or empty")
    if not client_secret:
        raise ValueError("Environment variable 'PERSONIO_CLIENT_SECRET' is not set or empty")

    return Credentials(
        client_id=client_id,
        client_secret=client_secret,
        access_token=os.environ.get("PERSONIO_ACCESS_TOKEN", ""),
    )


def load_settings(env_file: str | None = None) -> ClientSettings:
    """Read optional PERSONIO_BASE_URL / _TIMEOUT / _PAGE_SIZE overrides."""
    _load_env(env_file)

    return ClientSettings(
        base_url=os.environ.get("PERSONIO_BASE_URL") or DEFAULT_BASE_URL,
        timeout=float(os.environ.get("PERSONIO_TIMEOUT") or DEFAULT_TIMEOUT),
        page_size=int(os.environ.get("PERSONIO_PAGE_SIZE") or DEFAULT_PAGE_SIZE),
    )


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TIMEOUT",
    "ClientSettings",
    "Credentials",
    "load_credentials",
    "load_settings",
]
