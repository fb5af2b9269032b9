"""HTTP transport for Personio API v1 with single-use bearer tokens.

Personio hands out bearer tokens that are valid for one request. A successful
authenticated response may carry the next token in its Authorization header
("rotation"). The transport therefore keeps exactly one token slot:

  - before an authenticated call, the slot is read and cleared; if it was
    empty, POST /auth with the client credentials fills it first
  - after the call, a rotation header (if any) is written back into the slot,
    replacing whatever is there
  - with no rotation header the slot stays empty, so the next authenticated
    call authenticates from scratch

Both slot updates happen under an asyncio.Lock, which keeps one transport
usable from several tasks without two of them sending the same token. Calls
themselves are not serialized.

No retries: every failure aborts the call and surfaces to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from personio_client.config import ClientSettings, Credentials
from personio_client.errors import (
    DecodeError,
    EnvelopeError,
    NotFoundError,
    StatusError,
)
from personio_client.models import AuthData, ResultEnvelope

logger = logging.getLogger(__name__)


class PersonioTransport:
    """Owns the HTTP client and the token slot for one set of credentials."""

    def __init__(self, credentials: Credentials, settings: ClientSettings | None = None) -> None:
        self.credentials = credentials
        self.settings = settings or ClientSettings()
        self._client: httpx.AsyncClient | None = None
        self._token: str = credentials.access_token
        self._token_lock = asyncio.Lock()
        self.request_count: int = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def authenticate(self, client_id: str, client_secret: str) -> str:
        """Exchange client credentials for a fresh access token."""
        logger.info("Authenticating with Personio")
        data = await self.request_json(
            "POST",
            "auth",
            data={"client_id": client_id, "client_secret": client_secret},
            authenticated=False,
        )
        try:
            return AuthData.model_validate(data).token
        except ValidationError as e:
            raise DecodeError(f"Malformed auth response: {e}") from e

    async def _take_token(self) -> str:
        """Return the held token and clear the slot, authenticating if it is empty."""
        async with self._token_lock:
            if not self._token:
                self._token = await self.authenticate(
                    self.credentials.client_id, self.credentials.client_secret
                )
            token, self._token = self._token, ""
            return token

    async def _store_rotation(self, response: httpx.Response) -> None:
        next_token = response.headers.get("authorization", "").replace("Bearer ", "", 1)
        if next_token:
            async with self._token_lock:
                self._token = next_token

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> bytes:
        """Send one request and return the raw response body.

        Raises:
            StatusError: non-2xx response (NotFoundError for 404).
            httpx.TransportError: network failure or timeout, unwrapped.
        """
        client = await self._get_client()
        request_headers = dict(headers or {})
        if authenticated:
            token = await self._take_token()
            request_headers["Authorization"] = f"Bearer {token}"

        self.request_count += 1
        logger.debug(f"Personio {method} {path} params={params}")
        response = await client.request(
            method, path, params=params, data=data, headers=request_headers
        )

        # Rotation applies even when the status is an error
        if authenticated:
            await self._store_rotation(response)

        if not response.is_success:
            error_cls = NotFoundError if response.status_code == 404 else StatusError
            raise error_cls(response.status_code, response.reason_phrase)

        return response.content

    async def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request expecting the v1 JSON envelope and return its "data".

        Raises:
            EnvelopeError: the envelope reports success: false.
            DecodeError: the body is not a valid envelope.
        """
        headers = {**(kwargs.pop("headers", None) or {}), "Accept": "application/json"}
        body = await self.request(method, path, headers=headers, **kwargs)

        try:
            envelope = ResultEnvelope.model_validate(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise DecodeError(f"Malformed Personio response for {path}: {e}") from e

        if not envelope.success:
            error = envelope.error
            raise EnvelopeError(
                error.code if error else 0,
                error.message if error else "",
            )
        return envelope.data


__all__ = ["PersonioTransport"]
