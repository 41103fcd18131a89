"""Twitch stream platform adapter.

Implements StreamPlatformPort by querying the Twitch Helix API.
Authenticates every request with an app/user bearer token and the
application's client id.
"""

import logging
from typing import Any

import httpx

from runwatch.core.exceptions import TransientFetchError
from runwatch.core.models import StreamObservation
from runwatch.core.ports import StreamPlatformPort

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.twitch.tv/helix"


class TwitchAdapter(StreamPlatformPort):
    """Twitch-backed stream platform adapter via the Helix API."""

    def __init__(
        self,
        client_id: str,
        oauth_token: str,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize Twitch adapter.

        Args:
            client_id: Twitch application client id.
            oauth_token: Bearer token (without the 'Bearer ' prefix).
            api_url: Base URL for the Helix API.
            timeout_seconds: Transport timeout for every request.
            transport: Optional httpx transport (used by tests).
        """
        self.client_id = client_id
        self.oauth_token = oauth_token
        self.api_url = api_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "Authorization": f"Bearer {oauth_token}",
                "Client-Id": client_id,
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "TwitchAdapter":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def _first_item(self, path: str, params: dict[str, str]) -> dict[str, Any] | None:
        """GET a Helix collection and return its first element, if any.

        Raises:
            TransientFetchError: On HTTP or payload errors.
        """
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            items = response.json()["data"]
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Twitch request to {path} failed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise TransientFetchError(f"Malformed Twitch payload from {path}: {e}") from e

        if not items:
            return None
        return items[0]

    async def resolve_user_id(self, handle: str) -> str | None:
        """Resolve a login name to its Twitch user id."""
        user = await self._first_item("/users", {"login": handle})
        if user is None:
            return None
        try:
            return str(user["id"])
        except KeyError as e:
            raise TransientFetchError(f"Twitch user payload for {handle} lacks an id") from e

    async def current_stream(self, user_id: str) -> StreamObservation | None:
        """Return the live stream of a user, or None when offline."""
        stream = await self._first_item("/streams", {"user_id": user_id})
        if stream is None:
            return None
        try:
            return StreamObservation(
                title=stream["title"],
                broadcaster_display_name=stream["user_name"],
                broadcaster_login=stream.get("user_login") or stream["user_name"],
                game_name=stream.get("game_name") or "",
                thumbnail_url_template=stream["thumbnail_url"],
            )
        except KeyError as e:
            raise TransientFetchError(
                f"Twitch stream payload for {user_id} lacks {e}"
            ) from e
