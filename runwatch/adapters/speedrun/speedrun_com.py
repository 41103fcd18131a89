"""speedrun.com data adapter.

Implements SpeedrunDataPort by querying the public speedrun.com REST API
(v1) for personal-bests and the names needed to announce a run.
Normalizes speedrun.com payloads into core domain models.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from runwatch.core.exceptions import EntityNotFoundError, TransientFetchError
from runwatch.core.models import GameInfo, RunObservation
from runwatch.core.ports import SpeedrunDataPort

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://www.speedrun.com/api/v1"


def _parse_verify_date(value: Any) -> datetime | None:
    """Parse a speedrun.com 'verify-date' into an aware UTC datetime.

    Args:
        value: ISO 8601 string such as '2023-04-01T12:00:00Z', or None.

    Returns:
        Aware datetime, or None when the run is not verified.
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class SpeedrunComAdapter(SpeedrunDataPort):
    """speedrun.com-backed data adapter via the v1 REST API."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize speedrun.com adapter.

        Args:
            api_url: Base URL of the API (e.g., https://www.speedrun.com/api/v1).
            timeout_seconds: Transport timeout for every request.
            transport: Optional httpx transport (used by tests).
        """
        self.api_url = api_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "SpeedrunComAdapter":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def _get_data(self, path: str) -> Any:
        """GET a resource and return its 'data' member.

        Raises:
            EntityNotFoundError: On HTTP 404.
            TransientFetchError: On any other HTTP or payload error.
        """
        try:
            response = await self.client.get(path)
            if response.status_code == 404:
                raise EntityNotFoundError(f"speedrun.com resource not found: {path}")
            response.raise_for_status()
            return response.json().get("data")
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Request to {path} failed: {e}") from e
        except (AttributeError, ValueError) as e:
            raise TransientFetchError(f"Invalid JSON from {path}: {e}") from e

    async def personal_bests(self, runner: str) -> list[RunObservation]:
        """Return every current personal-best of a runner."""
        data = await self._get_data(f"/users/{runner}/personal-bests")
        if not data:
            return []

        try:
            return [self._to_run_observation(entry) for entry in data]
        except (KeyError, TypeError, ValueError) as e:
            raise TransientFetchError(
                f"Malformed personal-bests payload for {runner}: {e}"
            ) from e

    async def game_info(self, game_id: str) -> GameInfo:
        """Return the international name and medium cover of a game."""
        data = await self._get_data(f"/games/{game_id}")
        try:
            cover = (data.get("assets") or {}).get("cover-medium") or {}
            return GameInfo(
                game_id=data["id"],
                name=data["names"]["international"],
                cover_url=cover.get("uri"),
            )
        except (AttributeError, KeyError, TypeError) as e:
            raise TransientFetchError(f"Malformed game payload for {game_id}: {e}") from e

    async def category_name(self, category_id: str) -> str:
        """Return the name of a category."""
        data = await self._get_data(f"/categories/{category_id}")
        return self._name_of(data, f"category {category_id}")

    async def level_name(self, level_id: str) -> str:
        """Return the name of a level."""
        data = await self._get_data(f"/levels/{level_id}")
        return self._name_of(data, f"level {level_id}")

    async def variable_label(self, variable_id: str, value_id: str) -> str:
        """Return the label of one value of a variable."""
        data = await self._get_data(f"/variables/{variable_id}")
        try:
            return data["values"]["values"][value_id]["label"]
        except (KeyError, TypeError) as e:
            raise TransientFetchError(
                f"Variable {variable_id} has no label for value {value_id}"
            ) from e

    @staticmethod
    def _name_of(data: Any, what: str) -> str:
        try:
            return data["name"]
        except (KeyError, TypeError) as e:
            raise TransientFetchError(f"Malformed payload for {what}") from e

    @staticmethod
    def _to_run_observation(entry: dict[str, Any]) -> RunObservation:
        """Convert one personal-bests entry into a RunObservation.

        Raises:
            KeyError: If a required member is missing.
            ValueError: If the verify date is not ISO 8601.
        """
        run = entry["run"]
        status = run.get("status") or {}
        return RunObservation(
            run_id=run["id"],
            place=int(entry["place"]),
            game_id=run["game"],
            category_id=run["category"],
            level_id=run.get("level"),
            variables=dict(run.get("values") or {}),
            time_seconds=float(run["times"]["primary_t"]),
            weblink=run["weblink"],
            played_date=run.get("date") or "",
            verified_at=_parse_verify_date(status.get("verify-date")),
        )
