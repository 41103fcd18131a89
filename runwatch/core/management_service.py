"""Management service: implements ManagementPort for human-initiated operations.

This is a core service that registers new runners and streamers by
resolving their initial state through the data sources and writing them
to the registry. All registrations are logged for audit trails.
"""

import logging

from .exceptions import EntityNotFoundError
from .models import TrackedRunner, TrackedStreamer
from .ports import (
    ManagementPort,
    RegistryStorePort,
    SpeedrunDataPort,
    StreamPlatformPort,
)

logger = logging.getLogger(__name__)


class ManagementService(ManagementPort):
    """Core implementation of ManagementPort.

    Duplicate registrations are not rejected; the registry accepts
    repeated rows and the detectors tolerate them.
    """

    def __init__(
        self,
        store: RegistryStorePort,
        speedrun: SpeedrunDataPort,
        streams: StreamPlatformPort,
    ):
        """Initialize the management service.

        Args:
            store: RegistryStorePort implementation for persistence.
            speedrun: SpeedrunDataPort used to find a runner's current run.
            streams: StreamPlatformPort used to resolve broadcaster ids.
        """
        self.store = store
        self.speedrun = speedrun
        self.streams = streams

    async def register_runner(self, name: str) -> TrackedRunner:
        """Start tracking a runner without announcing their existing runs.

        Args:
            name: Runner name as known by speedrun.com.

        Returns:
            The registered runner.

        Raises:
            ValueError: If the name is empty.
            TransientFetchError: If the initial lookup fails.
        """
        name = name.strip()
        if not name:
            raise ValueError("Runner name must not be empty")

        latest = await self.speedrun.latest_personal_best(name)
        if latest is None:
            logger.info(f"Runner {name} has no runs yet")
        run_id = latest.run_id if latest is not None else ""

        await self.store.add_runner(name, run_id)
        logger.info(
            f"Runner {name} registered",
            extra={"runner": name, "initial_run_id": run_id},
        )
        return TrackedRunner(name=name, last_notified_run_id=run_id)

    async def register_streamer(self, handle: str) -> TrackedStreamer:
        """Start tracking a streamer.

        Args:
            handle: Login name on the streaming platform.

        Returns:
            The registered streamer with its resolved platform id.

        Raises:
            ValueError: If the handle is empty.
            EntityNotFoundError: If the platform knows no such user.
            TransientFetchError: If the lookup fails.
        """
        handle = handle.strip()
        if not handle:
            raise ValueError("Streamer name must not be empty")

        user_id = await self.streams.resolve_user_id(handle)
        if user_id is None:
            raise EntityNotFoundError(f"Streamer {handle} not found")

        await self.store.add_streamer(handle, user_id)
        logger.info(
            f"Streamer {handle} registered",
            extra={"streamer": handle, "platform_user_id": user_id},
        )
        return TrackedStreamer(name=handle, platform_user_id=user_id)

    async def list_runners(self) -> list[TrackedRunner]:
        """Return all tracked runners."""
        return await self.store.list_runners()

    async def list_streamers(self) -> list[TrackedStreamer]:
        """Return all tracked streamers."""
        return await self.store.list_streamers()
