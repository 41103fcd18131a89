"""Port interfaces for the runwatch notification system.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - RegistryStorePort: Persist tracked runners and streamers
   - SpeedrunDataPort: Personal-bests and run enrichment lookups
   - StreamPlatformPort: Broadcaster id resolution and live status
   - NotificationPort: Post and delete chat announcements

2. **Driving Ports** (adapters/external systems call into core)
   - SweepPort: Entry point for one sweep over a class of entities
   - ManagementPort: Human-initiated registration of entities
"""

from abc import ABC, abstractmethod

from .models import (
    EmbedSpec,
    GameInfo,
    MessageHandle,
    RunObservation,
    StreamObservation,
    SweepResult,
    TrackedRunner,
    TrackedStreamer,
)
from .selection import select_latest_run


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class RegistryStorePort(ABC):
    """Port for the durable registry of tracked entities.

    Implementations must serialize concurrent calls: an admin registration
    and a detector's post-notification update can race. Writes are
    last-writer-wins; no transaction spans more than one call.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backing schema if it does not exist.

        Raises:
            Exception: If the storage is unreachable. Fatal at startup.
        """

    @abstractmethod
    async def list_runners(self) -> list[TrackedRunner]:
        """Return all tracked runners in storage iteration order."""

    @abstractmethod
    async def list_streamers(self) -> list[TrackedStreamer]:
        """Return all tracked streamers in storage iteration order."""

    @abstractmethod
    async def record_runner_notified(self, name: str, run_id: str) -> None:
        """Set the last announced run id for every row named `name`.

        Args:
            name: Runner name.
            run_id: Id of the run that was just announced.
        """

    @abstractmethod
    async def add_runner(self, name: str, initial_run_id: str) -> None:
        """Insert a new runner row.

        No uniqueness check is performed: adding the same name twice
        produces two rows.

        Args:
            name: Runner name as known by the speedrun data source.
            initial_run_id: Run id to treat as already announced ("" for none).
        """

    @abstractmethod
    async def add_streamer(self, name: str, platform_user_id: str) -> None:
        """Insert a new streamer row (no uniqueness check)."""

    @abstractmethod
    async def close(self) -> None:
        """Release storage resources."""


class SpeedrunDataPort(ABC):
    """Port for the speedrun data source (speedrun.com REST API).

    All lookups are plain request/response calls, one per distinct id.
    Failures of any kind must surface as TransientFetchError.
    """

    @abstractmethod
    async def personal_bests(self, runner: str) -> list[RunObservation]:
        """Return every current personal-best of a runner.

        Returns:
            Possibly empty list of runs.

        Raises:
            TransientFetchError: On network or payload errors.
        """

    async def latest_personal_best(self, runner: str) -> RunObservation | None:
        """Return the runner's latest personal-best, or None if they have none.

        Raises:
            TransientFetchError: On network or payload errors.
        """
        return select_latest_run(await self.personal_bests(runner))

    @abstractmethod
    async def game_info(self, game_id: str) -> GameInfo:
        """Return game name and cover art.

        Raises:
            TransientFetchError: On network or payload errors.
        """

    @abstractmethod
    async def category_name(self, category_id: str) -> str:
        """Return the display name of a category."""

    @abstractmethod
    async def level_name(self, level_id: str) -> str:
        """Return the display name of a level."""

    @abstractmethod
    async def variable_label(self, variable_id: str, value_id: str) -> str:
        """Return the human-readable label of one value of a variable.

        Raises:
            TransientFetchError: If the variable or the value is unknown
                or the request fails.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP resources."""


class StreamPlatformPort(ABC):
    """Port for the live-streaming platform (Twitch Helix API)."""

    @abstractmethod
    async def resolve_user_id(self, handle: str) -> str | None:
        """Resolve a login name to the platform's immutable user id.

        Returns:
            The user id, or None if no such user exists.

        Raises:
            TransientFetchError: On network or payload errors.
        """

    @abstractmethod
    async def current_stream(self, user_id: str) -> StreamObservation | None:
        """Return the user's current live stream, or None when offline.

        Raises:
            TransientFetchError: On network or payload errors.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release HTTP resources."""


class NotificationPort(ABC):
    """Port for posting and retracting announcements.

    The target channel is bound when the adapter is constructed; the
    core only ever hands over an EmbedSpec or a handle it got back.
    """

    @abstractmethod
    async def post_embed(self, embed: EmbedSpec) -> MessageHandle:
        """Post an announcement.

        Returns:
            Handle of the posted message, usable with delete_message().

        Raises:
            SinkError: If the message could not be delivered.
        """

    @abstractmethod
    async def delete_message(self, handle: MessageHandle) -> None:
        """Delete a previously posted announcement.

        Raises:
            MessageAlreadyGoneError: If the message no longer exists.
            SinkError: On any other delivery failure.
        """


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class SweepPort(ABC):
    """Port for executing sweeps.

    Driving port: the daemon scheduler calls execute_sweep() in a loop.
    Implementations live in the core (run_detector.py, stream_tracker.py).
    """

    entity_kind: str

    @abstractmethod
    async def execute_sweep(self) -> SweepResult:
        """Visit every tracked entity of this class once, in registry order.

        Per-entity failures are logged and counted, never raised.

        Raises:
            Exception: Only if the registry listing itself fails.
        """

    @property
    @abstractmethod
    def idle_delay_seconds(self) -> float:
        """Delay to wait after a sweep that visited no entities."""


class ManagementPort(ABC):
    """Port for human-initiated registration operations.

    Driving port: the chat admin command and the CLI invoke these.
    """

    @abstractmethod
    async def register_runner(self, name: str) -> TrackedRunner:
        """Start tracking a runner.

        The runner's current latest personal-best is recorded as already
        announced, so registration does not trigger an announcement.

        Raises:
            TransientFetchError: If the initial lookup fails.
        """

    @abstractmethod
    async def register_streamer(self, handle: str) -> TrackedStreamer:
        """Start tracking a streamer.

        Raises:
            EntityNotFoundError: If the platform knows no such user.
            TransientFetchError: If the lookup fails.
        """

    @abstractmethod
    async def list_runners(self) -> list[TrackedRunner]:
        """Return all tracked runners."""

    @abstractmethod
    async def list_streamers(self) -> list[TrackedStreamer]:
        """Return all tracked streamers."""
