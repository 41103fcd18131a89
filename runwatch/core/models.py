"""Domain models for the runwatch notification system.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import TypeAlias

# Opaque identifier of a posted chat message (a Discord message id).
MessageHandle: TypeAlias = str


@dataclass(frozen=True)
class TrackedRunner:
    """A speedrun player whose personal-bests are watched.

    An empty last_notified_run_id means no run has been announced yet.
    """

    name: str
    last_notified_run_id: str = ""

    def __post_init__(self) -> None:
        """Validate runner invariants on creation."""
        if not self.name or not self.name.strip():
            raise ValueError("runner name must be a non-empty string")


@dataclass(frozen=True)
class TrackedStreamer:
    """A broadcaster whose live status is watched."""

    name: str
    platform_user_id: str

    def __post_init__(self) -> None:
        """Validate streamer invariants on creation."""
        if not self.name or not self.name.strip():
            raise ValueError("streamer name must be a non-empty string")
        if not self.platform_user_id:
            raise ValueError("platform_user_id must be a non-empty string")


@dataclass(frozen=True)
class RunObservation:
    """One personal-best as reported by the speedrun data source.

    The core's normalized representation of a run, not a
    speedrun.com response object.
    """

    run_id: str
    place: int
    game_id: str
    category_id: str
    level_id: str | None
    variables: Mapping[str, str]  # variable id -> value id, converted to proxy
    time_seconds: float
    weblink: str
    played_date: str
    verified_at: datetime | None = None

    def __post_init__(self) -> None:
        """Convert variables dict to read-only proxy."""
        if isinstance(self.variables, dict):
            object.__setattr__(
                self, "variables", MappingProxyType(self.variables)
            )


@dataclass(frozen=True)
class StreamObservation:
    """Current live stream of a broadcaster."""

    title: str
    broadcaster_display_name: str
    broadcaster_login: str
    game_name: str
    thumbnail_url_template: str  # contains {width} and {height} placeholders


@dataclass(frozen=True)
class GameInfo:
    """Game metadata used to enrich a run announcement."""

    game_id: str
    name: str
    cover_url: str | None = None


@dataclass(frozen=True)
class EmbedField:
    """A labeled field of an embed."""

    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class EmbedSpec:
    """Abstract notification payload handed to the notification sink.

    Sinks render this into their own wire format (Discord embed,
    terminal text, ...). The core never builds wire payloads itself.
    """

    title: str
    description: str
    color: int  # 0xRRGGBB
    url: str | None = None
    thumbnail_url: str | None = None
    fields: tuple[EmbedField, ...] = ()

    def __post_init__(self) -> None:
        """Validate embed invariants on creation."""
        if not 0 <= self.color <= 0xFFFFFF:
            raise ValueError(f"color must be a 24-bit RGB value, got {self.color}")


class RunDecisionKind(Enum):
    """Outcome of polling a single runner.

    - NO_RUN: The runner has no personal-bests at all
    - UNCHANGED: The latest run was already announced
    - NEW_RUN: A new run was found and announced
    - FAILED: Fetch, enrichment or delivery failed; retried next sweep
    """

    NO_RUN = "no_run"
    UNCHANGED = "unchanged"
    NEW_RUN = "new_run"
    FAILED = "failed"


class StreamDecisionKind(Enum):
    """Outcome of polling a single streamer."""

    UNCHANGED = "unchanged"
    WENT_LIVE = "went_live"
    WENT_OFFLINE = "went_offline"
    FAILED = "failed"


@dataclass(frozen=True)
class RunDecision:
    """Result of one poll of one runner."""

    runner: str
    kind: RunDecisionKind
    run_id: str | None = None
    embed: EmbedSpec | None = None
    delivered: bool = False
    error: str | None = None


@dataclass(frozen=True)
class StreamDecision:
    """Result of one poll of one streamer."""

    streamer: str
    kind: StreamDecisionKind
    handle: MessageHandle | None = None
    embed: EmbedSpec | None = None
    error: str | None = None


@dataclass(frozen=True)
class SweepResult:
    """Summary of one full pass over one class of tracked entities."""

    entity_kind: str  # "runners" or "streamers"
    visited: int
    notified: int
    failed: int
    started_at: datetime
    finished_at: datetime
    decisions: tuple[RunDecision | StreamDecision, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate sweep counters on creation."""
        if self.visited < 0 or self.notified < 0 or self.failed < 0:
            raise ValueError("sweep counters must be non-negative")
        if self.notified + self.failed > self.visited:
            raise ValueError(
                f"notified ({self.notified}) + failed ({self.failed}) "
                f"exceeds visited ({self.visited})"
            )

    @property
    def duration_seconds(self) -> float:
        """Wall-clock duration of the sweep."""
        return (self.finished_at - self.started_at).total_seconds()
