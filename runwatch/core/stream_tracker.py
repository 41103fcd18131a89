"""Live-presence tracking for tracked streamers.

Mirrors each streamer's live/offline status as an outstanding or absent
"now live" announcement.

Session table:
    streamer name → handle of the outstanding announcement

    - offline, no session → live: post announcement, record handle
    - live, session → live: nothing (no duplicate announcements)
    - live, session → offline: delete announcement, drop session
    - offline, no session → offline: nothing

Sessions are keyed by streamer name, so duplicate registry rows for the
same streamer still share a single announcement. The table lives in
memory only and is lost on restart.
"""

import asyncio
import logging
from datetime import datetime, timezone

from .exceptions import MessageAlreadyGoneError, RunwatchError, SinkError
from .formatting import EmbedFormatter
from .models import (
    MessageHandle,
    StreamDecision,
    StreamDecisionKind,
    SweepResult,
    TrackedStreamer,
)
from .ports import NotificationPort, RegistryStorePort, StreamPlatformPort, SweepPort

logger = logging.getLogger(__name__)


class StreamPresenceTracker(SweepPort):
    """Posts and retracts 'now live' announcements."""

    entity_kind = "streamers"

    def __init__(
        self,
        store: RegistryStorePort,
        streams: StreamPlatformPort,
        notification: NotificationPort,
        poll_delay_seconds: float = 10.0,
        thumbnail_width: int = 1280,
        thumbnail_height: int = 720,
    ):
        self.store = store
        self.streams = streams
        self.notification = notification
        self.poll_delay_seconds = poll_delay_seconds
        self.thumbnail_width = thumbnail_width
        self.thumbnail_height = thumbnail_height
        self._live_sessions: dict[str, MessageHandle] = {}

    @property
    def idle_delay_seconds(self) -> float:
        return self.poll_delay_seconds

    @property
    def live_sessions(self) -> dict[str, MessageHandle]:
        """Snapshot of outstanding announcements by streamer name."""
        return dict(self._live_sessions)

    async def execute_sweep(self) -> SweepResult:
        """Poll every tracked streamer once, sleeping before each fetch."""
        started_at = datetime.now(timezone.utc)
        streamers = await self.store.list_streamers()

        decisions: list[StreamDecision] = []
        for streamer in streamers:
            await asyncio.sleep(self.poll_delay_seconds)
            try:
                decision = await self.poll_streamer(streamer)
            except Exception as e:
                logger.error(
                    f"Unexpected error polling streamer {streamer.name}: {e}",
                    exc_info=True,
                )
                decision = StreamDecision(
                    streamer=streamer.name,
                    kind=StreamDecisionKind.FAILED,
                    error=str(e),
                )
            decisions.append(decision)

        return SweepResult(
            entity_kind=self.entity_kind,
            visited=len(decisions),
            notified=sum(
                1
                for d in decisions
                if d.kind in (StreamDecisionKind.WENT_LIVE, StreamDecisionKind.WENT_OFFLINE)
            ),
            failed=sum(1 for d in decisions if d.kind == StreamDecisionKind.FAILED),
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            decisions=tuple(decisions),
        )

    async def poll_streamer(self, streamer: TrackedStreamer) -> StreamDecision:
        """Check one streamer and reconcile their announcement with their status."""
        try:
            stream = await self.streams.current_stream(streamer.platform_user_id)
        except RunwatchError as e:
            logger.error(f"Failed to get stream info for {streamer.name}: {e}")
            return StreamDecision(
                streamer=streamer.name, kind=StreamDecisionKind.FAILED, error=str(e)
            )

        handle = self._live_sessions.get(streamer.name)

        if stream is not None:
            if handle is not None:
                logger.debug(f"{streamer.name} is still live")
                return StreamDecision(
                    streamer=streamer.name,
                    kind=StreamDecisionKind.UNCHANGED,
                    handle=handle,
                )

            embed = EmbedFormatter.live_embed(
                stream, self.thumbnail_width, self.thumbnail_height
            )
            try:
                handle = await self.notification.post_embed(embed)
            except SinkError as e:
                logger.error(f"Failed to announce stream of {streamer.name}: {e}")
                return StreamDecision(
                    streamer=streamer.name,
                    kind=StreamDecisionKind.FAILED,
                    embed=embed,
                    error=str(e),
                )

            self._live_sessions[streamer.name] = handle
            logger.info(f"{streamer.name} went live (message {handle})")
            return StreamDecision(
                streamer=streamer.name,
                kind=StreamDecisionKind.WENT_LIVE,
                handle=handle,
                embed=embed,
            )

        if handle is None:
            return StreamDecision(streamer=streamer.name, kind=StreamDecisionKind.UNCHANGED)

        try:
            await self.notification.delete_message(handle)
        except MessageAlreadyGoneError:
            logger.warning(
                f"Live announcement {handle} of {streamer.name} was already deleted"
            )
        except SinkError as e:
            logger.error(
                f"Failed to delete live announcement {handle} of {streamer.name}: {e}"
            )
            return StreamDecision(
                streamer=streamer.name,
                kind=StreamDecisionKind.FAILED,
                handle=handle,
                error=str(e),
            )

        del self._live_sessions[streamer.name]
        logger.info(f"{streamer.name} went offline")
        return StreamDecision(
            streamer=streamer.name, kind=StreamDecisionKind.WENT_OFFLINE, handle=handle
        )
