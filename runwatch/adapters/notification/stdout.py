"""Stdout notification adapter.

Implements NotificationPort by printing announcements to terminal with
human-readable formatting. Handles are sequential numbers, so live
announcements can be "deleted" like real messages during local runs.
"""

import asyncio
import itertools
import logging

from runwatch.core.exceptions import MessageAlreadyGoneError
from runwatch.core.models import EmbedSpec, MessageHandle
from runwatch.core.ports import NotificationPort

logger = logging.getLogger(__name__)


class StdoutNotificationAdapter(NotificationPort):
    """Prints announcements to stdout with human-readable formatting."""

    def __init__(self, verbose: bool = False, max_tracked_messages: int = 1000):
        """Initialize stdout notification adapter.

        Args:
            verbose: If True, include color and thumbnail in output.
            max_tracked_messages: How many printed announcements stay
                deletable. Older handles are forgotten first.
        """
        self.verbose = verbose
        self.max_tracked_messages = max_tracked_messages
        self._ids = itertools.count(1)
        self._posted: dict[MessageHandle, str] = {}

    async def post_embed(self, embed: EmbedSpec) -> MessageHandle:
        """Print an announcement and return its sequential handle."""
        handle = str(next(self._ids))
        self._posted[handle] = embed.title
        if len(self._posted) > self.max_tracked_messages:
            # Insertion order, so this is the oldest handle
            self._posted.pop(next(iter(self._posted)))
        await asyncio.to_thread(print, self._format_embed(handle, embed))
        return handle

    async def delete_message(self, handle: MessageHandle) -> None:
        """Print a retraction for a previously printed announcement."""
        title = self._posted.pop(handle, None)
        if title is None:
            raise MessageAlreadyGoneError(f"Message {handle} was never posted or already deleted")
        await asyncio.to_thread(print, f"[message #{handle} deleted] {title}")

    def _format_embed(self, handle: MessageHandle, embed: EmbedSpec) -> str:
        """Format an embed as a framed text block."""
        lines = [
            "=" * 80,
            f"[message #{handle}] {embed.title}",
            "=" * 80,
            embed.description,
        ]

        if embed.url:
            lines.append(f"Link: {embed.url}")

        if embed.fields:
            lines.append("")
            for field in embed.fields:
                lines.append(f"{field.name} {field.value}")

        if self.verbose:
            lines.append("")
            lines.append(f"Color: #{embed.color:06X}")
            if embed.thumbnail_url:
                lines.append(f"Thumbnail: {embed.thumbnail_url}")

        lines.append("=" * 80)
        return "\n".join(lines)
