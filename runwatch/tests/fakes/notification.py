"""Fake NotificationPort implementation for testing."""

from runwatch.core.exceptions import MessageAlreadyGoneError, SinkError
from runwatch.core.models import EmbedSpec, MessageHandle
from runwatch.core.ports import NotificationPort


class FakeNotificationPort(NotificationPort):
    """In-memory notification sink for testing.

    Captures all posted embeds and deletions for test assertions.
    """

    def __init__(self):
        """Initialize with empty notification history."""
        self.posted: dict[MessageHandle, EmbedSpec] = {}
        self.posted_embeds: list[EmbedSpec] = []
        self.deleted_handles: list[MessageHandle] = []
        self.post_call_count = 0
        self.delete_call_count = 0
        self.should_fail_post: bool = False
        self.should_fail_delete: bool = False
        self._next_id = 1000

    async def post_embed(self, embed: EmbedSpec) -> MessageHandle:
        """Capture the embed and return a fresh handle."""
        self.post_call_count += 1
        if self.should_fail_post:
            raise SinkError("Channel unavailable")

        handle = str(self._next_id)
        self._next_id += 1
        self.posted[handle] = embed
        self.posted_embeds.append(embed)
        return handle

    async def delete_message(self, handle: MessageHandle) -> None:
        """Delete a captured message.

        Raises MessageAlreadyGoneError for handles that are not present,
        mirroring a message removed by a moderator.
        """
        self.delete_call_count += 1
        if self.should_fail_delete:
            raise SinkError("Channel unavailable")
        if handle not in self.posted:
            raise MessageAlreadyGoneError(f"Message {handle} no longer exists")

        del self.posted[handle]
        self.deleted_handles.append(handle)

    def remove_externally(self, handle: MessageHandle) -> None:
        """Simulate a message deleted outside the application."""
        self.posted.pop(handle, None)

    def get_last_embed(self) -> EmbedSpec | None:
        """Get the most recently posted embed, if any."""
        if self.posted_embeds:
            return self.posted_embeds[-1]
        return None
