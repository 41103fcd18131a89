"""Discord channel notification adapter.

Implements NotificationPort by posting embeds to a single Discord text
channel through a logged-in discord.py client, and deleting them by
message id.
"""

import logging

import discord

from runwatch.core.exceptions import MessageAlreadyGoneError, SinkError
from runwatch.core.models import EmbedSpec, MessageHandle
from runwatch.core.ports import NotificationPort

logger = logging.getLogger(__name__)


class DiscordChannelNotificationAdapter(NotificationPort):
    """Posts announcements to one Discord channel."""

    def __init__(self, client: discord.Client, channel_id: int):
        """Initialize Discord notification adapter.

        Args:
            client: discord.py client. Must be logged in before the first
                post; the channel is looked up lazily.
            channel_id: Id of the announcement channel.
        """
        self.client = client
        self.channel_id = channel_id

    async def _get_channel(self) -> discord.abc.Messageable:
        """Return the announcement channel from cache or the API."""
        channel = self.client.get_channel(self.channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(self.channel_id)
        return channel  # type: ignore[return-value]

    async def post_embed(self, embed: EmbedSpec) -> MessageHandle:
        """Send an embed and return the id of the created message."""
        try:
            channel = await self._get_channel()
            message = await channel.send(embed=self.to_discord_embed(embed))
        except discord.DiscordException as e:
            raise SinkError(
                f"Failed to send message to channel {self.channel_id}: {e}"
            ) from e

        logger.debug(f"Posted message {message.id} to channel {self.channel_id}")
        return str(message.id)

    async def delete_message(self, handle: MessageHandle) -> None:
        """Delete a message previously returned by post_embed()."""
        try:
            channel = await self._get_channel()
            await channel.get_partial_message(int(handle)).delete()  # type: ignore[attr-defined]
        except discord.NotFound as e:
            raise MessageAlreadyGoneError(f"Message {handle} no longer exists") from e
        except discord.DiscordException as e:
            raise SinkError(f"Failed to delete message {handle}: {e}") from e

        logger.debug(f"Deleted message {handle} from channel {self.channel_id}")

    @staticmethod
    def to_discord_embed(spec: EmbedSpec) -> discord.Embed:
        """Render an EmbedSpec as a discord.py Embed."""
        embed = discord.Embed(
            title=spec.title,
            description=spec.description,
            colour=discord.Colour(spec.color),
            url=spec.url,
        )
        if spec.thumbnail_url:
            embed.set_thumbnail(url=spec.thumbnail_url)
        for field in spec.fields:
            embed.add_field(name=field.name, value=field.value, inline=field.inline)
        return embed
