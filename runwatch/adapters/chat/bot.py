"""Discord client hosting the admin commands and the sweep loops.

The sweep loops need a logged-in client to post announcements, so they
are started from the first on_ready event. Reconnects fire on_ready
again; the loops are only started once.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import discord

from .commands import AdminCommandHandler

logger = logging.getLogger(__name__)


class RunwatchBot(discord.Client):
    """discord.py client that routes admin commands and launches the loops."""

    def __init__(
        self,
        command_handler: AdminCommandHandler | None = None,
        on_first_ready: Callable[[], Awaitable[None]] | None = None,
    ):
        """Initialize the client.

        Args:
            command_handler: Handler for admin chat commands (can be set later).
            on_first_ready: Coroutine function started as a background task
                the first time the client becomes ready.
        """
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents)
        self.command_handler = command_handler
        self.on_first_ready = on_first_ready
        self._background_task: asyncio.Task[None] | None = None

    async def on_ready(self) -> None:
        logger.info(f"{self.user} is connected!")

        if self.on_first_ready is None or self._background_task is not None:
            return

        self._background_task = asyncio.create_task(self.on_first_ready())
        self._background_task.add_done_callback(self._log_background_exit)

    @staticmethod
    def _log_background_exit(task: "asyncio.Task[None]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.critical(f"Sweep loops exited with an error: {exc}", exc_info=exc)

    async def on_message(self, message: discord.Message) -> None:
        if self.command_handler is None or message.author == self.user:
            return

        role_ids: list[int] | None = None
        if isinstance(message.author, discord.Member):
            role_ids = [role.id for role in message.author.roles]

        result = await self.command_handler.handle(
            message.content, message.channel.id, role_ids
        )
        if result is None:
            return

        logger.info(f"Admin command result: {result['status']}: {result['message']}")

        try:
            await message.delete()
        except discord.DiscordException as e:
            logger.error(f"Failed to delete command message: {e}")
