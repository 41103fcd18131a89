"""Admin chat commands for registering tracked entities.

Maps chat messages such as ``!srcadd <runner>`` and ``!twitchadd <streamer>``
to ManagementPort operations. Commands are only honoured in the admin
channel and only from members holding the admin role. The handler is
independent of discord.py so it can be driven by any chat client.
"""

import logging
from collections.abc import Iterable
from typing import Any

from runwatch.core.exceptions import RunwatchError
from runwatch.core.ports import ManagementPort

logger = logging.getLogger(__name__)

RUNNER_COMMAND = "!srcadd"
STREAMER_COMMAND = "!twitchadd"


class AdminCommandHandler:
    """Handles admin chat commands by delegating to ManagementPort."""

    def __init__(
        self,
        management: ManagementPort,
        admin_channel_id: int,
        admin_role_id: int,
    ):
        """Initialize the admin command handler.

        Args:
            management: ManagementPort implementation to execute commands.
            admin_channel_id: Only messages in this channel are commands.
            admin_role_id: Role required to run a command.
        """
        self.management = management
        self.admin_channel_id = admin_channel_id
        self.admin_role_id = admin_role_id

    @staticmethod
    def parse(content: str) -> tuple[str, str] | None:
        """Split a message into (command, argument).

        Returns:
            None if the message is not a known command with an argument.
        """
        command, _, argument = content.strip().partition(" ")
        if command not in (RUNNER_COMMAND, STREAMER_COMMAND):
            return None
        argument = argument.strip()
        if not argument:
            return None
        return command, argument

    async def handle(
        self,
        content: str,
        channel_id: int,
        role_ids: Iterable[int] | None,
    ) -> dict[str, Any] | None:
        """Run a command if the message is one.

        Args:
            content: Raw message text.
            channel_id: Channel the message was posted in.
            role_ids: Role ids of the author, or None if the author is
                not a member of the server.

        Returns:
            None if the message is not an admin command (the caller should
            leave it alone), otherwise a result dictionary. Callers delete
            the command message whenever a result is returned, so failed
            registrations are reported here rather than raised.
        """
        if channel_id != self.admin_channel_id:
            return None

        parsed = self.parse(content)
        if parsed is None:
            return None
        command, argument = parsed

        if role_ids is None:
            logger.warning(f"Ignoring {command} from a user who is not a server member")
            return {"status": "forbidden", "command": command, "message": "Not a server member"}

        if self.admin_role_id not in set(role_ids):
            logger.info(f"Ignoring {command} from a user without the admin role")
            return {"status": "forbidden", "command": command, "message": "Missing admin role"}

        try:
            if command == RUNNER_COMMAND:
                runner = await self.management.register_runner(argument)
                return {
                    "status": "success",
                    "command": command,
                    "name": runner.name,
                    "message": f"Added runner {runner.name}",
                }

            streamer = await self.management.register_streamer(argument)
            return {
                "status": "success",
                "command": command,
                "name": streamer.name,
                "message": f"Added streamer {streamer.name}",
            }

        except (RunwatchError, ValueError) as e:
            logger.error(f"Failed to run {command} {argument}: {e}")
            return {
                "status": "error",
                "command": command,
                "name": argument,
                "message": str(e),
            }
        except Exception as e:
            # Registry failures still produce a result so the command is removed
            logger.error(f"Unexpected error running {command} {argument}: {e}", exc_info=True)
            return {
                "status": "error",
                "command": command,
                "name": argument,
                "message": f"Internal error: {e}",
            }
