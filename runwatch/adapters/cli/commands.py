"""CLI command implementations for runwatch management.

Provides human-initiated actions through command-line interface.

This adapter maps CLI commands (add-runner, add-streamer, list) to
ManagementPort operations. It handles CLI-specific formatting and error
reporting.
"""

import logging
from typing import Any

from runwatch.core.exceptions import RunwatchError
from runwatch.core.ports import ManagementPort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to ManagementPort."""

    def __init__(self, management: ManagementPort):
        """Initialize the CLI command handler.

        Args:
            management: ManagementPort implementation to execute commands.
        """
        self.management = management

    async def add_runner(self, name: str) -> dict[str, Any]:
        """Register a runner via CLI.

        Args:
            name: speedrun.com user name.

        Returns:
            Dictionary with status and message.
        """
        try:
            runner = await self.management.register_runner(name)
        except (RunwatchError, ValueError) as e:
            logger.error(f"Failed to add runner: {e}")
            return {
                "status": "error",
                "operation": "add_runner",
                "name": name,
                "message": str(e),
            }

        return {
            "status": "success",
            "operation": "add_runner",
            "name": runner.name,
            "last_notified_run_id": runner.last_notified_run_id,
            "message": f"Runner {runner.name} added",
        }

    async def add_streamer(self, name: str) -> dict[str, Any]:
        """Register a streamer via CLI.

        Args:
            name: Twitch login name.

        Returns:
            Dictionary with status and message.
        """
        try:
            streamer = await self.management.register_streamer(name)
        except (RunwatchError, ValueError) as e:
            logger.error(f"Failed to add streamer: {e}")
            return {
                "status": "error",
                "operation": "add_streamer",
                "name": name,
                "message": str(e),
            }

        return {
            "status": "success",
            "operation": "add_streamer",
            "name": streamer.name,
            "platform_user_id": streamer.platform_user_id,
            "message": f"Streamer {streamer.name} added",
        }

    async def list_entities(
        self, kind: str = "runners", output_format: str = "json"
    ) -> dict[str, Any]:
        """List tracked runners or streamers.

        Args:
            kind: 'runners' or 'streamers'.
            output_format: 'json' or 'text'.

        Returns:
            Dictionary with status and the listed entities.
        """
        if kind == "runners":
            runners = await self.management.list_runners()
            rows = [
                {"name": r.name, "last_notified_run_id": r.last_notified_run_id}
                for r in runners
            ]
        elif kind == "streamers":
            streamers = await self.management.list_streamers()
            rows = [
                {"name": s.name, "platform_user_id": s.platform_user_id}
                for s in streamers
            ]
        else:
            return {
                "status": "error",
                "operation": "list",
                "message": f"Unsupported kind: {kind}",
            }

        if output_format == "json":
            return {"status": "success", "operation": "list", "kind": kind, "data": rows}

        if output_format == "text":
            return {
                "status": "success",
                "operation": "list",
                "kind": kind,
                "data": self._format_rows_as_text(rows),
            }

        return {
            "status": "error",
            "operation": "list",
            "message": f"Unsupported format: {output_format}",
        }

    @staticmethod
    def _format_rows_as_text(rows: list[dict[str, str]]) -> str:
        """Format listed entities as one line per entity."""
        if not rows:
            return "(none)"
        lines = []
        for row in rows:
            name = row["name"]
            details = ", ".join(
                f"{key}: {value or '-'}" for key, value in row.items() if key != "name"
            )
            lines.append(f"{name} ({details})")
        return "\n".join(lines)


async def run_command(
    management: ManagementPort,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        management: ManagementPort implementation.
        command: Command name ('add-runner', 'add-streamer', 'list').
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required argument is missing.
    """
    handler = CLICommandHandler(management)

    if command in ("add-runner", "add-streamer"):
        if "name" not in args:
            raise ValueError("Missing required parameter: name")
        if command == "add-runner":
            return await handler.add_runner(args["name"])
        return await handler.add_streamer(args["name"])

    elif command == "list":
        return await handler.list_entities(
            kind=args.get("kind", "runners"),
            output_format=args.get("format", "json"),
        )

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
