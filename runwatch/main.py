"""Composition root for the runwatch notification system.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Entry point selection (daemon or CLI)
"""

import asyncio
import json
import logging
import sys
from typing import Any

from runwatch.adapters.chat.bot import RunwatchBot
from runwatch.adapters.chat.commands import AdminCommandHandler
from runwatch.adapters.cli.commands import run_command
from runwatch.adapters.notification.discord_channel import (
    DiscordChannelNotificationAdapter,
)
from runwatch.adapters.notification.stdout import StdoutNotificationAdapter
from runwatch.adapters.scheduler.daemon import run_daemons
from runwatch.adapters.speedrun.speedrun_com import SpeedrunComAdapter
from runwatch.adapters.store.sqlite import SQLiteRegistryStore
from runwatch.adapters.streams.twitch import TwitchAdapter
from runwatch.config import Settings, load_settings
from runwatch.core.management_service import ManagementService
from runwatch.core.ports import (
    ManagementPort,
    NotificationPort,
    RegistryStorePort,
    SpeedrunDataPort,
    StreamPlatformPort,
    SweepPort,
)
from runwatch.core.run_detector import RunChangeDetector
from runwatch.core.stream_tracker import StreamPresenceTracker


async def _run_cli_interactive(management: ManagementPort) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for management commands.

    Args:
        management: ManagementPort used to execute commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "runwatch> ")

            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            try:
                result = await _execute_cli_command(management, command, args)
                print(json.dumps(result, indent=2, default=str))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            # Ctrl+D to exit
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


async def _execute_cli_command(
    management: ManagementPort,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Execute a CLI command.

    Raises:
        ValueError: If command is not recognized or arguments are not an object.
    """
    if not isinstance(args, dict):
        raise ValueError("Command arguments must be a JSON object")
    return await run_command(management, command, args)


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  add-runner
    Start tracking a speedrun.com runner. Their current latest run is
    recorded as already announced.
    Required: name

    Example: add-runner {"name": "cheese"}

  add-streamer
    Start tracking a Twitch streamer.
    Required: name

    Example: add-streamer {"name": "gamesdonequick"}

  list
    List tracked runners or streamers.
    Optional: kind ("runners" or "streamers"), format ("json" or "text")

    Example: list {"kind": "streamers", "format": "text"}

  help
    Show this help message.

  exit
    Exit the CLI.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
    # discord.py logs every gateway event at DEBUG
    logging.getLogger("discord").setLevel(max(level, logging.INFO))


def build_sweep_ports(
    settings: Settings,
    store: RegistryStorePort,
    speedrun: SpeedrunDataPort,
    streams: StreamPlatformPort,
    notification: NotificationPort,
) -> list[SweepPort]:
    """Create the enabled detectors, all sharing one notification sink."""
    logger = logging.getLogger(__name__)
    ports: list[SweepPort] = []

    if settings.track_runs:
        ports.append(
            RunChangeDetector(
                store=store,
                speedrun=speedrun,
                notification=notification,
                poll_delay_seconds=settings.run_poll_delay_seconds,
            )
        )

    if settings.track_streams:
        if not settings.twitch_client_id or not settings.twitch_oauth_token:
            logger.warning("Twitch credentials not set; stream polls will fail")
        ports.append(
            StreamPresenceTracker(
                store=store,
                streams=streams,
                notification=notification,
                poll_delay_seconds=settings.stream_poll_delay_seconds,
                thumbnail_width=settings.thumbnail_width,
                thumbnail_height=settings.thumbnail_height,
            )
        )

    if not ports:
        logger.warning("Both TRACK_RUNS and TRACK_STREAMS are disabled")

    return ports


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the application.

    This is the composition root: the single place where all components
    are instantiated and wired together.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters with configuration
    4. Initialize core services
    5. Select and start run mode

    Raises:
        SystemExit: On fatal configuration errors.
        Exception: If the registry cannot be opened or Discord login fails.
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading runwatch...")

    # Step 3: Instantiate adapters
    store = SQLiteRegistryStore(db_path=settings.store_sqlite_path)
    await store.initialize()
    logger.info(f"Registry initialized: {settings.store_sqlite_path}")

    try:
        async with SpeedrunComAdapter(
            api_url=settings.speedrun_api_url,
            timeout_seconds=settings.http_timeout_seconds,
        ) as speedrun, TwitchAdapter(
            client_id=settings.twitch_client_id,
            oauth_token=settings.twitch_oauth_token,
            api_url=settings.twitch_api_url,
            timeout_seconds=settings.http_timeout_seconds,
        ) as streams:
            # Step 4: Initialize core services
            management = ManagementService(store=store, speedrun=speedrun, streams=streams)

            # Step 5: Select run mode and start
            logger.info(f"Starting in {settings.run_mode} mode...")

            if settings.run_mode == "cli":
                await _run_cli_interactive(management)

            elif settings.notification_backend == "stdout":
                notification = StdoutNotificationAdapter(verbose=settings.debug)
                logger.info("Notification adapter: Stdout")
                await run_daemons(
                    build_sweep_ports(settings, store, speedrun, streams, notification)
                )

            elif settings.notification_backend == "discord":
                if not settings.discord_token:
                    logger.error("Discord backend selected but DISCORD_TOKEN not set")
                    sys.exit(1)

                bot = RunwatchBot(
                    command_handler=AdminCommandHandler(
                        management,
                        admin_channel_id=settings.admin_channel_id,
                        admin_role_id=settings.admin_role_id,
                    ),
                )
                notification = DiscordChannelNotificationAdapter(
                    bot, channel_id=settings.discord_channel_id
                )
                logger.info("Notification adapter: Discord")
                ports = build_sweep_ports(settings, store, speedrun, streams, notification)
                bot.on_first_ready = lambda: run_daemons(ports, handle_signals=False)

                async with bot:
                    await bot.start(settings.discord_token)

            else:
                logger.error(f"Unknown notification backend: {settings.notification_backend}")
                sys.exit(1)

    finally:
        # HTTP clients are closed by their context managers
        await store.close()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
