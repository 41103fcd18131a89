"""Daemon scheduler adapter.

Implements a long-running asyncio loop that runs sweeps back to back.
Each tracked-entity class gets its own scheduler and task, so a hung
fetch in one loop never stalls the other.
"""

import asyncio
import logging
import signal

from runwatch.core.ports import SweepPort

logger = logging.getLogger(__name__)


class DaemonScheduler:
    """Asyncio-based daemon scheduler for continuous sweeps."""

    def __init__(self, sweep_port: SweepPort):
        """Initialize daemon scheduler.

        Args:
            sweep_port: SweepPort implementation to run sweeps on.
        """
        self.sweep_port = sweep_port
        self.running = False
        self._task: asyncio.Task[None] | None = None
        self._sweep_failure_count = 0  # Track consecutive registry failures

    @property
    def name(self) -> str:
        return self.sweep_port.entity_kind

    async def start(self) -> None:
        """Run the sweep loop until stopped or cancelled."""
        if self.running:
            logger.warning(f"Daemon scheduler for {self.name} already running")
            return

        self.running = True
        self._task = asyncio.current_task()
        logger.info(f"Starting daemon scheduler for {self.name}")

        try:
            await self._run_loop()
        except asyncio.CancelledError:
            logger.info(f"Daemon scheduler for {self.name} cancelled")
        finally:
            self.running = False
            logger.info(f"Daemon scheduler for {self.name} stopped")

    async def stop(self) -> None:
        """Stop the daemon scheduler loop."""
        if not self.running:
            return

        logger.info(f"Stopping daemon scheduler for {self.name}...")
        self.running = False

        if self._task and self._task is not asyncio.current_task():
            self._task.cancel()

    async def _run_loop(self) -> None:
        """Main daemon loop."""
        sweep_number = 0

        while self.running:
            sweep_number += 1

            try:
                result = await self.sweep_port.execute_sweep()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._sweep_failure_count += 1
                logger.error(
                    f"Error in {self.name} sweep #{sweep_number}: {e} "
                    f"(consecutive failures: {self._sweep_failure_count})",
                    exc_info=True,
                )
                if self._sweep_failure_count >= 5:
                    logger.critical(
                        f"{self.name} sweep has failed {self._sweep_failure_count} "
                        f"consecutive times. The registry may be unavailable."
                    )
                await asyncio.sleep(self.sweep_port.idle_delay_seconds)
                continue

            self._sweep_failure_count = 0
            logger.info(
                f"{self.name.capitalize()} sweep #{sweep_number} completed in "
                f"{result.duration_seconds:.2f}s: {result.visited} visited, "
                f"{result.notified} notified, {result.failed} failed"
            )

            # An empty registry would otherwise spin without suspending.
            if result.visited == 0:
                await asyncio.sleep(self.sweep_port.idle_delay_seconds)


def _setup_signal_handlers(schedulers: list[DaemonScheduler]) -> None:
    """Set up signal handlers that stop every scheduler."""
    try:
        loop = asyncio.get_running_loop()

        def _handle_signal(sig: int) -> None:
            logger.info(f"Received signal {sig}, initiating graceful shutdown...")
            for scheduler in schedulers:
                asyncio.create_task(scheduler.stop())

        loop.add_signal_handler(signal.SIGTERM, _handle_signal, signal.SIGTERM)
        loop.add_signal_handler(signal.SIGINT, _handle_signal, signal.SIGINT)
    except NotImplementedError:
        # Signal handlers not available on Windows
        logger.debug("Signal handlers not available on this platform")
    except Exception as e:
        logger.warning(f"Failed to set up signal handlers: {e}")


async def run_daemons(
    sweep_ports: list[SweepPort], handle_signals: bool = True
) -> None:
    """Run one scheduler per sweep port concurrently until all stop.

    Args:
        sweep_ports: Sweep implementations to drive.
        handle_signals: Install SIGINT/SIGTERM handlers that stop the loops.
    """
    schedulers = [DaemonScheduler(port) for port in sweep_ports]
    if handle_signals:
        _setup_signal_handlers(schedulers)
    await asyncio.gather(*(scheduler.start() for scheduler in schedulers))
