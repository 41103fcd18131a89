"""Run-change detection for tracked speedrunners.

This module implements the sweep that visits every tracked runner,
detects a personal-best that has not been announced yet, enriches it
with game/category/level/variable names, and announces it exactly once
per run id.
"""

import asyncio
import logging
from datetime import datetime, timezone

from .exceptions import RunwatchError, SinkError
from .formatting import EmbedFormatter
from .models import (
    EmbedSpec,
    RunDecision,
    RunDecisionKind,
    RunObservation,
    SweepResult,
    TrackedRunner,
)
from .ports import NotificationPort, RegistryStorePort, SpeedrunDataPort, SweepPort

logger = logging.getLogger(__name__)


class RunChangeDetector(SweepPort):
    """Announces new personal-bests of tracked runners.

    The registry only advances to a new run id after the notification
    sink confirms delivery. A failed delivery is therefore retried on
    the next sweep (at-least-once; the run id comparison keeps repeated
    successful polls idempotent).
    """

    entity_kind = "runners"

    def __init__(
        self,
        store: RegistryStorePort,
        speedrun: SpeedrunDataPort,
        notification: NotificationPort,
        poll_delay_seconds: float = 10.0,
    ):
        self.store = store
        self.speedrun = speedrun
        self.notification = notification
        self.poll_delay_seconds = poll_delay_seconds

    @property
    def idle_delay_seconds(self) -> float:
        return self.poll_delay_seconds

    async def execute_sweep(self) -> SweepResult:
        """Poll every tracked runner once, sleeping before each fetch."""
        started_at = datetime.now(timezone.utc)
        runners = await self.store.list_runners()

        decisions: list[RunDecision] = []
        for runner in runners:
            # Rate limit towards the speedrun API
            await asyncio.sleep(self.poll_delay_seconds)
            try:
                decision = await self.poll_runner(runner)
            except Exception as e:
                logger.error(
                    f"Unexpected error polling runner {runner.name}: {e}",
                    exc_info=True,
                )
                decision = RunDecision(
                    runner=runner.name, kind=RunDecisionKind.FAILED, error=str(e)
                )
            decisions.append(decision)

        return SweepResult(
            entity_kind=self.entity_kind,
            visited=len(decisions),
            notified=sum(1 for d in decisions if d.kind == RunDecisionKind.NEW_RUN),
            failed=sum(1 for d in decisions if d.kind == RunDecisionKind.FAILED),
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            decisions=tuple(decisions),
        )

    async def poll_runner(self, runner: TrackedRunner) -> RunDecision:
        """Check one runner and announce their latest run if it is new.

        Returns:
            RunDecision describing what happened. Transient failures are
            reported as FAILED rather than raised.
        """
        try:
            run = await self.speedrun.latest_personal_best(runner.name)
        except RunwatchError as e:
            logger.error(f"Failed to get latest run for {runner.name}: {e}")
            return RunDecision(
                runner=runner.name, kind=RunDecisionKind.FAILED, error=str(e)
            )

        if run is None:
            logger.debug(f"Runner {runner.name} has no runs")
            return RunDecision(runner=runner.name, kind=RunDecisionKind.NO_RUN)

        if run.run_id == runner.last_notified_run_id:
            logger.debug(f"Runner {runner.name} has no new run ({run.run_id})")
            return RunDecision(
                runner=runner.name, kind=RunDecisionKind.UNCHANGED, run_id=run.run_id
            )

        try:
            embed = await self.build_embed(runner.name, run)
        except RunwatchError as e:
            logger.error(
                f"Failed to enrich run {run.run_id} of {runner.name}: {e}"
            )
            return RunDecision(
                runner=runner.name,
                kind=RunDecisionKind.FAILED,
                run_id=run.run_id,
                error=str(e),
            )

        try:
            await self.notification.post_embed(embed)
        except SinkError as e:
            logger.error(
                f"Failed to announce run {run.run_id} of {runner.name}: {e}"
            )
            return RunDecision(
                runner=runner.name,
                kind=RunDecisionKind.FAILED,
                run_id=run.run_id,
                embed=embed,
                error=str(e),
            )

        try:
            await self.store.record_runner_notified(runner.name, run.run_id)
        except Exception as e:
            # Already posted; the run is announced again next sweep
            logger.error(
                f"Announced run {run.run_id} of {runner.name} but failed to record it: {e}",
                exc_info=True,
            )
            return RunDecision(
                runner=runner.name,
                kind=RunDecisionKind.FAILED,
                run_id=run.run_id,
                embed=embed,
                delivered=True,
                error=str(e),
            )

        logger.info(f"Announced new run {run.run_id} of {runner.name}")

        return RunDecision(
            runner=runner.name,
            kind=RunDecisionKind.NEW_RUN,
            run_id=run.run_id,
            embed=embed,
            delivered=True,
        )

    async def build_embed(self, runner: str, run: RunObservation) -> EmbedSpec:
        """Enrich a run with display names and format its announcement.

        Issues one lookup each for game, category and level (when the run
        is level-specific) plus one lookup per variable.

        Raises:
            TransientFetchError: If any lookup fails.
        """
        game = await self.speedrun.game_info(run.game_id)
        category = await self.speedrun.category_name(run.category_id)

        level: str | None = None
        if run.level_id is not None:
            level = await self.speedrun.level_name(run.level_id)

        variable_labels = [
            await self.speedrun.variable_label(variable_id, value_id)
            for variable_id, value_id in run.variables.items()
        ]

        return EmbedFormatter.run_embed(
            runner=runner,
            run=run,
            game=game,
            category=category,
            level=level,
            variable_labels=variable_labels,
        )
