"""Unit tests for domain model invariants."""

from datetime import UTC, datetime, timedelta

import pytest

from runwatch.core.models import (
    EmbedSpec,
    RunObservation,
    SweepResult,
    TrackedRunner,
    TrackedStreamer,
)


class TestTrackedEntities:
    def test_runner_defaults_to_nothing_announced(self) -> None:
        assert TrackedRunner("alice").last_notified_run_id == ""

    def test_runner_requires_name(self) -> None:
        with pytest.raises(ValueError):
            TrackedRunner(" ")

    def test_streamer_requires_platform_id(self) -> None:
        with pytest.raises(ValueError):
            TrackedStreamer(name="alice", platform_user_id="")

    def test_runner_is_immutable(self) -> None:
        runner = TrackedRunner("alice")
        with pytest.raises(AttributeError):
            runner.name = "bob"


class TestRunObservation:
    def test_variables_are_read_only(self) -> None:
        run = RunObservation(
            run_id="r1",
            place=1,
            game_id="g1",
            category_id="c1",
            level_id=None,
            variables={"platform": "pc"},
            time_seconds=1.0,
            weblink="https://www.speedrun.com/run/r1",
            played_date="2024-01-01",
        )

        with pytest.raises(TypeError):
            run.variables["platform"] = "n64"
        assert run.verified_at is None


class TestEmbedSpec:
    @pytest.mark.parametrize("color", [-1, 0x1000000])
    def test_color_must_fit_24_bits(self, color: int) -> None:
        with pytest.raises(ValueError):
            EmbedSpec(title="t", description="d", color=color)


class TestSweepResult:
    def test_duration(self) -> None:
        start = datetime(2024, 1, 1, tzinfo=UTC)
        result = SweepResult(
            entity_kind="runners",
            visited=2,
            notified=1,
            failed=1,
            started_at=start,
            finished_at=start + timedelta(seconds=20),
        )
        assert result.duration_seconds == 20.0

    def test_counters_cannot_exceed_visited(self) -> None:
        now = datetime.now(UTC)
        with pytest.raises(ValueError):
            SweepResult(
                entity_kind="runners",
                visited=1,
                notified=1,
                failed=1,
                started_at=now,
                finished_at=now,
            )
