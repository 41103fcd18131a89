"""Fake SpeedrunDataPort implementation for testing."""

from runwatch.core.exceptions import TransientFetchError
from runwatch.core.models import GameInfo, RunObservation
from runwatch.core.ports import SpeedrunDataPort


class FakeSpeedrunDataPort(SpeedrunDataPort):
    """In-memory speedrun data source for testing.

    Tests register runs and names up front; unknown ids raise
    TransientFetchError like a failed request would. Individual lookups
    can be forced to fail through `failing_calls`.
    """

    def __init__(self):
        """Initialize with no data."""
        self.runs: dict[str, list[RunObservation]] = {}
        self.games: dict[str, GameInfo] = {}
        self.categories: dict[str, str] = {}
        self.levels: dict[str, str] = {}
        self.variable_labels: dict[tuple[str, str], str] = {}
        self.failing_calls: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def _record(self, call: str, arg: str) -> None:
        self.calls.append((call, arg))
        if call in self.failing_calls:
            raise TransientFetchError(f"{call} failed for {arg}")

    def add_run(self, runner: str, run: RunObservation) -> None:
        """Add a personal-best for a runner."""
        self.runs.setdefault(runner, []).append(run)

    def calls_of(self, call: str) -> list[str]:
        """Get the arguments of every call of one kind."""
        return [arg for name, arg in self.calls if name == call]

    async def personal_bests(self, runner: str) -> list[RunObservation]:
        self._record("personal_bests", runner)
        return list(self.runs.get(runner, []))

    async def game_info(self, game_id: str) -> GameInfo:
        self._record("game_info", game_id)
        try:
            return self.games[game_id]
        except KeyError:
            raise TransientFetchError(f"Unknown game {game_id}")

    async def category_name(self, category_id: str) -> str:
        self._record("category_name", category_id)
        try:
            return self.categories[category_id]
        except KeyError:
            raise TransientFetchError(f"Unknown category {category_id}")

    async def level_name(self, level_id: str) -> str:
        self._record("level_name", level_id)
        try:
            return self.levels[level_id]
        except KeyError:
            raise TransientFetchError(f"Unknown level {level_id}")

    async def variable_label(self, variable_id: str, value_id: str) -> str:
        self._record("variable_label", variable_id)
        try:
            return self.variable_labels[(variable_id, value_id)]
        except KeyError:
            raise TransientFetchError(f"Unknown value {value_id} of {variable_id}")

    async def close(self) -> None:
        self.closed = True
