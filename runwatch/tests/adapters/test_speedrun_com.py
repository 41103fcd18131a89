"""Tests for the speedrun.com adapter against a mocked HTTP transport."""

from datetime import UTC, datetime

import httpx
import pytest

from runwatch.adapters.speedrun.speedrun_com import SpeedrunComAdapter
from runwatch.core.exceptions import EntityNotFoundError, TransientFetchError

PERSONAL_BESTS = {
    "data": [
        {
            "place": 3,
            "run": {
                "id": "old-run",
                "weblink": "https://www.speedrun.com/celeste/run/old-run",
                "game": "o1y9j9v6",
                "level": None,
                "category": "7kjpl1gk",
                "date": "2023-05-01",
                "status": {"status": "verified", "verify-date": "2023-05-02T10:00:00Z"},
                "times": {"primary_t": 1650.5},
                "values": {},
            },
        },
        {
            "place": 1,
            "run": {
                "id": "new-run",
                "weblink": "https://www.speedrun.com/celeste/run/new-run",
                "game": "o1y9j9v6",
                "level": "29vjx29l",
                "category": "xk901ggk",
                "date": "2024-02-10",
                "status": {"status": "verified", "verify-date": "2024-02-11T08:30:00Z"},
                "times": {"primary_t": 42.37},
                "values": {"5lygdn8q": "4qye4731"},
            },
        },
    ]
}


def make_adapter(routes: dict[str, httpx.Response]) -> tuple[SpeedrunComAdapter, list[str]]:
    """Create an adapter whose requests are answered from `routes`.

    Routes are keyed by path relative to the API root.
    """
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1")
        seen.append(path)
        if path in routes:
            return routes[path]
        return httpx.Response(404, json={"status": 404, "message": "not found"})

    adapter = SpeedrunComAdapter(transport=httpx.MockTransport(handler))
    return adapter, seen


class TestPersonalBests:
    @pytest.mark.asyncio
    async def test_entries_are_normalized(self) -> None:
        adapter, seen = make_adapter(
            {"/users/alice/personal-bests": httpx.Response(200, json=PERSONAL_BESTS)}
        )
        async with adapter:
            runs = await adapter.personal_bests("alice")

        assert seen == ["/users/alice/personal-bests"]
        assert [r.run_id for r in runs] == ["old-run", "new-run"]

        newest = runs[1]
        assert newest.place == 1
        assert newest.game_id == "o1y9j9v6"
        assert newest.category_id == "xk901ggk"
        assert newest.level_id == "29vjx29l"
        assert dict(newest.variables) == {"5lygdn8q": "4qye4731"}
        assert newest.time_seconds == 42.37
        assert newest.played_date == "2024-02-10"
        assert newest.verified_at == datetime(2024, 2, 11, 8, 30, tzinfo=UTC)
        assert runs[0].level_id is None

    @pytest.mark.asyncio
    async def test_latest_personal_best_uses_selection(self) -> None:
        adapter, _ = make_adapter(
            {"/users/alice/personal-bests": httpx.Response(200, json=PERSONAL_BESTS)}
        )
        async with adapter:
            latest = await adapter.latest_personal_best("alice")

        assert latest.run_id == "new-run"

    @pytest.mark.asyncio
    async def test_unverified_run_has_no_verify_date(self) -> None:
        payload = {"data": [dict(PERSONAL_BESTS["data"][0])]}
        payload["data"][0]["run"] = dict(
            payload["data"][0]["run"], status={"status": "new", "verify-date": None}
        )
        adapter, _ = make_adapter(
            {"/users/alice/personal-bests": httpx.Response(200, json=payload)}
        )
        async with adapter:
            runs = await adapter.personal_bests("alice")

        assert runs[0].verified_at is None

    @pytest.mark.asyncio
    async def test_no_runs(self) -> None:
        adapter, _ = make_adapter(
            {"/users/alice/personal-bests": httpx.Response(200, json={"data": []})}
        )
        async with adapter:
            assert await adapter.personal_bests("alice") == []
            assert await adapter.latest_personal_best("alice") is None

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self) -> None:
        adapter, _ = make_adapter({})
        async with adapter:
            with pytest.raises(EntityNotFoundError):
                await adapter.personal_bests("ghost")

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self) -> None:
        adapter, _ = make_adapter(
            {"/users/alice/personal-bests": httpx.Response(503, text="busy")}
        )
        async with adapter:
            with pytest.raises(TransientFetchError):
                await adapter.personal_bests("alice")

    @pytest.mark.asyncio
    async def test_invalid_json_is_transient(self) -> None:
        adapter, _ = make_adapter(
            {"/users/alice/personal-bests": httpx.Response(200, text="<html>")}
        )
        async with adapter:
            with pytest.raises(TransientFetchError):
                await adapter.personal_bests("alice")

    @pytest.mark.asyncio
    async def test_missing_members_are_transient(self) -> None:
        adapter, _ = make_adapter(
            {
                "/users/alice/personal-bests": httpx.Response(
                    200, json={"data": [{"place": 1, "run": {"id": "x"}}]}
                )
            }
        )
        async with adapter:
            with pytest.raises(TransientFetchError):
                await adapter.personal_bests("alice")

    @pytest.mark.asyncio
    async def test_network_error_is_transient(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        adapter = SpeedrunComAdapter(transport=httpx.MockTransport(handler))
        async with adapter:
            with pytest.raises(TransientFetchError):
                await adapter.personal_bests("alice")


class TestLookups:
    @pytest.mark.asyncio
    async def test_game_info(self) -> None:
        adapter, _ = make_adapter(
            {
                "/games/o1y9j9v6": httpx.Response(
                    200,
                    json={
                        "data": {
                            "id": "o1y9j9v6",
                            "names": {"international": "Celeste", "japanese": None},
                            "assets": {
                                "cover-medium": {"uri": "https://img/celeste.png"}
                            },
                        }
                    },
                )
            }
        )
        async with adapter:
            game = await adapter.game_info("o1y9j9v6")

        assert game.name == "Celeste"
        assert game.cover_url == "https://img/celeste.png"

    @pytest.mark.asyncio
    async def test_game_without_cover(self) -> None:
        adapter, _ = make_adapter(
            {
                "/games/g1": httpx.Response(
                    200,
                    json={"data": {"id": "g1", "names": {"international": "Celeste"}}},
                )
            }
        )
        async with adapter:
            game = await adapter.game_info("g1")

        assert game.cover_url is None

    @pytest.mark.asyncio
    async def test_category_and_level_names(self) -> None:
        adapter, _ = make_adapter(
            {
                "/categories/c1": httpx.Response(200, json={"data": {"name": "Any%"}}),
                "/levels/l1": httpx.Response(200, json={"data": {"name": "Forsaken City"}}),
            }
        )
        async with adapter:
            assert await adapter.category_name("c1") == "Any%"
            assert await adapter.level_name("l1") == "Forsaken City"

    @pytest.mark.asyncio
    async def test_variable_label(self) -> None:
        adapter, _ = make_adapter(
            {
                "/variables/5lygdn8q": httpx.Response(
                    200,
                    json={
                        "data": {
                            "id": "5lygdn8q",
                            "values": {
                                "values": {
                                    "4qye4731": {"label": "PC"},
                                    "mln68v0q": {"label": "Switch"},
                                }
                            },
                        }
                    },
                )
            }
        )
        async with adapter:
            assert await adapter.variable_label("5lygdn8q", "4qye4731") == "PC"
            with pytest.raises(TransientFetchError):
                await adapter.variable_label("5lygdn8q", "unknown")

    @pytest.mark.asyncio
    async def test_malformed_category_is_transient(self) -> None:
        adapter, _ = make_adapter(
            {"/categories/c1": httpx.Response(200, json={"data": None})}
        )
        async with adapter:
            with pytest.raises(TransientFetchError):
                await adapter.category_name("c1")
