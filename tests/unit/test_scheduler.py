"""Unit tests for RefreshScheduler and RefreshSchedulerGroup."""
import asyncio

import pytest

from src.ss_balance.application.retrying_query import RetryingQuery, RetryPolicy
from src.ss_balance.application.scheduler import RefreshScheduler, RefreshSchedulerGroup
from src.ss_balance.application.sources import build_balance_sources
from src.ss_balance.domain.cache import SharedCache
from src.ss_balance.domain.endpoint_pool import EndpointPool
from src.ss_balance.domain.models import BalanceSource
from src.ss_common.enums import BalanceKind
from tests.fakes import ENDPOINTS, SCENARIO_BALANCES, FakeFetcher, make_settings


def _make_query(fetcher: FakeFetcher) -> RetryingQuery:
    return RetryingQuery(
        EndpointPool(ENDPOINTS), fetcher, RetryPolicy(failed_query_retries=3, base_delay_s=0.0)
    )


def _source(kind: BalanceKind, period: float = 3600) -> BalanceSource:
    return BalanceSource(kind=kind, module="bank", update_period_s=period, denom="usomm")


async def _wait_for(predicate, timeout: float = 1.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.001)


class TestRefreshOnce:
    async def test_success_stores_value(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)

        entry = await scheduler.refresh_once()

        assert entry is not None
        assert entry.value == 25_000
        assert cache.get(BalanceKind.STAKING) == entry
        assert cache.get(BalanceKind.STAKING).has_value

    async def test_failure_before_first_success_stays_missing(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES, down=set(ENDPOINTS))
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)

        assert await scheduler.refresh_once() is None
        assert not cache.get(BalanceKind.STAKING).has_value

    async def test_failure_keeps_last_value_and_timestamp(
        self, cache: SharedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.VESTING), _make_query(fetcher), cache)
        before = await scheduler.refresh_once()

        fetcher.down = set(ENDPOINTS)
        fetcher.balances[BalanceKind.VESTING] = 1
        with caplog.at_level("ERROR"):
            assert await scheduler.refresh_once() is None

        assert cache.get(BalanceKind.VESTING) == before
        assert "keeping last known value" in caplog.text

    async def test_recovers_after_outage(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES, down=set(ENDPOINTS))
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        await scheduler.refresh_once()

        fetcher.down.clear()
        fetcher.balances[BalanceKind.STAKING] = 30_000
        await scheduler.refresh_once()
        assert cache.get(BalanceKind.STAKING).value == 30_000

    async def test_repeated_refresh_is_idempotent(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        first = await scheduler.refresh_once()
        second = await scheduler.refresh_once()
        assert first is not None and second is not None
        assert second.value == first.value == 25_000
        assert second.last_updated >= first.last_updated

    async def test_only_touches_own_kind(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        await scheduler.refresh_once()
        assert [k for k in BalanceKind if cache.get(k).has_value] == [BalanceKind.STAKING]


class TestRun:
    async def test_first_tick_is_immediate(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        scheduler.start()
        try:
            await _wait_for(lambda: cache.get(BalanceKind.STAKING).has_value)
        finally:
            await scheduler.stop()

    async def test_ticks_repeat_at_period(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(
            _source(BalanceKind.STAKING, period=0.01), _make_query(fetcher), cache
        )
        scheduler.start()
        try:
            await _wait_for(lambda: len(fetcher.calls) >= 3)
        finally:
            await scheduler.stop()

    async def test_stop_cancels_task(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        task = scheduler.start()
        assert scheduler.running
        await scheduler.stop()
        assert task.cancelled() or task.done()
        assert not scheduler.running

    async def test_stop_without_start_is_noop(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        await scheduler.stop()
        assert not scheduler.running

    async def test_double_start_rejected(self, cache: SharedCache) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        scheduler.start()
        try:
            with pytest.raises(RuntimeError, match="already running"):
                scheduler.start()
        finally:
            await scheduler.stop()

    async def test_unexpected_error_does_not_kill_loop(
        self, cache: SharedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        class FlakyFetcher(FakeFetcher):
            async def fetch(self, endpoint: str, kind: BalanceKind) -> int:
                if not self.calls:
                    self.calls.append((endpoint, kind))
                    raise RuntimeError("bug")
                return await super().fetch(endpoint, kind)

        fetcher = FlakyFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(
            _source(BalanceKind.STAKING, period=0.01), _make_query(fetcher), cache
        )
        with caplog.at_level("ERROR"):
            scheduler.start()
            try:
                await _wait_for(lambda: cache.get(BalanceKind.STAKING).has_value)
            finally:
                await scheduler.stop()
        assert "Unexpected error refreshing Staking" in caplog.text


    async def test_overrun_skips_missed_ticks(
        self, cache: SharedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        period = 0.05
        loop = asyncio.get_running_loop()
        started: list[float] = []
        finished: list[float] = []

        class SlowFirstFetcher(FakeFetcher):
            async def fetch(self, endpoint: str, kind: BalanceKind) -> int:
                started.append(loop.time())
                if len(started) == 1:
                    await asyncio.sleep(period * 2.4)
                value = await super().fetch(endpoint, kind)
                finished.append(loop.time())
                return value

        fetcher = SlowFirstFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(
            _source(BalanceKind.STAKING, period=period), _make_query(fetcher), cache
        )
        with caplog.at_level("WARNING"):
            scheduler.start()
            try:
                await _wait_for(lambda: len(started) >= 3)
            finally:
                await scheduler.stop()

        assert "overran its period; skipped" in caplog.text
        # next call lands on the next tick after the slow cycle, not immediately
        assert started[1] - finished[0] <= period + 0.02
        assert started[2] - started[1] >= period / 2

    async def test_refresh_logs_module(
        self, cache: SharedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        fetcher = FakeFetcher(SCENARIO_BALANCES)
        scheduler = RefreshScheduler(_source(BalanceKind.STAKING), _make_query(fetcher), cache)
        with caplog.at_level("DEBUG"):
            await scheduler.refresh_once()
        assert "updating Staking balance from the bank module" in caplog.text


class TestGroup:
    async def test_one_scheduler_per_kind(self, cache: SharedCache) -> None:
        sources = build_balance_sources(make_settings())
        group = RefreshSchedulerGroup(
            sources.values(), _make_query(FakeFetcher(SCENARIO_BALANCES)), cache
        )
        assert len(group) == len(BalanceKind)
        assert group[BalanceKind.TOTAL_SUPPLY].kind is BalanceKind.TOTAL_SUPPLY

    async def test_start_fills_cache_and_stop_stops_all(self, cache: SharedCache) -> None:
        sources = build_balance_sources(make_settings())
        group = RefreshSchedulerGroup(
            sources.values(), _make_query(FakeFetcher(SCENARIO_BALANCES)), cache
        )
        group.start()
        try:
            await _wait_for(lambda: cache.is_ready)
        finally:
            await group.stop()
        assert not any(group[k].running for k in BalanceKind)

    async def test_failing_kind_does_not_block_others(self, cache: SharedCache) -> None:
        balances = dict(SCENARIO_BALANCES)
        del balances[BalanceKind.VESTING]
        sources = build_balance_sources(make_settings())
        group = RefreshSchedulerGroup(sources.values(), _make_query(FakeFetcher(balances)), cache)
        group.start()
        try:
            await _wait_for(
                lambda: all(cache.get(k).has_value for k in BalanceKind if k != BalanceKind.VESTING)
            )
        finally:
            await group.stop()
        assert not cache.get(BalanceKind.VESTING).has_value
