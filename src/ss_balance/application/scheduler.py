"""RefreshScheduler — one independent periodic task per balance kind.

Tick n fires at start + n * period (first tick immediately). Ticks missed
while a cycle overran are skipped, not replayed. A failed cycle leaves the
cache entry untouched (stale-but-available).
"""

import asyncio
import logging
from collections.abc import Iterable

from src.ss_balance.application.retrying_query import RetryingQuery
from src.ss_balance.domain.cache import SharedCache
from src.ss_balance.domain.models import BalanceSource, CacheEntry
from src.ss_common.amounts import micro_to_display
from src.ss_common.enums import BalanceKind
from src.ss_common.errors import RefreshExhaustedError

logger = logging.getLogger(__name__)


class RefreshScheduler:
    def __init__(self, source: BalanceSource, query: RetryingQuery, cache: SharedCache) -> None:
        self._source = source
        self._query = query
        self._cache = cache
        self._task: asyncio.Task[None] | None = None

    @property
    def kind(self) -> BalanceKind:
        return self._source.kind

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> CacheEntry | None:
        """Run one refresh cycle. Returns the new entry, or None if the cycle failed."""
        kind = self._source.kind
        logger.debug("updating %s balance from the %s module", kind.value, self._source.module)
        try:
            amount = await self._query.attempt(kind)
        except RefreshExhaustedError as err:
            logger.error("%s; keeping last known value", err.message)
            return None
        # fetch finished; only now touch the cache
        entry = self._cache.store(kind, amount)
        logger.info(
            "%s balance updated: %d%s (%s)",
            kind.value,
            amount,
            self._source.denom,
            micro_to_display(amount, self._source.denom.removeprefix("u")),
        )
        return entry

    async def run(self) -> None:
        """Loop forever at a fixed rate. Cancel the task to stop."""
        loop = asyncio.get_running_loop()
        period = self._source.update_period_s
        logger.debug("updating %s balance every %d seconds", self._source.kind.value, period)
        next_tick = loop.time()
        while True:
            try:
                await self.refresh_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Unexpected error refreshing %s balance", self._source.kind.value)

            next_tick += period
            now = loop.time()
            if next_tick < now:
                skipped = int((now - next_tick) // period) + 1
                next_tick += skipped * period
                logger.warning(
                    "%s refresh overran its period; skipped %d tick(s)",
                    self._source.kind.value,
                    skipped,
                )
            await asyncio.sleep(next_tick - now)

    def start(self) -> asyncio.Task[None]:
        if self.running:
            raise RuntimeError(f"Scheduler for {self.kind.value} already running")
        self._task = asyncio.create_task(self.run(), name=f"refresh-{self.kind.value}")
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


class RefreshSchedulerGroup:
    """Starts and stops one RefreshScheduler per source."""

    def __init__(
        self, sources: Iterable[BalanceSource], query: RetryingQuery, cache: SharedCache
    ) -> None:
        self._schedulers = {s.kind: RefreshScheduler(s, query, cache) for s in sources}

    def __getitem__(self, kind: BalanceKind) -> RefreshScheduler:
        return self._schedulers[kind]

    def __len__(self) -> int:
        return len(self._schedulers)

    def start(self) -> None:
        for scheduler in self._schedulers.values():
            scheduler.start()
        logger.info("Started %d balance refresh schedulers", len(self._schedulers))

    async def stop(self) -> None:
        await asyncio.gather(*(s.stop() for s in self._schedulers.values()))
        logger.info("Stopped balance refresh schedulers")
