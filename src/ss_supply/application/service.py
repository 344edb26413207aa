"""SupplyApplicationService — composition root for the supply subsystem.

Owns the process-lifetime SharedCache and wires it to its only writers (one
RefreshScheduler per balance kind) and its only reader (SupplyCalculator).
Built in the app lifespan; routes reach it through app.state.
"""

import logging

from config.settings import Settings
from src.ss_balance.application.retrying_query import RetryingQuery, RetryPolicy
from src.ss_balance.application.scheduler import RefreshSchedulerGroup
from src.ss_balance.application.sources import build_balance_sources
from src.ss_balance.domain.cache import SharedCache
from src.ss_balance.domain.endpoint_pool import EndpointPool
from src.ss_balance.domain.repository import BalanceFetcherProtocol
from src.ss_balance.infrastructure.cosmos_rest import CosmosRestFetcher
from src.ss_supply.application.calculator import SupplyCalculator

logger = logging.getLogger(__name__)


class SupplyApplicationService:
    def __init__(
        self,
        settings: Settings,
        fetcher: BalanceFetcherProtocol | None = None,
        cache: SharedCache | None = None,
    ) -> None:
        # Configuration errors surface here, before anything starts
        self.pool = EndpointPool(settings.NODE_ENDPOINTS)
        self.sources = build_balance_sources(settings)
        self.fetcher: BalanceFetcherProtocol = fetcher or CosmosRestFetcher(
            self.sources, timeout_s=settings.QUERY_TIMEOUT_SECONDS
        )
        self.cache = cache or SharedCache()
        self.query = RetryingQuery(
            self.pool,
            self.fetcher,
            RetryPolicy(
                failed_query_retries=settings.FAILED_QUERY_RETRIES,
                base_delay_s=settings.RETRY_BASE_DELAY_SECONDS,
                max_delay_s=settings.RETRY_MAX_DELAY_SECONDS,
            ),
        )
        self.schedulers = RefreshSchedulerGroup(self.sources.values(), self.query, self.cache)
        self.calculator = SupplyCalculator(self.cache)

    async def start(self) -> None:
        logger.info(
            "Querying %d endpoint(s) with %d retries",
            len(self.pool),
            self.query.policy.failed_query_retries,
        )
        self.schedulers.start()

    async def stop(self) -> None:
        await self.schedulers.stop()
        await self.fetcher.aclose()

    def get_circulating_supply(self) -> int:
        return self.calculator.compute()
