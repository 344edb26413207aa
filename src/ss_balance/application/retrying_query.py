"""RetryingQuery — one refresh attempt with failover across endpoints.

Attempt i of a cycle goes to pool.next(start, i), i.e. a different endpoint
each time, so a single dead node costs one attempt, not the whole cycle.
Budget = failed_query_retries + 1 attempts. First success wins; if the
budget runs out the cycle fails with RefreshExhaustedError and nothing is
substituted.

Between attempts: jittered exponential backoff
  delay = uniform(0, min(base * 2**(attempt - 1), max_delay))
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from src.ss_balance.domain.endpoint_pool import EndpointPool
from src.ss_balance.domain.repository import BalanceFetcherProtocol
from src.ss_common.enums import BalanceKind
from src.ss_common.errors import FetchError, RefreshExhaustedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    failed_query_retries: int = 3
    base_delay_s: float = 0.5
    max_delay_s: float = 10.0

    def __post_init__(self) -> None:
        if self.failed_query_retries < 0:
            raise ValueError(f"failed_query_retries must be >= 0, got {self.failed_query_retries}")

    @property
    def max_attempts(self) -> int:
        return self.failed_query_retries + 1

    def backoff(self, attempt: int, rng: random.Random | None = None) -> float:
        """Delay after the given (1-based) failed attempt."""
        if self.base_delay_s <= 0:
            return 0.0
        cap = min(self.base_delay_s * (2 ** (attempt - 1)), self.max_delay_s)
        return (rng or random).uniform(0, cap)


@dataclass
class FailoverCursor:
    """Explicit state of one cycle: where it started and how many attempts ran."""
    start: int
    max_attempts: int
    attempt: int = 0
    errors: list[FetchError] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    def endpoint(self, pool: EndpointPool) -> str:
        return pool.next(self.start, self.attempt)

    def record_failure(self, err: FetchError) -> None:
        self.errors.append(err)
        self.attempt += 1


class RetryingQuery:
    def __init__(
        self,
        pool: EndpointPool,
        fetcher: BalanceFetcherProtocol,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._pool = pool
        self._fetcher = fetcher
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def attempt(self, kind: BalanceKind) -> int:
        """Fetch `kind`, failing over between endpoints. Raises RefreshExhaustedError."""
        cursor = FailoverCursor(start=self._pool.claim_start(), max_attempts=self._policy.max_attempts)
        while not cursor.exhausted:
            endpoint = cursor.endpoint(self._pool)
            try:
                amount = await self._fetcher.fetch(endpoint, kind)
            except FetchError as err:
                cursor.record_failure(err)
                logger.warning(
                    "%s query failed (attempt %d/%d) endpoint=%s error=%s: %s",
                    kind.value,
                    cursor.attempt,
                    cursor.max_attempts,
                    endpoint,
                    err.kind.value,
                    err.detail,
                )
                if not cursor.exhausted:
                    await self._sleep(self._policy.backoff(cursor.attempt))
                continue

            logger.debug(
                "%s query succeeded (attempt %d/%d) endpoint=%s amount=%d",
                kind.value,
                cursor.attempt + 1,
                cursor.max_attempts,
                endpoint,
                amount,
            )
            return amount

        raise RefreshExhaustedError(kind, cursor.attempt)
