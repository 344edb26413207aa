"""CosmosRestFetcher — BalanceFetcher over the Cosmos SDK REST (gRPC-gateway) API.

One call = one attempt against one endpoint for one kind. Kinds that cover
several addresses issue one request per address to the same endpoint; any
failing request fails the whole attempt. The attempt as a whole is bounded
by `timeout_s`.

Query per kind:
  CommunityPool     GET /cosmos/distribution/v1beta1/community_pool       (Dec coins)
  Vesting           GET /cosmos/auth/v1beta1/accounts/{address}           (locked part)
  FoundationWallet  GET /cosmos/bank/v1beta1/balances/{address}/by_denom
  Staking           GET /cosmos/staking/v1beta1/pool                      (bonded_tokens)
  TotalSupply       GET /cosmos/bank/v1beta1/supply/by_denom
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import httpx

from src.ss_balance.domain.models import BalanceSource
from src.ss_balance.domain.vesting import locked_balance
from src.ss_common.amounts import parse_amount, sum_denom
from src.ss_common.datetime_utils import utc_timestamp
from src.ss_common.enums import BalanceKind
from src.ss_common.errors import (
    FetchTimeoutError,
    MalformedResponseError,
    RemoteRejectedError,
    UnreachableError,
)

logger = logging.getLogger(__name__)


@contextmanager
def _parsing(endpoint: str, path: str) -> Iterator[None]:
    """Turn shape/amount errors while reading a response into MalformedResponse."""
    try:
        yield
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedResponseError(endpoint, f"{path}: {type(exc).__name__}: {exc}") from exc


class CosmosRestFetcher:
    def __init__(
        self,
        sources: Mapping[BalanceKind, BalanceSource],
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], int] = utc_timestamp,
    ) -> None:
        self._sources = dict(sources)
        self._timeout_s = timeout_s
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_s))
        self._clock = clock
        self._queries: dict[BalanceKind, Callable[[str, BalanceSource], Awaitable[int]]] = {
            BalanceKind.COMMUNITY_POOL: self._community_pool,
            BalanceKind.VESTING: self._vesting,
            BalanceKind.FOUNDATION_WALLET: self._foundation_wallet,
            BalanceKind.STAKING: self._staking,
            BalanceKind.TOTAL_SUPPLY: self._total_supply,
        }

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, endpoint: str, kind: BalanceKind) -> int:
        query = self._queries[kind]
        try:
            async with asyncio.timeout(self._timeout_s):
                return await query(endpoint, self._sources[kind])
        except TimeoutError:
            raise FetchTimeoutError(endpoint, f"no answer within {self._timeout_s}s") from None

    # ------------------------------------------------------------------
    # Per-kind queries
    # ------------------------------------------------------------------

    async def _community_pool(self, endpoint: str, source: BalanceSource) -> int:
        path = "/cosmos/distribution/v1beta1/community_pool"
        body = await self._get_json(endpoint, path)
        with _parsing(endpoint, path):
            return sum_denom(body["pool"], source.denom, dec=True)

    async def _staking(self, endpoint: str, source: BalanceSource) -> int:
        path = "/cosmos/staking/v1beta1/pool"
        body = await self._get_json(endpoint, path)
        with _parsing(endpoint, path):
            return parse_amount(body["pool"]["bonded_tokens"])

    async def _total_supply(self, endpoint: str, source: BalanceSource) -> int:
        path = "/cosmos/bank/v1beta1/supply/by_denom"
        body = await self._get_json(endpoint, path, {"denom": source.denom})
        with _parsing(endpoint, path):
            return parse_amount(body["amount"]["amount"])

    async def _foundation_wallet(self, endpoint: str, source: BalanceSource) -> int:
        total = 0
        for address in source.addresses:
            path = f"/cosmos/bank/v1beta1/balances/{address}/by_denom"
            body = await self._get_json(endpoint, path, {"denom": source.denom})
            with _parsing(endpoint, path):
                total += parse_amount(body["balance"]["amount"])
        return total

    async def _vesting(self, endpoint: str, source: BalanceSource) -> int:
        now = self._clock()
        total = 0
        for address in source.addresses:
            path = f"/cosmos/auth/v1beta1/accounts/{address}"
            body = await self._get_json(endpoint, path)
            with _parsing(endpoint, path):
                locked = locked_balance(body["account"], source.denom, now)
            if locked == 0:
                # fully vested, can be dropped from VESTING_ADDRESSES
                logger.warning("Vesting account %s has 0%s locked", address, source.denom)
            total += locked
        return total

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _get_json(
        self, endpoint: str, path: str, params: dict[str, str] | None = None
    ) -> Any:
        try:
            resp = await self._client.get(f"{endpoint}{path}", params=params)
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(endpoint, f"{path}: {type(exc).__name__}") from exc
        except httpx.TransportError as exc:
            raise UnreachableError(endpoint, f"{path}: {type(exc).__name__}: {exc}") from exc
        except httpx.DecodingError as exc:
            raise MalformedResponseError(endpoint, f"{path}: undecodable body: {exc}") from exc
        except httpx.RequestError as exc:
            raise UnreachableError(endpoint, f"{path}: {type(exc).__name__}: {exc}") from exc

        if resp.status_code >= 400:
            raise RemoteRejectedError(
                endpoint, f"{path}: HTTP {resp.status_code} {resp.text[:200]}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(endpoint, f"{path}: body is not JSON") from exc
