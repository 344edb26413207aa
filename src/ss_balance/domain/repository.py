"""Fetcher Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from src.ss_common.enums import BalanceKind


class BalanceFetcherProtocol(Protocol):
    async def fetch(self, endpoint: str, kind: BalanceKind) -> int:
        """One query, one endpoint, one kind. Raises FetchError on failure."""
        ...

    async def aclose(self) -> None: ...
