"""SupplyCalculator — circulating supply from one cache snapshot.

  circulating = TotalSupply - (CommunityPool + Vesting + FoundationWallet + Staking)

Saturates at zero. Entries may carry different timestamps; only per-entry
consistency is guaranteed.
"""

import logging

from src.ss_balance.domain.cache import SharedCache
from src.ss_balance.domain.models import CacheSnapshot
from src.ss_common.enums import NON_CIRCULATING_KINDS, BalanceKind
from src.ss_common.errors import NotReadyError

logger = logging.getLogger(__name__)


def circulating_supply(snapshot: CacheSnapshot) -> int:
    """Pure computation over a ready snapshot."""
    total = snapshot.value(BalanceKind.TOTAL_SUPPLY)
    locked = sum(snapshot.value(k) for k in NON_CIRCULATING_KINDS)
    if locked > total:
        logger.error(
            "Non-circulating balances (%d) exceed total supply (%d); reporting 0",
            locked,
            total,
        )
        return 0
    return total - locked


class SupplyCalculator:
    def __init__(self, cache: SharedCache) -> None:
        self._cache = cache

    def compute(self) -> int:
        """Raises NotReadyError until every kind has been fetched once."""
        snapshot = self._cache.snapshot()
        missing = snapshot.missing
        if missing:
            logger.warning(
                "circulating supply request failed due to missing balance for %s",
                ", ".join(k.value for k in missing),
            )
            raise NotReadyError(missing)
        return circulating_supply(snapshot)
