"""Balance source registry — builds the fixed set of BalanceSources from settings."""

import logging

from config.settings import Settings
from src.ss_balance.domain.models import BalanceSource
from src.ss_common.enums import BalanceKind
from src.ss_common.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _addresses(raw: list[str], setting: str) -> tuple[str, ...]:
    cleaned = tuple(a.strip() for a in raw)
    if any(not a for a in cleaned):
        raise ConfigurationError(f"blank entry in {setting}")
    return cleaned


def build_balance_sources(settings: Settings) -> dict[BalanceKind, BalanceSource]:
    """One BalanceSource per BalanceKind. Raises ConfigurationError on bad input."""
    foundation = _addresses(settings.FOUNDATION_ADDRESSES, "FOUNDATION_ADDRESSES")
    if not foundation:
        raise ConfigurationError("FOUNDATION_ADDRESSES must contain at least one address")
    vesting = _addresses(settings.VESTING_ADDRESSES, "VESTING_ADDRESSES")
    if not vesting:
        logger.warning("VESTING_ADDRESSES is empty; vesting balance will always be 0")

    denom = settings.DENOM
    sources = [
        BalanceSource(
            kind=BalanceKind.COMMUNITY_POOL,
            module="distribution",
            update_period_s=settings.COMMUNITY_POOL_UPDATE_PERIOD,
            denom=denom,
        ),
        BalanceSource(
            kind=BalanceKind.VESTING,
            module="auth",
            update_period_s=settings.VESTING_UPDATE_PERIOD,
            denom=denom,
            addresses=vesting,
        ),
        BalanceSource(
            kind=BalanceKind.FOUNDATION_WALLET,
            module="bank",
            update_period_s=settings.FOUNDATION_WALLET_UPDATE_PERIOD,
            denom=denom,
            addresses=foundation,
        ),
        BalanceSource(
            kind=BalanceKind.STAKING,
            module="staking",
            update_period_s=settings.STAKING_UPDATE_PERIOD,
            denom=denom,
        ),
        BalanceSource(
            kind=BalanceKind.TOTAL_SUPPLY,
            module="bank",
            update_period_s=settings.total_supply_update_period,
            denom=denom,
        ),
    ]
    return {s.kind: s for s in sources}
