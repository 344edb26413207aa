"""Global enums."""

from enum import Enum


class BalanceKind(str, Enum):
    """On-chain balances tracked for the supply figure."""
    COMMUNITY_POOL = "CommunityPool"
    VESTING = "Vesting"
    FOUNDATION_WALLET = "FoundationWallet"
    STAKING = "Staking"
    TOTAL_SUPPLY = "TotalSupply"

    @property
    def is_circulating(self) -> bool:
        return self is BalanceKind.TOTAL_SUPPLY


NON_CIRCULATING_KINDS: tuple[BalanceKind, ...] = tuple(
    k for k in BalanceKind if not k.is_circulating
)


class FetchErrorKind(str, Enum):
    UNREACHABLE = "Unreachable"
    TIMEOUT = "Timeout"
    MALFORMED_RESPONSE = "MalformedResponse"
    REMOTE_REJECTED = "RemoteRejected"


class VestingAccountType(str, Enum):
    """Protobuf type URLs of the vesting accounts we know how to read."""
    CONTINUOUS = "/cosmos.vesting.v1beta1.ContinuousVestingAccount"
    PERIODIC = "/cosmos.vesting.v1beta1.PeriodicVestingAccount"
    DELAYED = "/cosmos.vesting.v1beta1.DelayedVestingAccount"
