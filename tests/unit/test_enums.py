"""Tests for ss_common.enums — values appear in logs and error messages."""

from src.ss_common.enums import (
    NON_CIRCULATING_KINDS,
    BalanceKind,
    FetchErrorKind,
    VestingAccountType,
)


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    def test_str_enums(self) -> None:
        for enum_cls in (BalanceKind, FetchErrorKind, VestingAccountType):
            for member in enum_cls:
                assert isinstance(member, str)


class TestBalanceKind:
    def test_values(self) -> None:
        assert [k.value for k in BalanceKind] == [
            "CommunityPool",
            "Vesting",
            "FoundationWallet",
            "Staking",
            "TotalSupply",
        ]

    def test_only_total_supply_is_circulating(self) -> None:
        assert [k for k in BalanceKind if k.is_circulating] == [BalanceKind.TOTAL_SUPPLY]

    def test_non_circulating_kinds(self) -> None:
        assert len(NON_CIRCULATING_KINDS) == 4
        assert BalanceKind.TOTAL_SUPPLY not in NON_CIRCULATING_KINDS


class TestVestingAccountType:
    def test_type_urls(self) -> None:
        for t in VestingAccountType:
            assert t.value.startswith("/cosmos.vesting.v1beta1.")
            assert t.value.endswith("VestingAccount")
