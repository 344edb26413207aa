"""Locked (still-vesting) balance of Cosmos SDK vesting accounts.

Input is the `account` object returned by
GET /cosmos/auth/v1beta1/accounts/{address}; times are unix seconds.

  Continuous: all locked before start_time, none at/after end_time,
              linear in between: original * (end - now) // (end - start)
  Periodic:   periods laid end to end from start_time; a period whose end
              is before now is unlocked, otherwise its amount is locked
  Delayed:    all locked until now > end_time

Malformed or unsupported accounts raise ValueError.
"""

from typing import Any

from src.ss_common.amounts import sum_denom
from src.ss_common.enums import VestingAccountType


def _int_field(obj: dict[str, Any], key: str) -> int:
    try:
        return int(obj[key])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"Missing or non-integer field {key!r}") from None


def _base(account: dict[str, Any]) -> dict[str, Any]:
    base = account.get("base_vesting_account")
    if not isinstance(base, dict):
        raise ValueError("Missing base_vesting_account")
    return base


def continuous_locked(account: dict[str, Any], denom: str, now: int) -> int:
    base = _base(account)
    original = sum_denom(base.get("original_vesting", []), denom)
    start = _int_field(account, "start_time")
    end = _int_field(base, "end_time")
    if now < start:
        # not started yet: nothing has vested, all of it is locked
        return original
    if now >= end or end <= start:
        return 0
    return original * (end - now) // (end - start)


def periodic_locked(account: dict[str, Any], denom: str, now: int) -> int:
    periods = account.get("vesting_periods")
    if not isinstance(periods, list):
        raise ValueError("Missing vesting_periods")
    period_end = _int_field(account, "start_time")
    locked = 0
    for period in periods:
        if not isinstance(period, dict):
            raise ValueError(f"Malformed vesting period: {period!r}")
        period_end += _int_field(period, "length")
        if period_end >= now:
            locked += sum_denom(period.get("amount", []), denom)
    return locked


def delayed_locked(account: dict[str, Any], denom: str, now: int) -> int:
    base = _base(account)
    if now > _int_field(base, "end_time"):
        return 0
    return sum_denom(base.get("original_vesting", []), denom)


_CALCULATORS = {
    VestingAccountType.CONTINUOUS: continuous_locked,
    VestingAccountType.PERIODIC: periodic_locked,
    VestingAccountType.DELAYED: delayed_locked,
}


def locked_balance(account: Any, denom: str, now: int) -> int:
    """Dispatch on the account's @type and return its locked `denom` amount."""
    if not isinstance(account, dict):
        raise ValueError("Account must be an object")
    type_url = account.get("@type")
    try:
        account_type = VestingAccountType(type_url)
    except ValueError:
        raise ValueError(f"Unsupported account type: {type_url}") from None
    return _CALCULATORS[account_type](account, denom, now)
