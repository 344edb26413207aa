"""Domain models for ss_balance — pure dataclasses, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime

from src.ss_common.enums import BalanceKind


@dataclass(frozen=True)
class BalanceSource:
    """How and how often one balance kind is queried."""
    kind: BalanceKind
    module: str                      # cosmos module answering the query
    update_period_s: int
    denom: str
    addresses: tuple[str, ...] = ()  # empty for chain-wide balances

    @property
    def is_circulating(self) -> bool:
        return self.kind.is_circulating


@dataclass(frozen=True)
class CacheEntry:
    """Latest known value of one kind. Replaced whole, never mutated."""
    kind: BalanceKind
    value: int = 0                       # smallest denomination
    last_updated: datetime | None = None
    has_value: bool = False


@dataclass(frozen=True)
class CacheSnapshot:
    """Point-in-time copy of every entry."""
    entries: dict[BalanceKind, CacheEntry] = field(default_factory=dict)

    @property
    def missing(self) -> list[BalanceKind]:
        return [k for k in BalanceKind if not self.entries[k].has_value]

    @property
    def is_ready(self) -> bool:
        return not self.missing

    def value(self, kind: BalanceKind) -> int:
        return self.entries[kind].value
