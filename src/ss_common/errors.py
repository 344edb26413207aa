"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Configuration (fatal at startup)
  2xxx: Remote fetch / refresh cycle (recovered by the scheduler)
  3xxx: Supply (surfaced to HTTP callers)
  9xxx: System
"""

from src.ss_common.enums import BalanceKind, FetchErrorKind


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Configuration ---

class ConfigurationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid configuration: {detail}", 500)


# --- 2xxx: Fetch ---

class FetchError(AppError):
    """One failed query against one endpoint. Never leaves the refresh cycle."""

    kind: FetchErrorKind

    def __init__(self, code: int, endpoint: str, detail: str) -> None:
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(code, f"{self.kind.value} from {endpoint}: {detail}", 502)


class UnreachableError(FetchError):
    kind = FetchErrorKind.UNREACHABLE

    def __init__(self, endpoint: str, detail: str) -> None:
        super().__init__(2001, endpoint, detail)


class FetchTimeoutError(FetchError):
    kind = FetchErrorKind.TIMEOUT

    def __init__(self, endpoint: str, detail: str) -> None:
        super().__init__(2002, endpoint, detail)


class MalformedResponseError(FetchError):
    kind = FetchErrorKind.MALFORMED_RESPONSE

    def __init__(self, endpoint: str, detail: str) -> None:
        super().__init__(2003, endpoint, detail)


class RemoteRejectedError(FetchError):
    kind = FetchErrorKind.REMOTE_REJECTED

    def __init__(self, endpoint: str, detail: str) -> None:
        super().__init__(2004, endpoint, detail)


class RefreshExhaustedError(AppError):
    def __init__(self, balance_kind: BalanceKind, attempts: int) -> None:
        self.balance_kind = balance_kind
        self.attempts = attempts
        super().__init__(
            2101,
            f"Failed to query {balance_kind.value} balance after {attempts} attempts",
            502,
        )


# --- 3xxx: Supply ---

class NotReadyError(AppError):
    def __init__(self, missing: list[BalanceKind]) -> None:
        self.missing = missing
        names = ", ".join(k.value for k in missing)
        super().__init__(3001, f"Balances not yet available: {names}", 503)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9001, detail, 500)
