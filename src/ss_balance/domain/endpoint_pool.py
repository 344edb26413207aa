"""EndpointPool — static, ordered list of node base URLs.

Each refresh cycle claims a start index from a rotating cursor shared by all
kinds; attempt i of that cycle then uses endpoints[(start + i) % N]. The
cursor moves one step per cycle so no endpoint is always tried first.
"""

import threading
from collections.abc import Iterable

from src.ss_common.errors import ConfigurationError


class EndpointPool:
    def __init__(self, endpoints: Iterable[str]) -> None:
        cleaned: list[str] = []
        for raw in endpoints:
            endpoint = raw.strip().rstrip("/")
            if not endpoint:
                raise ConfigurationError("blank entry in NODE_ENDPOINTS")
            if not endpoint.startswith(("http://", "https://")):
                raise ConfigurationError(f"endpoint must be an http(s) URL: {endpoint}")
            cleaned.append(endpoint)
        if not cleaned:
            raise ConfigurationError("NODE_ENDPOINTS must contain at least one endpoint")
        self._endpoints: tuple[str, ...] = tuple(cleaned)
        self._cursor = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._endpoints)

    @property
    def endpoints(self) -> tuple[str, ...]:
        return self._endpoints

    def claim_start(self) -> int:
        """Return the current cursor and advance it by one."""
        with self._lock:
            start = self._cursor
            self._cursor = (self._cursor + 1) % len(self._endpoints)
            return start

    def next(self, start_index: int, attempt: int = 0) -> str:
        """Endpoint for `attempt` of a cycle that started at `start_index`."""
        return self._endpoints[(start_index + attempt) % len(self._endpoints)]
