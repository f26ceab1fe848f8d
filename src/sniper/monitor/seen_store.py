"""In-memory set of token addresses that have already been processed.

Entries never expire: once marked, an address is excluded for the rest of
the process lifetime, so the store grows with every distinct token seen.
"""

import time
from collections.abc import Callable


class SeenStore:
    """Monotonic address -> marked_at map."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._marked: dict[str, float] = {}

    def has(self, address: str) -> bool:
        return address in self._marked

    def mark(self, address: str) -> None:
        """Record the address. Re-marking keeps the first timestamp."""
        self._marked.setdefault(address, self._clock())

    def marked_at(self, address: str) -> float | None:
        return self._marked.get(address)

    def __contains__(self, address: object) -> bool:
        return address in self._marked

    def __len__(self) -> int:
        return len(self._marked)
