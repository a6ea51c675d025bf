"""Per-owner error counters keyed by ``"<kind>:<code>"``.

Each ErrorHandler owns an ErrorStatistics instance unless the caller passes
a shared one; counts live for the owner's lifetime and are never persisted.
"""

import threading
from types import MappingProxyType
from typing import Dict, Mapping, Union

from research_assistant.core.errors.base import ErrorKind, ErrorRecord, PluginError


def statistics_key(kind: ErrorKind, code: str) -> str:
    return f"{kind.value}:{code}"


class ErrorStatistics:
    """Thread-safe error counters.

    Increments are guarded by a threading.Lock so handlers shared across
    threads or tasks never lose counts.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def record(self, error: Union[PluginError, ErrorRecord]) -> int:
        """Increment the counter for ``error`` and return the new count."""
        record = error.record if isinstance(error, PluginError) else error
        key = statistics_key(record.kind, record.code)
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
        return count

    def count(self, kind: ErrorKind, code: str) -> int:
        with self._lock:
            return self._counts.get(statistics_key(kind, code), 0)

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def snapshot(self) -> Mapping[str, int]:
        """Return a read-only copy of the current counts."""
        with self._lock:
            return MappingProxyType(dict(self._counts))

    def reset(self) -> None:
        """Clear all counters."""
        with self._lock:
            self._counts.clear()
