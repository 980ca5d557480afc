"""Process-local, append-only log of broadcast values."""

import threading


class Memory:
    """Ordered integer log. Created empty, only ever appended to, never persisted."""

    def __init__(self, values: list[int] | None = None):
        self._values: list[int] = list(values) if values else []
        self._lock = threading.RLock()

    def append(self, value: int) -> None:
        """Record value after everything recorded so far."""
        with self._lock:
            self._values.append(value)

    def snapshot(self) -> list[int]:
        """Copy of every recorded value, in arrival order."""
        with self._lock:
            return list(self._values)

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
