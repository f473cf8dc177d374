import threading


class RequestCounter:
    """Process-wide request number, only used to annotate responses."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value
